"""
Reusable factorizations of A.

A factor is computed once per matrix and then solves for any number of
right-hand sides. Factors are frozen and their arrays read-only, so one
factor can serve concurrent solves from several threads. None of them
keeps a reference to the caller's A: Cholesky and LU own a private copy
of A' (needed to form A'b), QR and SVD need only their own factors.

    factor = factorize_qr(A)
    x1 = factor.solve(b1)
    X = factor.solve(np.column_stack([b2, b3, b4]))
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pylstsq.core.exceptions import DimensionMismatchError, RankDeficientError
from pylstsq.core.validation import (
    check_array,
    check_finite,
    check_2d,
    check_rhs,
    check_overdetermined,
)
from pylstsq.core.compute.tolerances import PIVOT_RTOL, RANK_RTOL
from pylstsq.core.compute.linalg.dense import (
    as_read_only,
    gram,
    matvec,
    transpose,
)
from pylstsq.core.compute.linalg.triangular import solve_lower, solve_upper
from pylstsq.core.compute.linalg.cholesky import CholeskyResult, cholesky
from pylstsq.core.compute.linalg.lu import LUResult, lu
from pylstsq.core.compute.linalg.qr import QRResult, householder_qr
from pylstsq.core.compute.linalg.svd import SVDResult, jacobi_svd, singular_value_divide
from pylstsq.lstsq.policies import RankPolicy, Strict, Truncate


def check_matrix(A: ArrayLike) -> NDArray[np.floating[Any]]:
    """Validate A as a finite, overdetermined float64 matrix."""
    A_arr = check_array(A, 'A')
    if A_arr.ndim == 1:
        A_arr = A_arr.reshape(-1, 1)
    check_2d(A_arr, 'A')
    check_finite(A_arr, 'A')
    check_overdetermined(A_arr, 'A')
    return A_arr


def _check_b(b: ArrayLike, n: int) -> NDArray[np.floating[Any]]:
    b_arr = check_array(b, 'b')
    check_rhs(b_arr, 'b')
    check_finite(b_arr, 'b')
    if b_arr.shape[0] != n:
        raise DimensionMismatchError(
            f"b has {b_arr.shape[0]} rows but the factored matrix has n={n}"
        )
    return b_arr


@dataclass(frozen=True)
class CholeskyFactor:
    """
    A'A = L L', solving L y = A'b then L' x = y.

    Forming A'A squares the condition number of the problem: this is the
    least robust factorization offered and fails with
    NotPositiveDefiniteError once A is (nearly) rank-deficient.
    """
    decomposition: CholeskyResult
    _At: NDArray[np.floating[Any]]

    @classmethod
    def build(cls, A: NDArray[np.floating[Any]], *, rtol: float = PIVOT_RTOL) -> CholeskyFactor:
        return cls(decomposition=cholesky(gram(A), rtol=rtol), _At=as_read_only(transpose(A)))

    @property
    def n(self) -> int:
        return self._At.shape[1]

    @property
    def p(self) -> int:
        return self._At.shape[0]

    @property
    def rank(self) -> int:
        return self.p

    def solve(self, b: ArrayLike) -> NDArray[np.floating[Any]]:
        """Least squares solution for b of shape (n,) or (n, k)."""
        c = matvec(self._At, _check_b(b, self.n))
        L = self.decomposition.L
        y = solve_lower(L, c)
        return solve_upper(transpose(L), y)


@dataclass(frozen=True)
class LUFactor:
    """
    A'A[perm] = L U, solving L y = (A'b)[perm] then U x = y.

    Also works on the squared system, so it shares the conditioning
    penalty of the Cholesky route; pivoting only guards the elimination.
    """
    decomposition: LUResult
    _At: NDArray[np.floating[Any]]

    @classmethod
    def build(cls, A: NDArray[np.floating[Any]], *, rtol: float = PIVOT_RTOL) -> LUFactor:
        return cls(decomposition=lu(gram(A), rtol=rtol), _At=as_read_only(transpose(A)))

    @property
    def n(self) -> int:
        return self._At.shape[1]

    @property
    def p(self) -> int:
        return self._At.shape[0]

    @property
    def rank(self) -> int:
        return self.p

    def solve(self, b: ArrayLike) -> NDArray[np.floating[Any]]:
        """Least squares solution for b of shape (n,) or (n, k)."""
        c = matvec(self._At, _check_b(b, self.n))
        lu_result = self.decomposition
        y = solve_lower(lu_result.L, lu_result.permute(c), unit_diagonal=True)
        return solve_upper(lu_result.U, y)


@dataclass(frozen=True)
class QRFactor:
    """
    A = Q R, solving R x = Q'b.

    The recommended default: A is factored directly, so the condition
    number is not squared. Rank deficiency of A is reported at solve time
    as RankDeficientError naming the dependent columns.
    """
    decomposition: QRResult

    @classmethod
    def build(cls, A: NDArray[np.floating[Any]], *, rtol: float = RANK_RTOL) -> QRFactor:
        return cls(decomposition=householder_qr(A, rtol=rtol))

    @property
    def n(self) -> int:
        return self.decomposition.Q.shape[0]

    @property
    def p(self) -> int:
        return self.decomposition.R.shape[0]

    @property
    def rank(self) -> int:
        return self.decomposition.rank

    def solve(self, b: ArrayLike) -> NDArray[np.floating[Any]]:
        """
        Least squares solution for b of shape (n,) or (n, k).

        Raises:
            RankDeficientError: If R has (near-)zero diagonal entries
        """
        b_arr = _check_b(b, self.n)
        qr_result = self.decomposition
        if qr_result.rank < self.p:
            raise RankDeficientError(
                f"A is rank-deficient: rank={qr_result.rank}, expected={self.p}. "
                f"Columns {list(qr_result.deficient_columns)} are linearly dependent "
                f"on earlier columns.",
                stage='qr',
                rank=qr_result.rank,
                expected_rank=self.p,
                columns=qr_result.deficient_columns,
            )
        Qtb = matvec(transpose(qr_result.Q), b_arr)
        return solve_upper(qr_result.R, Qtb)


@dataclass(frozen=True)
class SVDFactor:
    """
    A = U diag(s) V', solving x = V (U'b / s).

    The most robust strategy, and the only one with a choice on rank
    deficiency: under Strict small singular values raise
    RankDeficientError, under Truncate they are dropped and the
    minimum-norm solution is returned.
    """
    decomposition: SVDResult
    rank_policy: RankPolicy = Strict()

    @classmethod
    def build(cls, A: NDArray[np.floating[Any]], *, rank_policy: RankPolicy | None = None) -> SVDFactor:
        if rank_policy is None:
            rank_policy = Strict()
        if not isinstance(rank_policy, (Strict, Truncate)):
            raise TypeError(
                f"rank_policy must be Strict or Truncate, got {type(rank_policy).__name__}"
            )
        return cls(decomposition=jacobi_svd(A), rank_policy=rank_policy)

    @property
    def n(self) -> int:
        return self.decomposition.U.shape[0]

    @property
    def p(self) -> int:
        return self.decomposition.Vt.shape[0]

    @property
    def cutoff(self) -> float:
        """Absolute singular value threshold implied by the rank policy."""
        s = self.decomposition.s
        return self.rank_policy.cutoff(float(s[0]) if s.size else 0.0)

    @property
    def small_singular_values(self) -> tuple[int, ...]:
        """Positions of singular values at or below the cutoff."""
        return tuple(int(i) for i in np.flatnonzero(self.decomposition.s <= self.cutoff))

    @property
    def rank(self) -> int:
        return self.p - len(self.small_singular_values)

    def solve(self, b: ArrayLike) -> NDArray[np.floating[Any]]:
        """
        Least squares solution for b of shape (n,) or (n, k).

        Raises:
            RankDeficientError: Under Strict with rtol > 0, if some s_i <= cutoff
            SingularSystemError: Under Strict(rtol=0), if some s_i is exactly zero
        """
        b_arr = _check_b(b, self.n)
        svd_result = self.decomposition
        small = self.small_singular_values

        # Strict(rtol=0) skips the rank test; an exact zero then fails the division
        if small and isinstance(self.rank_policy, Strict) and self.rank_policy.rtol > 0:
            raise RankDeficientError(
                f"A is rank-deficient: {len(small)} singular value(s) at or below "
                f"{self.cutoff:.3e} (rtol={self.rank_policy.rtol:g} x s_max), "
                f"rank={self.rank}, expected={self.p}. Use Truncate() for the "
                f"minimum-norm solution.",
                stage='svd',
                rank=self.rank,
                expected_rank=self.p,
                columns=small,
                singular_values=svd_result.s,
            )

        Utb = matvec(transpose(svd_result.U), b_arr)
        cutoff = self.cutoff if isinstance(self.rank_policy, Truncate) else None
        y = singular_value_divide(Utb, svd_result.s, cutoff=cutoff)
        return matvec(transpose(svd_result.Vt), y)
