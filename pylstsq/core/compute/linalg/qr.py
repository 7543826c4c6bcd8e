"""
QR decomposition.

Thin Householder QR of a tall matrix, A = QR with Q (n x p) having
orthonormal columns and R (p x p) upper triangular. A itself is factored,
so the condition number of the least squares problem is preserved rather
than squared. Used by the QR strategy, and the numerical rank it reports
is what the QR strategy checks before back substitution.
"""

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray

from pylstsq.core.validation import check_2d, check_overdetermined
from pylstsq.core.compute.tolerances import RANK_RTOL
from pylstsq.core.compute.linalg.dense import (
    as_read_only,
    matmul,
    power_of_two_scale,
    vector_norm,
)


@dataclass(frozen=True)
class QRResult:
    """
    Result of QR decomposition.

    Attributes:
        Q: Orthonormal columns (n x p)
        R: Upper triangular matrix (p x p)
        rank: Numerical rank determined from the R diagonal
        deficient_columns: Columns k with |R_kk| at or below the rank tolerance
    """
    Q: NDArray[np.floating[Any]]
    R: NDArray[np.floating[Any]]
    rank: int
    deficient_columns: tuple[int, ...] = ()

    def reconstruct(self) -> NDArray[np.floating[Any]]:
        """Rebuild A = Q R."""
        return matmul(self.Q, self.R)


def _reflector(x: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]] | None:
    """
    Unit Householder vector v with (I - 2vv')x = alpha e_1.

    alpha takes the sign opposite to x[0] so v = x - alpha e_1 never
    suffers cancellation. Returns None for an all-zero column.
    """
    norm_x = vector_norm(x)
    if norm_x == 0.0:
        return None
    alpha = -np.copysign(norm_x, x[0])
    v = x.copy()
    v[0] -= alpha
    return v / vector_norm(v)


def householder_qr(
    A: NDArray[np.floating[Any]],
    *,
    rtol: float = RANK_RTOL,
) -> QRResult:
    """
    Thin QR by Householder reflections.

    Column k is reduced by the reflector H_k = I - 2 v_k v_k' acting on
    rows k..n-1; R is what remains of A after all p reflections and Q is
    H_0 H_1 ... H_{p-1} applied to the first p columns of the identity.

    Args:
        A: Matrix to decompose (n x p), n >= p
        rtol: |R_kk| <= rtol * max|R_jj| marks column k as dependent

    Returns:
        QRResult with read-only Q, R and the numerical rank

    Raises:
        DimensionMismatchError: If A is not 2D or n < p
    """
    check_2d(A, 'A')
    check_overdetermined(A, 'A')
    n, p = A.shape

    # Work on A / 2^k with entries in [-1, 1]; R is scaled back exactly
    scale = power_of_two_scale(A)
    work = np.array(A, dtype=np.float64, copy=True) / scale
    reflectors: list[NDArray[np.floating[Any]] | None] = []

    for k in range(p):
        v = _reflector(work[k:, k])
        reflectors.append(v)
        if v is not None:
            work[k:, k:] -= 2.0 * np.outer(v, v @ work[k:, k:])

    R = np.triu(work[:p, :]) * scale

    Q = np.eye(n, p, dtype=np.float64)
    for k in range(p - 1, -1, -1):
        v = reflectors[k]
        if v is not None:
            Q[k:, :] -= 2.0 * np.outer(v, v @ Q[k:, :])

    # Determine numerical rank from R diagonal
    diag_R = np.abs(np.diag(R))
    max_diag = float(diag_R.max())
    if max_diag > 0:
        deficient = tuple(int(k) for k in np.flatnonzero(diag_R <= rtol * max_diag))
    else:
        deficient = tuple(range(p))
    rank = p - len(deficient)

    return QRResult(
        Q=as_read_only(Q),
        R=as_read_only(R),
        rank=rank,
        deficient_columns=deficient,
    )
