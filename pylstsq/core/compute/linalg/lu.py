"""
LU decomposition with partial pivoting.

Factors a square matrix so that G[perm] = L U, with L unit lower
triangular and U upper triangular. The row permutation is kept as an
integer index array and applied by gather (``c[perm]``); a dense
permutation matrix is never formed.
"""

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray

from pylstsq.core.exceptions import SingularSystemError
from pylstsq.core.validation import check_square
from pylstsq.core.compute.tolerances import PIVOT_RTOL
from pylstsq.core.compute.linalg.dense import as_read_only, matmul


@dataclass(frozen=True)
class LUResult:
    """
    Result of LU decomposition with partial pivoting.

    Attributes:
        perm: Row order, G[perm] == L @ U. Row k of L U is row perm[k] of G.
        L: Unit lower triangular factor (p x p)
        U: Upper triangular factor (p x p)
    """
    perm: NDArray[np.intp]
    L: NDArray[np.floating[Any]]
    U: NDArray[np.floating[Any]]

    def permute(self, c: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
        """Apply the row permutation to a right-hand side by gather."""
        return c[self.perm]

    def reconstruct(self) -> NDArray[np.floating[Any]]:
        """Rebuild G by scattering the rows of L U back through perm."""
        LU = matmul(self.L, self.U)
        G = np.empty_like(LU)
        G[self.perm] = LU
        return G


def lu(
    G: NDArray[np.floating[Any]],
    *,
    rtol: float = PIVOT_RTOL,
    matrix_name: str = "A'A",
) -> LUResult:
    """
    Doolittle elimination with partial (row) pivoting.

    At step k the candidate of largest magnitude in column k (rows k..p-1)
    is swapped into the pivot position, which bounds the multipliers by 1
    and keeps rounding-error growth under control.

    Args:
        G: Square matrix (p x p)
        rtol: The best available pivot must exceed rtol * max|G|
        matrix_name: Name used in error messages

    Returns:
        LUResult with read-only perm, L, U

    Raises:
        DimensionMismatchError: If G is not square
        SingularSystemError: If no usable pivot exists in some column
    """
    check_square(G, matrix_name)
    p = G.shape[0]

    U = np.array(G, dtype=np.float64, copy=True)
    L = np.eye(p, dtype=np.float64)
    perm = np.arange(p)

    scale = float(np.max(np.abs(G))) if G.size else 0.0
    threshold = rtol * scale

    for k in range(p):
        i = k + int(np.argmax(np.abs(U[k:, k])))
        pivot = U[i, k]
        if abs(pivot) <= threshold or pivot == 0.0:
            raise SingularSystemError(
                f"{matrix_name} is singular: best pivot in column {k} is {pivot:.3e}, "
                f"at or below {threshold:.3e} after row exchange",
                stage='lu',
                index=k,
                pivot=float(pivot),
            )
        if i != k:
            U[[k, i], k:] = U[[i, k], k:]
            L[[k, i], :k] = L[[i, k], :k]
            perm[[k, i]] = perm[[i, k]]

        multipliers = U[k + 1:, k] / U[k, k]
        L[k + 1:, k] = multipliers
        U[k + 1:, k:] -= np.outer(multipliers, U[k, k:])
        U[k + 1:, k] = 0.0

    return LUResult(perm=as_read_only(perm), L=as_read_only(L), U=as_read_only(U))
