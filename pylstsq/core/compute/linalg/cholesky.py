"""
Cholesky decomposition.

Factors a symmetric positive definite matrix G = L L' with L lower
triangular. In least squares G is the Gram matrix A'A, which is SPD
exactly when A has full column rank; a running pivot that is not
clearly positive is therefore reported as NotPositiveDefiniteError,
distinct from a singular triangular solve later on.
"""

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray

from pylstsq.core.exceptions import NotPositiveDefiniteError, ValidationError
from pylstsq.core.validation import check_square
from pylstsq.core.compute.tolerances import PIVOT_RTOL, EPS
from pylstsq.core.compute.linalg.dense import as_read_only, matmul, transpose


@dataclass(frozen=True)
class CholeskyResult:
    """
    Result of Cholesky decomposition.

    Attributes:
        L: Lower triangular factor (p x p) with positive diagonal,
           exact zeros above the diagonal
    """
    L: NDArray[np.floating[Any]]

    def reconstruct(self) -> NDArray[np.floating[Any]]:
        """Rebuild G = L L'."""
        return matmul(self.L, transpose(self.L))


def cholesky(
    G: NDArray[np.floating[Any]],
    *,
    rtol: float = PIVOT_RTOL,
    matrix_name: str = "A'A",
) -> CholeskyResult:
    """
    Cholesky-Crout factorization, one column at a time.

    For column j:
        d_j   = G_jj - sum_{k<j} L_jk^2
        L_jj  = sqrt(d_j)
        L_ij  = (G_ij - sum_{k<j} L_ik L_jk) / L_jj     for i > j

    Args:
        G: Symmetric matrix (p x p). Only the lower triangle is read after
           the symmetry check.
        rtol: A running pivot d_j <= rtol * max(diag(G)) is treated as
              non-positive.
        matrix_name: Name used in error messages

    Returns:
        CholeskyResult with read-only L

    Raises:
        DimensionMismatchError: If G is not square
        ValidationError: If G is not symmetric to round-off
        NotPositiveDefiniteError: If a running pivot is not positive
    """
    check_square(G, matrix_name)
    p = G.shape[0]

    scale = float(np.max(np.abs(G))) if G.size else 0.0
    asym = float(np.max(np.abs(G - G.T))) if G.size else 0.0
    if asym > 100 * p * EPS * max(scale, 1.0):
        raise ValidationError(
            f"{matrix_name}: not symmetric (max |G - G'| = {asym:.3e})"
        )

    diag_max = float(np.max(np.diag(G))) if p else 0.0
    threshold = rtol * max(diag_max, 0.0)

    L = np.zeros((p, p), dtype=np.float64)
    for j in range(p):
        row = L[j, :j]
        d = G[j, j] - row @ row
        if d <= threshold or d <= 0.0:
            raise NotPositiveDefiniteError(
                f"{matrix_name} is not positive definite: running pivot {d:.3e} "
                f"at column {j} is at or below {threshold:.3e}. "
                f"The columns of A are linearly dependent or nearly so.",
                matrix_name=matrix_name,
                column=j,
                pivot=float(d),
            )
        L[j, j] = np.sqrt(d)
        L[j + 1:, j] = (G[j + 1:, j] - L[j + 1:, :j] @ row) / L[j, j]

    return CholeskyResult(L=as_read_only(L))
