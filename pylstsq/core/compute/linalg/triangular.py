"""
Triangular solvers.

Forward and back substitution for T x = y with T lower or upper
triangular. No pivoting, no iteration. The right-hand side may be a
single vector (p,) or a block (p, k); a block is processed in one pass
so a factor is applied to many right-hand sides without being touched
again.

Before any division the diagonal is screened against a relative
tolerance: a (near-)zero diagonal entry raises SingularSystemError
rather than letting Inf/NaN flow into the solution.
"""

from typing import Any

import numpy as np
from numpy.typing import NDArray

from pylstsq.core.exceptions import SingularSystemError, DimensionMismatchError
from pylstsq.core.validation import check_square, check_rhs
from pylstsq.core.compute.tolerances import PIVOT_RTOL


def _check_system(T: NDArray, y: NDArray, name: str) -> None:
    check_square(T, name)
    check_rhs(y, 'y')
    if y.shape[0] != T.shape[0]:
        raise DimensionMismatchError(
            f"{name} is {T.shape[0]}x{T.shape[1]} but right-hand side has {y.shape[0]} rows"
        )


def _check_diagonal(T: NDArray, rtol: float, stage: str) -> None:
    """Raise SingularSystemError at the first diagonal entry at or below tolerance."""
    diag = np.abs(np.diag(T))
    if diag.size == 0:
        return
    threshold = rtol * float(diag.max())
    bad = np.flatnonzero((diag <= threshold) | (diag == 0.0))
    if bad.size > 0:
        i = int(bad[0])
        raise SingularSystemError(
            f"{stage}: diagonal entry {i} is {T[i, i]:.3e}, at or below "
            f"tolerance {threshold:.3e} (rtol={rtol:g} x max|diag|={diag.max():.3e})",
            stage=stage,
            index=i,
            pivot=float(T[i, i]),
        )


def solve_lower(
    L: NDArray[np.floating[Any]],
    y: NDArray[np.floating[Any]],
    *,
    unit_diagonal: bool = False,
    rtol: float = PIVOT_RTOL,
) -> NDArray[np.floating[Any]]:
    """
    Solve L x = y by forward substitution.

        x_i = (y_i - sum_{j<i} L_ij x_j) / L_ii

    Only the lower triangle of L is read.

    Args:
        L: Lower triangular matrix (p x p)
        y: Right-hand side, (p,) or (p, k)
        unit_diagonal: Treat the diagonal as ones (LU's L factor)
        rtol: Relative tolerance on |L_ii| versus max|L_jj|

    Returns:
        Solution with the same shape as y

    Raises:
        DimensionMismatchError: If L is not square or y has the wrong length
        SingularSystemError: If a diagonal entry is (near) zero
    """
    _check_system(L, y, 'L')
    if not unit_diagonal:
        _check_diagonal(L, rtol, 'forward_substitution')

    p = L.shape[0]
    x = np.zeros(y.shape, dtype=np.float64)
    for i in range(p):
        s = y[i] - L[i, :i] @ x[:i]
        x[i] = s if unit_diagonal else s / L[i, i]
    return x


def solve_upper(
    U: NDArray[np.floating[Any]],
    y: NDArray[np.floating[Any]],
    *,
    unit_diagonal: bool = False,
    rtol: float = PIVOT_RTOL,
) -> NDArray[np.floating[Any]]:
    """
    Solve U x = y by back substitution, from the last row up.

    Only the upper triangle of U is read. Arguments and errors mirror
    :func:`solve_lower`.
    """
    _check_system(U, y, 'U')
    if not unit_diagonal:
        _check_diagonal(U, rtol, 'back_substitution')

    p = U.shape[0]
    x = np.zeros(y.shape, dtype=np.float64)
    for i in range(p - 1, -1, -1):
        s = y[i] - U[i, i + 1:] @ x[i + 1:]
        x[i] = s if unit_diagonal else s / U[i, i]
    return x
