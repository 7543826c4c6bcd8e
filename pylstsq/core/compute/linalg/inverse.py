"""
Explicit matrix inverse by Gauss-Jordan elimination.

Backs the textbook normal-equations estimator x = (A'A)^-1 A'b. Forming
an inverse is never the most accurate way to solve a system; it is kept
as a strategy of its own because it is the closed form most readers know,
and its error can be compared against the factorization-based strategies.
"""

from typing import Any

import numpy as np
from numpy.typing import NDArray

from pylstsq.core.exceptions import SingularSystemError
from pylstsq.core.validation import check_square
from pylstsq.core.compute.tolerances import PIVOT_RTOL


def gauss_jordan_inverse(
    G: NDArray[np.floating[Any]],
    *,
    rtol: float = PIVOT_RTOL,
    matrix_name: str = "A'A",
) -> NDArray[np.floating[Any]]:
    """
    Invert a square matrix by reducing [G | I] to [I | G^-1].

    Partial pivoting: at column k the remaining row with the largest
    |entry| becomes the pivot row.

    Args:
        G: Square matrix (p x p)
        rtol: The best pivot must exceed rtol * max|G|
        matrix_name: Name used in error messages

    Returns:
        G^-1 as a new array

    Raises:
        DimensionMismatchError: If G is not square
        SingularSystemError: If a column has no usable pivot
    """
    check_square(G, matrix_name)
    p = G.shape[0]

    aug = np.hstack([np.array(G, dtype=np.float64, copy=True), np.eye(p)])
    scale = float(np.max(np.abs(G))) if G.size else 0.0
    threshold = rtol * scale

    for k in range(p):
        i = k + int(np.argmax(np.abs(aug[k:, k])))
        pivot = aug[i, k]
        if abs(pivot) <= threshold or pivot == 0.0:
            raise SingularSystemError(
                f"{matrix_name} is singular: best pivot in column {k} is {pivot:.3e}, "
                f"at or below {threshold:.3e}",
                stage='normal_equations',
                index=k,
                pivot=float(pivot),
            )
        if i != k:
            aug[[k, i]] = aug[[i, k]]
        aug[k] /= aug[k, k]
        factors = aug[:, k].copy()
        factors[k] = 0.0
        aug -= np.outer(factors, aug[k])

    return aug[:, p:].copy()
