"""
Dense matrix/vector primitives.

Thin, shape-checked wrappers over NumPy arithmetic. Every kernel in this
package goes through these functions so that a dimension mismatch fails
immediately with a DimensionMismatchError naming both operands, instead
of surfacing as a broadcasting surprise three stages later.
"""

from typing import Any

import numpy as np
from numpy.typing import NDArray

from pylstsq.core.exceptions import DimensionMismatchError


def _check_inner(left: NDArray, right: NDArray, op: str) -> None:
    if left.ndim < 1 or right.ndim < 1 or left.shape[-1] != right.shape[0]:
        raise DimensionMismatchError(
            f"{op}: inner dimensions differ, {left.shape} vs {right.shape}"
        )


def matmul(A: NDArray[np.floating[Any]], B: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
    """
    Matrix-matrix product A @ B.

    Raises:
        DimensionMismatchError: If A is not (m, k) and B (k, q)
    """
    if A.ndim != 2 or B.ndim != 2:
        raise DimensionMismatchError(
            f"matmul: expected 2D operands, got {A.shape} and {B.shape}"
        )
    _check_inner(A, B, 'matmul')
    return A @ B


def matvec(A: NDArray[np.floating[Any]], x: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
    """
    Matrix-vector product A @ x.

    ``x`` may also be a (k, q) block of column vectors.

    Raises:
        DimensionMismatchError: If A has a different column count than x has rows
    """
    if A.ndim != 2 or x.ndim not in (1, 2):
        raise DimensionMismatchError(
            f"matvec: expected 2D matrix and 1D/2D vector, got {A.shape} and {x.shape}"
        )
    _check_inner(A, x, 'matvec')
    return A @ x


def transpose(A: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
    """Logical transpose: a view sharing A's buffer, never a copy."""
    if A.ndim != 2:
        raise DimensionMismatchError(f"transpose: expected 2D matrix, got {A.shape}")
    return A.T


def gram(A: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
    """
    Gram matrix A'A (p x p).

    Symmetrized explicitly so downstream Cholesky sees an exactly
    symmetric matrix regardless of BLAS summation order.
    """
    At = transpose(A)
    G = matmul(At, A)
    return 0.5 * (G + G.T)


def gram_rhs(A: NDArray[np.floating[Any]], b: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
    """Right-hand side of the normal equations, A'b (p,) or (p, k)."""
    return matvec(transpose(A), b)


def _scaled_norm(values: NDArray[np.floating[Any]]) -> float:
    # Dividing by max|v| first keeps the sum of squares inside double range
    scale = float(np.max(np.abs(values))) if values.size else 0.0
    if scale == 0.0 or not np.isfinite(scale):
        return scale
    scaled = values / scale
    return scale * float(np.sqrt(np.sum(scaled * scaled)))


def vector_norm(x: NDArray[np.floating[Any]]) -> float:
    """Euclidean norm of a vector, without overflow or underflow of x @ x."""
    if x.ndim != 1:
        raise DimensionMismatchError(f"vector_norm: expected 1D vector, got {x.shape}")
    return _scaled_norm(x)


def frobenius_norm(A: NDArray[np.floating[Any]]) -> float:
    """Frobenius norm; for a vector this is the Euclidean norm."""
    return _scaled_norm(A)


def power_of_two_scale(A: NDArray[np.floating[Any]]) -> float:
    """
    Smallest power of two above max|A| (1.0 for an all-zero A).

    Dividing by it maps the entries of A into [-1, 1] without rounding,
    so a kernel can work on A / scale and multiply the scale back into
    its output exactly.
    """
    amax = float(np.max(np.abs(A))) if A.size else 0.0
    if amax == 0.0:
        return 1.0
    _, exponent = np.frexp(amax)
    return float(np.ldexp(1.0, int(exponent)))


def as_read_only(array: NDArray[np.floating[Any]] | NDArray[np.integer[Any]]) -> NDArray[Any]:
    """
    Owned, immutable copy of an array.

    Factorization results freeze their buffers with this so a factor
    shared between threads cannot be modified by any of them.
    """
    frozen = np.array(array, copy=True)
    frozen.flags.writeable = False
    return frozen
