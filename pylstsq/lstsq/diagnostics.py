"""
Diagnostics for least squares solutions.

Checks that are independent of the strategy that produced x:

    - residual orthogonality: x minimizes ||Ax - b|| iff A'(Ax - b) = 0
    - conditioning: cond(A) from the Jacobi SVD, with warnings for the
      strategies that square it
    - factorization round trips: how well a decomposition rebuilds its input
    - a trusted reference solution (LAPACK via scipy) to compare against
"""

from dataclasses import dataclass
from typing import Any

import numpy as np
import scipy.linalg
from numpy.typing import ArrayLike, NDArray

from pylstsq.core.exceptions import DimensionMismatchError
from pylstsq.core.protocols import Decomposition
from pylstsq.core.compute.tolerances import (
    ORTHOGONALITY,
    SQUARED_CONDITION_THRESHOLD,
    CONDITION_THRESHOLD,
)
from pylstsq.core.compute.linalg.dense import (
    frobenius_norm,
    gram_rhs,
    matvec,
    vector_norm,
)
from pylstsq.core.compute.linalg.svd import jacobi_svd
from pylstsq.core.validation import check_array

# Strategies that form A'A and therefore see cond(A)**2
SQUARING_STRATEGIES = frozenset({'normal', 'cholesky', 'lu'})


@dataclass(frozen=True)
class OrthogonalityCheck:
    """
    Result of the residual orthogonality check.

    Attributes:
        norm: ||A'(Ax - b)||
        scaled: norm / (||A||_F (||A||_F ||x|| + ||b||)), scale-free
        rtol: Threshold applied to ``scaled``
        passed: scaled <= rtol
    """
    norm: float
    scaled: float
    rtol: float
    passed: bool


@dataclass(frozen=True)
class Diagnostics:
    """Bundle of post-solve checks attached to a solution."""
    condition_number: float
    orthogonality: OrthogonalityCheck
    warnings: tuple[str, ...]


def normal_equations_residual(
    A: NDArray[np.floating[Any]],
    x: NDArray[np.floating[Any]],
    b: NDArray[np.floating[Any]],
) -> float:
    """||A'(Ax - b)||, zero at the exact least squares minimizer."""
    r = matvec(A, x) - b
    return vector_norm(gram_rhs(A, r))


def check_residual_orthogonality(
    A: NDArray[np.floating[Any]],
    x: NDArray[np.floating[Any]],
    b: NDArray[np.floating[Any]],
    *,
    rtol: float = ORTHOGONALITY.rtol,
) -> OrthogonalityCheck:
    """
    Verify the residual is orthogonal to the column space of A.

    The raw norm is scaled by ||A|| (||A|| ||x|| + ||b||), the size of the
    rounding error a backward-stable solver is allowed to leave behind.
    """
    norm = normal_equations_residual(A, x, b)
    norm_A = frobenius_norm(A)
    scale = norm_A * (norm_A * vector_norm(x) + vector_norm(b))
    scaled = norm / scale if scale > 0 else norm
    return OrthogonalityCheck(norm=norm, scaled=scaled, rtol=rtol, passed=scaled <= rtol)


def condition_number(A: ArrayLike) -> float:
    """2-norm condition number s_max / s_min (inf for a singular A)."""
    return jacobi_svd(check_array(A, 'A')).condition_number


def conditioning_warnings(cond: float, strategy: str) -> tuple[str, ...]:
    """
    Messages describing how cond(A) affects the given strategy.

    Returns an empty tuple when the problem is comfortably conditioned.
    """
    messages: list[str] = []
    if not np.isfinite(cond):
        return (f"A is numerically singular (cond = inf); strategy {strategy!r} "
                f"result is not unique",)
    if strategy in SQUARING_STRATEGIES and cond > SQUARED_CONDITION_THRESHOLD:
        messages.append(
            f"cond(A) = {cond:.3e}: strategy {strategy!r} forms A'A with "
            f"cond(A'A) = {cond ** 2:.3e}; prefer 'qr' or 'svd'"
        )
    if cond > CONDITION_THRESHOLD:
        messages.append(
            f"cond(A) = {cond:.3e} exceeds {CONDITION_THRESHOLD:.0e}; "
            f"the solution has few correct significant digits"
        )
    return tuple(messages)


def diagnose(
    A: NDArray[np.floating[Any]],
    x: NDArray[np.floating[Any]],
    b: NDArray[np.floating[Any]],
    strategy: str,
    *,
    rtol: float = ORTHOGONALITY.rtol,
) -> Diagnostics:
    """Run the conditioning and orthogonality checks for a solved system."""
    cond = condition_number(A)
    orthogonality = check_residual_orthogonality(A, x, b, rtol=rtol)
    messages = list(conditioning_warnings(cond, strategy))
    if not orthogonality.passed:
        messages.append(
            f"residual is not orthogonal to range(A): scaled ||A'r|| = "
            f"{orthogonality.scaled:.3e} > {rtol:.0e}"
        )
    return Diagnostics(
        condition_number=cond,
        orthogonality=orthogonality,
        warnings=tuple(messages),
    )


def reconstruction_error(
    decomposition: Decomposition,
    target: NDArray[np.floating[Any]],
) -> float:
    """Relative Frobenius error ||reconstruct() - target|| / ||target||."""
    diff = frobenius_norm(decomposition.reconstruct() - target)
    scale = frobenius_norm(target)
    return diff / scale if scale > 0 else diff


def reference_solution(A: ArrayLike, b: ArrayLike) -> NDArray[np.floating[Any]]:
    """Least squares solution from LAPACK (scipy.linalg.lstsq, gelsd)."""
    x, _, _, _ = scipy.linalg.lstsq(check_array(A, 'A'), check_array(b, 'b'))
    return x


def relative_difference(x: ArrayLike, reference: ArrayLike) -> float:
    """||x - reference|| / ||reference|| (absolute if the reference is zero)."""
    x_arr = check_array(x, 'x')
    ref = check_array(reference, 'reference')
    if x_arr.shape != ref.shape:
        raise DimensionMismatchError(
            f"relative_difference: shapes differ, {x_arr.shape} vs {ref.shape}"
        )
    diff = frobenius_norm(x_arr - ref)
    scale = frobenius_norm(ref)
    return diff / scale if scale > 0 else diff
