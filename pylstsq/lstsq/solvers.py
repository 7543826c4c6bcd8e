"""
Solver dispatch for least squares.

This module provides the public entry points: solve() with strategy
selection, one convenience function per strategy, and the
factorize_*() functions for reusing a factorization across many
right-hand sides.

Strategy selection is always the caller's explicit choice. A strategy
that fails raises; no other strategy is tried in its place.
"""

import warnings
from typing import Any, Callable, Literal

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pylstsq.core.exceptions import IllConditionedWarning
from pylstsq.core.compute.tolerances import PIVOT_RTOL, RANK_RTOL
from pylstsq.lstsq.design import LstsqDesign
from pylstsq.lstsq.solution import LstsqSolution
from pylstsq.lstsq.policies import RankPolicy, Strict
from pylstsq.lstsq.factors import (
    CholeskyFactor,
    LUFactor,
    QRFactor,
    SVDFactor,
    check_matrix,
)
from pylstsq.lstsq.diagnostics import diagnose
from pylstsq.lstsq.backends import (
    NormalEquationsBackend,
    CholeskyBackend,
    LUBackend,
    QRBackend,
    SVDBackend,
)


# Type alias for strategy selection
StrategyChoice = Literal['normal', 'cholesky', 'lu', 'qr', 'svd']

# Registry: strategy name -> backend factory. Adding a strategy means
# adding an entry here; callers only ever pass the name.
_STRATEGIES: dict[str, Callable[..., Any]] = {
    'normal': NormalEquationsBackend,
    'cholesky': CholeskyBackend,
    'lu': LUBackend,
    'qr': QRBackend,
    'svd': SVDBackend,
}


def available_strategies() -> tuple[str, ...]:
    """Names accepted by ``solve(..., strategy=...)``."""
    return tuple(_STRATEGIES)


def solve(
    A: ArrayLike,
    b: ArrayLike,
    *,
    strategy: StrategyChoice = 'qr',
    rank_policy: RankPolicy | None = None,
    rtol: float | None = None,
    check: bool = False,
) -> LstsqSolution:
    """
    Solve the linear least squares problem min_x ||Ax - b||.

    This is the primary public API. All input validation, strategy
    selection, optional diagnostics and result wrapping happen here.

    Args:
        A: Coefficient matrix (n x p), n >= p. Any array-like.
        b: Observation vector (n,). Any array-like.
        strategy: Factorization pipeline to use:
            - 'qr': Householder QR of A (default, recommended)
            - 'svd': Jacobi SVD of A, honours ``rank_policy``
            - 'cholesky': Cholesky of A'A (squares cond(A))
            - 'lu': pivoted LU of A'A (squares cond(A))
            - 'normal': explicit inverse of A'A (squares cond(A))
        rank_policy: Strict() or Truncate(); only valid with 'svd'
        rtol: Override the near-zero threshold of the strategy:
            PIVOT_RTOL for 'normal', 'cholesky' and 'lu', RANK_RTOL for
            'qr'. For 'svd' the tolerance belongs to the rank policy.
        check: Compute cond(A) and the residual orthogonality check,
            attach them as ``solution.diagnostics`` and emit any findings
            as IllConditionedWarning

    Returns:
        LstsqSolution with coefficients, residuals and metadata

    Raises:
        ValueError: Unknown strategy, rank_policy given for a strategy
            other than 'svd', or rtol given for 'svd'
        ValidationError: If inputs are non-numeric or non-finite
        DimensionMismatchError: If shapes are inconsistent or n < p
        NotPositiveDefiniteError: Cholesky on a (nearly) rank-deficient A
        SingularSystemError: Zero pivot in LU / normal equations / substitution
        RankDeficientError: QR, or SVD under Strict, on a rank-deficient A

    Example:
        >>> import numpy as np
        >>> from pylstsq import solve
        >>>
        >>> A = np.column_stack([np.ones(100), np.random.randn(100, 2)])
        >>> b = A @ [1, 2, 3] + np.random.randn(100) * 0.1
        >>>
        >>> result = solve(A, b, strategy='qr', check=True)
        >>> print(result.coefficients)
        >>> print(result.summary())
    """
    # === Input Validation ===
    # This is the boundary - validate here, trust everywhere else
    design = LstsqDesign.from_arrays(A, b)

    # === Select Strategy ===
    backend_impl = _get_backend(strategy, rank_policy, rtol)

    # === Solve ===
    result = backend_impl.solve(design)

    # === Diagnostics ===
    diagnostics = None
    if check:
        diagnostics = diagnose(design.A, result.params.coefficients, design.b, backend_impl.name)
        for message in diagnostics.warnings:
            warnings.warn(message, IllConditionedWarning, stacklevel=2)
        result = result.with_warnings(*diagnostics.warnings)

    # === Wrap and Return ===
    return LstsqSolution(_result=result, _design=design, _diagnostics=diagnostics)


def _get_backend(choice: str, rank_policy: RankPolicy | None, rtol: float | None = None):
    """
    Instantiate the backend registered under ``choice``.

    Raises:
        ValueError: If the strategy is unknown, or a rank policy is passed
            to a strategy that has none
    """
    try:
        factory = _STRATEGIES[choice]
    except KeyError:
        raise ValueError(
            f"Unknown strategy: {choice!r}. Expected one of {available_strategies()}"
        ) from None

    if choice == 'svd':
        if rtol is not None:
            raise ValueError(
                "strategy 'svd' takes its tolerance from rank_policy, "
                "e.g. rank_policy=Strict(rtol=...)"
            )
        return factory(rank_policy)
    if rank_policy is not None:
        raise ValueError(
            f"rank_policy applies only to strategy 'svd', not {choice!r}"
        )
    if rtol is None:
        return factory()
    if rtol < 0:
        raise ValueError(f"rtol must be non-negative, got {rtol}")
    return factory(rtol)


# === One function per strategy ===

def solve_normal_equations(
    A: ArrayLike,
    b: ArrayLike,
    *,
    rtol: float = PIVOT_RTOL,
) -> NDArray[np.floating[Any]]:
    """x = (A'A)^-1 A'b. Raises SingularSystemError if A'A is singular."""
    return solve(A, b, strategy='normal', rtol=rtol).coefficients


def solve_cholesky(A: ArrayLike, b: ArrayLike, *, rtol: float = PIVOT_RTOL) -> NDArray[np.floating[Any]]:
    """Least squares via Cholesky of A'A. Raises NotPositiveDefiniteError."""
    return solve(A, b, strategy='cholesky', rtol=rtol).coefficients


def solve_lu(A: ArrayLike, b: ArrayLike, *, rtol: float = PIVOT_RTOL) -> NDArray[np.floating[Any]]:
    """Least squares via pivoted LU of A'A. Raises SingularSystemError."""
    return solve(A, b, strategy='lu', rtol=rtol).coefficients


def solve_qr(A: ArrayLike, b: ArrayLike, *, rtol: float = RANK_RTOL) -> NDArray[np.floating[Any]]:
    """Least squares via Householder QR of A. Raises RankDeficientError."""
    return solve(A, b, strategy='qr', rtol=rtol).coefficients


def solve_svd(
    A: ArrayLike,
    b: ArrayLike,
    rank_policy: RankPolicy | None = None,
) -> NDArray[np.floating[Any]]:
    """
    Least squares via SVD of A.

    Args:
        rank_policy: Strict() (default) or Truncate(rtol) for the
            minimum-norm solution of a rank-deficient A
    """
    if rank_policy is None:
        rank_policy = Strict()
    return solve(A, b, strategy='svd', rank_policy=rank_policy).coefficients


# === Factorization reuse ===

def factorize_cholesky(A: ArrayLike, *, rtol: float = PIVOT_RTOL) -> CholeskyFactor:
    """Factor A'A once; ``.solve(b)`` for each right-hand side."""
    return CholeskyFactor.build(check_matrix(A), rtol=rtol)


def factorize_lu(A: ArrayLike, *, rtol: float = PIVOT_RTOL) -> LUFactor:
    """Factor A'A = P L U once; ``.solve(b)`` for each right-hand side."""
    return LUFactor.build(check_matrix(A), rtol=rtol)


def factorize_qr(A: ArrayLike, *, rtol: float = RANK_RTOL) -> QRFactor:
    """
    Factor A = QR once; ``.solve(b)`` for each right-hand side.

    Rank deficiency is reported by ``solve``; the factor itself can still
    be inspected (``factor.rank``, ``factor.decomposition``).
    """
    return QRFactor.build(check_matrix(A), rtol=rtol)


def factorize_svd(A: ArrayLike, rank_policy: RankPolicy | None = None) -> SVDFactor:
    """Factor A = U S V' once; ``.solve(b)`` applies ``rank_policy``."""
    return SVDFactor.build(check_matrix(A), rank_policy=rank_policy)
