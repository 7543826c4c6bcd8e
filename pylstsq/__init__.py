"""
pylstsq: dense linear least squares, five ways.

Normal equations, Cholesky, LU, QR and SVD solvers for overdetermined
systems A x ~ b, built from hand-written numerical kernels so that each
strategy's stability trade-off is visible and testable.

Submodules:
    lstsq: Strategies, factorization reuse, diagnostics
    core: Exceptions, validation, result envelope, linear algebra kernels
"""

__version__ = "0.1.0"

from pylstsq import lstsq
from pylstsq.lstsq import (
    solve,
    solve_normal_equations,
    solve_cholesky,
    solve_lu,
    solve_qr,
    solve_svd,
    factorize_cholesky,
    factorize_lu,
    factorize_qr,
    factorize_svd,
    Strict,
    Truncate,
)
from pylstsq.core.exceptions import (
    LstsqError,
    ValidationError,
    DimensionMismatchError,
    NumericalError,
    SingularSystemError,
    NotPositiveDefiniteError,
    RankDeficientError,
    ConvergenceError,
    IllConditionedWarning,
)

__all__ = [
    "__version__",
    "lstsq",
    "solve",
    "solve_normal_equations",
    "solve_cholesky",
    "solve_lu",
    "solve_qr",
    "solve_svd",
    "factorize_cholesky",
    "factorize_lu",
    "factorize_qr",
    "factorize_svd",
    "Strict",
    "Truncate",
    "LstsqError",
    "ValidationError",
    "DimensionMismatchError",
    "NumericalError",
    "SingularSystemError",
    "NotPositiveDefiniteError",
    "RankDeficientError",
    "ConvergenceError",
    "IllConditionedWarning",
]
