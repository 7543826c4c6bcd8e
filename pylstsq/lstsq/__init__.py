"""
Dense linear least squares.

Five strategies for min_x ||Ax - b|| with A (n x p), n >= p, each built on
a different factorization:

    normal    explicit (A'A)^-1 A'b
    cholesky  A'A = L L'
    lu        A'A = P L U
    qr        A = Q R           (default)
    svd       A = U S V'        (Strict / Truncate rank policy)

Public API:
    solve(A, b, strategy=..., ...) -> LstsqSolution
    solve_<strategy>(A, b) -> coefficients
    factorize_<strategy>(A) -> factor with .solve(b)

Example:
    >>> from pylstsq.lstsq import solve
    >>> result = solve(A, b, strategy='svd', check=True)
    >>> print(result.coefficients)
    >>> print(result.summary())
"""

from pylstsq.lstsq.design import LstsqDesign
from pylstsq.lstsq.solution import LstsqSolution, LstsqParams
from pylstsq.lstsq.policies import RankPolicy, Strict, Truncate
from pylstsq.lstsq.factors import CholeskyFactor, LUFactor, QRFactor, SVDFactor
from pylstsq.lstsq.diagnostics import (
    Diagnostics,
    OrthogonalityCheck,
    check_residual_orthogonality,
    condition_number,
    conditioning_warnings,
    diagnose,
    normal_equations_residual,
    reconstruction_error,
    reference_solution,
    relative_difference,
)
from pylstsq.lstsq.solvers import (
    available_strategies,
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
)

__all__ = [
    # Entry points
    "solve",
    "available_strategies",
    "solve_normal_equations",
    "solve_cholesky",
    "solve_lu",
    "solve_qr",
    "solve_svd",
    # Factorization reuse
    "factorize_cholesky",
    "factorize_lu",
    "factorize_qr",
    "factorize_svd",
    "CholeskyFactor",
    "LUFactor",
    "QRFactor",
    "SVDFactor",
    # Rank policies
    "RankPolicy",
    "Strict",
    "Truncate",
    # Types
    "LstsqDesign",
    "LstsqSolution",
    "LstsqParams",
    # Diagnostics
    "Diagnostics",
    "OrthogonalityCheck",
    "check_residual_orthogonality",
    "condition_number",
    "conditioning_warnings",
    "diagnose",
    "normal_equations_residual",
    "reconstruction_error",
    "reference_solution",
    "relative_difference",
]
