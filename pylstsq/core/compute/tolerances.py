"""
Numerical tolerances and thresholds.

Single home for every "near zero" decision the solvers make. All
thresholds are RELATIVE: they are scaled by the magnitude of the matrix
being factored, so rescaling A by a constant never changes whether a
solve succeeds.

Every default here can be overridden per call through the corresponding
keyword argument (``rtol=...``) or rank policy.
"""

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class ToleranceTier:
    """Named rtol/atol pair for numerical comparison."""
    rtol: float
    atol: float
    name: str
    description: str


# Machine epsilon for the only supported dtype
EPS = float(np.finfo(np.float64).eps)

# Pivots and triangular diagonals: |d| <= PIVOT_RTOL * scale is "zero".
# Scale is max|diag| for triangular solves and Cholesky, max|G| for LU and
# Gauss-Jordan. A'A of a full-rank A with cond(A) up to ~1e6 stays above it.
PIVOT_RTOL = 1e-12

# Rank detection on A itself (QR diagonal, singular values), relative to
# the largest |R_kk| / s_max. Same default column tolerance as R's lm().
RANK_RTOL = 1e-7

# One-sided Jacobi SVD: a column pair counts as orthogonal once
# |a_i . a_j| <= JACOBI_TOL_FACTOR * n * eps * ||a_i|| ||a_j||.
JACOBI_TOL_FACTOR = 1.0
JACOBI_MAX_SWEEPS = 60

# Conditioning thresholds used by diagnostics.
# Strategies that form A'A see cond(A)**2: at cond(A) = 1e4 that is 1e8,
# half of double precision gone before the first substitution.
SQUARED_CONDITION_THRESHOLD = 1e4
# Any strategy: beyond this even QR/SVD lose most significant digits.
CONDITION_THRESHOLD = 1e8

# Cross-strategy agreement on well-conditioned problems
AGREEMENT = ToleranceTier(
    rtol=1e-4,
    atol=1e-8,
    name='agreement',
    description='All five strategies agree on a well-conditioned problem',
)

# Exact arithmetic expectations (hand-built systems, round trips)
EXACT = ToleranceTier(
    rtol=1e-10,
    atol=1e-12,
    name='exact',
    description='Double precision round-off only',
)

# Residual orthogonality A'(Ax - b) = 0, on the scaled norm
ORTHOGONALITY = ToleranceTier(
    rtol=1e-8,
    atol=0.0,
    name='orthogonality',
    description='Scaled norm of A\'r relative to ||A||(||A|| ||x|| + ||b||)',
)


def jacobi_tolerance(n_rows: int) -> float:
    """Pairwise orthogonality threshold for the Jacobi SVD on an n-row matrix."""
    return JACOBI_TOL_FACTOR * max(n_rows, 1) * EPS
