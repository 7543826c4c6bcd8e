"""
Shared compute infrastructure for pylstsq.

This module provides timing utilities, numerical tolerances and the
linear algebra kernels shared by every least squares strategy.

IMPORTANT: This is NOT where strategies live. Those go in
lstsq/backends/. This module contains shared NUMERIC infrastructure.

Submodules:
    timing: Execution timing utilities
    tolerances: Relative thresholds and comparison tiers
    linalg: Linear algebra kernels (triangular, Cholesky, LU, QR, SVD)
"""

from pylstsq.core.compute.timing import Timer, timed

__all__ = [
    # Timing
    "Timer",
    "timed",
]
