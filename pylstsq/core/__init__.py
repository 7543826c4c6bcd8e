"""
Core infrastructure for pylstsq.

This module provides shared abstractions, utilities, and numeric kernels
used by the least squares strategies.

Key components:
    protocols: Backend, Decomposition protocols
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input validators
    compute: Timing, tolerances, linear algebra kernels
"""

from pylstsq.core.protocols import Backend, Decomposition
from pylstsq.core.result import Result
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
    # Protocols
    "Backend",
    "Decomposition",
    # Result
    "Result",
    # Exceptions
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
