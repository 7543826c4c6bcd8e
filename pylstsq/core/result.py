"""
Generic result container for all pylstsq computations.

The Result class provides a standardized envelope that every strategy
backend returns. This enables shared tooling for timing, warnings and
reporting while allowing each strategy to record its own metadata.

Design decisions:
    - Generic over parameter payload P for type safety
    - info dict for flexible metadata (method, rank, pivot order, ...)
    - timing is optional (don't burden unit tests)
    - Immutable (frozen=True) for reproducibility
"""

from dataclasses import dataclass, field, replace
from typing import TypeVar, Generic, Any

P = TypeVar('P')  # Parameter payload type


@dataclass(frozen=True)
class Result(Generic[P]):
    """
    Immutable result envelope for a least squares solve.

    Type Parameters:
        P: The parameter payload type

    Attributes:
        params: Solution payload (coefficients, residuals, ...)
        info: Structured metadata (method, rank, strategy diagnostics)
        timing: Execution timing breakdown, or None if not measured
        backend_name: Identifier of the strategy backend that produced this result
        warnings: Non-fatal issues encountered during computation

    Examples:
        >>> Result(
        ...     params=LstsqParams(...),
        ...     info={'method': 'qr', 'rank': 5},
        ...     timing={'total_seconds': 0.01},
        ...     backend_name='qr'
        ... )
    """
    params: P
    info: dict[str, Any]
    timing: dict[str, float] | None
    backend_name: str
    warnings: tuple[str, ...] = field(default_factory=tuple)

    def has_warning(self, substring: str) -> bool:
        """Check if any warning contains the given substring."""
        return any(substring in w for w in self.warnings)

    def with_warnings(self, *messages: str) -> 'Result[P]':
        """Return a copy with additional warning messages appended."""
        return replace(self, warnings=self.warnings + tuple(messages))
