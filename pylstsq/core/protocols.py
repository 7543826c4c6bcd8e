"""
Core protocols for pylstsq.

These define structural interfaces that strategy backends and factorization
results must satisfy. We use Protocol (structural typing) rather than ABC
(nominal typing) so new strategies can be added without touching callers.

Design Principles:
    - Minimal contracts: prescribe only what's truly universal
    - Type-safe: use generics to preserve type information through pipelines
"""

from typing import Protocol, TypeVar, Any, runtime_checkable, TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

if TYPE_CHECKING:
    from pylstsq.core.result import Result

# Type variables for generic payloads
P = TypeVar('P', covariant=True)  # Parameter payload type
D = TypeVar('D', contravariant=True)  # Design type


@runtime_checkable
class Backend(Protocol[D, P]):
    """
    Protocol for least squares strategy backends.

    Each backend composes the dense primitives with exactly one
    factorization into a full solve. Backends are stateless apart from
    construction-time configuration (e.g. the SVD rank policy), which
    makes them easy to test and swap.

    Type Parameters:
        D: The design type this backend accepts
        P: The parameter payload type this backend produces
    """

    @property
    def name(self) -> str:
        """
        Backend identifier.

        Examples: 'normal', 'cholesky', 'lu', 'qr', 'svd'
        """
        ...

    def solve(self, design: D) -> 'Result[P]':
        """
        Execute the least squares solve.

        Raises:
            NumericalError: If numerical issues prevent a solution
            ConvergenceError: If an iterative kernel fails to converge
        """
        ...


@runtime_checkable
class Decomposition(Protocol):
    """
    Protocol for factorization results.

    Every factorization can rebuild the matrix it decomposes, which is
    what the round-trip diagnostics compare against the original.
    """

    def reconstruct(self) -> NDArray[np.floating[Any]]:
        """Rebuild the decomposed matrix from its factors."""
        ...
