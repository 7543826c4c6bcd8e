"""
Least squares solution types.

Contains the parameter payload and user-facing solution wrapper.
"""

from dataclasses import dataclass
from typing import Any, TYPE_CHECKING
import numpy as np
from numpy.typing import NDArray

from pylstsq.core.result import Result
from pylstsq.core.compute.linalg.dense import vector_norm

if TYPE_CHECKING:
    from pylstsq.lstsq.design import LstsqDesign
    from pylstsq.lstsq.diagnostics import Diagnostics


@dataclass(frozen=True)
class LstsqParams:
    """
    Parameter payload for a least squares solve.

    This is the immutable data computed by backends.
    """
    coefficients: NDArray[np.floating[Any]]
    residuals: NDArray[np.floating[Any]]
    fitted_values: NDArray[np.floating[Any]]
    rss: float
    rank: int


@dataclass
class LstsqSolution:
    """
    User-facing least squares results.

    Wraps the backend Result and provides convenient accessors for the
    coefficients, residual quantities and (if requested) diagnostics.
    """
    _result: Result[LstsqParams]
    _design: 'LstsqDesign'
    _diagnostics: 'Diagnostics | None' = None

    @property
    def coefficients(self) -> NDArray[np.floating[Any]]:
        return self._result.params.coefficients

    @property
    def residuals(self) -> NDArray[np.floating[Any]]:
        return self._result.params.residuals

    @property
    def fitted_values(self) -> NDArray[np.floating[Any]]:
        return self._result.params.fitted_values

    @property
    def rss(self) -> float:
        return self._result.params.rss

    @property
    def residual_norm(self) -> float:
        """||Ax - b||, the minimized quantity (finite even where rss overflows)."""
        return vector_norm(self.residuals)

    @property
    def rank(self) -> int:
        return self._result.params.rank

    @property
    def strategy(self) -> str:
        return self._result.backend_name

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    @property
    def diagnostics(self) -> 'Diagnostics | None':
        """Diagnostics, present when the solve was run with check=True."""
        return self._diagnostics

    def summary(self) -> str:
        """Plain-text report of the solve."""
        lines = [
            "Least Squares Results",
            "=" * 60,
            f"Strategy: {self.strategy}",
            f"Observations (n): {self._design.n}",
            f"Unknowns (p): {self._design.p}",
            f"Rank: {self.rank}",
            f"Residual norm ||Ax - b||: {self.residual_norm:.6e}",
        ]
        if self._diagnostics is not None:
            d = self._diagnostics
            lines.extend([
                f"Condition number: {d.condition_number:.3e}",
                f"||A'(Ax - b)||: {d.orthogonality.norm:.3e} "
                f"({'ok' if d.orthogonality.passed else 'FAILED'})",
            ])
        lines.extend([
            "",
            "Coefficients:",
            "-" * 60,
        ])
        for i, coef in enumerate(self.coefficients):
            lines.append(f"  x[{i}]: {coef:16.8e}")
        lines.append("-" * 60)
        if self.warnings:
            lines.append("Warnings:")
            lines.extend(f"  - {w}" for w in self.warnings)
        if self.timing:
            lines.append(f"Time: {self.timing.get('total_seconds', 0):.4f}s")

        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"LstsqSolution(strategy={self.strategy!r}, n={self._design.n}, "
            f"p={self._design.p}, rank={self.rank}, "
            f"residual_norm={self.residual_norm:.4e})"
        )
