"""
Rank policies for the SVD strategy.

SVD is the only strategy that can degrade gracefully on a rank-deficient
A. Whether it should is the caller's decision, expressed as a policy:

    Strict(rtol)    fail with RankDeficientError if any s_i <= rtol * s_max
    Truncate(rtol)  zero those components: the minimum-norm solution
"""

from dataclasses import dataclass
from typing import Union

from pylstsq.core.compute.tolerances import RANK_RTOL


@dataclass(frozen=True)
class _Threshold:
    """Relative singular value threshold shared by both policies."""
    rtol: float = RANK_RTOL

    def __post_init__(self) -> None:
        if self.rtol < 0:
            raise ValueError(f"rtol must be non-negative, got {self.rtol}")

    def cutoff(self, s_max: float) -> float:
        """
        Absolute threshold rtol * s_max.

        Singular values at or below it count as zero for this policy.
        """
        return self.rtol * s_max


@dataclass(frozen=True)
class Strict(_Threshold):
    """
    Refuse rank-deficient problems.

    Any s_i <= rtol * s_max raises RankDeficientError. With rtol=0 there
    is no rank test at all: only an exactly-zero singular value stops the
    solve, and it does so as SingularSystemError from the division step.
    """


@dataclass(frozen=True)
class Truncate(_Threshold):
    """Drop singular components at or below ``rtol * s_max``."""


RankPolicy = Union[Strict, Truncate]
