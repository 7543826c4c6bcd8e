"""
Shared helpers for strategy backends.

Every backend ends the same way: given x, compute fitted values,
residuals and RSS, and wrap them in a Result.
"""

from typing import Any

import numpy as np
from numpy.typing import NDArray

from pylstsq.core.result import Result
from pylstsq.core.compute.timing import Timer
from pylstsq.core.compute.linalg.dense import matvec
from pylstsq.lstsq.design import LstsqDesign
from pylstsq.lstsq.solution import LstsqParams


def finish(
    design: LstsqDesign,
    coefficients: NDArray[np.floating[Any]],
    *,
    rank: int,
    info: dict[str, Any],
    timer: Timer,
    backend_name: str,
) -> Result[LstsqParams]:
    """Compute residual quantities, stop the timer and build the Result."""
    with timer.section('residuals'):
        fitted_values = matvec(design.A, coefficients)
        residuals = design.b - fitted_values
        rss = float(residuals @ residuals)

    timer.stop()

    params = LstsqParams(
        coefficients=coefficients,
        residuals=residuals,
        fitted_values=fitted_values,
        rss=rss,
        rank=rank,
    )

    return Result(
        params=params,
        info={'rank': rank, **info},
        timing=timer.result(),
        backend_name=backend_name,
        warnings=(),
    )
