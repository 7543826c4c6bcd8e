"""
Cholesky backend.

A'A = L L', then two triangular solves. Cheapest of the factorization
strategies and the least robust: forming A'A squares cond(A), and a
(nearly) rank-deficient A shows up as NotPositiveDefiniteError.
"""

from pylstsq.core.result import Result
from pylstsq.core.compute.timing import Timer
from pylstsq.core.compute.tolerances import PIVOT_RTOL
from pylstsq.lstsq.design import LstsqDesign
from pylstsq.lstsq.factors import CholeskyFactor
from pylstsq.lstsq.solution import LstsqParams
from pylstsq.lstsq.backends._common import finish


class CholeskyBackend:
    """Strategy: L y = A'b (forward), L' x = y (back)."""

    def __init__(self, rtol: float = PIVOT_RTOL):
        self._rtol = rtol

    @property
    def name(self) -> str:
        return 'cholesky'

    def solve(self, design: LstsqDesign) -> Result[LstsqParams]:
        timer = Timer()
        timer.start()

        with timer.section('factorization'):
            factor = CholeskyFactor.build(design.A, rtol=self._rtol)

        with timer.section('substitution'):
            coefficients = factor.solve(design.b)

        return finish(
            design,
            coefficients,
            rank=factor.rank,
            info={'method': 'cholesky'},
            timer=timer,
            backend_name=self.name,
        )
