"""
LU backend.

A'A[perm] = L U with partial pivoting, then the permuted A'b goes through
a forward and a back substitution. Works on the squared system like
Cholesky but does not need positive definiteness, only a nonzero pivot.
"""

from pylstsq.core.result import Result
from pylstsq.core.compute.timing import Timer
from pylstsq.core.compute.tolerances import PIVOT_RTOL
from pylstsq.lstsq.design import LstsqDesign
from pylstsq.lstsq.factors import LUFactor
from pylstsq.lstsq.solution import LstsqParams
from pylstsq.lstsq.backends._common import finish


class LUBackend:
    """Strategy: gather A'b by perm, forward-solve L, back-solve U."""

    def __init__(self, rtol: float = PIVOT_RTOL):
        self._rtol = rtol

    @property
    def name(self) -> str:
        return 'lu'

    def solve(self, design: LstsqDesign) -> Result[LstsqParams]:
        timer = Timer()
        timer.start()

        with timer.section('factorization'):
            factor = LUFactor.build(design.A, rtol=self._rtol)

        with timer.section('substitution'):
            coefficients = factor.solve(design.b)

        return finish(
            design,
            coefficients,
            rank=factor.rank,
            info={
                'method': 'lu',
                'pivot_order': factor.decomposition.perm.tolist(),
            },
            timer=timer,
            backend_name=self.name,
        )
