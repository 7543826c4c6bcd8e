"""
Normal-equations backend.

The closed form x = (A'A)^-1 A'b, evaluated literally: A'A is inverted
by Gauss-Jordan elimination and multiplied into A'b. It squares the
condition number and adds the error of an explicit inverse, so it is
the baseline the other strategies are measured against, not a
recommendation.
"""

from pylstsq.core.result import Result
from pylstsq.core.compute.timing import Timer
from pylstsq.core.compute.tolerances import PIVOT_RTOL
from pylstsq.core.compute.linalg.dense import matvec
from pylstsq.core.compute.linalg.inverse import gauss_jordan_inverse
from pylstsq.lstsq.design import LstsqDesign
from pylstsq.lstsq.solution import LstsqParams
from pylstsq.lstsq.backends._common import finish


class NormalEquationsBackend:
    """
    Strategy solving A'A x = A'b through an explicit inverse.

    Raises SingularSystemError when A'A has no usable pivot.
    """

    def __init__(self, rtol: float = PIVOT_RTOL):
        self._rtol = rtol

    @property
    def name(self) -> str:
        return 'normal'

    def solve(self, design: LstsqDesign) -> Result[LstsqParams]:
        """
        Algorithm:
            1. G = A'A, c = A'b
            2. G^-1 by Gauss-Jordan with partial pivoting
            3. x = G^-1 c
        """
        timer = Timer()
        timer.start()

        with timer.section('gram'):
            G = design.AtA()
            c = design.Atb()

        with timer.section('inverse'):
            G_inv = gauss_jordan_inverse(G, rtol=self._rtol)

        with timer.section('solve'):
            coefficients = matvec(G_inv, c)

        return finish(
            design,
            coefficients,
            rank=design.p,
            info={'method': 'normal_equations'},
            timer=timer,
            backend_name=self.name,
        )
