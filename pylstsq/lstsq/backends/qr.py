"""
QR backend.

Householder QR of A itself, then R x = Q'b. This is the reference
strategy and the default: the conditioning of the problem is not squared,
and it is the approach production statistical software takes for OLS.
"""

from pylstsq.core.result import Result
from pylstsq.core.compute.timing import Timer
from pylstsq.core.compute.tolerances import RANK_RTOL
from pylstsq.lstsq.design import LstsqDesign
from pylstsq.lstsq.factors import QRFactor
from pylstsq.lstsq.solution import LstsqParams
from pylstsq.lstsq.backends._common import finish


class QRBackend:
    """
    Strategy using Householder QR.

    Algorithm:
        1. A = QR (thin)
        2. Check rank from the R diagonal
        3. Solve R x = Q'b by back substitution

    Raises:
        RankDeficientError: If A is rank-deficient, naming the columns
    """

    def __init__(self, rtol: float = RANK_RTOL):
        self._rtol = rtol

    @property
    def name(self) -> str:
        return 'qr'

    def solve(self, design: LstsqDesign) -> Result[LstsqParams]:
        timer = Timer()
        timer.start()

        with timer.section('factorization'):
            factor = QRFactor.build(design.A, rtol=self._rtol)

        with timer.section('substitution'):
            coefficients = factor.solve(design.b)

        return finish(
            design,
            coefficients,
            rank=factor.rank,
            info={'method': 'qr'},
            timer=timer,
            backend_name=self.name,
        )
