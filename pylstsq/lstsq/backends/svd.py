"""
SVD backend.

A = U diag(s) V', then x = V (U'b / s). No triangular solve is involved;
the only division is by singular values, guarded by the rank policy.
"""

from pylstsq.core.result import Result
from pylstsq.core.compute.timing import Timer
from pylstsq.lstsq.design import LstsqDesign
from pylstsq.lstsq.factors import SVDFactor
from pylstsq.lstsq.policies import RankPolicy, Strict
from pylstsq.lstsq.solution import LstsqParams
from pylstsq.lstsq.backends._common import finish


class SVDBackend:
    """
    Strategy using the one-sided Jacobi SVD.

    Args:
        rank_policy: Strict() (default) raises RankDeficientError on small
            singular values; Truncate() returns the minimum-norm solution.
    """

    def __init__(self, rank_policy: RankPolicy | None = None):
        self._rank_policy = rank_policy if rank_policy is not None else Strict()

    @property
    def name(self) -> str:
        return 'svd'

    @property
    def rank_policy(self) -> RankPolicy:
        return self._rank_policy

    def solve(self, design: LstsqDesign) -> Result[LstsqParams]:
        timer = Timer()
        timer.start()

        with timer.section('factorization'):
            factor = SVDFactor.build(design.A, rank_policy=self._rank_policy)

        with timer.section('solve'):
            coefficients = factor.solve(design.b)

        svd_result = factor.decomposition
        return finish(
            design,
            coefficients,
            rank=factor.rank,
            info={
                'method': 'svd',
                'rank_policy': type(self._rank_policy).__name__.lower(),
                'singular_values': svd_result.s.tolist(),
                'truncated': len(factor.small_singular_values),
                'sweeps': svd_result.sweeps,
            },
            timer=timer,
            backend_name=self.name,
        )
