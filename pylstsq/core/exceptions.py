"""
Exception hierarchy for pylstsq.

All exceptions inherit from LstsqError to allow catching any
library-specific error. Numerical failures carry the factorization
stage that produced them and, where meaningful, the row/column index.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Never catch and re-raise with less information
    - Deterministic numerical failures are never retried
"""

from typing import Sequence


class LstsqError(Exception):
    """Base exception for all pylstsq errors."""
    pass


class ValidationError(LstsqError):
    """
    Input validation failed.

    Raised when user-provided inputs fail validation checks
    (non-numeric data, NaN/Inf values).
    """
    pass


class DimensionMismatchError(ValidationError):
    """
    Array dimensions are incorrect or inconsistent.

    Raised when array shapes don't satisfy a solver precondition:
    wrong number of dimensions, A and b with different row counts,
    an underdetermined system (n < p), or a non-square triangular factor.
    This is a programming error, never a best-effort solve.
    """
    pass


class NumericalError(LstsqError):
    """
    Numerical computation failed.

    Base class for errors arising from numerical issues during a solve.

    Attributes:
        stage: Pipeline stage that failed (e.g. 'cholesky', 'lu', 'qr',
            'svd', 'normal_equations', 'forward_substitution')
        index: Row/column index where the failure was detected, if known
    """

    def __init__(
        self,
        message: str,
        stage: str | None = None,
        index: int | None = None,
    ):
        super().__init__(message)
        self.stage = stage
        self.index = index


class SingularSystemError(NumericalError):
    """
    A triangular or diagonal system has a zero (or below-tolerance) divisor.

    Raised by substitution, LU pivoting, Gauss-Jordan inversion and the
    singular-value division step instead of propagating Inf/NaN.

    Attributes:
        pivot: The offending pivot/diagonal value, if available
    """

    def __init__(
        self,
        message: str,
        stage: str | None = None,
        index: int | None = None,
        pivot: float | None = None,
    ):
        super().__init__(message, stage=stage, index=index)
        self.pivot = pivot


class NotPositiveDefiniteError(NumericalError):
    """
    Matrix is not positive definite.

    Raised by the Cholesky factorization when a running pivot is not
    strictly positive. For least squares this means A'A is not SPD, i.e.
    A is column-rank-deficient or nearly so.

    Attributes:
        matrix_name: Name/description of the problematic matrix
        pivot: Value of the failed running pivot
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        column: int | None = None,
        pivot: float | None = None,
    ):
        super().__init__(message, stage='cholesky', index=column)
        self.matrix_name = matrix_name
        self.pivot = pivot

    @property
    def column(self) -> int | None:
        """Column of the failed pivot (alias of ``index``)."""
        return self.index


class RankDeficientError(NumericalError):
    """
    A lacks full column rank.

    Raised by the QR and SVD strategies when the factorization of A itself
    (not A'A) exposes near-zero diagonal entries / singular values.

    Attributes:
        rank: Numerical rank
        expected_rank: Expected rank (number of columns p)
        columns: Offending column indices (QR) or singular-value
            positions (SVD)
        singular_values: Singular values, when computed by SVD
    """

    def __init__(
        self,
        message: str,
        stage: str | None = None,
        rank: int | None = None,
        expected_rank: int | None = None,
        columns: Sequence[int] = (),
        singular_values: Sequence[float] | None = None,
    ):
        first = columns[0] if len(columns) > 0 else None
        super().__init__(message, stage=stage, index=first)
        self.rank = rank
        self.expected_rank = expected_rank
        self.columns = tuple(int(c) for c in columns)
        self.singular_values = (
            tuple(float(s) for s in singular_values)
            if singular_values is not None else None
        )


class ConvergenceError(LstsqError):
    """
    Iterative algorithm failed to converge.

    Raised when the Jacobi SVD fails to orthogonalize all column pairs
    within the maximum number of sweeps.

    Attributes:
        iterations: Number of sweeps completed
        final_change: Largest remaining off-diagonal measure
        threshold: The convergence threshold that was not met
    """

    def __init__(
        self,
        message: str,
        iterations: int,
        final_change: float | None = None,
        threshold: float | None = None
    ):
        super().__init__(message)
        self.iterations = iterations
        self.final_change = final_change
        self.threshold = threshold


class IllConditionedWarning(UserWarning):
    """Emitted by diagnostics when cond(A) makes a strategy unreliable."""
    pass
