"""
Least squares design.

A design is a validated, immutable (A, b) pair. It is the boundary where
inputs are checked; every strategy downstream trusts it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pylstsq.core.validation import (
    check_array,
    check_finite,
    check_2d,
    check_1d,
    check_consistent_length,
    check_overdetermined,
)
from pylstsq.core.compute.linalg.dense import as_read_only, gram, gram_rhs


@dataclass(frozen=True)
class LstsqDesign:
    """
    Overdetermined system A x ~ b.

    Immutable after construction: A and b are read-only copies, so the
    caller's arrays are never aliased or modified.

    Construction:
        LstsqDesign.from_arrays(A, b)
    """
    _A: NDArray[np.floating[Any]]
    _b: NDArray[np.floating[Any]]
    _n: int
    _p: int

    @classmethod
    def from_arrays(cls, A: ArrayLike, b: ArrayLike) -> LstsqDesign:
        """
        Build a design from array-likes.

        A 1D ``A`` is treated as a single column; a column vector ``b`` of
        shape (n, 1) is flattened.

        Raises:
            ValidationError: If inputs are non-numeric or non-finite
            DimensionMismatchError: If shapes are inconsistent or n < p
        """
        A_arr = check_array(A, 'A')
        b_arr = check_array(b, 'b')

        if A_arr.ndim == 1:
            A_arr = A_arr.reshape(-1, 1)
        if b_arr.ndim == 2 and b_arr.shape[1] == 1:
            b_arr = b_arr.ravel()

        check_2d(A_arr, 'A')
        check_1d(b_arr, 'b')
        check_finite(A_arr, 'A')
        check_finite(b_arr, 'b')
        check_consistent_length(A_arr, b_arr, names=('A', 'b'))
        check_overdetermined(A_arr, 'A')

        n, p = A_arr.shape
        return cls(_A=as_read_only(A_arr), _b=as_read_only(b_arr), _n=n, _p=p)

    # === Properties ===

    @property
    def A(self) -> NDArray[np.floating[Any]]:
        """Coefficient matrix (n x p)."""
        return self._A

    @property
    def b(self) -> NDArray[np.floating[Any]]:
        """Observation vector (n,)."""
        return self._b

    @property
    def n(self) -> int:
        """Number of observations (rows)."""
        return self._n

    @property
    def p(self) -> int:
        """Number of unknowns (columns)."""
        return self._p

    def AtA(self) -> NDArray[np.floating[Any]]:
        """Compute A'A (p x p)."""
        return gram(self._A)

    def Atb(self) -> NDArray[np.floating[Any]]:
        """Compute A'b (p,)."""
        return gram_rhs(self._A, self._b)
