"""
Tests for forward and back substitution.
"""

import numpy as np
import pytest

from pylstsq.core.exceptions import DimensionMismatchError, SingularSystemError
from pylstsq.core.compute.linalg.triangular import solve_lower, solve_upper


L_HAND = np.array([
    [1.0, 0.0, 0.0],
    [2.0, 3.0, 0.0],
    [3.0, 4.0, 1.0],
])


class TestForwardSubstitution:

    def test_hand_built_system_exact(self):
        x = solve_lower(L_HAND, np.array([1.0, 11.0, 15.0]))
        np.testing.assert_array_equal(x, [1.0, 3.0, 0.0])

    def test_multiple_right_hand_sides(self):
        Y = np.column_stack([[1.0, 11.0, 15.0], [1.0, 2.0, 3.0]])
        X = solve_lower(L_HAND, Y)
        assert X.shape == (3, 2)
        np.testing.assert_array_equal(X[:, 0], [1.0, 3.0, 0.0])
        np.testing.assert_allclose(L_HAND @ X[:, 1], [1.0, 2.0, 3.0], atol=1e-14)

    def test_unit_diagonal_ignores_stored_diagonal(self):
        L = np.array([[5.0, 0.0], [2.0, 7.0]])
        x = solve_lower(L, np.array([1.0, 4.0]), unit_diagonal=True)
        np.testing.assert_array_equal(x, [1.0, 2.0])

    def test_upper_triangle_not_read(self):
        L = L_HAND.copy()
        L[0, 2] = 99.0
        x = solve_lower(L, np.array([1.0, 11.0, 15.0]))
        np.testing.assert_array_equal(x, [1.0, 3.0, 0.0])

    def test_zero_diagonal_raises(self):
        L = L_HAND.copy()
        L[1, 1] = 0.0
        with pytest.raises(SingularSystemError) as exc_info:
            solve_lower(L, np.ones(3))
        assert exc_info.value.index == 1
        assert exc_info.value.stage == 'forward_substitution'

    def test_near_zero_diagonal_raises(self):
        L = L_HAND.copy()
        L[2, 2] = 1e-15
        with pytest.raises(SingularSystemError) as exc_info:
            solve_lower(L, np.ones(3))
        assert exc_info.value.index == 2

    def test_rtol_is_configurable(self):
        L = L_HAND.copy()
        L[2, 2] = 1e-15
        x = solve_lower(L, np.array([1.0, 11.0, 15.0]), rtol=0.0)
        assert np.all(np.isfinite(x))

    def test_input_not_modified(self, rng):
        L = np.tril(rng.standard_normal((4, 4))) + 4 * np.eye(4)
        y = rng.standard_normal(4)
        L_copy, y_copy = L.copy(), y.copy()
        solve_lower(L, y)
        np.testing.assert_array_equal(L, L_copy)
        np.testing.assert_array_equal(y, y_copy)


class TestBackSubstitution:

    def test_transpose_of_hand_built_system(self):
        U = L_HAND.T
        x_true = np.array([1.0, -1.0, 2.0])
        x = solve_upper(U, U @ x_true)
        np.testing.assert_allclose(x, x_true, rtol=1e-14)

    def test_random_upper(self, rng):
        U = np.triu(rng.standard_normal((6, 6))) + 6 * np.eye(6)
        Y = rng.standard_normal((6, 3))
        X = solve_upper(U, Y)
        np.testing.assert_allclose(U @ X, Y, atol=1e-12)

    def test_zero_diagonal_raises(self):
        U = np.array([[1.0, 2.0], [0.0, 0.0]])
        with pytest.raises(SingularSystemError) as exc_info:
            solve_upper(U, np.ones(2))
        assert exc_info.value.index == 1
        assert exc_info.value.stage == 'back_substitution'


class TestShapeErrors:

    def test_non_square(self):
        with pytest.raises(DimensionMismatchError):
            solve_lower(np.ones((3, 2)), np.ones(3))

    def test_rhs_length(self):
        with pytest.raises(DimensionMismatchError, match="2 rows"):
            solve_upper(np.eye(3), np.ones(2))
