"""
Tests for the dense matrix/vector primitives.
"""

import numpy as np
import pytest

from pylstsq.core.exceptions import DimensionMismatchError
from pylstsq.core.compute.linalg.dense import (
    as_read_only,
    frobenius_norm,
    gram,
    gram_rhs,
    matmul,
    matvec,
    power_of_two_scale,
    transpose,
    vector_norm,
)


class TestProducts:

    def test_matmul(self, rng):
        A = rng.standard_normal((4, 3))
        B = rng.standard_normal((3, 2))
        np.testing.assert_allclose(matmul(A, B), A @ B)

    def test_matmul_mismatch(self):
        with pytest.raises(DimensionMismatchError, match="inner dimensions"):
            matmul(np.ones((4, 3)), np.ones((4, 3)))

    def test_matvec_vector_and_block(self, rng):
        A = rng.standard_normal((5, 3))
        x = rng.standard_normal(3)
        X = rng.standard_normal((3, 2))
        np.testing.assert_allclose(matvec(A, x), A @ x)
        np.testing.assert_allclose(matvec(A, X), A @ X)

    def test_matvec_mismatch(self):
        with pytest.raises(DimensionMismatchError):
            matvec(np.ones((5, 3)), np.ones(5))

    def test_transpose_is_view(self):
        A = np.arange(6.0).reshape(3, 2)
        At = transpose(A)
        assert At.shape == (2, 3)
        assert np.shares_memory(A, At)

    def test_gram_symmetric(self, rng):
        A = rng.standard_normal((50, 4))
        G = gram(A)
        np.testing.assert_array_equal(G, G.T)
        np.testing.assert_allclose(G, A.T @ A, rtol=1e-12, atol=1e-12)

    def test_gram_rhs(self, rng):
        A = rng.standard_normal((50, 4))
        b = rng.standard_normal(50)
        np.testing.assert_allclose(gram_rhs(A, b), A.T @ b)


class TestNorms:

    def test_vector_norm(self):
        assert vector_norm(np.array([3.0, 4.0])) == 5.0

    def test_vector_norm_rejects_matrix(self):
        with pytest.raises(DimensionMismatchError):
            vector_norm(np.ones((2, 2)))

    def test_frobenius_norm(self):
        assert frobenius_norm(np.array([[1.0, 2.0], [2.0, 4.0]])) == 5.0

    @pytest.mark.parametrize("scale", [1e-200, 1e200])
    def test_norms_at_extreme_scales(self, scale):
        assert vector_norm(scale * np.array([3.0, 4.0])) == pytest.approx(5.0 * scale, rel=1e-15)
        A = scale * np.array([[1.0, 2.0], [2.0, 4.0]])
        assert frobenius_norm(A) == pytest.approx(5.0 * scale, rel=1e-15)

    def test_zero_norm(self):
        assert vector_norm(np.zeros(3)) == 0.0


class TestPowerOfTwoScale:

    def test_bounds_entries(self):
        A = np.array([[3.0, -5.0], [0.5, 1.0]])
        scale = power_of_two_scale(A)
        assert scale == 8.0
        assert np.max(np.abs(A / scale)) < 1.0

    def test_exact_power_of_two(self):
        assert power_of_two_scale(np.array([1.0])) == 2.0

    def test_zero_matrix(self):
        assert power_of_two_scale(np.zeros((2, 2))) == 1.0

    def test_division_is_exact(self, rng):
        A = 1e-170 * rng.standard_normal((5, 3))
        scale = power_of_two_scale(A)
        np.testing.assert_array_equal((A / scale) * scale, A)


class TestReadOnly:

    def test_copy_is_frozen_and_independent(self):
        source = np.ones(3)
        frozen = as_read_only(source)
        source[0] = 7.0
        assert frozen[0] == 1.0
        with pytest.raises(ValueError):
            frozen[0] = 2.0
