"""
pytest configuration and shared fixtures.
"""

import pytest
import numpy as np


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def simple_problem(rng):
    """Small well-conditioned overdetermined system."""
    n, p = 100, 3
    A = rng.standard_normal((n, p))
    x_true = np.array([1.0, -2.0, 0.5])
    b = A @ x_true + rng.standard_normal(n) * 0.1
    return A, b, x_true


@pytest.fixture
def duplicated_column_problem(rng):
    """Rank p-1: the last column repeats the first."""
    n = 50
    A = rng.standard_normal((n, 3))
    A = np.column_stack([A, A[:, 0]])
    b = rng.standard_normal(n)
    return A, b


@pytest.fixture
def collinear_problem(rng):
    """Perfect collinearity x3 = x1 + x2."""
    n = 100
    x1 = rng.standard_normal(n)
    x2 = rng.standard_normal(n)
    A = np.column_stack([x1, x2, x1 + x2])
    b = rng.standard_normal(n)
    return A, b


@pytest.fixture
def make_conditioned(rng):
    """Factory: n x p matrix with singular values log-spaced from 1 to 1/cond."""
    def _make(n, p, cond):
        U, _ = np.linalg.qr(rng.standard_normal((n, p)))
        V, _ = np.linalg.qr(rng.standard_normal((p, p)))
        s = np.logspace(0, -np.log10(cond), p)
        return (U * s) @ V.T
    return _make
