"""
End-to-end scenarios.

A realistic 1000 x 20 problem that every strategy must solve, and the
stability property the strategies exist to demonstrate: as cond(A)
grows, the strategies that form A'A lose accuracy like cond(A)**2 while
QR and SVD lose it like cond(A).
"""

import pytest
import numpy as np

from pylstsq import solve
from pylstsq.lstsq import reference_solution, relative_difference


STRATEGIES = ['normal', 'cholesky', 'lu', 'qr', 'svd']
SQUARING = ['normal', 'cholesky', 'lu']
DIRECT = ['qr', 'svd']


@pytest.fixture
def large_problem(rng):
    n, p = 1000, 20
    A = rng.standard_normal((n, p))
    x_true = rng.uniform(-5.0, 5.0, p)
    noise = 0.01
    b = A @ x_true + noise * rng.standard_normal(n)
    return A, b, x_true, noise


def _errors(A, x_true, strategies):
    b = A @ x_true
    return {s: relative_difference(solve(A, b, strategy=s).coefficients, x_true) for s in strategies}


class TestLargeProblem:

    @pytest.mark.parametrize("strategy", STRATEGIES)
    def test_recovers_truth_to_noise_floor(self, large_problem, strategy):
        A, b, x_true, noise = large_problem
        x = solve(A, b, strategy=strategy).coefficients
        # Standard error of each coefficient is about noise / sqrt(n)
        np.testing.assert_allclose(x, x_true, atol=10 * noise / np.sqrt(A.shape[0]))

    @pytest.mark.parametrize("strategy", STRATEGIES)
    def test_agrees_with_reference(self, large_problem, strategy):
        A, b, _, _ = large_problem
        x = solve(A, b, strategy=strategy, check=True).coefficients
        assert relative_difference(x, reference_solution(A, b)) < 1e-10

    def test_residual_at_noise_level(self, large_problem):
        A, b, _, noise = large_problem
        result = solve(A, b)
        sigma_hat = np.sqrt(result.rss / (A.shape[0] - A.shape[1]))
        assert sigma_hat == pytest.approx(noise, rel=0.1)


class TestConditionSquaring:

    def test_squaring_strategies_deviate_more(self, make_conditioned, rng):
        A = make_conditioned(200, 10, 1e5)
        x_true = rng.standard_normal(10)
        errors = _errors(A, x_true, STRATEGIES)
        worst_direct = max(errors[s] for s in DIRECT)
        for s in SQUARING:
            assert errors[s] > 100 * worst_direct, (
                f"{s}: {errors[s]:.3e} vs qr/svd {worst_direct:.3e}"
            )

    def test_deviation_grows_with_condition_number(self, make_conditioned, rng):
        x_true = rng.standard_normal(8)
        mild = _errors(make_conditioned(150, 8, 1e2), x_true, ['cholesky', 'qr'])
        severe = _errors(make_conditioned(150, 8, 1e5), x_true, ['cholesky', 'qr'])
        assert severe['cholesky'] > 100 * mild['cholesky']
        assert severe['cholesky'] > 100 * severe['qr']

    def test_near_collinear_columns(self, rng):
        n = 200
        base = rng.standard_normal((n, 4))
        A = np.column_stack([base, base[:, 0] + 1e-5 * rng.standard_normal(n)])
        x_true = np.array([1.0, -1.0, 2.0, 0.5, 3.0])
        errors = _errors(A, x_true, STRATEGIES)
        assert errors['qr'] < 1e-8
        assert errors['svd'] < 1e-8
        assert errors['normal'] > 100 * errors['qr']
        assert errors['cholesky'] > 100 * errors['qr']

    def test_direct_strategies_stay_accurate(self, make_conditioned, rng):
        A = make_conditioned(200, 10, 1e6)
        x_true = rng.standard_normal(10)
        errors = _errors(A, x_true, DIRECT)
        for s in DIRECT:
            assert errors[s] < 1e-8
