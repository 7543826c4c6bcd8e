"""
Tests for solve().

Tests the complete pipeline: input validation, strategy selection and
solution properties.
"""

import pytest
import numpy as np

from pylstsq import solve, solve_cholesky, solve_qr, solve_svd, Strict, Truncate
from pylstsq.lstsq import available_strategies
from pylstsq.lstsq.solution import LstsqSolution
from pylstsq.lstsq.solvers import _get_backend
from pylstsq.core.protocols import Backend
from pylstsq.core.exceptions import (
    DimensionMismatchError,
    NumericalError,
    RankDeficientError,
    ValidationError,
)


class TestSolveBasic:
    """Basic solve() functionality tests."""

    def test_returns_solution(self, simple_problem):
        A, b, _ = simple_problem
        result = solve(A, b)
        assert isinstance(result, LstsqSolution)
        assert result.coefficients.shape == (3,)

    def test_default_strategy_is_qr(self, simple_problem):
        A, b, _ = simple_problem
        assert solve(A, b).strategy == 'qr'

    def test_coefficients_close_to_truth(self, simple_problem):
        A, b, x_true = simple_problem
        result = solve(A, b)
        # Low noise (sigma=0.1): coefficients should be close to truth
        np.testing.assert_allclose(result.coefficients, x_true, atol=0.1)

    def test_lists_accepted(self):
        A = [[1.0, 0.0], [0.0, 1.0], [1.0, 1.0]]
        b = [1.0, 2.0, 3.0]
        np.testing.assert_allclose(solve(A, b).coefficients, [1.0, 2.0], atol=1e-12)

    def test_single_column_matrix(self):
        A = np.array([1.0, 2.0, 3.0])
        b = 2.0 * A
        np.testing.assert_allclose(solve(A, b).coefficients, [2.0], atol=1e-12)

    def test_square_system_exact(self, rng):
        A = rng.standard_normal((5, 5)) + 5 * np.eye(5)
        x_true = rng.standard_normal(5)
        result = solve(A, A @ x_true)
        np.testing.assert_allclose(result.coefficients, x_true, rtol=1e-10)
        assert result.rss < 1e-20

    def test_column_vector_b(self, simple_problem):
        A, b, _ = simple_problem
        np.testing.assert_allclose(
            solve(A, b.reshape(-1, 1)).coefficients,
            solve(A, b).coefficients,
        )

    def test_inputs_not_modified(self, simple_problem):
        A, b, _ = simple_problem
        A_copy, b_copy = A.copy(), b.copy()
        for strategy in available_strategies():
            solve(A, b, strategy=strategy)
        np.testing.assert_array_equal(A, A_copy)
        np.testing.assert_array_equal(b, b_copy)


class TestSolveProperties:

    def test_residuals_and_fitted_values(self, simple_problem):
        A, b, _ = simple_problem
        result = solve(A, b)
        np.testing.assert_allclose(result.fitted_values, A @ result.coefficients)
        np.testing.assert_allclose(result.residuals, b - result.fitted_values)

    def test_rss_and_residual_norm(self, simple_problem):
        A, b, _ = simple_problem
        result = solve(A, b)
        assert result.rss == pytest.approx(np.sum(result.residuals ** 2))
        assert result.residual_norm == pytest.approx(np.linalg.norm(result.residuals))

    def test_rank(self, simple_problem):
        A, b, _ = simple_problem
        assert solve(A, b).rank == 3

    def test_timing(self, simple_problem):
        A, b, _ = simple_problem
        timing = solve(A, b).timing
        assert timing['total_seconds'] >= 0
        assert 'factorization' in timing

    @pytest.mark.parametrize("strategy, method", [
        ('normal', 'normal_equations'),
        ('cholesky', 'cholesky'),
        ('lu', 'lu'),
        ('qr', 'qr'),
        ('svd', 'svd'),
    ])
    def test_info_method(self, simple_problem, strategy, method):
        A, b, _ = simple_problem
        result = solve(A, b, strategy=strategy)
        assert result.strategy == strategy
        assert result.info['method'] == method
        assert result.info['rank'] == 3

    def test_lu_info_has_pivot_order(self, simple_problem):
        A, b, _ = simple_problem
        pivot_order = solve(A, b, strategy='lu').info['pivot_order']
        assert sorted(pivot_order) == [0, 1, 2]

    def test_svd_info(self, simple_problem):
        A, b, _ = simple_problem
        info = solve(A, b, strategy='svd').info
        assert info['rank_policy'] == 'strict'
        assert info['truncated'] == 0
        assert len(info['singular_values']) == 3
        assert info['sweeps'] >= 1

    def test_no_warnings_without_check(self, simple_problem):
        A, b, _ = simple_problem
        result = solve(A, b)
        assert result.warnings == ()
        assert result.diagnostics is None

    def test_summary(self, simple_problem):
        A, b, _ = simple_problem
        summary = solve(A, b, strategy='svd').summary()
        assert "Least Squares Results" in summary
        assert "Strategy: svd" in summary
        assert "x[2]" in summary
        assert "Condition number" not in summary

    def test_summary_with_diagnostics(self, simple_problem):
        A, b, _ = simple_problem
        summary = solve(A, b, check=True).summary()
        assert "Condition number:" in summary
        assert "(ok)" in summary

    def test_repr(self, simple_problem):
        A, b, _ = simple_problem
        text = repr(solve(A, b))
        assert text.startswith("LstsqSolution(strategy='qr'")
        assert "n=100" in text


class TestSolveValidation:

    def test_underdetermined(self):
        with pytest.raises(DimensionMismatchError, match="n=2, p=3"):
            solve(np.ones((2, 3)), np.ones(2))

    def test_length_mismatch(self):
        with pytest.raises(DimensionMismatchError, match="A=5, b=4"):
            solve(np.ones((5, 2)), np.ones(4))

    def test_matrix_b_rejected(self):
        with pytest.raises(DimensionMismatchError):
            solve(np.ones((5, 2)), np.ones((5, 2)))

    def test_nan_rejected(self, simple_problem):
        A, b, _ = simple_problem
        A = A.copy()
        A[0, 0] = np.nan
        with pytest.raises(ValidationError, match="NaN"):
            solve(A, b)

    def test_inf_in_b_rejected(self, simple_problem):
        A, b, _ = simple_problem
        b = b.copy()
        b[3] = np.inf
        with pytest.raises(ValidationError, match="Inf"):
            solve(A, b)

    def test_non_numeric_rejected(self):
        with pytest.raises(ValidationError):
            solve([["a", "b"], ["c", "d"]], [1.0, 2.0])

    def test_unknown_strategy(self, simple_problem):
        A, b, _ = simple_problem
        with pytest.raises(ValueError, match="Unknown strategy"):
            solve(A, b, strategy='gmres')

    def test_rank_policy_only_for_svd(self, simple_problem):
        A, b, _ = simple_problem
        with pytest.raises(ValueError, match="rank_policy applies only"):
            solve(A, b, strategy='qr', rank_policy=Truncate())

    def test_bad_rank_policy_type(self, simple_problem):
        A, b, _ = simple_problem
        with pytest.raises(TypeError, match="Strict or Truncate"):
            solve(A, b, strategy='svd', rank_policy='truncate')

    def test_negative_rtol(self):
        with pytest.raises(ValueError, match="non-negative"):
            Strict(rtol=-1.0)

    def test_negative_solve_rtol(self, simple_problem):
        A, b, _ = simple_problem
        with pytest.raises(ValueError, match="non-negative"):
            solve(A, b, strategy='lu', rtol=-1e-12)

    def test_rtol_not_for_svd(self, simple_problem):
        A, b, _ = simple_problem
        with pytest.raises(ValueError, match="rank_policy"):
            solve(A, b, strategy='svd', rtol=1e-12)


class TestToleranceOverride:

    @pytest.fixture
    def near_dependent(self, rng):
        A = rng.standard_normal((60, 3))
        A = np.column_stack([A, A[:, 0] + 1e-10 * rng.standard_normal(60)])
        return A, rng.standard_normal(60)

    def test_qr_default_rejects(self, near_dependent):
        A, b = near_dependent
        with pytest.raises(RankDeficientError):
            solve(A, b, strategy='qr')

    def test_qr_tighter_rtol_accepts(self, near_dependent):
        A, b = near_dependent
        result = solve(A, b, strategy='qr', rtol=1e-14)
        assert result.rank == 4
        assert np.all(np.isfinite(result.coefficients))

    def test_solve_qr_passes_rtol(self, near_dependent):
        A, b = near_dependent
        np.testing.assert_array_equal(
            solve_qr(A, b, rtol=1e-14),
            solve(A, b, strategy='qr', rtol=1e-14).coefficients,
        )

    @pytest.mark.parametrize("strategy", ['normal', 'cholesky', 'lu', 'qr'])
    def test_backend_receives_rtol(self, strategy):
        assert _get_backend(strategy, None, 1e-3)._rtol == 1e-3

    def test_loose_rtol_rejects_moderate_conditioning(self, make_conditioned, rng):
        A = make_conditioned(80, 4, 1e3)
        b = rng.standard_normal(80)
        solve_cholesky(A, b)
        with pytest.raises(NumericalError):
            solve_cholesky(A, b, rtol=1e-2)


class TestConvenienceFunctions:

    def test_available_strategies(self):
        assert available_strategies() == ('normal', 'cholesky', 'lu', 'qr', 'svd')

    def test_solve_qr_returns_coefficients(self, simple_problem):
        A, b, _ = simple_problem
        x = solve_qr(A, b)
        assert isinstance(x, np.ndarray)
        np.testing.assert_array_equal(x, solve(A, b, strategy='qr').coefficients)

    def test_solve_svd_default_policy_is_strict(self, simple_problem):
        A, b, _ = simple_problem
        np.testing.assert_array_equal(
            solve_svd(A, b),
            solve(A, b, strategy='svd', rank_policy=Strict()).coefficients,
        )


class TestBackendProtocol:

    @pytest.mark.parametrize("strategy", ['normal', 'cholesky', 'lu', 'qr', 'svd'])
    def test_backends_satisfy_protocol(self, strategy):
        backend = _get_backend(strategy, None)
        assert isinstance(backend, Backend)
        assert backend.name == strategy

    def test_svd_backend_keeps_policy(self):
        policy = Truncate(rtol=1e-6)
        assert _get_backend('svd', policy).rank_policy is policy
