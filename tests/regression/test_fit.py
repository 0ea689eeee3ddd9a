"""
Tests for regression fit().

Tests the complete pipeline: cross caching, design construction, backend
selection, prediction write-back and solution properties.
"""

import warnings

import pytest
import numpy as np

from linfit.core.compute.tolerances import CPU_FP64, select_tolerance
from linfit.core.exceptions import (
    DimensionError,
    ErrorKind,
    InsufficientDataError,
    SingularMatrixError,
    UnderdeterminedError,
)
from linfit.core.protocols import Backend
from linfit.regression import fit, observations_from_table
from linfit.regression.backends import CPUQRBackend
from linfit.regression.crosses import FeatureCross, pow_cross, product_cross
from linfit.regression.observations import Observation
from linfit.regression.solution import LinearSolution


class TestFitBasic:
    """Basic fit() functionality tests."""

    def test_returns_solution(self, quadratic_observations):
        solution = fit(quadratic_observations)
        assert isinstance(solution, LinearSolution)
        assert solution.coefficients.shape == (2,)

    def test_recovers_exact_coefficients(self, exact_linear_data):
        X, y, coef_true = exact_linear_data
        observations = [Observation.of(yi, xi) for xi, yi in zip(X, y)]
        solution = fit(observations)
        np.testing.assert_allclose(solution.coefficients, coef_true, atol=1e-6)

    def test_accepts_pairs(self, golden_table):
        pairs = [(row[0], row[1:]) for row in golden_table]
        solution = fit(pairs)
        assert solution.n_observations == 9

    def test_murder_rate(self, murder_observations):
        """Every variable correlates positively with the murder rate."""
        solution = fit(murder_observations)
        assert np.all(solution.coefficients[1:] >= 0.0)
        assert solution.r_squared > 0.8

    def test_murder_rate_matches_lstsq(self, murder_observations):
        """Inhabitants sit next to percentages, so compare loosely."""
        solution = fit(murder_observations)
        X = np.column_stack([
            np.ones(len(murder_observations)),
            [o.variables for o in murder_observations],
        ])
        y = np.array([o.observed for o in murder_observations])
        expected, *_ = np.linalg.lstsq(X, y, rcond=None)
        tier = select_tolerance(is_ill_conditioned=True)
        np.testing.assert_allclose(solution.coefficients, expected, rtol=tier.rtol, atol=tier.atol)

    def test_golden_coefficients(self, golden_table):
        solution = fit(observations_from_table(golden_table, 0))
        assert solution.n_terms == 3
        np.testing.assert_allclose(solution.coefficients, [323.54, 46.60, 13.99], atol=0.01)

    def test_residuals_sum_to_near_zero_with_bias(self, golden_table):
        solution = fit(observations_from_table(golden_table, 0))
        assert abs(solution.residuals.sum()) < 1e-8

    def test_coefficients_read_only(self, golden_table):
        solution = fit(observations_from_table(golden_table, 0))
        with pytest.raises(ValueError):
            solution.coefficients[0] = 0.0


class TestFitStatistics:

    def test_r_squared_range(self, murder_observations):
        solution = fit(murder_observations)
        assert 0.0 <= solution.r_squared <= 1.0

    def test_r_squared_is_variance_ratio(self, murder_observations):
        solution = fit(murder_observations)
        assert solution.r_squared == pytest.approx(
            solution.variance_predicted / solution.variance_observed
        )

    def test_variance_observed_is_population_variance(self, murder_observations):
        solution = fit(murder_observations)
        observed = [o.observed for o in murder_observations]
        assert solution.variance_observed == pytest.approx(np.var(observed))

    def test_r_squared_matches_one_minus_rss_over_tss(self, murder_observations):
        solution = fit(murder_observations)
        assert solution.r_squared == pytest.approx(1.0 - solution.rss / solution.tss)

    def test_degrees_of_freedom(self, murder_observations):
        solution = fit(murder_observations)
        assert solution.rank == 4
        assert solution.df_residual == 16
        assert solution.residual_std_error > 0.0

    def test_constant_target(self, rng):
        observations = [Observation.of(5.0, rng.standard_normal(2)) for _ in range(6)]
        with pytest.warns(RuntimeWarning, match="R-squared is undefined"):
            solution = fit(observations)
        assert np.isnan(solution.r_squared)
        assert solution.variance_observed == 0.0
        assert len(solution.warnings) == 1

    def test_warning_points_at_caller(self, rng):
        observations = [Observation.of(5.0, rng.standard_normal(2)) for _ in range(6)]
        with pytest.warns(RuntimeWarning) as record:
            fit(observations)
        assert record[0].filename == __file__

    def test_no_warning_for_varying_target(self, golden_table):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            solution = fit(observations_from_table(golden_table, 0))
        assert solution.warnings == ()


class TestPredictionWriteBack:

    def test_predicted_and_residual_stored(self, golden_table):
        observations = observations_from_table(golden_table, 0)
        solution = fit(observations)
        for obs, fitted in zip(observations, solution.fitted_values):
            assert obs.predicted == fitted
            assert obs.residual == obs.predicted - obs.observed

    def test_predict_matches_stored_exactly(self, murder_observations):
        solution = fit(murder_observations)
        for obs in murder_observations:
            assert solution.predict(obs.variables) == obs.predicted

    def test_predict_matches_stored_exactly_with_crosses(self, quadratic_observations):
        solution = fit(quadratic_observations, crosses=[pow_cross(0, 2)])
        for obs in quadratic_observations:
            assert solution.predict(obs.variables) == obs.predicted

    def test_predict_wrong_length(self, golden_table):
        solution = fit(observations_from_table(golden_table, 0))
        with pytest.raises(DimensionError, match="expected 2 values, got 3"):
            solution.predict([1.0, 2.0, 3.0])


class TestCrosses:

    def test_power_cross_fits_quadratic_exactly(self):
        observations = [Observation.of(1 + 2 * x + 3 * x ** 2, [x]) for x in range(-3, 4)]
        solution = fit(observations, crosses=[pow_cross(0, 2)])
        np.testing.assert_allclose(
            solution.coefficients, [1.0, 2.0, 3.0], rtol=CPU_FP64.rtol, atol=1e-9
        )

    def test_prediction_applies_crosses(self, quadratic_observations):
        solution = fit(quadratic_observations, crosses=[pow_cross(0, 2), pow_cross(0, 7)])
        assert solution.r_squared > 0.8
        assert solution.predict([6.0]) == pytest.approx(42.0, abs=1e-3)

    def test_product_cross(self, rng):
        X = rng.standard_normal((12, 2))
        observations = [Observation.of(0.5 + x0 - x1 + 4.0 * x0 * x1, [x0, x1]) for x0, x1 in X]
        solution = fit(observations, crosses=[product_cross(0, 1)])
        np.testing.assert_allclose(solution.coefficients, [0.5, 1.0, -1.0, 4.0], atol=1e-9)
        assert solution.term_names == ('(bias)', 'x0', 'x1', 'x0*x1')

    def test_crosses_cached_on_observations(self, quadratic_observations):
        fit(quadratic_observations, crosses=[pow_cross(0, 2)])
        for obs in quadratic_observations:
            assert obs.crosses == (obs.variables[0] ** 2,)

    def test_refit_does_not_recompute(self, quadratic_observations, monkeypatch):
        fit(quadratic_observations, crosses=[pow_cross(0, 2)])

        calls = []
        original = FeatureCross.calculate

        def counting(self, variables):
            calls.append(self)
            return original(self, variables)

        monkeypatch.setattr(FeatureCross, 'calculate', counting)
        first = [o.crosses for o in quadratic_observations]
        fit(quadratic_observations, crosses=[pow_cross(0, 2)])
        assert calls == []
        assert [o.crosses for o in quadratic_observations] == first

    def test_refit_under_different_crosses(self, quadratic_observations):
        fit(quadratic_observations, crosses=[pow_cross(0, 2)])
        solution = fit(quadratic_observations, crosses=[pow_cross(0, 3)])
        for obs in quadratic_observations:
            assert obs.crosses == (obs.variables[0] ** 3,)
            assert solution.predict(obs.variables) == obs.predicted
        assert solution.term_names == ('(bias)', 'x0', 'x0^3')

    def test_refit_without_crosses(self, quadratic_observations):
        fit(quadratic_observations, crosses=[pow_cross(0, 2)])
        solution = fit(quadratic_observations)
        assert solution.n_terms == 2
        for obs in quadratic_observations:
            assert obs.crosses == ()
            assert solution.predict(obs.variables) == obs.predicted

    def test_out_of_range_cross_index(self, quadratic_observations):
        with pytest.raises(DimensionError, match="out of range"):
            fit(quadratic_observations, crosses=[pow_cross(1, 2)])


class TestFitErrors:

    @pytest.mark.parametrize("n", [0, 1, 2])
    def test_insufficient_data(self, n):
        observations = [Observation.of(float(i), [float(i)]) for i in range(n)]
        with pytest.raises(InsufficientDataError, match="Not enough data points") as exc_info:
            fit(observations)
        assert exc_info.value.kind is ErrorKind.INSUFFICIENT_DATA
        assert exc_info.value.n_observations == n
        assert exc_info.value.min_required == 3

    @pytest.mark.parametrize("n,v,k", [
        (3, 3, 0),
        (4, 2, 2),
        (5, 4, 1),
        (3, 2, 1),
        (6, 6, 0),
    ])
    def test_underdetermined(self, rng, n, v, k):
        observations = [Observation.of(float(i), rng.standard_normal(v)) for i in range(n)]
        crosses = [pow_cross(0, j + 2) for j in range(k)]
        with pytest.raises(UnderdeterminedError) as exc_info:
            fit(observations, crosses=crosses)
        assert exc_info.value.kind is ErrorKind.UNDERDETERMINED
        assert exc_info.value.n_terms == 1 + v + k

    def test_zero_column_is_singular(self, rng):
        observations = [Observation.of(float(i), [rng.standard_normal(), 0.0]) for i in range(6)]
        with pytest.raises(SingularMatrixError) as exc_info:
            fit(observations)
        assert exc_info.value.kind is ErrorKind.SINGULAR_MATRIX
        assert exc_info.value.expected_rank == 3

    def test_inconsistent_variables(self):
        observations = [
            Observation.of(1.0, [1.0]),
            Observation.of(2.0, [2.0, 3.0]),
            Observation.of(3.0, [3.0]),
        ]
        with pytest.raises(DimensionError):
            fit(observations)


class TestBackendSelection:

    def test_auto_selects_cpu_qr(self, golden_table):
        solution = fit(observations_from_table(golden_table, 0), backend='auto')
        assert solution.backend_name == 'cpu_qr'

    def test_unknown_backend(self, golden_table):
        with pytest.raises(ValueError, match="Unknown backend"):
            fit(observations_from_table(golden_table, 0), backend='gpu')

    def test_backend_protocol(self):
        assert isinstance(CPUQRBackend(), Backend)

    def test_timing_sections(self, golden_table):
        solution = fit(observations_from_table(golden_table, 0))
        assert 'qr_decomposition' in solution.timing
        assert 'back_substitution' in solution.timing
        assert solution.info['method'] == 'qr'


class TestSolutionAccessors:

    def test_coeff_total(self, golden_table):
        solution = fit(observations_from_table(golden_table, 0))
        assert solution.coeff(0) == solution.bias
        assert solution.coeff(3) == 0.0
        assert solution.coeff(-1) == 0.0

    def test_summary(self, golden_table):
        summary = fit(observations_from_table(golden_table, 0)).summary()
        assert "R-squared" in summary
        assert "Backend: cpu_qr" in summary

    def test_repr(self, golden_table):
        assert repr(fit(observations_from_table(golden_table, 0))).startswith("LinearSolution(n=9, p=3")
