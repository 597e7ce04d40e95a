"""Tests for metric aggregation helpers."""

import math

import pytest

from bottleneck_analysis.analysis import statistics


class TestSeriesStatistics:
    """Mean, variance and coefficient of variation."""

    def test_empty_series_is_neutral(self):
        assert statistics.mean([]) == 0.0
        assert statistics.variance([]) == 0.0
        assert statistics.stddev([]) == 0.0
        assert statistics.coefficient_of_variation([]) == 0.0

    def test_population_variance(self):
        values = [2, 4, 4, 4, 5, 5, 7, 9]

        assert statistics.mean(values) == pytest.approx(5.0)
        assert statistics.variance(values) == pytest.approx(4.0)
        assert statistics.stddev(values) == pytest.approx(2.0)

    def test_constant_series(self):
        values = [0.1] * 7

        assert statistics.variance(values) == 0.0
        assert statistics.coefficient_of_variation(values) == 0.0

    def test_coefficient_of_variation_zero_mean(self):
        assert statistics.coefficient_of_variation([-1.0, 1.0]) == 0.0

    def test_coefficient_of_variation(self):
        assert statistics.coefficient_of_variation([40, 95]) == pytest.approx(27.5 / 67.5)


class TestLinearTrend:
    """Least-squares trend against sample index."""

    @pytest.mark.parametrize("intercept,slope", [(3.0, 2.5), (100.0, -0.75), (0.0, 0.001)])
    def test_recovers_exact_slope(self, intercept, slope):
        values = [intercept + slope * i for i in range(12)]

        trend = statistics.linear_trend(values)

        assert trend.slope == pytest.approx(slope)
        assert trend.correlation == pytest.approx(math.copysign(1.0, slope))

    def test_constant_series_has_no_trend(self):
        trend = statistics.linear_trend([42.0, 42.0, 42.0, 42.0])

        assert trend.slope == 0.0
        assert trend.correlation == 0.0

    def test_short_series(self):
        assert statistics.linear_trend([]) == (0.0, 0.0)
        assert statistics.linear_trend([5.0]) == (0.0, 0.0)

    def test_noisy_series_is_finite(self):
        trend = statistics.linear_trend([1, 3, 2, 5, 4, 6])

        assert trend.slope > 0
        assert 0 < trend.correlation < 1


class TestPearsonCorrelation:
    """Pearson correlation over the overlapping prefix."""

    def test_self_correlation(self):
        values = [3.0, 1.0, 4.0, 1.5, 9.0, 2.6]

        assert statistics.pearson_correlation(values, values) == pytest.approx(1.0)

    def test_negated_correlation(self):
        values = [3.0, 1.0, 4.0, 1.5, 9.0, 2.6]

        assert statistics.pearson_correlation(values, [-v for v in values]) == pytest.approx(-1.0)

    def test_uses_overlapping_prefix(self):
        a = [1.0, 2.0, 3.0, 4.0]
        b = [10.0, 20.0, 30.0, 40.0, -1000.0, 7.0]

        assert statistics.pearson_correlation(a, b) == pytest.approx(1.0)

    def test_degenerate_inputs(self):
        assert statistics.pearson_correlation([], [1.0, 2.0]) == 0.0
        assert statistics.pearson_correlation([5.0, 5.0, 5.0], [1.0, 2.0, 3.0]) == 0.0
        assert statistics.pearson_correlation([1.0], [2.0]) == 0.0
