import pytest

from engine.regime import VolatilityState
from engine.stats_analysis import (
    calculate_order_statistics,
    calculate_robust_forecast,
    exponential_moving_average,
)


class TestOrderStatistics:
    def test_nearest_rank_positions(self):
        stats = calculate_order_statistics([5, 1, 3, 2, 4])
        assert stats.median == 3
        assert stats.q1 == 2
        assert stats.q3 == 4
        assert stats.iqr == 2

    def test_input_not_sorted_in_place(self):
        history = [5, 1, 3]
        calculate_order_statistics(history)
        assert history == [5, 1, 3]


class TestExponentialMovingAverage:
    def test_short_series(self):
        # k = 2 / (3 + 1) = 0.5
        assert exponential_moving_average([1, 2, 3]) == pytest.approx(2.25)

    def test_span_saturates_but_uses_full_history(self):
        history = [float(i % 7) for i in range(25)]
        k = 2 / 11
        expected = history[0]
        for value in history[1:]:
            expected = value * k + expected * (1 - k)
        assert exponential_moving_average(history) == pytest.approx(expected)


class TestRobustForecast:
    def test_hot_scales_forecast(self):
        history = [1, 3, 2, 4, 3, 5, 4, 6]
        result = calculate_robust_forecast(history)
        assert result.volatility.state == VolatilityState.HOT
        base = min(result.statistics.median, result.ema)
        assert result.forecast == pytest.approx(base * 0.8)
        assert "Correction likely" in result.warning

    def test_cold_widens_upper_bound(self):
        history = [9, 8, 8.5, 7, 6, 6.2, 5, 4]
        result = calculate_robust_forecast(history)
        assert result.volatility.state == VolatilityState.COLD
        assert result.interval.max == pytest.approx(3 * 8.5)
        assert "Volatility spike possible" in result.warning

    def test_neutral_low_majority_warns(self):
        history = [1.0, 1.5, 1.2, 1.8, 1.1, 5.0, 1.3]
        result = calculate_robust_forecast(history)
        assert result.volatility.state == VolatilityState.NEUTRAL
        assert result.warning.startswith("High risk")

    def test_high_to_low_cycle_caps_forecast(self):
        history = [12, 1.0, 15, 1.2, 11, 1.1, 14]
        result = calculate_robust_forecast(history)
        assert result.forecast == pytest.approx(1.5)
        assert result.warning == "High -> Low cycle imminent."

    def test_warnings_are_appended(self):
        history = [1.0, 11, 1.0, 11, 1.0, 40]
        result = calculate_robust_forecast(history)
        assert result.volatility.state == VolatilityState.HOT
        assert len(result.warnings) == 2
        assert result.warnings[0].startswith("Overheating")
        assert result.warnings[1] == "High -> Low cycle imminent."
        assert result.warning == " ".join(result.warnings)
        assert result.forecast == pytest.approx(1.5)

    def test_interval_bounds(self):
        history = [2.5, 3.0, 2.8, 3.1, 2.9, 3.3, 2.7]
        result = calculate_robust_forecast(history)
        stats = result.statistics
        assert result.interval.min == pytest.approx(max(0.0, stats.q1 - 0.5 * stats.iqr))
        assert result.interval.min <= result.interval.max

    def test_interval_ordered_for_negative_values(self):
        result = calculate_robust_forecast([-5, -6, -4, -7, -5.5])
        assert result.interval.min == 0.0
        assert result.interval.min <= result.interval.max

    def test_calm_neutral_series_has_no_warning(self):
        result = calculate_robust_forecast([2.5, 3.0, 2.8, 3.1, 2.9, 3.3, 2.7])
        assert result.volatility.state == VolatilityState.NEUTRAL
        assert result.warning is None
