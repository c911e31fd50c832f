import pytest

from engine.regime import (
    Level,
    VolatilityState,
    calculate_volatility_state,
    classify_level,
    estimate_transitions,
)


class TestVolatilityState:
    def test_only_gains_is_hot(self):
        reading = calculate_volatility_state([1, 2, 3, 4])
        assert reading.state == VolatilityState.HOT
        assert reading.score == 100.0

    def test_only_losses_is_cold(self):
        reading = calculate_volatility_state([5, 4, 3, 2])
        assert reading.state == VolatilityState.COLD
        assert reading.score == pytest.approx(0.0)

    def test_balanced_is_neutral(self):
        reading = calculate_volatility_state([1, 2, 1, 2, 1])
        assert reading.state == VolatilityState.NEUTRAL
        assert reading.score == pytest.approx(50.0)
        assert not reading.is_extreme

    def test_uses_trailing_window_only(self):
        # The drop from 100 falls outside the last 14 observations
        history = [100] + list(range(1, 15))
        reading = calculate_volatility_state(history)
        assert reading.state == VolatilityState.HOT

    def test_single_value_is_neutral(self):
        reading = calculate_volatility_state([3.0])
        assert reading.state == VolatilityState.NEUTRAL
        assert reading.score == 50.0


class TestLevels:
    @pytest.mark.parametrize("value, level", [
        (0.5, Level.LOW),
        (1.99, Level.LOW),
        (2.0, Level.MED),
        (10.0, Level.MED),
        (10.01, Level.HIGH),
    ])
    def test_boundaries(self, value, level):
        assert classify_level(value) == level


class TestTransitions:
    def test_counts_successors_of_current_level(self):
        estimate = estimate_transitions([12, 1, 15, 5, 11])
        assert estimate.current == Level.HIGH
        assert estimate.total == 2
        assert estimate.probability(Level.LOW) == pytest.approx(0.5)
        assert estimate.probability(Level.MED) == pytest.approx(0.5)
        assert estimate.probability(Level.HIGH) == 0.0

    def test_no_prior_occurrence(self):
        estimate = estimate_transitions([1, 1, 15])
        assert estimate.total == 0
        assert estimate.probability(Level.LOW) == 0.0
