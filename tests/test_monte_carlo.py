import math

import numpy as np
import pytest

from engine.monte_carlo import (
    analyze_calm_zone,
    build_pool,
    draw_samples,
    horizon_hit_probability,
    simulate_zone_hits,
)


class TestPool:
    def test_capped_to_most_recent(self):
        history = list(range(100))
        pool = build_pool(history, 50)
        assert len(pool) == 50
        assert pool[0] == 50
        assert pool[-1] == 99

    def test_draws_come_from_pool(self, rng):
        pool = np.array([1.0, 2.0, 3.0])
        draws = draw_samples(pool, rng, (1000, 2))
        assert draws.shape == (1000, 2)
        assert set(np.unique(draws)) <= {1.0, 2.0, 3.0}


class TestZoneHits:
    def test_every_value_in_range(self, rng):
        result = simulate_zone_hits([2.5, 2.2, 2.9], 2.0, 3.0, rng)
        assert result.probability == 100.0
        assert result.estimated_turn == 1.0
        assert "100.0%" in result.summary

    def test_low_probability_omits_timing(self, rng):
        result = simulate_zone_hits([5.0, 6.0, 7.0], 2.0, 3.0, rng)
        assert result.probability == 0.0
        assert result.estimated_turn == 0.0
        assert result.summary.startswith("Low probability")
        assert "turn +" not in result.summary

    def test_empty_history(self, rng):
        result = simulate_zone_hits([], 2.0, 3.0, rng)
        assert result.probability == 0.0
        assert result.summary == "Not enough data to simulate."

    def test_mean_first_hit_turn(self, rng):
        # One value in four hits: first hit follows a truncated geometric law
        result = simulate_zone_hits([2.5, 5.0, 5.0, 5.0], 2.0, 3.0, rng)
        expected_probability = 100 * (1 - 0.75 ** 5)
        assert result.probability == pytest.approx(expected_probability, abs=3)
        assert 1.0 < result.estimated_turn < 5.0


class TestHorizonProbability:
    def test_matches_closed_form(self, rng):
        probability = horizon_hit_probability([1, 1, 1, 5], 4, 6, horizon=2, rng=rng)
        assert probability == pytest.approx(100 * (1 - 0.75 ** 2), abs=3)

    def test_open_upper_bound(self, rng):
        probability = horizon_hit_probability([3, 50, 1000], 3, math.inf, horizon=1, rng=rng)
        assert probability == 100.0

    def test_only_recent_pool_counts(self, rng):
        history = [100.0] * 100 + [1.0] * 50
        assert horizon_hit_probability(history, 50, math.inf, horizon=5, rng=rng) == 0.0

    def test_empty_history(self, rng):
        assert horizon_hit_probability([], 0, 1, horizon=2, rng=rng) == 0.0

    def test_same_seed_is_reproducible(self):
        history = [1.2, 3.4, 2.2, 8.1, 1.1, 4.4, 1.9]
        first = horizon_hit_probability(history, 3, math.inf, 2, np.random.default_rng(5))
        second = horizon_hit_probability(history, 3, math.inf, 2, np.random.default_rng(5))
        assert first == second

    def test_independent_runs_converge(self):
        history = [1.2, 3.4, 2.2, 8.1, 1.1, 4.4, 1.9, 2.7, 1.05, 6.3]
        runs = [
            horizon_hit_probability(history, 3, math.inf, 2, np.random.default_rng(seed))
            for seed in range(5)
        ]
        assert max(runs) - min(runs) <= 5


class TestCalmZone:
    def test_all_calm(self, rng):
        analysis = analyze_calm_zone([1.0, 1.5, 2.9], rng)
        assert analysis.turn1.is_calm and analysis.turn2.is_calm
        assert analysis.turn1.probability == 100.0
        assert analysis.global_probability == 100.0

    def test_half_calm(self, rng):
        analysis = analyze_calm_zone([1.0, 5.0], rng)
        assert analysis.turn1.probability == pytest.approx(50, abs=3)
        assert analysis.turn2.probability == pytest.approx(50, abs=3)
        assert analysis.global_probability == pytest.approx(25, abs=3)
        assert not analysis.turn1.is_calm

    def test_empty_history(self, rng):
        analysis = analyze_calm_zone([], rng)
        assert analysis.to_dict() == {
            "turn1": {"isCalm": False, "probability": 0.0},
            "turn2": {"isCalm": False, "probability": 0.0},
            "globalProbability": 0.0,
        }
