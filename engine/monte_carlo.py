"""
Monte Carlo Module - Resampling Simulators

Each simulator resamples uniformly, with replacement, from the most recent
observations (the pool) using an injected numpy Generator. Trial counts and
pool size are fixed per call, so the cost does not grow with history length.

- Zone-hit: chance of landing in [min, max] within 5 turns, and when
- Horizon probability: the same, reduced to a single percentage
- Calm zone: chance that each of the next two turns stays below 3.0
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Sequence

import numpy as np

logger = logging.getLogger(__name__)


DEFAULT_SIMULATIONS = 5000
DEFAULT_POOL_SIZE = 50
ZONE_HORIZON = 5
LOW_PROBABILITY_CUTOFF = 20.0
CALM_THRESHOLD = 3.0
CALM_TURN_CUTOFF = 60.0


def build_pool(history: Sequence[float], size: int = DEFAULT_POOL_SIZE) -> np.ndarray:
    """Most recent `size` observations as a float array (copy)."""
    return np.array(history[-size:] if size > 0 else [], dtype=float)


def draw_samples(pool: np.ndarray, rng: np.random.Generator, shape) -> np.ndarray:
    """Uniform draws with replacement: index = floor(u * len(pool)), u in [0, 1)."""
    indices = np.floor(rng.random(shape) * len(pool)).astype(int)
    return pool[indices]


def _first_hits(
    pool: np.ndarray,
    minimum: float,
    maximum: float,
    horizon: int,
    rng: np.random.Generator,
    simulations: int,
):
    """Per-trial hit flag and 1-based turn of the first hit."""
    draws = draw_samples(pool, rng, (simulations, horizon))
    in_range = (draws >= minimum) & (draws <= maximum)
    hit = in_range.any(axis=1)
    first_turn = in_range.argmax(axis=1) + 1
    return hit, first_turn


@dataclass
class ZoneHitResult:
    """Result of a zone-hit simulation."""
    target_min: float
    target_max: float
    simulations: int
    horizon: int
    probability: float       # percent of trials that hit
    estimated_turn: float    # mean first-hit turn among hits, 0 when none

    @property
    def summary(self) -> str:
        if self.simulations == 0:
            return "Not enough data to simulate."

        if self.probability < LOW_PROBABILITY_CUTOFF:
            return f"Low probability ({self.probability:.1f}%) within {self.horizon} turns."

        return (
            f"Based on {self.simulations} simulations:\n"
            f"- Probability of zone [{self.target_min}-{self.target_max}]: {self.probability:.1f}%\n"
            f"- Expected around turn +{self.estimated_turn:.1f}"
        )


def simulate_zone_hits(
    history: Sequence[float],
    target_min: float,
    target_max: float,
    rng: np.random.Generator,
    simulations: int = DEFAULT_SIMULATIONS,
    horizon: int = ZONE_HORIZON,
    pool_size: int = DEFAULT_POOL_SIZE,
) -> ZoneHitResult:
    """
    Estimate when the sequence next lands inside [target_min, target_max].

    Each trial draws up to `horizon` successive values and stops at the first
    one inside the range.
    """
    pool = build_pool(history, pool_size)
    if len(pool) == 0:
        return ZoneHitResult(target_min, target_max, 0, horizon, 0.0, 0.0)

    hit, first_turn = _first_hits(pool, target_min, target_max, horizon, rng, simulations)
    hits = int(hit.sum())

    probability = hits / simulations * 100
    estimated_turn = float(first_turn[hit].mean()) if hits else 0.0

    logger.debug(f"Zone [{target_min}, {target_max}]: {probability:.1f}% over {simulations} trials")
    return ZoneHitResult(target_min, target_max, simulations, horizon, probability, estimated_turn)


def horizon_hit_probability(
    history: Sequence[float],
    minimum: float,
    maximum: float,
    horizon: int,
    rng: np.random.Generator,
    simulations: int = DEFAULT_SIMULATIONS,
    pool_size: int = DEFAULT_POOL_SIZE,
) -> float:
    """Percentage of trials with at least one value in [minimum, maximum] within `horizon` turns."""
    pool = build_pool(history, pool_size)
    if len(pool) == 0:
        return 0.0

    hit, _ = _first_hits(pool, minimum, maximum, horizon, rng, simulations)
    return float(hit.sum()) / simulations * 100


@dataclass
class TurnOutlook:
    """Calm probability for a single future turn."""
    is_calm: bool
    probability: float

    def to_dict(self) -> Dict:
        return {"isCalm": self.is_calm, "probability": self.probability}


@dataclass
class CalmZoneAnalysis:
    """Marginal and joint calm probabilities for the next two turns."""
    turn1: TurnOutlook
    turn2: TurnOutlook
    global_probability: float

    def to_dict(self) -> Dict:
        return {
            "turn1": self.turn1.to_dict(),
            "turn2": self.turn2.to_dict(),
            "globalProbability": self.global_probability,
        }


def analyze_calm_zone(
    history: Sequence[float],
    rng: np.random.Generator,
    threshold: float = CALM_THRESHOLD,
    simulations: int = DEFAULT_SIMULATIONS,
    pool_size: int = DEFAULT_POOL_SIZE,
) -> CalmZoneAnalysis:
    """
    Probability that the next turn, the one after, and both, stay below `threshold`.

    Each trial draws exactly two independent values.
    """
    pool = build_pool(history, pool_size)
    if len(pool) == 0:
        return CalmZoneAnalysis(
            turn1=TurnOutlook(is_calm=False, probability=0.0),
            turn2=TurnOutlook(is_calm=False, probability=0.0),
            global_probability=0.0,
        )

    calm = draw_samples(pool, rng, (simulations, 2)) < threshold

    p1 = calm[:, 0].sum() / simulations * 100
    p2 = calm[:, 1].sum() / simulations * 100
    p_both = calm.all(axis=1).sum() / simulations * 100

    return CalmZoneAnalysis(
        turn1=TurnOutlook(is_calm=bool(p1 > CALM_TURN_CUTOFF), probability=round(float(p1), 1)),
        turn2=TurnOutlook(is_calm=bool(p2 > CALM_TURN_CUTOFF), probability=round(float(p2), 1)),
        global_probability=round(float(p_both), 1),
    )
