"""
Regime Module - Volatility State and Level Transitions

Two trailing-window classifiers used by the robust analyzer:
- A momentum score (RSI-style gains/losses ratio) mapped to HOT / NEUTRAL / COLD
- An empirical Markov estimate of moving from the current level
  (LOW / MED / HIGH) to each level on the next observation
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Sequence

import numpy as np

logger = logging.getLogger(__name__)


MOMENTUM_WINDOW = 14
HOT_SCORE = 70.0
COLD_SCORE = 30.0

LOW_LEVEL_CEILING = 2.0
HIGH_LEVEL_FLOOR = 10.0


class VolatilityState(str, Enum):
    """Momentum classification of the trailing window."""
    HOT = "HOT"          # mostly rises recently
    NEUTRAL = "NEUTRAL"
    COLD = "COLD"        # mostly falls recently


class Level(str, Enum):
    """Tri-state partition of single observations."""
    LOW = "LOW"
    MED = "MED"
    HIGH = "HIGH"


@dataclass
class VolatilityReading:
    """Momentum score (0-100) and the state it maps to."""
    score: float
    state: VolatilityState

    @property
    def is_extreme(self) -> bool:
        return self.state != VolatilityState.NEUTRAL


@dataclass
class TransitionEstimate:
    """Successor counts for every past observation sharing the current level."""
    current: Level
    counts: Dict[Level, int] = field(default_factory=lambda: {level: 0 for level in Level})

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    def probability(self, level: Level) -> float:
        if self.total == 0:
            return 0.0
        return self.counts[level] / self.total


def calculate_volatility_state(
    history: Sequence[float],
    window: int = MOMENTUM_WINDOW,
) -> VolatilityReading:
    """
    Classify the trailing window by its ratio of upward to downward movement.

    Parameters
    ----------
    history : sequence of float
        Observations in insertion order.
    window : int
        Number of trailing observations considered.

    Returns
    -------
    VolatilityReading
        Score = 100 - 100 / (1 + gains / losses). No losses at all is HOT
        with a score of 100; fewer than two observations is NEUTRAL at 50.
    """
    recent = np.asarray(history[-window:], dtype=float)
    if len(recent) < 2:
        return VolatilityReading(score=50.0, state=VolatilityState.NEUTRAL)

    delta = np.diff(recent)
    gains = float(delta[delta > 0].sum())
    losses = float(-delta[delta < 0].sum())

    if losses == 0:
        return VolatilityReading(score=100.0, state=VolatilityState.HOT)

    score = 100.0 - 100.0 / (1.0 + gains / losses)

    if score > HOT_SCORE:
        state = VolatilityState.HOT
    elif score < COLD_SCORE:
        state = VolatilityState.COLD
    else:
        state = VolatilityState.NEUTRAL

    return VolatilityReading(score=score, state=state)


def classify_level(value: float) -> Level:
    """LOW below 2.0, MED from 2.0 to 10.0 inclusive, HIGH above 10.0."""
    if value < LOW_LEVEL_CEILING:
        return Level.LOW
    if value <= HIGH_LEVEL_FLOOR:
        return Level.MED
    return Level.HIGH


def estimate_transitions(history: Sequence[float]) -> TransitionEstimate:
    """
    Empirical transition frequencies out of the most recent observation's level.

    Every consecutive pair (v[i], v[i+1]) whose first element has the current
    level contributes one count to the level of v[i+1].
    """
    levels = [classify_level(v) for v in history]
    estimate = TransitionEstimate(current=levels[-1])

    for level, successor in zip(levels[:-1], levels[1:]):
        if level == estimate.current:
            estimate.counts[successor] += 1

    return estimate
