"""
Recommendation Module - GO / STOP Policy

Combines the simulated chance of a value >= 3.0 within the next two turns
with a gap signal (is the current wait longer than the average wait?).
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Sequence

import numpy as np

from .monte_carlo import DEFAULT_POOL_SIZE, DEFAULT_SIMULATIONS, horizon_hit_probability
from .peaks import gap_statistics

logger = logging.getLogger(__name__)


TARGET_THRESHOLD = 3.0
TARGET_HORIZON = 2
GO_PROBABILITY = 30.0
GO_WITH_GAP_PROBABILITY = 20.0


class Action(str, Enum):
    GO = "GO"
    STOP = "STOP"


@dataclass
class Recommendation:
    """Binary decision with a confidence percentage and a reason."""
    action: Action
    confidence: float
    reason: str

    def to_dict(self) -> Dict:
        return {
            "action": self.action.value,
            "confidence": self.confidence,
            "reason": self.reason,
        }


def generate_recommendation(
    history: Sequence[float],
    rng: np.random.Generator,
    simulations: int = DEFAULT_SIMULATIONS,
    pool_size: int = DEFAULT_POOL_SIZE,
) -> Recommendation:
    """
    GO when the 2-turn probability of a value >= 3.0 exceeds 30%, or exceeds
    20% while the current gap since the last such value is above average.
    """
    probability = horizon_hit_probability(
        history,
        minimum=TARGET_THRESHOLD,
        maximum=math.inf,
        horizon=TARGET_HORIZON,
        rng=rng,
        simulations=simulations,
        pool_size=pool_size,
    )

    gaps = gap_statistics(history, TARGET_THRESHOLD)
    gap_signal = gaps is not None and gaps.is_overdue
    gap_reason = (
        f"Statistically overdue (gap {gaps.current_gap} > average {gaps.mean_gap:.1f})."
        if gap_signal else ""
    )

    if probability > GO_PROBABILITY or (probability > GO_WITH_GAP_PROBABILITY and gap_signal):
        reason = f"Probability {probability:.1f}% over {TARGET_HORIZON} turns."
        if gap_reason:
            reason = f"{reason} {gap_reason}"
        recommendation = Recommendation(
            action=Action.GO,
            confidence=round(probability, 1),
            reason=reason,
        )
    else:
        recommendation = Recommendation(
            action=Action.STOP,
            confidence=round(100 - probability, 1),
            reason=f"Low probability ({probability:.1f}%). Wait.",
        )

    logger.debug(f"Recommendation {recommendation.action.value}: p={probability:.1f}, gap_signal={gap_signal}")
    return recommendation
