"""
Peak Module - Rare High-Value Recurrence

Estimates how close the sequence is to its next peak (a value >= 10.0) from
the spacing of past peaks, with bonuses when recent values are compressed
near the floor.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

logger = logging.getLogger(__name__)


PEAK_THRESHOLD = 10.0
LOW_VALUE_CEILING = 2.0

INSUFFICIENT_HISTORY_PROBABILITY = 5.0
PRESSURE_OFFSET = 0.4
PRESSURE_SCALE = 60.0
BASE_PROBABILITY_CAP = 98.0
FINAL_PROBABILITY_CAP = 99.0

COMPRESSION_WINDOW = 10
COMPRESSION_MIN_LOWS = 8
COMPRESSION_BONUS = 15.0
DEAD_ZONE_WINDOW = 5
DEAD_ZONE_BONUS = 10.0


def find_peaks(history: Sequence[float], threshold: float = PEAK_THRESHOLD) -> List[int]:
    """Indices of observations at or above `threshold`."""
    return [i for i, value in enumerate(history) if value >= threshold]


@dataclass
class GapStatistics:
    """Spacing between threshold crossings."""
    current_gap: int    # observations since the latest crossing
    mean_gap: float     # mean distance between consecutive crossings

    @property
    def pressure_factor(self) -> float:
        return self.current_gap / self.mean_gap

    @property
    def is_overdue(self) -> bool:
        return self.current_gap > self.mean_gap


def gap_statistics(history: Sequence[float], threshold: float) -> Optional[GapStatistics]:
    """Gap statistics for `threshold`, or None with fewer than two crossings."""
    indices = find_peaks(history, threshold)
    if len(indices) < 2:
        return None

    gaps = [b - a for a, b in zip(indices[:-1], indices[1:])]
    return GapStatistics(
        current_gap=(len(history) - 1) - indices[-1],
        mean_gap=sum(gaps) / len(gaps),
    )


@dataclass
class PeakAnalysis:
    """Probability (percent) of a peak on the next turn, with commentary."""
    probability: float
    text: str

    def to_dict(self) -> Dict:
        return {"probability": self.probability, "text": self.text}


def calculate_peak_probability(history: Sequence[float]) -> PeakAnalysis:
    """
    Probability of an imminent peak.

    The base probability grows with the ratio of the current gap to the mean
    gap; a compressed recent window (8 of the last 10 below 2.0) and a dead
    zone (last 5 all below 2.0) each add an independent bonus.
    """
    stats = gap_statistics(history, PEAK_THRESHOLD)
    if stats is None:
        return PeakAnalysis(
            probability=INSUFFICIENT_HISTORY_PROBABILITY,
            text="Insufficient peak history to predict.",
        )

    probability = min(max((stats.pressure_factor - PRESSURE_OFFSET) * PRESSURE_SCALE, 0.0), BASE_PROBABILITY_CAP)

    recent_lows = sum(1 for v in history[-COMPRESSION_WINDOW:] if v < LOW_VALUE_CEILING)
    if recent_lows >= COMPRESSION_MIN_LOWS:
        probability += COMPRESSION_BONUS

    if all(v < LOW_VALUE_CEILING for v in history[-DEAD_ZONE_WINDOW:]):
        probability += DEAD_ZONE_BONUS

    probability = min(probability, FINAL_PROBABILITY_CAP)

    text = f"Last peak {stats.current_gap} turns ago (average gap {stats.mean_gap:.1f})."
    if probability > 85:
        text += " PEAK IMMINENT (critical gap + compression)."
    elif probability > 60:
        text += " Propitious zone for a peak."
    elif probability > 40:
        text += " Pressure accumulating."
    else:
        text += " Patience."

    logger.debug(f"Peak pressure {stats.pressure_factor:.2f} -> {probability:.1f}%")
    return PeakAnalysis(probability=round(probability, 1), text=text)
