"""
Statistics Module - Robust Forecast for Stochastic Sequences

Fallback analysis when no deterministic pattern fits:
- Order statistics (median, quartiles, IQR) at nearest-rank positions
- Exponential moving average over the whole sequence
- Momentum/volatility adjustment (HOT / COLD / NEUTRAL)
- Markov high-to-low cycle adjustment

The result is a conservative point forecast, an interval and risk warnings.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

import numpy as np
import pandas as pd

from .regime import (
    Level,
    TransitionEstimate,
    VolatilityReading,
    VolatilityState,
    calculate_volatility_state,
    estimate_transitions,
    LOW_LEVEL_CEILING,
)

logger = logging.getLogger(__name__)


EMA_MAX_SPAN = 10
HOT_FORECAST_FACTOR = 0.8
COLD_UPPER_MULTIPLIER = 3.0
HIGH_TO_LOW_THRESHOLD = 0.7
HIGH_TO_LOW_FORECAST_CAP = 1.5
LOW_VALUE_MAJORITY = 0.5


@dataclass
class OrderStatistics:
    """Nearest-rank order statistics of a sequence."""
    median: float
    q1: float
    q3: float

    @property
    def iqr(self) -> float:
        return self.q3 - self.q1


@dataclass
class Interval:
    """Closed forecast interval."""
    min: float
    max: float

    def to_dict(self) -> Dict:
        return {"min": round(self.min, 2), "max": round(self.max, 2)}


@dataclass
class RobustForecast:
    """Outcome of the stochastic analysis."""
    forecast: float
    interval: Interval
    volatility: VolatilityReading
    transitions: TransitionEstimate
    statistics: OrderStatistics
    ema: float
    warnings: List[str] = field(default_factory=list)

    @property
    def warning(self) -> Optional[str]:
        """All warnings in the order they fired, or None."""
        return " ".join(self.warnings) if self.warnings else None


def calculate_order_statistics(history: Sequence[float]) -> OrderStatistics:
    """
    Median and quartiles read from a sorted copy at floor(n * q).

    No interpolation: each statistic is an actual observation.
    """
    ordered = np.sort(np.asarray(history, dtype=float))
    n = len(ordered)
    return OrderStatistics(
        median=float(ordered[math.floor(n * 0.5)]),
        q1=float(ordered[math.floor(n * 0.25)]),
        q3=float(ordered[math.floor(n * 0.75)]),
    )


def exponential_moving_average(history: Sequence[float]) -> float:
    """
    EMA of the full sequence, seeded at the first observation.

    The smoothing span saturates at 10 observations (k = 2 / (min(n, 10) + 1))
    but every observation still contributes.
    """
    span = min(len(history), EMA_MAX_SPAN)
    series = pd.Series(history, dtype=float)
    return float(series.ewm(span=span, adjust=False).mean().iloc[-1])


def calculate_robust_forecast(history: Sequence[float]) -> RobustForecast:
    """
    Conservative forecast for a sequence that follows no deterministic rule.

    Parameters
    ----------
    history : sequence of float
        Observations in insertion order (not modified).

    Returns
    -------
    RobustForecast
        Point forecast, interval, the classifier readings behind them and any
        warnings raised along the way.
    """
    n = len(history)
    stats = calculate_order_statistics(history)
    ema = exponential_moving_average(history)
    volatility = calculate_volatility_state(history)
    transitions = estimate_transitions(history)

    forecast = min(stats.median, ema)
    lower = max(0.0, stats.q1 - 0.5 * stats.iqr)
    upper = stats.q3 + 1.5 * stats.iqr
    warnings: List[str] = []

    if volatility.state == VolatilityState.HOT:
        # Overheated: expect a pullback
        forecast *= HOT_FORECAST_FACTOR
        warnings.append(f"Overheating (momentum {volatility.score:.0f}). Correction likely.")
    elif volatility.state == VolatilityState.COLD:
        # Compressed: widen the upside
        upper = stats.q3 * COLD_UPPER_MULTIPLIER
        warnings.append(f"Compression (momentum {volatility.score:.0f}). Volatility spike possible.")
    else:
        low_count = sum(1 for v in history if v < LOW_LEVEL_CEILING)
        if low_count / n > LOW_VALUE_MAJORITY:
            warnings.append(f"High risk: most values are below {LOW_LEVEL_CEILING:.2f}.")

    if transitions.current == Level.HIGH and transitions.probability(Level.LOW) > HIGH_TO_LOW_THRESHOLD:
        forecast = min(forecast, HIGH_TO_LOW_FORECAST_CAP)
        warnings.append("High -> Low cycle imminent.")

    upper = max(upper, lower)

    logger.debug(
        f"Robust forecast: median={stats.median}, ema={ema:.4f}, "
        f"state={volatility.state.value}, forecast={forecast:.4f}"
    )

    return RobustForecast(
        forecast=forecast,
        interval=Interval(min=lower, max=upper),
        volatility=volatility,
        transitions=transitions,
        statistics=stats,
        ema=ema,
        warnings=warnings,
    )
