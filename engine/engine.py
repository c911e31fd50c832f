"""
Engine Module - Sequence Forecasting Engine

Entry point of the forecasting core. Given an ordered sequence of numeric
observations, SequenceAnalyzer.predict:

1. Tries the deterministic rule chain (arithmetic, Fibonacci, geometric,
   quadratic) and returns the first match.
2. Otherwise treats the sequence as stochastic: robust statistics, then the
   zone-hit narrative, peak analysis, GO/STOP recommendation and calm-zone
   analysis, all computed from the same input.

The analyzer keeps no state between calls apart from its random generator.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from .config import EngineSettings, get_engine_settings
from .monte_carlo import CalmZoneAnalysis, analyze_calm_zone, simulate_zone_hits
from .patterns import SequenceType, detect_pattern
from .peaks import PeakAnalysis, calculate_peak_probability
from .recommendation import Recommendation, generate_recommendation
from .stats_analysis import Interval, calculate_robust_forecast

logger = logging.getLogger(__name__)


MIN_HISTORY = 3

# Target band for the zone-hit narrative
CALM_BAND_MIN = 2.0
CALM_BAND_MAX = 3.0

EXTREME_STATE_CONFIDENCE = 0.25
NEUTRAL_STATE_CONFIDENCE = 0.15


class InsufficientDataError(Exception):
    """Raised when a sequence is too short to forecast."""
    pass


class InvalidSequenceError(Exception):
    """Raised when a sequence contains NaN or infinite values."""
    pass


def _clamp_confidence(value: float) -> float:
    if not math.isfinite(value):
        return 0.0
    return min(max(value, 0.0), 1.0)


@dataclass
class PredictionResult:
    """
    Forecast for the next three observations.

    Deterministic results carry only the core fields; stochastic results
    also carry the optional analyses, each independently present or absent.
    """
    next_values: List[float]
    confidence: float
    is_deterministic: bool
    sequence_type: SequenceType
    interval: Optional[Interval] = None
    warning: Optional[str] = None
    monte_carlo: Optional[str] = None
    peak_analysis: Optional[PeakAnalysis] = None
    recommendation: Optional[Recommendation] = None
    calm_analysis: Optional[CalmZoneAnalysis] = None

    def to_dict(self) -> Dict[str, Any]:
        """Wire representation (camelCase keys, absent parts omitted)."""
        result: Dict[str, Any] = {
            "nextValues": [float(v) for v in self.next_values],
            "confidence": float(self.confidence),
            "isDeterministic": self.is_deterministic,
            "type": self.sequence_type.value,
        }
        if self.interval is not None:
            result["interval"] = self.interval.to_dict()
        if self.warning is not None:
            result["warning"] = self.warning
        if self.monte_carlo is not None:
            result["monteCarlo"] = self.monte_carlo
        if self.peak_analysis is not None:
            result["peakAnalysis"] = self.peak_analysis.to_dict()
        if self.recommendation is not None:
            result["recommendation"] = self.recommendation.to_dict()
        if self.calm_analysis is not None:
            result["calmAnalysis"] = self.calm_analysis.to_dict()
        return result


class SequenceAnalyzer:
    """
    Classifies a sequence and forecasts its next three values.

    Parameters
    ----------
    rng : np.random.Generator, optional
        Uniform random source for the Monte Carlo estimators. Defaults to a
        generator seeded from FORECAST_RANDOM_SEED (fresh entropy if unset).
    settings : EngineSettings, optional
        Simulation sizing; defaults to the environment settings.
    """

    def __init__(
        self,
        rng: Optional[np.random.Generator] = None,
        settings: Optional[EngineSettings] = None,
    ):
        self.settings = settings or get_engine_settings()
        self.rng = rng if rng is not None else self.settings.make_rng()

    def predict(self, history: Sequence[float]) -> PredictionResult:
        """
        Forecast the next three observations.

        Raises
        ------
        InsufficientDataError
            If fewer than 3 observations are given.
        InvalidSequenceError
            If any observation is NaN or infinite.
        """
        values = [float(v) for v in history]
        if len(values) < MIN_HISTORY:
            raise InsufficientDataError(
                f"At least {MIN_HISTORY} observations are required, got {len(values)}"
            )
        if not all(math.isfinite(v) for v in values):
            raise InvalidSequenceError("Observations must be finite numbers")

        match = detect_pattern(values)
        if match is not None:
            fitted = ", ".join(f"{name}={value:.4g}" for name, value in match.parameters.items())
            logger.info(
                f"Sequence of {len(values)} classified as {match.sequence_type.value} "
                f"(confidence {match.confidence:.4f}) {fitted}".rstrip()
            )
            return PredictionResult(
                next_values=match.next_values,
                confidence=_clamp_confidence(match.confidence),
                is_deterministic=True,
                sequence_type=match.sequence_type,
            )

        result = self._analyze_stochastic(values)
        logger.info(f"Sequence of {len(values)} classified as RANDOM (forecast {result.next_values[0]})")
        return result

    def _analyze_stochastic(self, values: List[float]) -> PredictionResult:
        robust = calculate_robust_forecast(values)
        forecast = round(robust.forecast, 2)

        simulations = self.settings.simulations
        pool_size = self.settings.pool_size

        zone = simulate_zone_hits(
            values, CALM_BAND_MIN, CALM_BAND_MAX, self.rng,
            simulations=simulations, pool_size=pool_size,
        )

        return PredictionResult(
            next_values=[forecast, forecast, forecast],
            confidence=EXTREME_STATE_CONFIDENCE if robust.volatility.is_extreme else NEUTRAL_STATE_CONFIDENCE,
            is_deterministic=False,
            sequence_type=SequenceType.RANDOM,
            interval=robust.interval,
            warning=robust.warning,
            monte_carlo=zone.summary,
            peak_analysis=calculate_peak_probability(values),
            recommendation=generate_recommendation(
                values, self.rng, simulations=simulations, pool_size=pool_size,
            ),
            calm_analysis=analyze_calm_zone(
                values, self.rng, simulations=simulations, pool_size=pool_size,
            ),
        )
