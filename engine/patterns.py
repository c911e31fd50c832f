"""
Pattern Detection Module - Deterministic Sequence Classification

Checks a sequence against a fixed chain of generative rules and returns the
first one that fits:

1. ARITHMETIC - linear fit with R² > 0.98
2. FIBONACCI  - every value is the sum of the previous two (±0.1)
3. GEOMETRIC  - log-linear fit with R² > 0.95 (strictly positive values only)
4. QUADRATIC  - degree-2 fit with R² > 0.98

The chain short-circuits: there is no best-of-all-fits comparison, so an
arithmetic series is never reported as quadratic even when both fit.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence

from .regression import (
    index_axis,
    linear_regression,
    log_linear_regression,
    quadratic_regression,
    r_squared,
)

logger = logging.getLogger(__name__)


FORECAST_HORIZON = 3

ARITHMETIC_MIN_R2 = 0.98
GEOMETRIC_MIN_R2 = 0.95
QUADRATIC_MIN_R2 = 0.98
FIBONACCI_TOLERANCE = 0.1


class SequenceType(str, Enum):
    """Classification tag carried on every prediction."""
    ARITHMETIC = "ARITHMETIC"
    GEOMETRIC = "GEOMETRIC"
    QUADRATIC = "QUADRATIC"
    FIBONACCI = "FIBONACCI"
    RANDOM = "RANDOM"


@dataclass
class PatternMatch:
    """A deterministic rule that fits the sequence."""
    sequence_type: SequenceType
    next_values: List[float]
    confidence: float
    parameters: Dict[str, float] = field(default_factory=dict)


def _next_positions(n: int) -> List[int]:
    return [n - 1 + i for i in range(1, FORECAST_HORIZON + 1)]


def _match_arithmetic(history: Sequence[float]) -> Optional[PatternMatch]:
    x = index_axis(history)
    fit = linear_regression(x, history)
    score = r_squared(history, fit.predict(x))
    logger.debug(f"Linear fit: slope={fit.slope:.4f}, intercept={fit.intercept:.4f}, R²={score:.4f}")

    if not score > ARITHMETIC_MIN_R2:
        return None

    return PatternMatch(
        sequence_type=SequenceType.ARITHMETIC,
        next_values=[round(fit.predict(p), 2) for p in _next_positions(len(history))],
        confidence=score,
        parameters={"slope": fit.slope, "intercept": fit.intercept},
    )


def _match_geometric(history: Sequence[float]) -> Optional[PatternMatch]:
    fit = log_linear_regression(history)
    if fit is None:
        logger.debug("Geometric test skipped: sequence has non-positive values")
        return None

    x = index_axis(history)
    log_values = [math.log(v) for v in history]
    score = r_squared(log_values, fit.predict(x))
    logger.debug(f"Log-linear fit: slope={fit.slope:.4f}, R²={score:.4f}")

    if not score > GEOMETRIC_MIN_R2:
        return None

    return PatternMatch(
        sequence_type=SequenceType.GEOMETRIC,
        next_values=[round(math.exp(fit.predict(p)), 2) for p in _next_positions(len(history))],
        confidence=score,
        parameters={"ratio": math.exp(fit.slope), "initial": math.exp(fit.intercept)},
    )


def _match_quadratic(history: Sequence[float]) -> Optional[PatternMatch]:
    x = index_axis(history)
    fit = quadratic_regression(x, history)
    score = r_squared(history, fit.predict(x))
    logger.debug(f"Quadratic fit: a={fit.a:.4f}, b={fit.b:.4f}, c={fit.c:.4f}, R²={score:.4f}")

    if not score > QUADRATIC_MIN_R2:
        return None

    return PatternMatch(
        sequence_type=SequenceType.QUADRATIC,
        next_values=[round(fit.predict(p), 2) for p in _next_positions(len(history))],
        confidence=score,
        parameters={"a": fit.a, "b": fit.b, "c": fit.c},
    )


def is_fibonacci_like(history: Sequence[float], tolerance: float = FIBONACCI_TOLERANCE) -> bool:
    """True when every value from index 2 on is the sum of its two predecessors."""
    if len(history) < 3:
        return False
    return all(
        abs(history[i] - (history[i - 1] + history[i - 2])) <= tolerance
        for i in range(2, len(history))
    )


def _match_fibonacci(history: Sequence[float]) -> Optional[PatternMatch]:
    if not is_fibonacci_like(history):
        return None

    previous, last = history[-2], history[-1]
    next_values = []
    for _ in range(FORECAST_HORIZON):
        previous, last = last, previous + last
        next_values.append(last)

    return PatternMatch(
        sequence_type=SequenceType.FIBONACCI,
        next_values=next_values,
        confidence=1.0,
    )


# Evaluation order is the tie-break policy
PATTERN_RULES = (
    _match_arithmetic,
    _match_fibonacci,
    _match_geometric,
    _match_quadratic,
)


def detect_pattern(history: Sequence[float]) -> Optional[PatternMatch]:
    """
    Run the rule chain and return the first match.

    Parameters
    ----------
    history : sequence of float
        Observations in insertion order (not modified).

    Returns
    -------
    PatternMatch or None
        None means no deterministic rule fits and the sequence should be
        treated as stochastic.
    """
    for rule in PATTERN_RULES:
        match = rule(history)
        if match is not None:
            return match
    return None
