"""
Regression Module - Closed-form Least-Squares Fitters

Curve fits used by the deterministic pattern detector:
- Linear fit (arithmetic progressions)
- Log-linear fit (geometric progressions)
- Quadratic fit via the 3x3 normal equations and Cramer's rule
- Goodness-of-fit (R²)

Every function here is pure: identical input gives bit-identical output.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

logger = logging.getLogger(__name__)

# Below this determinant the quadratic system is treated as singular
SINGULAR_TOLERANCE = 1e-9


@dataclass(frozen=True)
class LinearFit:
    """Fitted line y = slope * x + intercept."""
    slope: float
    intercept: float

    def predict(self, x):
        return self.slope * x + self.intercept


@dataclass(frozen=True)
class QuadraticFit:
    """Fitted polynomial y = a * x² + b * x + c."""
    a: float
    b: float
    c: float

    def predict(self, x):
        return self.a * x * x + self.b * x + self.c

    @property
    def is_degenerate(self) -> bool:
        return self.a == 0.0 and self.b == 0.0 and self.c == 0.0


def index_axis(values: Sequence[float]) -> np.ndarray:
    """Positions 0..n-1 used as the x axis for every fit."""
    return np.arange(len(values), dtype=float)


def linear_regression(x: Sequence[float], y: Sequence[float]) -> LinearFit:
    """
    Ordinary least squares on (x, y) pairs.

    Parameters
    ----------
    x, y : sequence of float
        Same-length coordinates.

    Returns
    -------
    LinearFit
        Slope and intercept from the closed-form sums of x, y, xy and x².
        A zero denominator (fewer than two distinct x) yields a flat line
        through the mean.
    """
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)
    n = len(x)

    sum_x = x.sum()
    sum_y = y.sum()
    sum_xy = (x * y).sum()
    sum_xx = (x * x).sum()

    denominator = n * sum_xx - sum_x * sum_x
    if denominator == 0:
        return LinearFit(slope=0.0, intercept=float(sum_y / n) if n else 0.0)

    slope = (n * sum_xy - sum_x * sum_y) / denominator
    intercept = (sum_y - slope * sum_x) / n
    return LinearFit(slope=float(slope), intercept=float(intercept))


def log_linear_regression(values: Sequence[float]) -> Optional[LinearFit]:
    """
    Fit a line to log(values) against position.

    Returns None when any value is zero or negative; the logarithm is never
    attempted in that case.
    """
    y = np.asarray(values, dtype=float)
    if np.any(y <= 0):
        return None
    return linear_regression(index_axis(y), np.log(y))


def _det3(m: np.ndarray) -> float:
    return float(
        m[0, 0] * (m[1, 1] * m[2, 2] - m[1, 2] * m[2, 1])
        - m[0, 1] * (m[1, 0] * m[2, 2] - m[1, 2] * m[2, 0])
        + m[0, 2] * (m[1, 0] * m[2, 1] - m[1, 1] * m[2, 0])
    )


def solve_3x3(a: np.ndarray, b: np.ndarray) -> Optional[np.ndarray]:
    """Cramer's rule for a 3x3 system. None when the system is singular."""
    d = _det3(a)
    if abs(d) < SINGULAR_TOLERANCE:
        return None

    solution = np.empty(3)
    for col in range(3):
        replaced = a.copy()
        replaced[:, col] = b
        solution[col] = _det3(replaced) / d
    return solution


def quadratic_regression(x: Sequence[float], y: Sequence[float]) -> QuadraticFit:
    """
    Least-squares degree-2 polynomial through (x, y).

    Builds the normal equations from the power sums and solves them with
    Cramer's rule. A singular system returns the all-zero polynomial.
    """
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)
    n = len(x)

    x2 = x * x
    sx, sx2, sx3, sx4 = x.sum(), x2.sum(), (x2 * x).sum(), (x2 * x2).sum()
    sy, sxy, sx2y = y.sum(), (x * y).sum(), (x2 * y).sum()

    a = np.array([
        [sx4, sx3, sx2],
        [sx3, sx2, sx],
        [sx2, sx, n],
    ], dtype=float)
    b = np.array([sx2y, sxy, sy], dtype=float)

    solution = solve_3x3(a, b)
    if solution is None:
        logger.debug("Quadratic normal equations are singular, returning zero polynomial")
        return QuadraticFit(a=0.0, b=0.0, c=0.0)

    return QuadraticFit(a=float(solution[0]), b=float(solution[1]), c=float(solution[2]))


def r_squared(y: Sequence[float], predicted: Sequence[float]) -> float:
    """
    Coefficient of determination, 1 - SSres / SStot.

    A constant series (SStot == 0) returns 0.0 instead of dividing by zero,
    as does a fit whose sums overflowed or picked up a NaN.
    """
    y = np.asarray(y, dtype=float)
    predicted = np.asarray(predicted, dtype=float)

    mean_y = y.mean()
    ss_tot = float(((y - mean_y) ** 2).sum())
    ss_res = float(((y - predicted) ** 2).sum())

    if ss_tot == 0 or not (np.isfinite(ss_tot) and np.isfinite(ss_res)):
        return 0.0
    return 1.0 - ss_res / ss_tot
