"""
Sequence Forecast Engine

This package classifies ordered numeric sequences and forecasts their next
three values:
- Closed-form regression fitters and R²
- Deterministic pattern detection (arithmetic, Fibonacci, geometric, quadratic)
- Robust statistics with a momentum state machine and Markov transitions
- Monte Carlo resampling (zone hits, horizon probability, calm zone)
- Peak recurrence analysis and a GO/STOP recommendation
- Number extraction and batch assembly for imported data
"""

from .config import (
    EngineSettings,
    get_engine_settings,
)

from .regression import (
    LinearFit,
    QuadraticFit,
    linear_regression,
    log_linear_regression,
    quadratic_regression,
    r_squared,
)

from .patterns import (
    SequenceType,
    PatternMatch,
    detect_pattern,
    is_fibonacci_like,
)

from .regime import (
    VolatilityState,
    VolatilityReading,
    Level,
    TransitionEstimate,
    calculate_volatility_state,
    classify_level,
    estimate_transitions,
)

from .stats_analysis import (
    OrderStatistics,
    Interval,
    RobustForecast,
    calculate_order_statistics,
    exponential_moving_average,
    calculate_robust_forecast,
)

from .monte_carlo import (
    ZoneHitResult,
    TurnOutlook,
    CalmZoneAnalysis,
    simulate_zone_hits,
    horizon_hit_probability,
    analyze_calm_zone,
)

from .peaks import (
    GapStatistics,
    PeakAnalysis,
    find_peaks,
    gap_statistics,
    calculate_peak_probability,
)

from .recommendation import (
    Action,
    Recommendation,
    generate_recommendation,
)

from .engine import (
    InsufficientDataError,
    InvalidSequenceError,
    PredictionResult,
    SequenceAnalyzer,
)

from .extraction import (
    OcrWord,
    BoundingBox,
    extract_from_html,
    extract_from_words,
    parse_ocr_token,
    order_words,
    normalize_manual,
)

from .assembly import (
    assemble_series,
    is_contiguous_subsequence,
    is_duplicate,
)

__all__ = [
    # Config
    "EngineSettings",
    "get_engine_settings",
    # Regression
    "LinearFit",
    "QuadraticFit",
    "linear_regression",
    "log_linear_regression",
    "quadratic_regression",
    "r_squared",
    # Patterns
    "SequenceType",
    "PatternMatch",
    "detect_pattern",
    "is_fibonacci_like",
    # Regime
    "VolatilityState",
    "VolatilityReading",
    "Level",
    "TransitionEstimate",
    "calculate_volatility_state",
    "classify_level",
    "estimate_transitions",
    # Statistics
    "OrderStatistics",
    "Interval",
    "RobustForecast",
    "calculate_order_statistics",
    "exponential_moving_average",
    "calculate_robust_forecast",
    # Monte Carlo
    "ZoneHitResult",
    "TurnOutlook",
    "CalmZoneAnalysis",
    "simulate_zone_hits",
    "horizon_hit_probability",
    "analyze_calm_zone",
    # Peaks
    "GapStatistics",
    "PeakAnalysis",
    "find_peaks",
    "gap_statistics",
    "calculate_peak_probability",
    # Recommendation
    "Action",
    "Recommendation",
    "generate_recommendation",
    # Engine
    "InsufficientDataError",
    "InvalidSequenceError",
    "PredictionResult",
    "SequenceAnalyzer",
    # Extraction
    "OcrWord",
    "BoundingBox",
    "extract_from_html",
    "extract_from_words",
    "parse_ocr_token",
    "order_words",
    "normalize_manual",
    # Assembly
    "assemble_series",
    "is_contiguous_subsequence",
    "is_duplicate",
]
