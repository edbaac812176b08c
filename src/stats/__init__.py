"""
Statistical Summary Module

Rolling z-score statistics for scalar macro indicators (VIX, DXY, M2).

Key Features:
- Mean / sample standard deviation over a trailing 90-observation window
- Z-score with explicit zero-variance policy (flat window -> z = 0)
- Rarity ("1 in N") from the normal upper tail, defined for |z| >= 2
- SD bands for charting
- Time series helpers with nearest-match lookup for sparse series

Architecture:
- series.py: TimeSeriesPoint, validation, nearest lookup, percent change
- summary.py: StatisticalSummary, rarity, percentile, rolling z-scores

Usage:
    from market_signals.stats import compute_statistical_summary

    summary = compute_statistical_summary(vix_history, current_value=27.5)
    summary.z_score      # 3.4
    summary.rarity       # 2980
    summary.severity     # ZScoreSeverity.EXTREME
"""

from .series import (
    TimeSeriesPoint,
    validate_series,
    to_pandas,
    value_at,
    percent_change,
    trailing_values,
)

from .summary import (
    SummaryConfig,
    ZScoreSeverity,
    ExtremeDirection,
    StatisticalSummary,
    SDBands,
    classify_z_score,
    calculate_rarity,
    calculate_percentile,
    compute_statistical_summary,
    rolling_z_scores,
    calculate_sd_bands,
    NOTABLE_THRESHOLD,
    SIGNIFICANT_THRESHOLD,
    EXTREME_THRESHOLD,
)

__all__ = [
    # Time series
    "TimeSeriesPoint",
    "validate_series",
    "to_pandas",
    "value_at",
    "percent_change",
    "trailing_values",

    # Summary
    "SummaryConfig",
    "ZScoreSeverity",
    "ExtremeDirection",
    "StatisticalSummary",
    "SDBands",
    "classify_z_score",
    "calculate_rarity",
    "calculate_percentile",
    "compute_statistical_summary",
    "rolling_z_scores",
    "calculate_sd_bands",
    "NOTABLE_THRESHOLD",
    "SIGNIFICANT_THRESHOLD",
    "EXTREME_THRESHOLD",
]
