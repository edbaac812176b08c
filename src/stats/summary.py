"""
Statistical Summary - Rolling Z-Score Analysis

Calculates the z-score statistics shown for every macro indicator:
1. Mean over the trailing window (default 90 observations)
2. Standard deviation (sample, n-1, by default)
3. Z-score of the current value against the window
4. Rarity - approximate "1 in N" occurrence of a move this large

Degenerate windows are expected steady-state conditions (first day of use,
stale feeds), not faults: an empty, single-point or flat window yields
z-score 0 and no rarity instead of NaN or an exception.

Rarity uses the one-tailed standard normal survival function:
    z = 2.0 -> 1 in 44
    z = 3.0 -> 1 in 741

Performance: <0.1ms for a 90-point window with Numba
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Union

import numpy as np
from numba import jit
from scipy.stats import norm

# Z-score tiers
NOTABLE_THRESHOLD = 1.0
SIGNIFICANT_THRESHOLD = 2.0
EXTREME_THRESHOLD = 3.0

# Smallest tail probability used for rarity; keeps 1/p finite for huge |z|
_MIN_TAIL_PROBABILITY = float(np.finfo(np.float64).tiny)


@dataclass
class SummaryConfig:
    """Configuration for statistical summaries"""

    # Trailing window (observations)
    window_size: int = 90

    # Delta degrees of freedom: 1 = sample std (default), 0 = population std
    ddof: int = 1

    # Minimum window size for a non-zero deviation
    min_periods: int = 2


class ZScoreSeverity(Enum):
    """Magnitude tier of a z-score"""
    NORMAL = "normal"            # |z| < 1
    NOTABLE = "notable"          # 1 <= |z| < 2
    SIGNIFICANT = "significant"  # 2 <= |z| < 3
    EXTREME = "extreme"          # |z| >= 3


class ExtremeDirection(Enum):
    """Side of the mean a significant reading lies on"""
    HIGH = "high"
    LOW = "low"


@jit(nopython=True, cache=True)
def _fast_mean_std(values: np.ndarray, ddof: int) -> tuple:
    """
    Fast mean and standard deviation with Numba

    Returns (mean, std); std is exactly 0.0 for a flat window or fewer
    than ddof + 1 points
    """
    n = len(values)
    if n == 0:
        return 0.0, 0.0

    mean_val = np.mean(values)
    if n - ddof <= 0 or np.max(values) == np.min(values):
        return mean_val, 0.0

    sum_sq = 0.0
    for v in values:
        diff = v - mean_val
        sum_sq += diff * diff

    return mean_val, np.sqrt(sum_sq / (n - ddof))


def classify_z_score(z_score: float) -> ZScoreSeverity:
    """Map a z-score onto its magnitude tier"""
    magnitude = abs(z_score)
    if magnitude >= EXTREME_THRESHOLD:
        return ZScoreSeverity.EXTREME
    elif magnitude >= SIGNIFICANT_THRESHOLD:
        return ZScoreSeverity.SIGNIFICANT
    elif magnitude >= NOTABLE_THRESHOLD:
        return ZScoreSeverity.NOTABLE
    else:
        return ZScoreSeverity.NORMAL


def calculate_rarity(z_score: float) -> Optional[int]:
    """
    Approximate "1 in N" occurrence for a z-score

    Formula: N = 1 / P(Z > |z|)  (one-tailed standard normal)

    Args:
        z_score: Z-score of the current observation

    Returns:
        Positive integer N for |z| >= 2, None otherwise
        Non-decreasing in |z|

    Example:
        calculate_rarity(2.0)  # 44
        calculate_rarity(3.0)  # 741
        calculate_rarity(1.5)  # None
    """
    if not math.isfinite(z_score) or abs(z_score) < SIGNIFICANT_THRESHOLD:
        return None

    tail = max(float(norm.sf(abs(z_score))), _MIN_TAIL_PROBABILITY)
    return max(1, int(round(1.0 / tail)))


def calculate_percentile(z_score: float) -> float:
    """Percentile (0-100) of a z-score under a standard normal distribution"""
    return float(norm.cdf(z_score) * 100.0)


@dataclass(frozen=True)
class StatisticalSummary:
    """Z-score statistics of the current value against its trailing window"""
    mean: float
    standard_deviation: float
    current_value: float
    z_score: float
    rarity: Optional[int]

    @property
    def severity(self) -> ZScoreSeverity:
        return classify_z_score(self.z_score)

    @property
    def is_significant(self) -> bool:
        """|z| >= 2"""
        return abs(self.z_score) >= SIGNIFICANT_THRESHOLD

    @property
    def is_extreme(self) -> bool:
        """|z| >= 3"""
        return abs(self.z_score) >= EXTREME_THRESHOLD

    @property
    def percentile(self) -> float:
        return calculate_percentile(self.z_score)

    @property
    def direction(self) -> Optional[ExtremeDirection]:
        if not self.is_significant:
            return None
        return ExtremeDirection.HIGH if self.z_score > 0 else ExtremeDirection.LOW

    @property
    def formatted(self) -> str:
        """Z-score with sigma suffix, e.g. '+2.1σ'"""
        return f"{self.z_score:+.1f}σ"


def compute_statistical_summary(
    history: Union[Sequence[float], np.ndarray],
    current_value: float,
    window_size: Optional[int] = None,
    config: Optional[SummaryConfig] = None
) -> StatisticalSummary:
    """
    Compute mean, deviation, z-score and rarity for the current value

    Args:
        history: Historical values, oldest first
        current_value: Latest observation
        window_size: Trailing window (default: config.window_size = 90)
        config: Summary configuration (optional)

    Returns:
        StatisticalSummary

        Zero deviation (flat window, < 2 points) -> z_score = 0, rarity = None

    Example:
        vix_history = [14.2, 15.1, 13.8, ...]  # 90 days
        summary = compute_statistical_summary(vix_history, 27.5)
        # summary.z_score -> 3.4, summary.rarity -> 2980
    """
    cfg = config or SummaryConfig()
    window = window_size if window_size is not None else cfg.window_size

    values = np.asarray(history, dtype=np.float64)
    if window > 0:
        values = values[-window:]
    else:
        values = values[:0]
    values = values[~np.isnan(values)]

    current = float(current_value)

    if len(values) == 0:
        return StatisticalSummary(
            mean=0.0,
            standard_deviation=0.0,
            current_value=current,
            z_score=0.0,
            rarity=None,
        )

    mean_val, std_val = _fast_mean_std(values, cfg.ddof)
    mean_val = float(mean_val)
    std_val = float(std_val)

    if len(values) < cfg.min_periods:
        std_val = 0.0

    if std_val > 0 and math.isfinite(current):
        z_score = (current - mean_val) / std_val
    else:
        z_score = 0.0

    return StatisticalSummary(
        mean=mean_val,
        standard_deviation=std_val,
        current_value=current,
        z_score=float(z_score),
        rarity=calculate_rarity(z_score),
    )


def rolling_z_scores(
    values: Union[Sequence[float], np.ndarray],
    window_size: int = 90,
    min_periods: int = 2,
    ddof: int = 1
) -> np.ndarray:
    """
    Z-score of each observation against the window that precedes it

    Look-ahead bias protection: observation i is scored only against
    values[i - window_size:i].

    Args:
        values: Indicator history, oldest first
        window_size: Trailing window length
        min_periods: Minimum preceding observations (NaN before that)
        ddof: Delta degrees of freedom for the deviation

    Returns:
        np.ndarray of z-scores, NaN where no window is available yet
    """
    data = np.asarray(values, dtype=np.float64)
    result = np.full(len(data), np.nan)

    for i in range(len(data)):
        window = data[max(0, i - window_size):i]
        window = window[~np.isnan(window)]
        if len(window) < min_periods or np.isnan(data[i]):
            continue

        mean_val, std_val = _fast_mean_std(window, ddof)
        result[i] = (data[i] - mean_val) / std_val if std_val > 0 else 0.0

    return result


@dataclass(frozen=True)
class SDBands:
    """Standard deviation bands for visualization"""
    mean: float
    plus_1sd: float
    plus_2sd: float
    plus_3sd: float
    minus_1sd: float
    minus_2sd: float
    minus_3sd: float

    @classmethod
    def around(cls, mean: float, sd: float) -> "SDBands":
        return cls(
            mean=mean,
            plus_1sd=mean + sd,
            plus_2sd=mean + 2 * sd,
            plus_3sd=mean + 3 * sd,
            minus_1sd=mean - sd,
            minus_2sd=mean - 2 * sd,
            minus_3sd=mean - 3 * sd,
        )


def calculate_sd_bands(values: Union[List[float], np.ndarray], ddof: int = 1) -> Optional[SDBands]:
    """SD bands for a dataset; None with < 2 values or zero deviation"""
    data = np.asarray(values, dtype=np.float64)
    data = data[~np.isnan(data)]
    if len(data) < 2:
        return None

    mean_val, std_val = _fast_mean_std(data, ddof)
    if std_val <= 0:
        return None

    return SDBands.around(float(mean_val), float(std_val))


__all__ = [
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
