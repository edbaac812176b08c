"""
Indicator Time Series Helpers

One observation per day, oldest first. The data layer may deliver sparse
series (weekends, holidays, monthly M2 prints), so lookups match the
nearest observation instead of requiring an exact date.

Used to:
- Validate ordering before statistics are computed
- Derive DXY daily % change and M2 monthly % change from history
- Cut the trailing window fed to the statistical summary
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, Optional, Sequence

import numpy as np
import pandas as pd


@dataclass(frozen=True)
class TimeSeriesPoint:
    """Single dated observation of a scalar indicator"""
    date: datetime
    value: float


def validate_series(points: Sequence[TimeSeriesPoint]) -> None:
    """
    Check that dates are strictly increasing

    Raises:
        ValueError: if two consecutive points are out of order or share a date
    """
    for i in range(1, len(points)):
        if points[i].date <= points[i - 1].date:
            raise ValueError(
                f"Time series dates must be strictly increasing: "
                f"{points[i - 1].date} followed by {points[i].date} at index {i}"
            )


def to_pandas(points: Sequence[TimeSeriesPoint]) -> pd.Series:
    """
    Convert points into a float Series on a DatetimeIndex

    Args:
        points: Ordered observations (oldest first)

    Returns:
        pd.Series indexed by date
    """
    validate_series(points)
    if not points:
        return pd.Series([], index=pd.DatetimeIndex([]), dtype=np.float64)

    index = pd.DatetimeIndex([p.date for p in points])
    return pd.Series([float(p.value) for p in points], index=index, dtype=np.float64)


def value_at(
    points: Sequence[TimeSeriesPoint],
    when: datetime,
    tolerance: Optional[timedelta] = None
) -> Optional[float]:
    """
    Look up the observation nearest to a date

    Args:
        points: Ordered observations
        when: Target date
        tolerance: Maximum distance to the nearest observation (None = unbounded)

    Returns:
        Value of the nearest observation, or None if the series is empty or
        nothing lies within tolerance
    """
    series = to_pandas(points)
    if series.empty:
        return None

    position = series.index.get_indexer([pd.Timestamp(when)], method="nearest")[0]
    if position < 0:
        return None

    if tolerance is not None:
        distance = abs(series.index[position] - pd.Timestamp(when))
        if distance > pd.Timedelta(tolerance):
            return None

    return float(series.iloc[position])


def percent_change(points: Sequence[TimeSeriesPoint], days: int = 1) -> Optional[float]:
    """
    Percent change of the latest value against the value `days` earlier

    The base value is the observation nearest to (latest date - days), which
    tolerates sparse series.

    Args:
        points: Ordered observations
        days: Lookback in calendar days (1 for DXY daily change, 30 for M2 monthly)

    Returns:
        Percent change (e.g. 0.5 for +0.5%), or None with < 2 points or a zero base
    """
    if len(points) < 2:
        return None

    latest = points[-1]
    base = value_at(points[:-1], latest.date - timedelta(days=days))
    if base is None or base == 0:
        return None

    return (float(latest.value) - base) / abs(base) * 100.0


def trailing_values(points: Sequence[TimeSeriesPoint], window: int) -> np.ndarray:
    """Values of the most recent `window` observations"""
    if window <= 0:
        return np.array([], dtype=np.float64)
    recent: List[TimeSeriesPoint] = list(points)[-window:]
    return np.array([p.value for p in recent], dtype=np.float64)


__all__ = [
    "TimeSeriesPoint",
    "validate_series",
    "to_pandas",
    "value_at",
    "percent_change",
    "trailing_values",
]
