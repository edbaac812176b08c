"""
Logarithmic Regression Fair Value

Fits a power-law trend through an asset's price history:

    log10(price) = a + b * log10(days since origin)

The fitted line is the asset's "fair value". The log deviation of the current
price from it feeds the log-regression risk factor.

Example:
    fit = fit_log_regression(btc_history, origin=datetime(2009, 1, 3))
    fair = fit.fair_value_at(today)
    deviation = log_deviation(price, fair)    # > 0 overvalued, < 0 undervalued
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

import numpy as np

from ..stats.series import TimeSeriesPoint

logger = logging.getLogger(__name__)

# Fewer valid points than this give no fit
MIN_FIT_POINTS = 10

SECONDS_PER_DAY = 86400.0

# Least-squares denominator below this means x has no spread
DEGENERATE_DENOMINATOR = 1e-10


def days_since(origin: datetime, date: datetime) -> float:
    return (date - origin).total_seconds() / SECONDS_PER_DAY


def log_deviation(price: float, fair_value: float) -> float:
    """log10(price) - log10(fair_value); 0.0 unless both are positive"""
    if price <= 0 or fair_value <= 0:
        return 0.0
    return float(np.log10(price) - np.log10(fair_value))


@dataclass(frozen=True)
class LogRegressionFit:
    """Fitted coefficients in log10-log10 space"""
    intercept: float
    slope: float
    r_squared: float
    origin: datetime
    n_points: int = 0

    def fair_value_at(self, date: datetime) -> float:
        """Trend price at a date; 0.0 on or before the origin"""
        days = days_since(self.origin, date)
        if days <= 0:
            return 0.0
        return float(10.0 ** (self.intercept + self.slope * np.log10(days)))

    def deviation_at(self, date: datetime, price: float) -> float:
        return log_deviation(price, self.fair_value_at(date))


def fit_log_regression(
    prices: Sequence[TimeSeriesPoint],
    origin: datetime
) -> Optional[LogRegressionFit]:
    """
    Least-squares fit of log10(price) against log10(days since origin)

    Points on or before the origin and non-positive prices are dropped.

    Args:
        prices: Price history
        origin: Date the asset started trading

    Returns:
        LogRegressionFit, or None with fewer than MIN_FIT_POINTS valid points
        or when every point lies on the same day
    """
    days = np.array([days_since(origin, p.date) for p in prices], dtype=np.float64)
    values = np.array([p.value for p in prices], dtype=np.float64)

    valid = (days > 0) & (values > 0) & np.isfinite(values)
    n = int(np.sum(valid))
    if n < MIN_FIT_POINTS:
        logger.debug(f"Log regression needs {MIN_FIT_POINTS} valid points, got {n}")
        return None

    x = np.log10(days[valid])
    y = np.log10(values[valid])

    sum_x = np.sum(x)
    sum_y = np.sum(y)
    denominator = n * np.sum(x * x) - sum_x * sum_x
    if abs(denominator) <= DEGENERATE_DENOMINATOR:
        logger.debug("Log regression undefined: no spread in dates")
        return None

    slope = (n * np.sum(x * y) - sum_x * sum_y) / denominator
    intercept = (sum_y - slope * sum_x) / n

    residuals = y - (intercept + slope * x)
    ss_total = np.sum((y - np.mean(y)) ** 2)
    ss_residual = np.sum(residuals ** 2)
    r_squared = 1.0 - ss_residual / ss_total if ss_total > 0 else 0.0

    return LogRegressionFit(
        intercept=float(intercept),
        slope=float(slope),
        r_squared=float(r_squared),
        origin=origin,
        n_points=n,
    )


__all__ = [
    "MIN_FIT_POINTS",
    "LogRegressionFit",
    "fit_log_regression",
    "log_deviation",
    "days_since",
]
