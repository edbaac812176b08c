"""
Risk Factor Normalizers

Each normalizer maps a raw indicator value into [0, 1] where 1.0 is the
highest risk. Missing input (None / NaN) yields None so the factor can be
marked unavailable by the composer.
"""

from typing import Optional, Tuple

import numpy as np

from ..utils.math_utils import clamp, is_missing, optional_float, safe_divide

# RSI band: oversold -> 0, overbought -> 1
RSI_OVERSOLD = 30.0
RSI_OVERBOUGHT = 70.0

# Funding rate band (per 8h): -0.1% -> 0, +0.1% -> 1
FUNDING_RATE_BOUND = 0.001

# VIX: 10 -> 0.7 (complacency), 40 -> 0.3 (panic is a buying opportunity)
VIX_BASE = 0.3
VIX_SPAN = 0.4
VIX_CEILING = 40.0
VIX_RANGE = 30.0

# DXY level band
DXY_FLOOR = 90.0
DXY_RANGE = 20.0

# (price-vs-SMA threshold, normalized value), checked top down
SMA_POSITION_BANDS: Tuple[Tuple[float, float], ...] = (
    (0.20, 0.2),
    (0.10, 0.3),
    (0.0, 0.4),
    (-0.10, 0.6),
    (-0.20, 0.7),
)
SMA_FAR_BELOW = 0.8


def normalize_rsi(rsi: Optional[float]) -> Optional[float]:
    """RSI 30 -> 0.0, RSI 70 -> 1.0"""
    if is_missing(rsi):
        return None
    return clamp((float(rsi) - RSI_OVERSOLD) / (RSI_OVERBOUGHT - RSI_OVERSOLD))


def normalize_sma_position(price: Optional[float], sma200: Optional[float]) -> Optional[float]:
    """
    Banded price-vs-200 day SMA position

    Far above the SMA is treated as lower risk (established uptrend), far
    below as higher risk. A non-positive SMA carries no information and maps
    to 0.5.
    """
    if is_missing(price) or is_missing(sma200):
        return None

    sma = float(sma200)
    if sma <= 0:
        return 0.5

    pct_from_sma = (float(price) - sma) / sma
    for threshold, normalized in SMA_POSITION_BANDS:
        if pct_from_sma > threshold:
            return normalized
    return SMA_FAR_BELOW


def sma_position_raw(price: Optional[float], sma200: Optional[float]) -> Optional[float]:
    """Raw SMA factor value: 0.3 above the SMA, 0.7 at or below"""
    if is_missing(price) or is_missing(sma200):
        return None
    return 0.3 if float(price) > float(sma200) else 0.7


def normalize_funding_rate(rate: Optional[float]) -> Optional[float]:
    """Funding rate -0.1% -> 0.0, +0.1% -> 1.0"""
    if is_missing(rate):
        return None
    return clamp((float(rate) + FUNDING_RATE_BOUND) / (2 * FUNDING_RATE_BOUND))


def normalize_fear_greed(value: Optional[float]) -> Optional[float]:
    """Fear & Greed index 0-100 -> 0-1"""
    if is_missing(value):
        return None
    return clamp(float(value) / 100.0)


def normalize_vix(vix: Optional[float]) -> Optional[float]:
    """Inverse VIX mapping: low VIX (complacency) is the riskier reading"""
    if is_missing(vix):
        return None
    return clamp(VIX_BASE + VIX_SPAN * (VIX_CEILING - float(vix)) / VIX_RANGE)


def normalize_dxy(dxy: Optional[float]) -> Optional[float]:
    """DXY 90 -> 0.0, 110 -> 1.0"""
    if is_missing(dxy):
        return None
    return clamp((float(dxy) - DXY_FLOOR) / DXY_RANGE)


def normalize_macro_risk(vix: Optional[float], dxy: Optional[float]) -> Optional[float]:
    """Average of the available VIX / DXY normalizations, None if neither"""
    components = [v for v in (normalize_vix(vix), normalize_dxy(dxy)) if v is not None]
    if not components:
        return None
    return float(np.mean(components))


def macro_risk_raw(vix: Optional[float], dxy: Optional[float]) -> Optional[float]:
    """Raw macro factor value: average of the available raw readings"""
    components = [v for v in (optional_float(vix), optional_float(dxy)) if v is not None]
    if not components:
        return None
    return float(np.mean(components))


def normalize_log_deviation(
    deviation: Optional[float],
    bounds: Optional[Tuple[float, float]]
) -> Optional[float]:
    """
    Map a log-regression deviation linearly onto [0, 1]

    Args:
        deviation: log10(price) - log10(fair value)
        bounds: (low, high) historical deviation range

    Returns:
        Normalized deviation; 0.5 for a degenerate range, None when missing
    """
    if is_missing(deviation) or bounds is None:
        return None

    low, high = float(bounds[0]), float(bounds[1])
    span = high - low
    if span <= 0:
        return 0.5

    clamped = clamp(float(deviation), low, high)
    return clamp(safe_divide(clamped - low, span, default=0.5))


__all__ = [
    "normalize_rsi",
    "normalize_sma_position",
    "sma_position_raw",
    "normalize_funding_rate",
    "normalize_fear_greed",
    "normalize_vix",
    "normalize_dxy",
    "normalize_macro_risk",
    "macro_risk_raw",
    "normalize_log_deviation",
]
