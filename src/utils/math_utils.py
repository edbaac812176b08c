"""
Mathematical Utilities Module

Safe numeric helpers shared by the statistics, risk and signal modules.
Missing data arrives as None or NaN from the data layer; both are treated
the same way everywhere in the engine.
"""

import math
from typing import Optional, Union

import numpy as np
from numba import jit


@jit(nopython=True, cache=True)
def _fast_safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """Fast safe division with Numba optimization"""
    if abs(denominator) < 1e-15:  # Essentially zero
        return default
    return numerator / denominator


def safe_divide(
    numerator: Union[float, np.ndarray],
    denominator: Union[float, np.ndarray],
    default: float = 0.0
) -> Union[float, np.ndarray]:
    """
    Safe division operation that handles division by zero

    Args:
        numerator: Numerator value(s)
        denominator: Denominator value(s)
        default: Default value when denominator is zero

    Returns:
        Division result or default value
    """
    if np.isscalar(numerator) and np.isscalar(denominator):
        return float(_fast_safe_divide(float(numerator), float(denominator), default))

    numerator = np.asarray(numerator, dtype=np.float64)
    denominator = np.asarray(denominator, dtype=np.float64)

    result = np.full(np.broadcast(numerator, denominator).shape, default, dtype=np.float64)
    mask = np.abs(denominator) >= 1e-15
    np.divide(numerator, denominator, out=result, where=mask)
    return result


def clamp(value: float, lower: float = 0.0, upper: float = 1.0) -> float:
    """Clamp value into [lower, upper]"""
    return max(lower, min(upper, float(value)))


def is_missing(value: Optional[float]) -> bool:
    """True for None and NaN"""
    if value is None:
        return True
    try:
        return math.isnan(float(value))
    except (TypeError, ValueError):
        return True


def optional_float(value: Optional[float]) -> Optional[float]:
    """Coerce to float, mapping None/NaN/unparseable to None"""
    if is_missing(value):
        return None
    return float(value)


__all__ = [
    "safe_divide",
    "clamp",
    "is_missing",
    "optional_float",
]
