"""
Utilities Module

Common numeric helpers used across the signal engine.

Available modules:
- math_utils: Safe division, clamping, missing-value handling
"""

from .math_utils import (
    safe_divide,
    clamp,
    is_missing,
    optional_float,
)

__all__ = [
    "safe_divide",
    "clamp",
    "is_missing",
    "optional_float",
]
