"""
Correlation & Signal Classifier

Maps raw or derived indicator values to discrete tiers:
1. Correlation strength (WEAK..VERY_STRONG) from magnitude thresholds
2. Regime signal vote (BULLISH / NEUTRAL / BEARISH)
3. Qualitative reading level (widget label tier)
4. Market implication of a z-score
5. Composite risk category

Missing data (None / NaN) resolves to the most conservative tier: WEAK,
NEUTRAL, UNAVAILABLE. Classification never raises on missing input.
"""

from typing import Optional

from ..stats.summary import EXTREME_THRESHOLD, SIGNIFICANT_THRESHOLD
from ..utils.math_utils import is_missing
from .thresholds import (
    CORRELATION_THRESHOLDS,
    SIGNAL_BANDS,
    VIX_READING_BANDS,
    DXY_READING_BAND,
    M2_READING_BANDS,
    RISK_CATEGORY_BANDS,
    CorrelationThresholds,
    SignalBands,
)
from .types import (
    CorrelationStrength,
    IndicatorCorrelation,
    MacroIndicator,
    MarketImplication,
    ReadingLevel,
    RiskCategory,
    Signal,
)


def classify_correlation_strength(
    indicator: MacroIndicator,
    value: Optional[float],
    thresholds: Optional[CorrelationThresholds] = None
) -> CorrelationStrength:
    """
    Classify correlation strength from an indicator's level or % change

    Args:
        indicator: VIX (level), DXY (% change) or M2 (monthly % change)
        value: Indicator metric; None/NaN when unavailable
        thresholds: Custom tier boundaries (optional)

    Returns:
        CorrelationStrength; WEAK when value is missing

    Monotonic: a larger magnitude never yields a lower tier.

    Example:
        classify_correlation_strength(MacroIndicator.VIX, 27.0)   # STRONG
        classify_correlation_strength(MacroIndicator.DXY, -0.6)   # STRONG
        classify_correlation_strength(MacroIndicator.M2, None)    # WEAK
    """
    if is_missing(value):
        return CorrelationStrength.WEAK

    thresh = thresholds or CORRELATION_THRESHOLDS[indicator]
    magnitude = abs(float(value))

    if magnitude > thresh.very_strong:
        return CorrelationStrength.VERY_STRONG
    elif magnitude > thresh.strong:
        return CorrelationStrength.STRONG
    elif magnitude > thresh.moderate:
        return CorrelationStrength.MODERATE
    else:
        return CorrelationStrength.WEAK


def classify_signal(
    indicator: MacroIndicator,
    value: Optional[float],
    bands: Optional[SignalBands] = None
) -> Signal:
    """
    Classify an indicator's regime vote

    Args:
        indicator: VIX (level), DXY (% change) or M2 (monthly % change)
        value: Indicator metric; None/NaN when unavailable
        bands: Custom signal bands (optional)

    Returns:
        Signal; NEUTRAL when value is missing or between bands
    """
    if is_missing(value):
        return Signal.NEUTRAL

    band = bands or SIGNAL_BANDS[indicator]
    v = float(value)

    if band.higher_is_bullish:
        if v > band.bullish:
            return Signal.BULLISH
        elif v < band.bearish:
            return Signal.BEARISH
    else:
        if v < band.bullish:
            return Signal.BULLISH
        elif v > band.bearish:
            return Signal.BEARISH

    return Signal.NEUTRAL


def classify_reading_level(indicator: MacroIndicator, value: Optional[float]) -> ReadingLevel:
    """Qualitative reading behind the indicator label ('Low', 'Stable', 'Expanding', ...)"""
    if is_missing(value):
        return ReadingLevel.UNAVAILABLE

    v = float(value)

    if indicator is MacroIndicator.VIX:
        low, normal, elevated = VIX_READING_BANDS
        if v < low:
            return ReadingLevel.LOW
        elif v < normal:
            return ReadingLevel.NORMAL
        elif v < elevated:
            return ReadingLevel.ELEVATED
        return ReadingLevel.HIGH

    if indicator is MacroIndicator.DXY:
        if v < -DXY_READING_BAND:
            return ReadingLevel.WEAK
        elif v > DXY_READING_BAND:
            return ReadingLevel.STRONG
        return ReadingLevel.STABLE

    contracting, flat, growing = M2_READING_BANDS
    if v > growing:
        return ReadingLevel.EXPANDING
    elif v > flat:
        return ReadingLevel.GROWING
    elif v > contracting:
        return ReadingLevel.FLAT
    return ReadingLevel.CONTRACTING


def classify_zscore_implication(indicator: MacroIndicator, z_score: Optional[float]) -> MarketImplication:
    """
    Market implication of an indicator's z-score

    Orientation follows the indicator's correlation with crypto:
    - VIX, DXY (inverse): unusually high = bearish
    - M2 (positive): unusually high = bullish

    Returns:
        |z| >= 3: BULLISH / BEARISH
        |z| >= 2: FAVORABLE / CAUTIOUS
        otherwise NEUTRAL
    """
    if is_missing(z_score):
        return MarketImplication.NEUTRAL

    z = float(z_score)
    high_is_bearish = indicator.correlation is IndicatorCorrelation.INVERSE
    adverse = (z > 0 and high_is_bearish) or (z < 0 and not high_is_bearish)

    if abs(z) >= EXTREME_THRESHOLD:
        return MarketImplication.BEARISH if adverse else MarketImplication.BULLISH
    elif abs(z) >= SIGNIFICANT_THRESHOLD:
        return MarketImplication.CAUTIOUS if adverse else MarketImplication.FAVORABLE
    else:
        return MarketImplication.NEUTRAL


def classify_risk_category(risk_level: float) -> RiskCategory:
    """
    Bucket a composite risk level (0-1)

    Raises:
        ValueError: if risk_level is None or NaN (an unavailable composite
                    has no category)
    """
    if is_missing(risk_level):
        raise ValueError("Cannot categorize an unavailable risk level")

    very_low, low, neutral, elevated, high = RISK_CATEGORY_BANDS
    level = float(risk_level)

    if level < very_low:
        return RiskCategory.VERY_LOW
    elif level < low:
        return RiskCategory.LOW
    elif level < neutral:
        return RiskCategory.NEUTRAL
    elif level < elevated:
        return RiskCategory.ELEVATED
    elif level < high:
        return RiskCategory.HIGH
    else:
        return RiskCategory.EXTREME


__all__ = [
    "classify_correlation_strength",
    "classify_signal",
    "classify_reading_level",
    "classify_zscore_implication",
    "classify_risk_category",
]
