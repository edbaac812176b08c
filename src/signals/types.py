"""
Signal Classification Types

Ordinal and categorical outputs of the classifier. Display text and colors
live in metadata.py; these enums carry no rendering concerns.
"""

from enum import Enum, IntEnum


class IndicatorCorrelation(Enum):
    """How an indicator typically co-moves with crypto"""
    POSITIVE = "positive"
    INVERSE = "inverse"
    NEUTRAL = "neutral"


class MacroIndicator(Enum):
    """Macro indicators feeding the regime classifier"""
    VIX = "VIX"
    DXY = "DXY"
    M2 = "M2"

    @property
    def correlation(self) -> IndicatorCorrelation:
        # High VIX = risk-off, strong dollar = headwind, liquidity = tailwind
        if self is MacroIndicator.M2:
            return IndicatorCorrelation.POSITIVE
        return IndicatorCorrelation.INVERSE


class CorrelationStrength(IntEnum):
    """Ordinal strength of an indicator's current co-movement with crypto"""
    WEAK = 1
    MODERATE = 2
    STRONG = 3
    VERY_STRONG = 4


class Signal(Enum):
    """Per-indicator regime vote"""
    BULLISH = "bullish"
    NEUTRAL = "neutral"
    BEARISH = "bearish"


class MarketRegime(str, Enum):
    """Aggregate macro regime; values are persisted"""
    RISK_ON = "RISK-ON"
    RISK_OFF = "RISK-OFF"
    MIXED = "MIXED"
    NO_DATA = "NO DATA"


class Severity(Enum):
    """Severity tier of a qualitative reading (mapped to colors by the UI)"""
    FAVORABLE = "favorable"
    POSITIVE = "positive"
    CAUTION = "caution"
    ADVERSE = "adverse"
    UNKNOWN = "unknown"


class ReadingLevel(Enum):
    """Qualitative per-indicator reading"""
    # VIX level
    LOW = "low"
    NORMAL = "normal"
    ELEVATED = "elevated"
    HIGH = "high"
    # DXY % change
    WEAK = "weak"
    STABLE = "stable"
    STRONG = "strong"
    # M2 monthly change
    EXPANDING = "expanding"
    GROWING = "growing"
    FLAT = "flat"
    CONTRACTING = "contracting"

    UNAVAILABLE = "unavailable"

    @property
    def severity(self) -> Severity:
        return _READING_SEVERITY[self]


_READING_SEVERITY = {
    ReadingLevel.LOW: Severity.FAVORABLE,
    ReadingLevel.NORMAL: Severity.POSITIVE,
    ReadingLevel.ELEVATED: Severity.CAUTION,
    ReadingLevel.HIGH: Severity.ADVERSE,
    ReadingLevel.WEAK: Severity.FAVORABLE,
    ReadingLevel.STABLE: Severity.CAUTION,
    ReadingLevel.STRONG: Severity.ADVERSE,
    ReadingLevel.EXPANDING: Severity.FAVORABLE,
    ReadingLevel.GROWING: Severity.POSITIVE,
    ReadingLevel.FLAT: Severity.CAUTION,
    ReadingLevel.CONTRACTING: Severity.ADVERSE,
    ReadingLevel.UNAVAILABLE: Severity.UNKNOWN,
}


class MarketImplication(Enum):
    """Market implication of an indicator's z-score"""
    BULLISH = "bullish"
    FAVORABLE = "favorable"
    NEUTRAL = "neutral"
    CAUTIOUS = "cautious"
    BEARISH = "bearish"


class RiskCategory(Enum):
    """Bucketed composite risk level"""
    VERY_LOW = "very_low"    # < 0.20
    LOW = "low"              # 0.20 - 0.40
    NEUTRAL = "neutral"      # 0.40 - 0.55
    ELEVATED = "elevated"    # 0.55 - 0.70
    HIGH = "high"            # 0.70 - 0.90
    EXTREME = "extreme"      # >= 0.90


__all__ = [
    "IndicatorCorrelation",
    "MacroIndicator",
    "CorrelationStrength",
    "Signal",
    "MarketRegime",
    "Severity",
    "ReadingLevel",
    "MarketImplication",
    "RiskCategory",
]
