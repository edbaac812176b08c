"""
Display Metadata Lookup Tables

Labels, descriptions and notification copy for classifier outputs, kept as
plain enum -> record tables so the classification logic stays free of any
presentation concerns.
"""

from dataclasses import dataclass
from typing import Dict

from ..stats.summary import ZScoreSeverity, classify_z_score
from .types import (
    CorrelationStrength,
    MarketImplication,
    MarketRegime,
    ReadingLevel,
    RiskCategory,
)


@dataclass(frozen=True)
class RegimeMetadata:
    description: str
    notification_title: str
    notification_body: str


@dataclass(frozen=True)
class LabelMetadata:
    label: str
    description: str


REGIME_METADATA: Dict[MarketRegime, RegimeMetadata] = {
    MarketRegime.RISK_ON: RegimeMetadata(
        description="Favorable conditions for risk assets",
        notification_title="Market Regime: RISK-ON",
        notification_body=(
            "Macro conditions have shifted bullish. Low volatility and "
            "expanding liquidity favor risk assets."
        ),
    ),
    MarketRegime.RISK_OFF: RegimeMetadata(
        description="Defensive positioning recommended",
        notification_title="Market Regime: RISK-OFF",
        notification_body=(
            "Macro conditions have shifted bearish. Elevated VIX and dollar "
            "strength may pressure crypto."
        ),
    ),
    MarketRegime.MIXED: RegimeMetadata(
        description="Conflicting signals across indicators",
        notification_title="Market Regime: MIXED",
        notification_body=(
            "Macro signals are now conflicting. Consider reducing position "
            "sizes until clarity emerges."
        ),
    ),
    MarketRegime.NO_DATA: RegimeMetadata(
        description="Awaiting market data",
        notification_title="Market Data Unavailable",
        notification_body="Unable to determine market conditions.",
    ),
}

CORRELATION_METADATA: Dict[CorrelationStrength, LabelMetadata] = {
    CorrelationStrength.WEAK: LabelMetadata("Weak", "Historical correlation currently weak"),
    CorrelationStrength.MODERATE: LabelMetadata("Moderate", "Moderate historical correlation"),
    CorrelationStrength.STRONG: LabelMetadata("Strong", "Strong historical correlation"),
    CorrelationStrength.VERY_STRONG: LabelMetadata("Very Strong", "Very strong correlation observed"),
}

IMPLICATION_METADATA: Dict[MarketImplication, LabelMetadata] = {
    MarketImplication.BULLISH: LabelMetadata("Bullish", "Bullish for crypto"),
    MarketImplication.FAVORABLE: LabelMetadata("Favorable", "Favorable conditions"),
    MarketImplication.NEUTRAL: LabelMetadata("Neutral", "Neutral conditions"),
    MarketImplication.CAUTIOUS: LabelMetadata("Cautious", "Exercise caution"),
    MarketImplication.BEARISH: LabelMetadata("Bearish", "Bearish for crypto"),
}

READING_METADATA: Dict[ReadingLevel, str] = {
    ReadingLevel.LOW: "Low",
    ReadingLevel.NORMAL: "Normal",
    ReadingLevel.ELEVATED: "Elevated",
    ReadingLevel.HIGH: "High",
    ReadingLevel.WEAK: "Weak",
    ReadingLevel.STABLE: "Stable",
    ReadingLevel.STRONG: "Strong",
    ReadingLevel.EXPANDING: "Expanding",
    ReadingLevel.GROWING: "Growing",
    ReadingLevel.FLAT: "Flat",
    ReadingLevel.CONTRACTING: "Contracting",
    ReadingLevel.UNAVAILABLE: "--",
}

RISK_CATEGORY_LABELS: Dict[RiskCategory, str] = {
    RiskCategory.VERY_LOW: "Very Low Risk",
    RiskCategory.LOW: "Low Risk",
    RiskCategory.NEUTRAL: "Neutral",
    RiskCategory.ELEVATED: "Elevated Risk",
    RiskCategory.HIGH: "High Risk",
    RiskCategory.EXTREME: "Extreme Risk",
}

# (positive z label, negative z label)
SEVERITY_LABELS: Dict[ZScoreSeverity, tuple] = {
    ZScoreSeverity.EXTREME: ("Extremely High", "Extremely Low"),
    ZScoreSeverity.SIGNIFICANT: ("Significantly High", "Significantly Low"),
    ZScoreSeverity.NOTABLE: ("Above Average", "Below Average"),
    ZScoreSeverity.NORMAL: ("Normal Range", "Normal Range"),
}


def describe_z_score(z_score: float) -> str:
    """Human-readable z-score description, e.g. 'Significantly High'"""
    high, low = SEVERITY_LABELS[classify_z_score(z_score)]
    return high if z_score > 0 else low


__all__ = [
    "RegimeMetadata",
    "LabelMetadata",
    "REGIME_METADATA",
    "CORRELATION_METADATA",
    "IMPLICATION_METADATA",
    "READING_METADATA",
    "RISK_CATEGORY_LABELS",
    "SEVERITY_LABELS",
    "describe_z_score",
]
