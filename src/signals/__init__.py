"""
Correlation & Signal Classification Module

Threshold-based classification of macro indicators into discrete tiers and
synthesis of the aggregate market regime.

Key Features:
- Correlation strength tiers (VIX level, DXY % change, M2 monthly change)
- Bullish / neutral / bearish regime votes (bands distinct from the tiers)
- Aggregate regime: RISK-ON / RISK-OFF / MIXED / NO DATA
- Z-score market implication oriented by indicator correlation
- Composite risk categories
- Display metadata as pure lookup tables

Architecture:
- types.py: Enums (MacroIndicator, CorrelationStrength, MarketRegime, ...)
- thresholds.py: Threshold and band tables
- classifier.py: Per-indicator classification
- regime.py: Regime vote tally
- metadata.py: Labels, descriptions, notification copy

Usage:
    from market_signals.signals import MacroIndicator, classify_regime
    from market_signals.signals import classify_correlation_strength

    classify_correlation_strength(MacroIndicator.VIX, 27.0)   # STRONG
    classify_regime(vix=16, dxy_change_percent=-0.3)          # RISK_ON
"""

from .types import (
    IndicatorCorrelation,
    MacroIndicator,
    CorrelationStrength,
    Signal,
    MarketRegime,
    Severity,
    ReadingLevel,
    MarketImplication,
    RiskCategory,
)

from .thresholds import (
    CorrelationThresholds,
    SignalBands,
    CORRELATION_THRESHOLDS,
    SIGNAL_BANDS,
)

from .classifier import (
    classify_correlation_strength,
    classify_signal,
    classify_reading_level,
    classify_zscore_implication,
    classify_risk_category,
)

from .regime import (
    MacroSnapshot,
    RegimeTally,
    tally_regime_signals,
    classify_regime,
)

from .metadata import (
    REGIME_METADATA,
    CORRELATION_METADATA,
    IMPLICATION_METADATA,
    READING_METADATA,
    RISK_CATEGORY_LABELS,
    describe_z_score,
)

__all__ = [
    # Types
    "IndicatorCorrelation",
    "MacroIndicator",
    "CorrelationStrength",
    "Signal",
    "MarketRegime",
    "Severity",
    "ReadingLevel",
    "MarketImplication",
    "RiskCategory",

    # Thresholds
    "CorrelationThresholds",
    "SignalBands",
    "CORRELATION_THRESHOLDS",
    "SIGNAL_BANDS",

    # Classification
    "classify_correlation_strength",
    "classify_signal",
    "classify_reading_level",
    "classify_zscore_implication",
    "classify_risk_category",

    # Regime
    "MacroSnapshot",
    "RegimeTally",
    "tally_regime_signals",
    "classify_regime",

    # Metadata
    "REGIME_METADATA",
    "CORRELATION_METADATA",
    "IMPLICATION_METADATA",
    "READING_METADATA",
    "RISK_CATEGORY_LABELS",
    "describe_z_score",
]
