"""
Multi-Factor Risk Composer Module

Key Features:
- Six risk factors normalized into [0, 1] (1.0 = highest risk)
- Validated weight presets (DEFAULT, CONSERVATIVE, SENTIMENT_FOCUSED)
- Proportional weight redistribution when factors are missing
- Undefined (None) composite when no data is available
- Log-regression fair value fitted from price history

Architecture:
- factors.py: Factor types, weights, RiskFactor
- normalizers.py: Raw value -> [0, 1] mappings
- regression.py: Log-regression fair value and deviation
- composer.py: Weight redistribution and composition

Usage:
    from market_signals.risk import MultiFactorRiskComposer, RiskFactorData

    composer = MultiFactorRiskComposer()
    result = composer.compose_data(RiskFactorData(rsi=55, fear_greed=72))
    print(result.risk_level, result.category)
"""

from .factors import (
    WEIGHT_TOLERANCE,
    WeightConfigurationError,
    RiskFactorType,
    RiskFactorWeights,
    RiskFactor,
)

from .normalizers import (
    normalize_rsi,
    normalize_sma_position,
    normalize_funding_rate,
    normalize_fear_greed,
    normalize_vix,
    normalize_dxy,
    normalize_macro_risk,
    normalize_log_deviation,
)

from .regression import (
    MIN_FIT_POINTS,
    LogRegressionFit,
    fit_log_regression,
    log_deviation,
)

from .composer import (
    RiskFactorData,
    validate_factor_weights,
    redistribute_weights,
    CompositeRisk,
    MultiFactorRiskPoint,
    MultiFactorRiskComposer,
)

__all__ = [
    # Factors
    "WEIGHT_TOLERANCE",
    "WeightConfigurationError",
    "RiskFactorType",
    "RiskFactorWeights",
    "RiskFactor",

    # Normalizers
    "normalize_rsi",
    "normalize_sma_position",
    "normalize_funding_rate",
    "normalize_fear_greed",
    "normalize_vix",
    "normalize_dxy",
    "normalize_macro_risk",
    "normalize_log_deviation",

    # Regression
    "MIN_FIT_POINTS",
    "LogRegressionFit",
    "fit_log_regression",
    "log_deviation",

    # Composition
    "RiskFactorData",
    "validate_factor_weights",
    "redistribute_weights",
    "CompositeRisk",
    "MultiFactorRiskPoint",
    "MultiFactorRiskComposer",
]
