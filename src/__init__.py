"""
Market Signal Engine - Macro Statistics, Risk Composition and Regime Alerts

Turns already-fetched macro and market time series into decision signals.

Key Features:
- Statistical summaries (mean, deviation, z-score, "1 in N" rarity)
- Correlation strength tiers and bullish/bearish votes for VIX, DXY, M2
- Aggregate market regime (RISK-ON / RISK-OFF / MIXED / NO DATA)
- Multi-factor composite risk with weight redistribution for missing data
- Persisted regime change detection with notifications
- Cooldown-limited extreme move alerts
- High-performance computation with Numba

Usage:
 from market_signals import compute_statistical_summary, classify_regime
 from market_signals import MultiFactorRiskComposer, RiskFactorData
 from market_signals.alerts import RegimeChangeDetector, JsonFileKeyValueStore

 summary = compute_statistical_summary(vix_history, current_vix)
 regime = classify_regime(vix=16, dxy_change_percent=-0.3, m2_monthly_change=0.8)

 detector = RegimeChangeDetector(JsonFileKeyValueStore.default())
 event = detector.check_regime_change(regime)

 risk = MultiFactorRiskComposer().compose_data(RiskFactorData(rsi=62, fear_greed=71))
"""

__version__ = "1.0.0"
__license__ = "MIT"

import logging
import os

import numba
import numpy as np

from .stats import (
    TimeSeriesPoint,
    StatisticalSummary,
    SummaryConfig,
    compute_statistical_summary,
    calculate_rarity,
    rolling_z_scores,
)

from .signals import (
    MacroIndicator,
    CorrelationStrength,
    Signal,
    MarketRegime,
    classify_correlation_strength,
    classify_signal,
    classify_regime,
)

from .risk import (
    RiskFactorType,
    RiskFactorWeights,
    RiskFactor,
    RiskFactorData,
    CompositeRisk,
    MultiFactorRiskComposer,
    WeightConfigurationError,
)

from .alerts import (
    RegimeChangeDetector,
    RegimeChangeEvent,
    ExtremeMoveDetector,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    StorageError,
)

__all__ = [
    # Statistics
    "TimeSeriesPoint",
    "StatisticalSummary",
    "SummaryConfig",
    "compute_statistical_summary",
    "calculate_rarity",
    "rolling_z_scores",

    # Signals
    "MacroIndicator",
    "CorrelationStrength",
    "Signal",
    "MarketRegime",
    "classify_correlation_strength",
    "classify_signal",
    "classify_regime",

    # Risk
    "RiskFactorType",
    "RiskFactorWeights",
    "RiskFactor",
    "RiskFactorData",
    "CompositeRisk",
    "MultiFactorRiskComposer",
    "WeightConfigurationError",

    # Alerts
    "RegimeChangeDetector",
    "RegimeChangeEvent",
    "ExtremeMoveDetector",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "StorageError",
]

# Configure default logging
logging.basicConfig(
    level=logging.INFO if os.getenv("MARKET_SIGNALS_DEBUG") else logging.WARNING,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

logger = logging.getLogger(__name__)
logger.info(f"Market Signal Engine v{__version__} initialized")

logger.info(f"Numba {numba.__version__} - JIT compilation enabled")
logger.info(f"NumPy {np.__version__} - vectorized operations enabled")
