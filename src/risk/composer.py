"""
Multi-Factor Risk Composer

Combines the normalized risk factors into one composite risk level in [0, 1].

Algorithm:
1. Normalize each raw input into [0, 1] (see normalizers.py)
2. Redistribute the weight of unavailable factors proportionally across the
   available ones, so the effective weights always sum to 1.0
3. risk = sum(normalized_i * effective_weight_i), clamped to [0, 1]

With no factor available the composite is undefined: risk_level is None,
never 0 or 0.5 or NaN.

Example:
    composer = MultiFactorRiskComposer()
    result = composer.compose_data(RiskFactorData(rsi=70, fear_greed=80))
    # rsi=1.0 (w 0.15 -> 0.6), fear_greed=0.8 (w 0.10 -> 0.4) -> 0.92
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Dict, List, Optional, Sequence, Tuple, Union

import numpy as np

from ..signals.classifier import classify_risk_category
from ..signals.types import RiskCategory
from ..utils.math_utils import clamp, optional_float
from ..stats.series import TimeSeriesPoint
from .factors import (
    WEIGHT_TOLERANCE,
    RiskFactor,
    RiskFactorType,
    RiskFactorWeights,
    WeightConfigurationError,
)
from .regression import LogRegressionFit, fit_log_regression
from .normalizers import (
    macro_risk_raw,
    normalize_fear_greed,
    normalize_funding_rate,
    normalize_log_deviation,
    normalize_macro_risk,
    normalize_rsi,
    normalize_sma_position,
    sma_position_raw,
)


@dataclass(frozen=True)
class RiskFactorData:
    """Raw inputs for one composite calculation; every field is optional"""
    log_deviation: Optional[float] = None
    deviation_bounds: Optional[Tuple[float, float]] = None
    rsi: Optional[float] = None
    sma200: Optional[float] = None
    current_price: Optional[float] = None
    funding_rate: Optional[float] = None
    fear_greed: Optional[float] = None
    vix: Optional[float] = None
    dxy: Optional[float] = None


def validate_factor_weights(factors: Sequence[RiskFactor]) -> None:
    """
    Check the nominal weights carried by a factor set

    Each weight must lie in [0, 1] and the weights may not exceed 1.0 in
    total. A set covering every factor type must sum to 1.0.

    Raises:
        ValueError: if a factor type appears more than once
        WeightConfigurationError: if the weights are malformed
    """
    seen = set()
    for f in factors:
        if f.type in seen:
            raise ValueError(f"Duplicate risk factor: {f.type.value}")
        seen.add(f.type)
        if f.weight > 1.0:
            raise WeightConfigurationError(f"Weight '{f.type.value}' must be within [0, 1], got {f.weight}")

    total = float(np.sum([f.weight for f in factors]))
    if total > 1.0 + WEIGHT_TOLERANCE:
        raise WeightConfigurationError(f"Factor weights exceed 1.0, got {total:.4f}")
    if len(seen) == len(RiskFactorType) and abs(total - 1.0) > WEIGHT_TOLERANCE:
        raise WeightConfigurationError(f"Weights must sum to 1.0, got {total:.4f}")


def redistribute_weights(factors: Sequence[RiskFactor]) -> List[RiskFactor]:
    """
    Rescale the weights of available factors so they sum to 1.0

    Unavailable factors keep their nominal weight and do not contribute.
    When nothing is available the factors are returned unchanged. Available
    factors whose nominal weights are all zero share the weight equally.

    Args:
        factors: Factors carrying their nominal weights

    Returns:
        New list of factors in the same order
    """
    available = [f for f in factors if f.is_available]
    if not available:
        return list(factors)

    total_weight = float(np.sum([f.weight for f in available]))

    redistributed = []
    for f in factors:
        if not f.is_available:
            redistributed.append(f)
        elif total_weight > 0:
            redistributed.append(replace(f, weight=f.weight / total_weight))
        else:
            redistributed.append(replace(f, weight=1.0 / len(available)))
    return redistributed


@dataclass(frozen=True)
class CompositeRisk:
    """Composite risk level with the factors that produced it"""
    risk_level: Optional[float]
    factors: Tuple[RiskFactor, ...] = ()
    effective_weights: Dict[RiskFactorType, float] = field(default_factory=dict)
    available_count: int = 0

    @property
    def is_available(self) -> bool:
        return self.risk_level is not None

    @property
    def category(self) -> Optional[RiskCategory]:
        if self.risk_level is None:
            return None
        return classify_risk_category(self.risk_level)


@dataclass(frozen=True)
class MultiFactorRiskPoint:
    """Composite risk for one date, with price context"""
    date: datetime
    risk_level: Optional[float]
    price: float
    fair_value: float
    deviation: float
    factors: Tuple[RiskFactor, ...] = ()
    weights: Dict[RiskFactorType, float] = field(default_factory=dict)
    available_count: int = 0

    def factor(self, factor_type: RiskFactorType) -> Optional[RiskFactor]:
        for f in self.factors:
            if f.type is factor_type:
                return f
        return None

    @property
    def category(self) -> Optional[RiskCategory]:
        if self.risk_level is None:
            return None
        return classify_risk_category(self.risk_level)

    @property
    def date_string(self) -> str:
        return self.date.strftime("%Y-%m-%d")


class MultiFactorRiskComposer:
    """
    Composite risk calculator

    Features:
    - Configurable nominal weights (validated presets or custom mapping)
    - Proportional weight redistribution for missing factors
    - Validated per-factor weights on composed factor sets
    - Fair value and deviation from a log-regression fit
    """

    def __init__(self, weights: Optional[RiskFactorWeights] = None):
        self.weights = weights or RiskFactorWeights.DEFAULT
        self.logger = logging.getLogger(__name__)

    def build_factors(self, data: RiskFactorData) -> List[RiskFactor]:
        """
        Normalize raw inputs into factors carrying their nominal weights

        Every factor type is present in the result; factors without data are
        marked unavailable.
        """
        candidates = [
            (RiskFactorType.LOG_REGRESSION,
             optional_float(data.log_deviation),
             normalize_log_deviation(data.log_deviation, data.deviation_bounds)),
            (RiskFactorType.RSI,
             optional_float(data.rsi),
             normalize_rsi(data.rsi)),
            (RiskFactorType.SMA_POSITION,
             sma_position_raw(data.current_price, data.sma200),
             normalize_sma_position(data.current_price, data.sma200)),
            (RiskFactorType.FUNDING_RATE,
             optional_float(data.funding_rate),
             normalize_funding_rate(data.funding_rate)),
            (RiskFactorType.FEAR_GREED,
             optional_float(data.fear_greed),
             normalize_fear_greed(data.fear_greed)),
            (RiskFactorType.MACRO_RISK,
             macro_risk_raw(data.vix, data.dxy),
             normalize_macro_risk(data.vix, data.dxy)),
        ]

        factors = []
        for factor_type, raw, normalized in candidates:
            weight = self.weights.weight_for(factor_type)
            if normalized is None:
                factors.append(RiskFactor.unavailable(factor_type, weight))
            else:
                factors.append(RiskFactor(factor_type, raw, normalized, weight))
        return factors

    def compose(self, factors: Sequence[RiskFactor]) -> CompositeRisk:
        """
        Compose factors into a composite risk level

        Args:
            factors: Factors to combine, each carrying its nominal weight

        Returns:
            CompositeRisk; risk_level is None when no factor is available

        Raises:
            ValueError: if a factor type appears more than once
            WeightConfigurationError: if the carried weights are malformed
        """
        validate_factor_weights(factors)
        redistributed = redistribute_weights(factors)

        available = [f for f in redistributed if f.is_available]
        if not available:
            self.logger.debug("No risk factors available, composite undefined")
            return CompositeRisk(risk_level=None, factors=tuple(redistributed))

        risk = float(np.sum([f.weighted_contribution for f in available]))
        effective = {f.type: f.weight for f in available}

        return CompositeRisk(
            risk_level=clamp(risk),
            factors=tuple(redistributed),
            effective_weights=effective,
            available_count=len(available),
        )

    def compose_data(self, data: RiskFactorData) -> CompositeRisk:
        return self.compose(self.build_factors(data))

    def risk_point(
        self,
        date: datetime,
        price: float,
        fair_value: float,
        deviation: float,
        factors_or_data: Union[RiskFactorData, Sequence[RiskFactor]]
    ) -> MultiFactorRiskPoint:
        """Composite risk for one date"""
        if isinstance(factors_or_data, RiskFactorData):
            composite = self.compose_data(factors_or_data)
        else:
            composite = self.compose(factors_or_data)

        return MultiFactorRiskPoint(
            date=date,
            risk_level=composite.risk_level,
            price=price,
            fair_value=fair_value,
            deviation=deviation,
            factors=composite.factors,
            weights=composite.effective_weights,
            available_count=composite.available_count,
        )

    def regression_risk_point(
        self,
        date: datetime,
        price: float,
        data: RiskFactorData,
        regression: Optional[LogRegressionFit] = None,
        price_history: Optional[Sequence[TimeSeriesPoint]] = None,
        origin: Optional[datetime] = None
    ) -> Optional[MultiFactorRiskPoint]:
        """
        Composite risk for one date with the log-regression factor derived
        from a fair-value fit

        The fit is taken from `regression`, or fitted from `price_history`
        and `origin`. The deviation bounds come from `data.deviation_bounds`;
        `data.log_deviation` is replaced by the fitted deviation.

        Returns:
            MultiFactorRiskPoint, or None when no fit is available or the
            fair value at `date` is not positive
        """
        if regression is None and price_history is not None and origin is not None:
            regression = fit_log_regression(price_history, origin)
        if regression is None:
            self.logger.debug("No log regression available, skipping risk point")
            return None

        fair_value = regression.fair_value_at(date)
        if fair_value <= 0:
            return None

        deviation = regression.deviation_at(date, price)
        data = replace(data, log_deviation=deviation)
        return self.risk_point(date, price, fair_value, deviation, data)


__all__ = [
    "RiskFactorData",
    "validate_factor_weights",
    "redistribute_weights",
    "CompositeRisk",
    "MultiFactorRiskPoint",
    "MultiFactorRiskComposer",
]
