"""
Risk Factor Definitions

Six independently scored factors feed the composite risk level. Each factor
carries its raw value, its normalized value in [0, 1] (1.0 = highest risk)
and its nominal weight. A factor without data stays in the list as
unavailable so its weight can be redistributed.

Canonical weights (sum to 1.0):
    logRegression  0.40
    rsi            0.15
    smaPosition    0.15
    fundingRate    0.10
    fearGreed      0.10
    macroRisk      0.10
"""

import math
from dataclasses import asdict, dataclass, fields
from enum import Enum
from typing import ClassVar, Dict, Mapping, Optional

WEIGHT_TOLERANCE = 1e-3


class WeightConfigurationError(ValueError):
    """Raised when a weight configuration is malformed"""


class RiskFactorType(Enum):
    """Factors of the multi-factor risk model"""
    LOG_REGRESSION = "log_regression"
    RSI = "rsi"
    SMA_POSITION = "sma_position"
    FUNDING_RATE = "funding_rate"
    FEAR_GREED = "fear_greed"
    MACRO_RISK = "macro_risk"


@dataclass(frozen=True)
class RiskFactorWeights:
    """
    Nominal factor weights

    Validated at construction: every weight in [0, 1] and the total equal to
    1.0 (within 1e-3). Malformed configurations fail fast instead of being
    silently renormalized.
    """
    log_regression: float
    rsi: float
    sma_position: float
    funding_rate: float
    fear_greed: float
    macro_risk: float

    DEFAULT: ClassVar["RiskFactorWeights"]
    CONSERVATIVE: ClassVar["RiskFactorWeights"]
    SENTIMENT_FOCUSED: ClassVar["RiskFactorWeights"]

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise WeightConfigurationError(f"Weight '{f.name}' must be a number, got {value!r}")
            if not math.isfinite(value) or value < 0.0 or value > 1.0:
                raise WeightConfigurationError(f"Weight '{f.name}' must be within [0, 1], got {value}")

        if abs(self.total - 1.0) > WEIGHT_TOLERANCE:
            raise WeightConfigurationError(f"Weights must sum to 1.0, got {self.total:.4f}")

    @property
    def total(self) -> float:
        return float(sum(getattr(self, f.name) for f in fields(self)))

    def weight_for(self, factor_type: RiskFactorType) -> float:
        return float(getattr(self, factor_type.value))

    def as_dict(self) -> Dict[RiskFactorType, float]:
        return {factor_type: self.weight_for(factor_type) for factor_type in RiskFactorType}

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, float]) -> "RiskFactorWeights":
        """
        Load weights from a configuration mapping

        Keys are factor names ('log_regression', 'rsi', ...). Every factor must
        be present; unknown keys are rejected.

        Raises:
            WeightConfigurationError: on unknown/missing keys or invalid values
        """
        expected = {factor_type.value for factor_type in RiskFactorType}
        keys = set(mapping)

        unknown = keys - expected
        if unknown:
            raise WeightConfigurationError(f"Unknown risk factors in weight configuration: {sorted(unknown)}")

        missing = expected - keys
        if missing:
            raise WeightConfigurationError(f"Missing risk factors in weight configuration: {sorted(missing)}")

        return cls(**{key: mapping[key] for key in expected})

    def to_mapping(self) -> Dict[str, float]:
        return asdict(self)


RiskFactorWeights.DEFAULT = RiskFactorWeights(
    log_regression=0.40,
    rsi=0.15,
    sma_position=0.15,
    funding_rate=0.10,
    fear_greed=0.10,
    macro_risk=0.10,
)

# More emphasis on regression
RiskFactorWeights.CONSERVATIVE = RiskFactorWeights(
    log_regression=0.55,
    rsi=0.10,
    sma_position=0.15,
    funding_rate=0.08,
    fear_greed=0.06,
    macro_risk=0.06,
)

RiskFactorWeights.SENTIMENT_FOCUSED = RiskFactorWeights(
    log_regression=0.30,
    rsi=0.12,
    sma_position=0.18,
    funding_rate=0.15,
    fear_greed=0.15,
    macro_risk=0.10,
)


@dataclass(frozen=True)
class RiskFactor:
    """Single risk factor with raw and normalized values"""
    type: RiskFactorType
    raw_value: Optional[float]
    normalized_value: Optional[float]
    weight: float

    def __post_init__(self):
        if self.normalized_value is not None:
            if not (0.0 <= self.normalized_value <= 1.0):
                raise ValueError(
                    f"{self.type.value}: normalized value must be within [0, 1], got {self.normalized_value}"
                )
        if not math.isfinite(self.weight) or self.weight < 0.0:
            raise ValueError(f"{self.type.value}: weight must be non-negative, got {self.weight}")

    @property
    def is_available(self) -> bool:
        return self.normalized_value is not None

    @property
    def weighted_contribution(self) -> Optional[float]:
        """normalized_value * weight, None when unavailable"""
        if self.normalized_value is None:
            return None
        return self.normalized_value * self.weight

    @classmethod
    def unavailable(cls, factor_type: RiskFactorType, weight: float) -> "RiskFactor":
        return cls(type=factor_type, raw_value=None, normalized_value=None, weight=weight)


__all__ = [
    "WEIGHT_TOLERANCE",
    "WeightConfigurationError",
    "RiskFactorType",
    "RiskFactorWeights",
    "RiskFactor",
]
