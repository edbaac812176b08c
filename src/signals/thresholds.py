"""
Indicator Threshold Tables

Two independent sets of bands per indicator:
- Correlation strength tiers (magnitude of level / % change)
- Regime signal bands (bullish / neutral / bearish vote)

These are policy, not mathematics. Do not derive one from the other:
VIX 20 is a MODERATE correlation tier but a NEUTRAL regime vote.

Correlation strength (value > threshold moves up a tier):
    Indicator  Metric                  moderate  strong  very_strong
    VIX        level                   18        25      30
    DXY        abs(% change)           0.2       0.5     0.8
    M2         abs(monthly % change)   0.5       1.0     2.0

Regime signal bands:
    VIX   level < 18 bullish,          level > 25 bearish
    DXY   change < -0.2 bullish,       change > 0.2 bearish
    M2    monthly > 0.5 bullish,       monthly < -0.5 bearish
"""

import math
from dataclasses import dataclass
from typing import Dict

from .types import MacroIndicator


@dataclass(frozen=True)
class CorrelationThresholds:
    """Tier boundaries for correlation strength (strictly increasing)"""
    moderate: float
    strong: float
    very_strong: float

    def __post_init__(self):
        values = (self.moderate, self.strong, self.very_strong)
        if not all(math.isfinite(v) for v in values):
            raise ValueError(f"Correlation thresholds must be finite: {values}")
        if not (self.moderate < self.strong < self.very_strong):
            raise ValueError(
                f"Correlation thresholds must be strictly increasing: "
                f"moderate={self.moderate}, strong={self.strong}, very_strong={self.very_strong}"
            )


@dataclass(frozen=True)
class SignalBands:
    """
    Bullish / bearish cut-offs for a regime vote

    higher_is_bullish=False: value < bullish -> BULLISH, value > bearish -> BEARISH
    higher_is_bullish=True:  value > bullish -> BULLISH, value < bearish -> BEARISH
    """
    bullish: float
    bearish: float
    higher_is_bullish: bool = False

    def __post_init__(self):
        if self.higher_is_bullish and not self.bearish < self.bullish:
            raise ValueError(f"Bearish band must lie below bullish band: {self}")
        if not self.higher_is_bullish and not self.bullish < self.bearish:
            raise ValueError(f"Bullish band must lie below bearish band: {self}")


CORRELATION_THRESHOLDS: Dict[MacroIndicator, CorrelationThresholds] = {
    MacroIndicator.VIX: CorrelationThresholds(moderate=18.0, strong=25.0, very_strong=30.0),
    MacroIndicator.DXY: CorrelationThresholds(moderate=0.2, strong=0.5, very_strong=0.8),
    MacroIndicator.M2: CorrelationThresholds(moderate=0.5, strong=1.0, very_strong=2.0),
}

SIGNAL_BANDS: Dict[MacroIndicator, SignalBands] = {
    MacroIndicator.VIX: SignalBands(bullish=18.0, bearish=25.0, higher_is_bullish=False),
    MacroIndicator.DXY: SignalBands(bullish=-0.2, bearish=0.2, higher_is_bullish=False),
    MacroIndicator.M2: SignalBands(bullish=0.5, bearish=-0.5, higher_is_bullish=True),
}

# Qualitative reading bands (widget labels)
VIX_READING_BANDS = (15.0, 20.0, 25.0)        # low | normal | elevated | high
DXY_READING_BAND = 0.3                         # weak < -0.3 | stable | strong > 0.3
M2_READING_BANDS = (-1.0, 0.0, 1.0)            # contracting | flat | growing | expanding

# Composite risk category cut-offs
RISK_CATEGORY_BANDS = (0.20, 0.40, 0.55, 0.70, 0.90)


__all__ = [
    "CorrelationThresholds",
    "SignalBands",
    "CORRELATION_THRESHOLDS",
    "SIGNAL_BANDS",
    "VIX_READING_BANDS",
    "DXY_READING_BAND",
    "M2_READING_BANDS",
    "RISK_CATEGORY_BANDS",
]
