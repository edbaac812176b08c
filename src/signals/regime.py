"""
Macro Regime Classification

Synthesizes an aggregate market regime from up to 3 macro signals:
- VIX level
- DXY % change
- M2 monthly % change

Rule (strict majority with no dissent):
1. Each indicator with data casts a BULLISH / NEUTRAL / BEARISH vote
2. Fewer than 2 indicators with data -> NO_DATA
3. >= 2 bullish and 0 bearish -> RISK_ON
4. >= 2 bearish and 0 bullish -> RISK_OFF
5. Anything else -> MIXED

A single bearish vote blocks RISK_ON even when the other two are bullish,
so the engine never issues an "all clear" on contested data.

Example:
    classify_regime(vix=16, dxy_change_percent=-0.3, m2_monthly_change=0.2)
    # bullish=2, bearish=0 -> RISK_ON

    classify_regime(vix=16, dxy_change_percent=0.5, m2_monthly_change=1.5)
    # bullish=2, bearish=1 -> MIXED
"""

from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional

from ..utils.math_utils import optional_float
from .classifier import classify_signal
from .thresholds import SIGNAL_BANDS, SignalBands
from .types import MacroIndicator, MarketRegime, Signal

MIN_SIGNALS = 2


@dataclass(frozen=True)
class MacroSnapshot:
    """Latest macro readings; None (or NaN) marks an unavailable indicator"""
    vix: Optional[float] = None
    dxy_change_percent: Optional[float] = None
    m2_monthly_change: Optional[float] = None

    def metric(self, indicator: MacroIndicator) -> Optional[float]:
        """Metric used for signals and correlation strength"""
        if indicator is MacroIndicator.VIX:
            return optional_float(self.vix)
        elif indicator is MacroIndicator.DXY:
            return optional_float(self.dxy_change_percent)
        return optional_float(self.m2_monthly_change)


@dataclass(frozen=True)
class RegimeTally:
    """Vote breakdown behind a regime classification"""
    signals: Dict[MacroIndicator, Signal] = field(default_factory=dict)
    bullish_count: int = 0
    bearish_count: int = 0
    total_signals: int = 0
    regime: MarketRegime = MarketRegime.NO_DATA


def _regime_from_counts(bullish: int, bearish: int, total: int) -> MarketRegime:
    if total < MIN_SIGNALS:
        return MarketRegime.NO_DATA
    if bullish >= 2 and bearish == 0:
        return MarketRegime.RISK_ON
    if bearish >= 2 and bullish == 0:
        return MarketRegime.RISK_OFF
    return MarketRegime.MIXED


def tally_regime_signals(
    snapshot: MacroSnapshot,
    bands: Optional[Mapping[MacroIndicator, SignalBands]] = None
) -> RegimeTally:
    """
    Count regime votes for the available indicators

    Args:
        snapshot: Latest macro readings
        bands: Custom signal bands per indicator (optional)

    Returns:
        RegimeTally with per-indicator signals (available indicators only)
    """
    band_table = dict(SIGNAL_BANDS)
    if bands:
        band_table.update(bands)

    signals: Dict[MacroIndicator, Signal] = {}
    for indicator in MacroIndicator:
        value = snapshot.metric(indicator)
        if value is None:
            continue
        signals[indicator] = classify_signal(indicator, value, band_table[indicator])

    bullish = sum(1 for s in signals.values() if s is Signal.BULLISH)
    bearish = sum(1 for s in signals.values() if s is Signal.BEARISH)
    total = len(signals)

    return RegimeTally(
        signals=signals,
        bullish_count=bullish,
        bearish_count=bearish,
        total_signals=total,
        regime=_regime_from_counts(bullish, bearish, total),
    )


def classify_regime(
    vix: Optional[float] = None,
    dxy_change_percent: Optional[float] = None,
    m2_monthly_change: Optional[float] = None
) -> MarketRegime:
    """
    Classify the aggregate macro regime

    Args:
        vix: VIX level
        dxy_change_percent: DXY % change (e.g. -0.3 for -0.3%)
        m2_monthly_change: M2 monthly % change

    Returns:
        MarketRegime
    """
    snapshot = MacroSnapshot(
        vix=vix,
        dxy_change_percent=dxy_change_percent,
        m2_monthly_change=m2_monthly_change,
    )
    return tally_regime_signals(snapshot).regime


__all__ = [
    "MacroSnapshot",
    "RegimeTally",
    "tally_regime_signals",
    "classify_regime",
    "MIN_SIGNALS",
]
