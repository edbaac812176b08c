"""
Extreme Move Detector

Alerts when a macro indicator's z-score reaches the significant (|z| >= 2)
or extreme (|z| >= 3) band.

Rules:
- EXTREME readings alert when extreme alerts are enabled (default on)
- SIGNIFICANT readings alert when significant alerts are enabled (default off)
- One alert per (indicator, direction) per cooldown period (default 4h)
- Alerts are kept in a history, newest first, capped at max_history and
  pruned after the retention period (default 30 days)
"""

import logging
import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, List, Mapping, Optional

from ..signals.classifier import classify_zscore_implication
from ..signals.metadata import IMPLICATION_METADATA
from ..signals.types import MacroIndicator, MarketImplication
from ..stats.summary import ExtremeDirection, StatisticalSummary, ZScoreSeverity
from .notifications import (
    EXTREME_MOVE_CATEGORY,
    LoggingNotificationScheduler,
    Notification,
    NotificationScheduler,
)
from .regime_detector import Clock, parse_timestamp, utc_now
from .storage import KeyValueStore, StorageError

logger = logging.getLogger(__name__)

DEFAULT_COOLDOWN = timedelta(hours=4)
DEFAULT_RETENTION = timedelta(days=30)
DEFAULT_MAX_HISTORY = 50


def format_indicator_value(indicator: MacroIndicator, value: float) -> str:
    if indicator is MacroIndicator.VIX:
        return f"{value:.1f}"
    if indicator is MacroIndicator.DXY:
        return f"{value:.2f}"
    if value >= 1e12:
        return f"${value / 1e12:.1f}T"
    if value >= 1e9:
        return f"${value / 1e9:.1f}B"
    return f"${value:.0f}"


@dataclass(frozen=True)
class ExtremeMove:
    """A detected significant or extreme z-score reading"""
    indicator: MacroIndicator
    z_score: float
    current_value: float
    direction: ExtremeDirection
    severity: ZScoreSeverity
    implication: MarketImplication
    detected_at: datetime
    rarity: Optional[int] = None
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @property
    def formatted_z_score(self) -> str:
        return f"{self.z_score:+.1f}σ"

    @property
    def notification_title(self) -> str:
        severity_text = "Extreme" if self.severity is ZScoreSeverity.EXTREME else "Significant"
        return f"{severity_text} Move: {self.indicator.value} {self.formatted_z_score}"

    @property
    def notification_body(self) -> str:
        value_text = format_indicator_value(self.indicator, self.current_value)
        rarity_text = f" (1 in {self.rarity} occurrence)" if self.rarity else ""
        implication = IMPLICATION_METADATA[self.implication].description
        return f"{self.indicator.value} at {value_text}{rarity_text}. {implication}."

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "indicator": self.indicator.value,
            "z_score": self.z_score,
            "current_value": self.current_value,
            "direction": self.direction.value,
            "severity": self.severity.value,
            "implication": self.implication.value,
            "detected_at": self.detected_at.isoformat(),
            "rarity": self.rarity,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ExtremeMove":
        """
        Rebuild from to_dict() output

        Raises:
            ValueError: if a field is missing or cannot be parsed
        """
        try:
            detected_at = parse_timestamp(data["detected_at"])
            if detected_at is None:
                raise ValueError(f"Invalid timestamp: {data['detected_at']!r}")
            return cls(
                id=str(data["id"]),
                indicator=MacroIndicator(data["indicator"]),
                z_score=float(data["z_score"]),
                current_value=float(data["current_value"]),
                direction=ExtremeDirection(data["direction"]),
                severity=ZScoreSeverity(data["severity"]),
                implication=MarketImplication(data["implication"]),
                detected_at=detected_at,
                rarity=data.get("rarity"),
            )
        except (KeyError, TypeError) as e:
            raise ValueError(f"Malformed extreme move record: {e}") from e


class ExtremeMoveDetector:
    """
    Cooldown-limited extreme move alerts

    Uses the same storage failure handling as RegimeChangeDetector. Failed
    reads fall back to empty state. Failed writes are logged and the alert is
    still returned, with the cooldown kept in memory.
    """

    def __init__(
        self,
        store: KeyValueStore,
        scheduler: Optional[NotificationScheduler] = None,
        clock: Optional[Clock] = None,
        cooldown: timedelta = DEFAULT_COOLDOWN,
        max_history: int = DEFAULT_MAX_HISTORY,
        retention: timedelta = DEFAULT_RETENTION,
        key_prefix: str = "market_signals"
    ):
        if max_history < 1:
            raise ValueError(f"max_history must be >= 1, got {max_history}")

        self.store = store
        self.scheduler = scheduler or LoggingNotificationScheduler()
        self.clock = clock or utc_now
        self.cooldown = cooldown
        self.max_history = max_history
        self.retention = retention

        self.history_key = f"{key_prefix}_extreme_move_history"
        self.last_alert_times_key = f"{key_prefix}_extreme_move_last_alert_times"
        self.extreme_enabled_key = f"{key_prefix}_extreme_alerts_enabled"
        self.significant_enabled_key = f"{key_prefix}_significant_alerts_enabled"

        self._lock = threading.Lock()
        # Cooldowns also held in memory so a failing store cannot repeat alerts
        self._alert_times: Dict[str, datetime] = {}

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    def _read_flag(self, key: str, default: bool) -> bool:
        try:
            value = self.store.get(key)
        except StorageError as e:
            logger.warning(f"Failed to read setting {key}: {e}")
            return default
        return value if isinstance(value, bool) else default

    @property
    def extreme_alerts_enabled(self) -> bool:
        return self._read_flag(self.extreme_enabled_key, True)

    @extreme_alerts_enabled.setter
    def extreme_alerts_enabled(self, enabled: bool) -> None:
        self.store.set(self.extreme_enabled_key, bool(enabled))

    @property
    def significant_alerts_enabled(self) -> bool:
        return self._read_flag(self.significant_enabled_key, False)

    @significant_alerts_enabled.setter
    def significant_alerts_enabled(self, enabled: bool) -> None:
        self.store.set(self.significant_enabled_key, bool(enabled))

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def _load_history(self) -> List[ExtremeMove]:
        try:
            records = self.store.get(self.history_key) or []
        except StorageError as e:
            logger.warning(f"Failed to read extreme move history: {e}")
            return []

        moves = []
        for record in records if isinstance(records, list) else []:
            try:
                moves.append(ExtremeMove.from_dict(record))
            except ValueError as e:
                logger.warning(f"Dropping unreadable extreme move record: {e}")
        return sorted(moves, key=lambda m: m.detected_at, reverse=True)

    def history(self) -> List[ExtremeMove]:
        """Recorded alerts, newest first"""
        with self._lock:
            return self._load_history()

    def clear_history(self) -> None:
        with self._lock:
            self.store.delete(self.history_key)

    def _record(self, move: ExtremeMove, now: datetime) -> None:
        cutoff = now - self.retention
        history = [m for m in self._load_history() if m.detected_at > cutoff]
        history.insert(0, move)
        history = history[:self.max_history]
        try:
            self.store.set(self.history_key, [m.to_dict() for m in history])
        except StorageError as e:
            logger.error(f"Failed to persist extreme move history: {e}")

    # ------------------------------------------------------------------
    # Cooldown
    # ------------------------------------------------------------------

    @staticmethod
    def _cooldown_key(indicator: MacroIndicator, direction: ExtremeDirection) -> str:
        return f"{indicator.value}_{direction.value}"

    def _load_alert_times(self) -> Dict[str, str]:
        try:
            times = self.store.get(self.last_alert_times_key) or {}
        except StorageError as e:
            logger.warning(f"Failed to read alert cooldowns: {e}")
            return {}
        return times if isinstance(times, dict) else {}

    def _in_cooldown(self, alert_times: Dict[str, str], key: str, now: datetime) -> bool:
        last = parse_timestamp(alert_times.get(key))
        remembered = self._alert_times.get(key)
        if remembered is not None and (last is None or remembered > last):
            last = remembered
        if last is None:
            return False
        return now - last < self.cooldown

    # ------------------------------------------------------------------
    # Detection
    # ------------------------------------------------------------------

    def check(self, indicator: MacroIndicator, summary: StatisticalSummary) -> Optional[ExtremeMove]:
        """
        Check one indicator's summary for an alert-worthy move

        Returns:
            ExtremeMove when an alert fired, None otherwise
        """
        severity = summary.severity
        if severity is ZScoreSeverity.EXTREME:
            should_alert = self.extreme_alerts_enabled
        elif severity is ZScoreSeverity.SIGNIFICANT:
            should_alert = self.significant_alerts_enabled
        else:
            return None

        if not should_alert:
            return None

        direction = summary.direction
        key = self._cooldown_key(indicator, direction)

        with self._lock:
            now = self.clock()
            alert_times = self._load_alert_times()
            if self._in_cooldown(alert_times, key, now):
                logger.info(f"Skipping alert for {indicator.value} - in cooldown")
                return None

            move = ExtremeMove(
                indicator=indicator,
                z_score=summary.z_score,
                current_value=summary.current_value,
                direction=direction,
                severity=severity,
                implication=classify_zscore_implication(indicator, summary.z_score),
                detected_at=now,
                rarity=summary.rarity,
            )

            self._record(move, now)
            self._alert_times[key] = now
            alert_times[key] = now.isoformat()
            try:
                self.store.set(self.last_alert_times_key, alert_times)
            except StorageError as e:
                logger.error(f"Failed to persist alert cooldown: {e}")

        self._schedule(move)
        logger.info(f"Extreme move alert triggered for {indicator.value}: {move.formatted_z_score}")
        return move

    def check_all(self, summaries: Mapping[MacroIndicator, StatisticalSummary]) -> List[ExtremeMove]:
        """Check every indicator; returns the alerts that fired"""
        moves = []
        for indicator, summary in summaries.items():
            move = self.check(indicator, summary)
            if move is not None:
                moves.append(move)
        return moves

    def _schedule(self, move: ExtremeMove) -> None:
        notification = Notification(
            identifier=f"extreme_move_{move.id}",
            title=move.notification_title,
            body=move.notification_body,
            category=EXTREME_MOVE_CATEGORY,
        )
        try:
            self.scheduler.schedule(notification)
        except Exception:
            logger.exception("Failed to schedule extreme move notification")


__all__ = [
    "ExtremeMove",
    "ExtremeMoveDetector",
    "format_indicator_value",
    "DEFAULT_COOLDOWN",
    "DEFAULT_MAX_HISTORY",
]
