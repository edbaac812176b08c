"""
Regime Change Detector

Tracks the aggregate market regime over time and emits one event per
genuine transition.

State machine:
    Uninitialized --(first regime)--> Tracking(regime)      no event
    Tracking(a)   --(b != a)-------> Tracking(b)            event a -> b
    Tracking(a)   --(a)------------> Tracking(a)            no-op
    any           --(NO_DATA)------> unchanged              no-op

State lives in a KeyValueStore under three keys:
    <prefix>_last_market_regime            regime value ("RISK-ON", ...)
    <prefix>_last_regime_change            ISO-8601 UTC timestamp
    <prefix>_regime_notifications_enabled  bool

All reads and writes of one check run under a single lock, so two
concurrent refreshes cannot both detect the same transition. A regime whose
write failed is remembered in memory until a later write succeeds, so a
failing store can cause a missed transition but never a repeated one.

Example:
    detector = RegimeChangeDetector(InMemoryKeyValueStore())
    detector.check_regime_change(MarketRegime.RISK_OFF)   # None (first observation)
    detector.check_regime_change(MarketRegime.RISK_OFF)   # None
    detector.check_regime_change(MarketRegime.MIXED)      # RISK_OFF -> MIXED
"""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, List, Optional, Tuple

from ..signals.types import MarketRegime
from .notifications import (
    LoggingNotificationScheduler,
    NotificationScheduler,
    build_regime_notification,
)
from .storage import KeyValueStore, StorageError

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(microsecond=0)


def parse_timestamp(value) -> Optional[datetime]:
    """ISO-8601 string -> aware datetime; None when unset or unparseable"""
    if not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class RegimeChangeState:
    """Persisted detector state"""
    last_known_regime: Optional[MarketRegime] = None
    last_regime_change: Optional[datetime] = None
    notifications_enabled: bool = True

    @property
    def is_tracking(self) -> bool:
        return self.last_known_regime is not None


@dataclass(frozen=True)
class RegimeChangeEvent:
    """A genuine regime transition"""
    previous: MarketRegime
    current: MarketRegime
    detected_at: datetime


class RegimeChangeDetector:
    """
    Persisted regime transition detector

    Failure handling:
    - Store read failure: logged, the call is treated as Uninitialized
    - Store write failure: logged, the detected event is still returned and
      the regime is kept in memory; a partial write is rolled back
    - Scheduler / listener failure: logged with traceback, ignored
    """

    def __init__(
        self,
        store: KeyValueStore,
        scheduler: Optional[NotificationScheduler] = None,
        clock: Optional[Clock] = None,
        key_prefix: str = "market_signals"
    ):
        self.store = store
        self.scheduler = scheduler or LoggingNotificationScheduler()
        self.clock = clock or utc_now
        self.key_prefix = key_prefix

        self.regime_key = f"{key_prefix}_last_market_regime"
        self.last_change_key = f"{key_prefix}_last_regime_change"
        self.notifications_key = f"{key_prefix}_regime_notifications_enabled"

        self._lock = threading.Lock()
        self._listeners: List[Callable[[RegimeChangeEvent], None]] = []
        # Accepted regime and change time not yet persisted
        self._unsaved: Optional[Tuple[MarketRegime, datetime]] = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    def _load_regime(self) -> Optional[MarketRegime]:
        value = self.store.get(self.regime_key)
        if value is None:
            return None
        try:
            regime = MarketRegime(value)
        except ValueError:
            logger.warning(f"Ignoring unrecognized stored regime: {value!r}")
            return None
        # NO_DATA is never a tracked state
        if regime is MarketRegime.NO_DATA:
            return None
        return regime

    def _store_regime(self, regime: MarketRegime, when: datetime, stored: Optional[MarketRegime]) -> None:
        """Write regime and change time together; on failure keep them in memory"""
        try:
            self.store.set(self.regime_key, regime.value)
        except StorageError as e:
            logger.error(f"Failed to persist regime {regime.value}: {e}")
            self._unsaved = (regime, when)
            return

        try:
            self.store.set(self.last_change_key, when.isoformat())
        except StorageError as e:
            logger.error(f"Failed to persist regime change time, rolling back {regime.value}: {e}")
            self._unsaved = (regime, when)
            self._rollback_regime(stored)
            return

        self._unsaved = None

    def _rollback_regime(self, stored: Optional[MarketRegime]) -> None:
        try:
            if stored is None:
                self.store.delete(self.regime_key)
            else:
                self.store.set(self.regime_key, stored.value)
        except StorageError as e:
            logger.error(f"Failed to roll back stored regime: {e}")

    def state(self) -> RegimeChangeState:
        """
        Current tracked state

        Unreadable fields read as unset. A regime whose write failed is
        reported from memory.
        """
        with self._lock:
            if self._unsaved is not None:
                regime, changed_at = self._unsaved
            else:
                try:
                    regime = self._load_regime()
                    changed_at = parse_timestamp(self.store.get(self.last_change_key))
                except StorageError as e:
                    logger.warning(f"Failed to read regime state: {e}")
                    regime, changed_at = None, None
            return RegimeChangeState(
                last_known_regime=regime,
                last_regime_change=changed_at,
                notifications_enabled=self._read_notifications_enabled(),
            )

    def _read_notifications_enabled(self) -> bool:
        try:
            value = self.store.get(self.notifications_key)
        except StorageError as e:
            logger.warning(f"Failed to read notification setting: {e}")
            return True
        return value if isinstance(value, bool) else True

    @property
    def notifications_enabled(self) -> bool:
        return self._read_notifications_enabled()

    @notifications_enabled.setter
    def notifications_enabled(self, enabled: bool) -> None:
        self.store.set(self.notifications_key, bool(enabled))

    def add_listener(self, callback: Callable[[RegimeChangeEvent], None]) -> None:
        """Register a callback invoked once per detected transition"""
        self._listeners.append(callback)

    def reset(self) -> None:
        """Forget the tracked regime; the next observation starts tracking afresh"""
        with self._lock:
            self._unsaved = None
            self.store.delete(self.regime_key)
            self.store.delete(self.last_change_key)
        logger.info("Regime change state reset")

    # ------------------------------------------------------------------
    # Detection
    # ------------------------------------------------------------------

    def check_regime_change(self, new_regime: MarketRegime) -> Optional[RegimeChangeEvent]:
        """
        Record the latest regime and detect a transition

        Args:
            new_regime: Regime from the current classification

        Returns:
            RegimeChangeEvent on a genuine transition, None otherwise
        """
        new_regime = MarketRegime(new_regime)
        if new_regime is MarketRegime.NO_DATA:
            return None

        with self._lock:
            try:
                stored = self._load_regime()
            except StorageError as e:
                logger.warning(f"Failed to read last regime, treating as uninitialized: {e}")
                stored = None

            previous = self._unsaved[0] if self._unsaved is not None else stored
            now = self.clock()

            if previous is None:
                self._store_regime(new_regime, now, stored)
                logger.info(f"Tracking market regime: {new_regime.value}")
                return None

            if previous is new_regime:
                if self._unsaved is not None:
                    # retry the pending write
                    self._store_regime(*self._unsaved, stored)
                return None

            self._store_regime(new_regime, now, stored)
            event = RegimeChangeEvent(previous=previous, current=new_regime, detected_at=now)
            notify = self._read_notifications_enabled()

        logger.info(f"Market regime changed: {previous.value} -> {new_regime.value}")

        if notify:
            self._schedule(event)
        self._dispatch(event)
        return event

    def _schedule(self, event: RegimeChangeEvent) -> None:
        try:
            notification = build_regime_notification(event.previous, event.current, event.detected_at)
            self.scheduler.schedule(notification)
        except Exception:
            logger.exception("Failed to schedule regime change notification")

    def _dispatch(self, event: RegimeChangeEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Regime change listener failed")


__all__ = [
    "RegimeChangeState",
    "RegimeChangeEvent",
    "RegimeChangeDetector",
    "utc_now",
    "parse_timestamp",
]
