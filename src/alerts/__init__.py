"""
Regime Change & Extreme Move Alerts

Persisted detectors that turn classifier output into change events and
notifications.

Architecture:
- storage.py: KeyValueStore protocol, in-memory and JSON file backends
- notifications.py: Notification, scheduler protocol, logging scheduler
- regime_detector.py: Regime transition state machine
- extreme_moves.py: Cooldown-limited z-score alerts

Usage:
    from market_signals.alerts import JsonFileKeyValueStore, RegimeChangeDetector

    detector = RegimeChangeDetector(JsonFileKeyValueStore.default())
    event = detector.check_regime_change(regime)
    if event:
        print(f"{event.previous.value} -> {event.current.value}")
"""

from .storage import (
    StorageError,
    KeyValueStore,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
)

from .notifications import (
    Notification,
    NotificationScheduler,
    LoggingNotificationScheduler,
    build_regime_notification,
)

from .regime_detector import (
    RegimeChangeState,
    RegimeChangeEvent,
    RegimeChangeDetector,
)

from .extreme_moves import (
    ExtremeMove,
    ExtremeMoveDetector,
)

__all__ = [
    # Storage
    "StorageError",
    "KeyValueStore",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",

    # Notifications
    "Notification",
    "NotificationScheduler",
    "LoggingNotificationScheduler",
    "build_regime_notification",

    # Detectors
    "RegimeChangeState",
    "RegimeChangeEvent",
    "RegimeChangeDetector",
    "ExtremeMove",
    "ExtremeMoveDetector",
]
