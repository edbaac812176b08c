"""
Notification Scheduling

Detectors hand notifications to a scheduler; platform delivery is left to
the host application. The default scheduler only writes to the log.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from ..signals.metadata import REGIME_METADATA
from ..signals.types import MarketRegime

logger = logging.getLogger(__name__)

REGIME_CHANGE_CATEGORY = "REGIME_CHANGE"
EXTREME_MOVE_CATEGORY = "EXTREME_MOVE"


@dataclass(frozen=True)
class Notification:
    """Local notification request"""
    identifier: str
    title: str
    body: str
    category: str
    deliver_after: float = 1.0  # seconds


class NotificationScheduler(Protocol):
    def schedule(self, notification: Notification) -> None:
        ...


class LoggingNotificationScheduler:
    """Scheduler that records notifications in the log"""

    def __init__(self, level: int = logging.INFO):
        self.level = level

    def schedule(self, notification: Notification) -> None:
        logger.log(
            self.level,
            f"[{notification.category}] {notification.title}: {notification.body}"
        )


def build_regime_notification(
    previous: MarketRegime,
    new: MarketRegime,
    now: datetime
) -> Notification:
    """
    Notification announcing a regime transition

    Title and body describe the new regime; the identifier is unique per
    detection time (regime_change_<epoch seconds>).
    """
    meta = REGIME_METADATA[new]
    logger.debug(f"Building regime notification {previous.value} -> {new.value}")
    return Notification(
        identifier=f"regime_change_{now.timestamp()}",
        title=meta.notification_title,
        body=meta.notification_body,
        category=REGIME_CHANGE_CATEGORY,
    )


__all__ = [
    "Notification",
    "NotificationScheduler",
    "LoggingNotificationScheduler",
    "build_regime_notification",
    "REGIME_CHANGE_CATEGORY",
    "EXTREME_MOVE_CATEGORY",
]
