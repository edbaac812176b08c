"""
Test Suite for Market Signal Engine

Test Structure:
- Unit tests for each module (stats, signals, risk, alerts)
- Detector tests against in-memory and temporary-file storage
- Edge case validation (flat windows, missing data, storage failures)
"""

import warnings
from datetime import datetime, timedelta, timezone
from typing import Any, List

import numpy as np

from market_signals.alerts import InMemoryKeyValueStore, Notification, StorageError
from market_signals.stats import TimeSeriesPoint

# Configure test environment
warnings.filterwarnings("ignore", category=RuntimeWarning)

BASE_TIME = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)


# Test data generators
def generate_vix_history(n_points: int = 90, mean: float = 16.0, sd: float = 2.0) -> np.ndarray:
    """Generate a VIX-like level history"""
    np.random.seed(42)  # For reproducible tests
    return np.clip(np.random.normal(mean, sd, n_points), 9.0, None)


def generate_series(values, start: datetime = datetime(2024, 1, 1), step_days: int = 1) -> List[TimeSeriesPoint]:
    """Daily TimeSeriesPoints from a list of values"""
    return [
        TimeSeriesPoint(date=start + timedelta(days=i * step_days), value=float(v))
        for i, v in enumerate(values)
    ]


# Test doubles
class FakeClock:
    """Manually advanced UTC clock"""

    def __init__(self, start: datetime = BASE_TIME):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


class RecordingNotificationScheduler:
    """Collects scheduled notifications instead of delivering them"""

    def __init__(self):
        self.notifications: List[Notification] = []

    def schedule(self, notification: Notification) -> None:
        self.notifications.append(notification)


class FailingNotificationScheduler:
    def schedule(self, notification: Notification) -> None:
        raise RuntimeError("notification service unavailable")


class FlakyKeyValueStore(InMemoryKeyValueStore):
    """In-memory store whose reads and/or writes can be switched to fail"""

    def __init__(self, fail_reads: bool = False, fail_writes: bool = False, fail_write_keys=()):
        super().__init__()
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes
        self.fail_write_keys = set(fail_write_keys)

    def get(self, key: str, default: Any = None) -> Any:
        if self.fail_reads:
            raise StorageError("store unavailable")
        return super().get(key, default)

    def set(self, key: str, value: Any) -> None:
        if self.fail_writes or key in self.fail_write_keys:
            raise StorageError("store is read-only")
        super().set(key, value)

    def delete(self, key: str) -> None:
        if self.fail_writes:
            raise StorageError("store is read-only")
        super().delete(key)


# Test utilities
def assert_in_unit_interval(value: float) -> None:
    assert value is not None
    assert 0.0 <= value <= 1.0, f"{value} outside [0, 1]"


SAMPLE_VIX = generate_vix_history(90)

__all__ = [
    "BASE_TIME",
    "generate_vix_history",
    "generate_series",
    "FakeClock",
    "RecordingNotificationScheduler",
    "FailingNotificationScheduler",
    "FlakyKeyValueStore",
    "assert_in_unit_interval",
    "SAMPLE_VIX",
]
