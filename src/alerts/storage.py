"""
Key-Value State Storage

Detectors persist their state through a minimal key-value interface so the
backing store can be swapped (in-memory for tests, a JSON file for a
long-running process). Every backend failure surfaces as StorageError.
"""

import copy
import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Dict, Optional, Protocol, Union

logger = logging.getLogger(__name__)

STATE_PATH_ENV = "MARKET_SIGNALS_STATE_PATH"
DEFAULT_STATE_FILE = "market_signals_state.json"


class StorageError(RuntimeError):
    """Raised when the backing store cannot be read or written"""


class KeyValueStore(Protocol):
    """Persistent key-value storage for detector state"""

    def get(self, key: str, default: Any = None) -> Any:
        ...

    def set(self, key: str, value: Any) -> None:
        ...

    def delete(self, key: str) -> None:
        ...

    def snapshot(self) -> Dict[str, Any]:
        ...


class InMemoryKeyValueStore:
    """Dict-backed store; state lives as long as the instance"""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = dict(initial or {})

    def get(self, key: str, default: Any = None) -> Any:
        return copy.deepcopy(self._data.get(key, default))

    def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def snapshot(self) -> Dict[str, Any]:
        return copy.deepcopy(self._data)


class JsonFileKeyValueStore:
    """
    Flat JSON mapping on disk

    Reads treat a missing file as empty. Writes go through a temporary file
    in the same directory followed by os.replace, so a crash mid-write never
    leaves a truncated state file behind.

    Example:
        store = JsonFileKeyValueStore("state.json")
        store.set("market_signals_last_market_regime", "RISK-ON")
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._lock = threading.Lock()

    @classmethod
    def default(cls) -> "JsonFileKeyValueStore":
        """Store at $MARKET_SIGNALS_STATE_PATH, or ./market_signals_state.json"""
        return cls(os.getenv(STATE_PATH_ENV, DEFAULT_STATE_FILE))

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise StorageError(f"Failed to read state from {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StorageError(f"State file {self.path} does not contain a JSON object")
        return data

    def _write(self, data: Dict[str, Any]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, indent=2, sort_keys=True)
                os.replace(tmp_name, self.path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except (OSError, TypeError, ValueError) as e:
            raise StorageError(f"Failed to write state to {self.path}: {e}") from e

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._read().get(key, default)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            data = self._read()
            data[key] = value
            self._write(data)

    def delete(self, key: str) -> None:
        with self._lock:
            data = self._read()
            if key in data:
                del data[key]
                self._write(data)

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            return self._read()


__all__ = [
    "StorageError",
    "KeyValueStore",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "STATE_PATH_ENV",
]
