"""JSON key-value stores backing plans, progress and profiles."""

import json
import logging
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional

from fitcoach.errors import StorageError

logger = logging.getLogger(__name__)


class StorageKeys:
    """Fixed keys collections are stored under."""

    USERS = "fitness_app_users"
    DIET_PLANS = "fitness_app_diet_plans"
    WORKOUT_PLANS = "fitness_app_workout_plans"
    PROGRESS_ENTRIES = "fitness_app_progress_entries"
    PROFILE_PREFIX = "fitness_app_profile_"

    @classmethod
    def profile(cls, uid: str) -> str:
        return f"{cls.PROFILE_PREFIX}{uid}"


class KeyValueStore(ABC):
    """
    String keys mapped to JSON-serializable values.

    Values are serialized on write and parsed on read, so callers always get
    a fresh copy and non-JSON values fail at write time.

    Callers that read a value, change it and write it back hold `lock` for
    the whole update; one store is shared by every browser session.
    """

    def __init__(self) -> None:
        self.lock = threading.RLock()

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Return the stored value or None."""

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store value under key, replacing any previous value."""

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete key; missing keys are ignored."""

    @abstractmethod
    def clear(self) -> None:
        """Delete every key."""

    @staticmethod
    def _encode(key: str, value: Any) -> str:
        try:
            return json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise StorageError(key, f"value is not JSON serializable: {e}") from e


class MemoryKeyValueStore(KeyValueStore):
    """Process-local store; also used as the per-browser-session store."""

    def __init__(self, data: Optional[Dict[str, str]] = None) -> None:
        super().__init__()
        self._data: Dict[str, str] = data if data is not None else {}

    def get(self, key: str) -> Optional[Any]:
        raw = self._data.get(key)
        return json.loads(raw) if raw is not None else None

    def set(self, key: str, value: Any) -> None:
        self._data[key] = self._encode(key, value)

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def clear(self) -> None:
        self._data.clear()


class JsonFileKeyValueStore(KeyValueStore):
    """All keys kept in one JSON document on local disk."""

    FILENAME = "fitcoach_store.json"

    def __init__(self, data_dir: str) -> None:
        super().__init__()
        self.path = Path(data_dir) / self.FILENAME

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            return json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise StorageError(str(self.path), f"corrupt store file: {e}") from e

    def _write(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")

    def get(self, key: str) -> Optional[Any]:
        return self._read().get(key)

    def set(self, key: str, value: Any) -> None:
        encoded = self._encode(key, value)
        with self.lock:
            data = self._read()
            data[key] = json.loads(encoded)
            self._write(data)
        logger.debug(f"Stored '{key}' in {self.path}")

    def remove(self, key: str) -> None:
        with self.lock:
            data = self._read()
            if key in data:
                del data[key]
                self._write(data)

    def clear(self) -> None:
        with self.lock:
            if self.path.exists():
                self.path.unlink()
