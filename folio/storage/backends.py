"""
Durable key/value storage used by the portfolio store.

Each key maps to one serialized document. Backends mimic browser storage:
string values, single-key writes, and failures when the storage is full or
disabled.
"""
import logging
import os
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Base class for storage failures."""


class StorageUnavailableError(StorageError):
    """Storage is disabled or cannot be written."""


class QuotaExceededError(StorageUnavailableError):
    """Write would exceed the storage quota."""


class CorruptedDataError(StorageError):
    """Stored bytes cannot be decoded as text."""


class KeyValueStorage(ABC):
    """String key/value storage."""

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """Return the stored value, or None if the key is absent."""

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store `value` under `key` in a single write."""

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Remove `key`; absent keys are ignored."""


class MemoryStorage(KeyValueStorage):
    """In-process storage, used for session-scoped values and tests."""

    def __init__(self, quota_bytes: Optional[int] = None):
        """Initialize empty storage.

        Args:
            quota_bytes: Optional limit on the total size of stored values
        """
        self._items: Dict[str, str] = {}
        self.quota_bytes = quota_bytes
        self.disabled = False

    def _check_enabled(self):
        if self.disabled:
            raise StorageUnavailableError("storage is disabled")

    def get_item(self, key: str) -> Optional[str]:
        self._check_enabled()
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._check_enabled()
        if self.quota_bytes is not None:
            others = sum(len(v.encode("utf-8")) for k, v in self._items.items() if k != key)
            if others + len(value.encode("utf-8")) > self.quota_bytes:
                raise QuotaExceededError(f"writing {key!r} exceeds quota of {self.quota_bytes} bytes")
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._check_enabled()
        self._items.pop(key, None)


class JsonFileStorage(KeyValueStorage):
    """Stores each key as `<key>.json` inside a directory."""

    def __init__(self, storage_dir: str = "data/active"):
        """Initialize file storage, creating the directory if needed."""
        self.storage_dir = Path(storage_dir)
        self.storage_dir.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()

    def path_for(self, key: str) -> Path:
        return self.storage_dir / f"{key}.json"

    def get_item(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        if not path.exists():
            return None
        try:
            with open(path, 'r', encoding='utf-8') as f:
                return f.read()
        except UnicodeDecodeError as e:
            raise CorruptedDataError(f"{path} is not valid UTF-8: {e}") from e
        except OSError as e:
            raise StorageUnavailableError(f"could not read {path}: {e}") from e

    def set_item(self, key: str, value: str) -> None:
        path = self.path_for(key)
        tmp = path.with_suffix(path.suffix + ".tmp")
        with self._lock:
            try:
                with open(tmp, 'w', encoding='utf-8') as f:
                    f.write(value)
                os.replace(tmp, path)
            except OSError as e:
                tmp.unlink(missing_ok=True)
                raise StorageUnavailableError(f"could not write {path}: {e}") from e
        logger.debug("Wrote %d bytes to %s", len(value), path)

    def remove_item(self, key: str) -> None:
        try:
            self.path_for(key).unlink(missing_ok=True)
        except OSError as e:
            raise StorageUnavailableError(f"could not remove {key!r}: {e}") from e
