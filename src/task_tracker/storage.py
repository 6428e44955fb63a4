from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from threading import RLock
from typing import Dict, Optional

from .settings import get_settings

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """A storage provider could not complete a read or write."""


class StorageQuotaExceeded(StorageError):
    """A write would take the provider past its configured byte quota."""


# PUBLIC_INTERFACE
class KeyValueStorage(ABC):
    """Abstract contract for durable local key-value storage."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the stored string for key, or None if absent."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store value under key. Raise StorageError if the write fails."""

    @property
    def name(self) -> str:
        return "custom"


class InMemoryStorage(KeyValueStorage):
    """
    Thread-safe in-memory storage suitable for testing and default runtime.

    An optional byte quota (UTF-8 size of all keys and values) makes writes
    fail the way browser local storage does when it fills up.
    """

    def __init__(self, quota_bytes: Optional[int] = None) -> None:
        self._lock = RLock()
        self._items: Dict[str, str] = {}
        self._quota_bytes = quota_bytes

    @property
    def name(self) -> str:
        return "memory"

    def _size_with(self, key: str, value: str) -> int:
        size = 0
        for k, v in self._items.items():
            if k == key:
                continue
            size += len(k.encode("utf-8")) + len(v.encode("utf-8"))
        return size + len(key.encode("utf-8")) + len(value.encode("utf-8"))

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._items.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            if self._quota_bytes is not None:
                needed = self._size_with(key, value)
                if needed > self._quota_bytes:
                    raise StorageQuotaExceeded(
                        f"writing {key!r} needs {needed} bytes, quota is {self._quota_bytes}"
                    )
            self._items[key] = value


# PUBLIC_INTERFACE
def get_storage() -> KeyValueStorage:
    """
    Factory to return the configured storage provider based on settings.
    - memory: InMemoryStorage (honours STORAGE_QUOTA_BYTES)
    - sqlite: SQLiteStorage, or InMemoryStorage if the database cannot be opened
    """
    settings = get_settings()
    if settings.persistence_backend == "sqlite":
        from .db import SQLiteStorage

        try:
            return SQLiteStorage(settings.sqlite_db_path)
        except StorageError:
            logger.exception("Falling back to in-memory storage")
    return InMemoryStorage(quota_bytes=settings.storage_quota_bytes)
