"""Process-local key-value store used for tests and single-process demos."""

from __future__ import annotations

import threading
import time
from typing import Callable, Dict, Optional, Tuple


class InMemoryStore:
    """Dictionary-backed store with the same contract as :class:`SQLiteStore`."""

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._items: Dict[str, Tuple[str, Optional[float]]] = {}

    def put(self, key: str, value: str, ttl_seconds: Optional[int] = None) -> None:
        if not key:
            raise ValueError("Key must be a non-empty string")
        expires_at = self._clock() + ttl_seconds if ttl_seconds else None
        with self._lock:
            self._items[key] = (value, expires_at)

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            entry = self._items.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if expires_at is not None and expires_at <= self._clock():
                del self._items[key]
                return None
            return value

    def delete(self, key: str) -> None:
        with self._lock:
            self._items.pop(key, None)

    def pop(self, key: str) -> Optional[str]:
        with self._lock:
            entry = self._items.pop(key, None)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and expires_at <= self._clock():
            return None
        return value

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._items)


__all__ = ["InMemoryStore"]
