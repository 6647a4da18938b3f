"""In-process key-value cache with per-entry expiry."""

import time
from typing import Any, Callable, Dict, Optional, Tuple

from src.domain.interfaces import KeyValueCache


class InMemoryTTLCache(KeyValueCache):
    """
    Dictionary-backed KeyValueCache.

    Expired entries are dropped lazily on read. ``clock`` defaults to
    ``time.monotonic`` and can be replaced in tests.
    """

    def __init__(self, clock: Callable[[], float] | None = None):
        self._clock = clock or time.monotonic
        self._entries: Dict[str, Tuple[Any, Optional[float]]] = {}

    def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None

        value, expires_at = entry
        if expires_at is not None and self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    def set(self, key: str, value: Any, ttl_seconds: Optional[float] = None) -> None:
        expires_at = None if ttl_seconds is None else self._clock() + ttl_seconds
        self._entries[key] = (value, expires_at)

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def __len__(self) -> int:
        return len(self._entries)
