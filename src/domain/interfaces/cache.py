"""Key-value cache interface."""

from abc import ABC, abstractmethod
from typing import Any, Optional


class KeyValueCache(ABC):
    """
    Small key-value store with per-entry expiry.

    Backs refresh timestamps and reminder de-duplication flags.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Return the value, or None if missing or expired."""
        ...

    @abstractmethod
    def set(self, key: str, value: Any, ttl_seconds: Optional[float] = None) -> None:
        """Store a value; ``ttl_seconds=None`` keeps it until overwritten."""
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        ...

    def contains(self, key: str) -> bool:
        return self.get(key) is not None
