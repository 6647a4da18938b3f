"""Cache implementations."""

from .memory import InMemoryTTLCache

__all__ = ["InMemoryTTLCache"]
