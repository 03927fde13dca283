"""TTL cache owned by the services that use it."""

import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol


class Cache(Protocol):
    """Cache interface for simple key-value data."""

    def get(self, key: str) -> object | None:
        """Return a cached value if present and not expired."""

    def set(self, key: str, value: object, ttl_seconds: float) -> None:
        """Store a value for ``ttl_seconds``."""


@dataclass
class _CacheEntry:
    value: object
    expires_at: float


@dataclass
class TtlCache(Cache):
    """In-process cache; each service instance is given its own."""

    clock: Callable[[], float] = field(default=time.monotonic)
    _entries: dict[str, _CacheEntry] = field(default_factory=dict)

    def get(self, key: str) -> object | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self.clock() >= entry.expires_at:
            self._entries.pop(key, None)
            return None
        return entry.value

    def set(self, key: str, value: object, ttl_seconds: float) -> None:
        now = self.clock()
        self._prune(now)
        self._entries[key] = _CacheEntry(value=value, expires_at=now + ttl_seconds)

    def __len__(self) -> int:
        return len(self._entries)

    def _prune(self, now: float) -> None:
        expired = [key for key, entry in self._entries.items() if now >= entry.expires_at]
        for key in expired:
            del self._entries[key]
