from __future__ import annotations

import threading
import time
from collections.abc import Callable
from typing import Protocol


class Cache(Protocol):
    """
    Key/value store with TTL semantics.

    The cache is the sole authority on expiry: ``get`` MUST return ``None``
    for keys that were never set or whose TTL has elapsed. Implementations
    raise :class:`~wechat_kit.services._shared.errors.CacheError` on backend
    failures.
    """

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str, ttl: int) -> None:
        """Store ``value`` for ``ttl`` seconds. A ``ttl`` <= 0 removes any existing entry."""

    def delete(self, key: str) -> None: ...


class InMemoryCache(Cache):
    """
    Process-local cache with per-entry expiry.

    .. note::
       ``clock`` defaults to :func:`time.monotonic`; tests inject a fake clock
       to step over TTL boundaries.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: dict[str, tuple[str, float]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                return None
            return value

    def set(self, key: str, value: str, ttl: int) -> None:
        with self._lock:
            if ttl <= 0:
                self._entries.pop(key, None)
                return
            self._entries[key] = (value, self._clock() + ttl)

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)
