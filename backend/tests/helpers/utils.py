"""Tiny helpers shared across test modules."""

from __future__ import annotations

from wechat_kit.services._shared.errors import CacheError
from wechat_kit.services._shared.ports.cache import InMemoryCache


class FakeClock:
    """Clock advanced by hand, injectable wherever a ``time.monotonic``-like callable is expected.

    Parameters
    ----------
    start: float
        Initial reading.
    """

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FailingCache(InMemoryCache):
    """In-memory cache whose listed operations raise :class:`CacheError`.

    Parameters
    ----------
    fail: tuple[str, ...]
        Operations to break, among ``"get"``, ``"set"`` and ``"delete"``.
    """

    def __init__(self, *fail: str) -> None:
        super().__init__()
        self.fail = set(fail)

    def _check(self, operation: str, key: str) -> None:
        if operation in self.fail:
            raise CacheError("backend down", key=key, operation=operation)

    def get(self, key: str) -> str | None:
        self._check("get", key)
        return super().get(key)

    def set(self, key: str, value: str, ttl: int) -> None:
        self._check("set", key)
        super().set(key, value, ttl)

    def delete(self, key: str) -> None:
        self._check("delete", key)
        super().delete(key)
