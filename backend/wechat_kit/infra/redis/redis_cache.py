from __future__ import annotations

from typing import cast

import redis  # type: ignore[import-untyped]
from redis.exceptions import RedisError  # type: ignore[import-untyped]

from wechat_kit.services._shared.errors import CacheError


class RedisCache:
    """
    Credential cache backed by Redis.

    Expiry is delegated to Redis (``SET ... EX``), so every process sharing the
    instance sees the same credential and the same deadline.
    """

    def __init__(self, r: redis.Redis, *, namespace: str = "wechat:"):
        self.r = r
        self.namespace = namespace

    def _k(self, key: str) -> str:
        return f"{self.namespace}{key}"

    def get(self, key: str) -> str | None:
        try:
            raw = self.r.get(self._k(key))
        except RedisError as exc:
            raise CacheError(f"Redis GET failed: {exc}", key=key, operation="get") from exc
        if raw is None:
            return None
        return raw.decode("utf-8") if isinstance(raw, bytes) else cast(str, raw)

    def set(self, key: str, value: str, ttl: int) -> None:
        """Store ``value`` for ``ttl`` seconds; a non-positive ``ttl`` removes the key."""
        try:
            if ttl <= 0:
                self.r.delete(self._k(key))
            else:
                self.r.set(self._k(key), value, ex=int(ttl))
        except RedisError as exc:
            raise CacheError(f"Redis SET failed: {exc}", key=key, operation="set") from exc

    def delete(self, key: str) -> None:
        try:
            self.r.delete(self._k(key))
        except RedisError as exc:
            raise CacheError(f"Redis DEL failed: {exc}", key=key, operation="delete") from exc
