# tests/unit/infra/test_redis_cache.py
"""
Unit tests for RedisCache using fakeredis.

They use fakeredis.FakeRedis so they run entirely in-memory and integrate with pytest.
"""

from __future__ import annotations

import fakeredis
import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from wechat_kit.infra.redis.redis_cache import RedisCache
from wechat_kit.services._shared.errors import CacheError


@pytest.fixture
def fake_redis():
    """Provide a fresh FakeRedis instance for each test."""
    r = fakeredis.FakeRedis()
    r.flushall()
    return r


@pytest.fixture
def cache(fake_redis):
    return RedisCache(r=fake_redis)


class BrokenRedis:
    """Client whose every call fails like a lost connection."""

    def get(self, *_args, **_kwargs):
        raise RedisConnectionError("connection refused")

    set = delete = get


def test_set_and_get_round_trip_as_text(cache):
    cache.set("access_token_wx", "T1", 60)

    assert cache.get("access_token_wx") == "T1"


def test_set_uses_redis_expiry(cache, fake_redis):
    cache.set("access_token_wx", "T1", 5700)

    assert 0 < fake_redis.ttl("wechat:access_token_wx") <= 5700


def test_keys_are_namespaced(fake_redis):
    RedisCache(r=fake_redis, namespace="app1:").set("k", "v", 60)

    assert fake_redis.get("app1:k") == b"v"


def test_non_positive_ttl_is_not_stored(cache, fake_redis):
    cache.set("k", "v", 0)

    assert fake_redis.exists("wechat:k") == 0


def test_non_positive_ttl_removes_existing_key(cache, fake_redis):
    cache.set("k", "v", 60)
    cache.set("k", "v2", 0)

    assert cache.get("k") is None
    assert fake_redis.exists("wechat:k") == 0


def test_missing_key_returns_none(cache):
    assert cache.get("missing") is None


def test_delete_removes_key(cache):
    cache.set("k", "v", 60)
    cache.delete("k")

    assert cache.get("k") is None


@pytest.mark.parametrize(
    ("operation", "call"),
    [
        ("get", lambda c: c.get("k")),
        ("set", lambda c: c.set("k", "v", 60)),
        ("set", lambda c: c.set("k", "v", 0)),
        ("delete", lambda c: c.delete("k")),
    ],
)
def test_redis_errors_become_cache_errors(operation, call):
    cache = RedisCache(r=BrokenRedis())

    with pytest.raises(CacheError) as excinfo:
        call(cache)

    assert excinfo.value.operation == operation
    assert excinfo.value.key == "k"
