# tests/unit/infra/test_in_memory_cache.py
from __future__ import annotations

import pytest

from tests.helpers.utils import FakeClock
from wechat_kit.services._shared.ports.cache import InMemoryCache


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(start=0.0)


@pytest.fixture
def cache(clock) -> InMemoryCache:
    return InMemoryCache(clock=clock)


def test_get_unknown_key_returns_none(cache):
    assert cache.get("missing") is None


def test_value_is_served_until_ttl_elapses(cache, clock):
    cache.set("k", "v", 10)

    clock.advance(9)
    assert cache.get("k") == "v"

    clock.advance(1)
    assert cache.get("k") is None


def test_set_overwrites_value_and_deadline(cache, clock):
    cache.set("k", "old", 5)
    clock.advance(4)
    cache.set("k", "new", 5)

    clock.advance(4)
    assert cache.get("k") == "new"


@pytest.mark.parametrize("ttl", [0, -1])
def test_non_positive_ttl_stores_nothing(cache, ttl):
    cache.set("k", "v", 100)
    cache.set("k", "v2", ttl)

    assert cache.get("k") is None


def test_delete_is_idempotent(cache):
    cache.set("k", "v", 10)

    cache.delete("k")
    cache.delete("k")

    assert cache.get("k") is None
