"""Pytest fixtures wiring the credential core to in-memory doubles.

No test talks to the network or to a real Redis: HTTP goes through
:class:`StubTransport` (or ``responses`` for the requests adapter) and the
cache is :class:`InMemoryCache` (or ``fakeredis`` for the Redis adapter).
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest
from flask import Flask

from tests.helpers.payloads import API_BASE, TOKEN_URL, json_body
from tests.helpers.utils import FakeClock
from wechat_kit.core.extensions import init_app as init_wechat
from wechat_kit.services._shared.base import ServiceContext
from wechat_kit.services._shared.dto import AppIdentity
from wechat_kit.services._shared.ports.cache import InMemoryCache
from wechat_kit.services._shared.ports.transport import StubTransport
from wechat_kit.services.credentials.manager import TokenCacheManager
from wechat_kit.services.credentials.store import CredentialStore


class TestConfig:
    """Testing configuration for the Flask host.

    Notes
    -----
    - Never connects to Redis.
    - Points every endpoint at a fake host served by the stub transport.
    """

    TESTING = True
    DEBUG = False
    WECHAT_APP_ID = "wx-app"
    WECHAT_APP_SECRET = "app-secret"
    WECHAT_API_BASE = API_BASE
    WECHAT_PAY_MCH_ID = "mch-1"
    WECHAT_PAY_KEY = "pay-key"
    WECHAT_PAY_NOTIFY_URL = "https://shop.test/notify"
    REDIS_URL = None


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def identity() -> AppIdentity:
    return AppIdentity(app_id="wx-app", app_secret="app-secret")


@pytest.fixture()
def transport() -> StubTransport:
    """Stub transport with no responses queued."""
    return StubTransport()


@pytest.fixture()
def cache(clock: FakeClock) -> InMemoryCache:
    return InMemoryCache(clock=clock)


@pytest.fixture()
def store(identity: AppIdentity, transport: StubTransport) -> CredentialStore:
    return CredentialStore(identity=identity, transport=transport, api_base=API_BASE)


@pytest.fixture()
def manager(store: CredentialStore, cache: InMemoryCache) -> TokenCacheManager:
    return TokenCacheManager(store=store, cache=cache)


@pytest.fixture()
def ctx(identity: AppIdentity, transport: StubTransport, manager: TokenCacheManager) -> ServiceContext:
    return ServiceContext(identity=identity, transport=transport, tokens=manager, api_base=API_BASE)


@pytest.fixture()
def token_ok(transport: StubTransport) -> Callable[..., None]:
    """Queue access-token replies: ``token_ok("T1", "T2", expires_in=7200)``."""

    def _queue(*tokens: str, expires_in: int | None = 7200) -> None:
        transport.queue(
            TOKEN_URL,
            *(json_body(access_token=t, expires_in=expires_in) for t in tokens),
        )

    return _queue


@pytest.fixture()
def app(transport: StubTransport) -> Flask:
    """Flask host with the WeChat extension wired to the stub transport."""
    application = Flask(__name__)
    application.config.from_object(TestConfig)
    init_wechat(application, cache=InMemoryCache(), transport=transport)
    return application


@pytest.fixture()
def freeze_time() -> Callable[[str | None], Any]:
    """Factory returning :func:`freezegun.freeze_time`.

    Examples
    --------
    >>> def test_with_frozen_time(freeze_time):
    ...     with freeze_time("2024-01-01"):
    ...         ...
    """

    from freezegun import freeze_time as _freeze_time

    def _factory(target: str | None = None) -> Any:
        return _freeze_time(target or "2024-01-01")

    return _factory
