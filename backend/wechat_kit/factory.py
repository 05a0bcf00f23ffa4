"""Client factory wiring the credential core and the feature services."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import redis  # type: ignore[import-untyped]
from flask import Flask
from redis.exceptions import RedisError  # type: ignore[import-untyped]

from wechat_kit.core.config import BaseConfig, WeChatSettings, get_config
from wechat_kit.core.logger import configure_logging, init_app as init_logging
from wechat_kit.infra.http.requests_transport import RequestsTransport
from wechat_kit.infra.redis.redis_cache import RedisCache
from wechat_kit.services._shared.base import ServiceContext
from wechat_kit.services._shared.ports.cache import Cache, InMemoryCache
from wechat_kit.services._shared.ports.transport import Transport
from wechat_kit.services.credentials.dto import CredentialKind
from wechat_kit.services.credentials.manager import TokenCacheManager
from wechat_kit.services.credentials.store import CredentialStore
from wechat_kit.services.jssdk.service import JSSDKService
from wechat_kit.services.oauth.service import OAuthService
from wechat_kit.services.pay.service import PayService
from wechat_kit.services.template.service import TemplateService

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class WeChat:
    """
    Entry point bundling every feature service of one application.

    All services share one :class:`TokenCacheManager`, so a token refreshed by
    one feature is reused by the others.
    """

    settings: WeChatSettings
    manager: TokenCacheManager
    jssdk: JSSDKService
    pay: PayService
    oauth: OAuthService
    template: TemplateService

    @property
    def app_id(self) -> str:
        return self.settings.identity.app_id

    def get_access_token(self) -> str:
        """Return a valid application access token, even one the cache refused to store."""
        return self.manager.get_usable(CredentialKind.ACCESS_TOKEN)


def create_client(
    config: WeChatSettings | Mapping[str, Any] | type[BaseConfig] | object | None = None,
    *,
    cache: Cache | None = None,
    transport: Transport | None = None,
) -> WeChat:
    """
    Build a :class:`WeChat` client.

    :param config: Typed settings, a mapping such as Flask's ``app.config``, or
        a config class. Defaults to the class selected by ``APP_ENV``.
    :param cache: Credential cache. Defaults to a Redis cache when
        ``REDIS_URL`` is set, otherwise an in-process cache.
    :param transport: HTTP transport. Defaults to a ``requests`` session.
    :returns: Ready-to-use client.
    """
    if isinstance(config, WeChatSettings):
        settings = config
    else:
        settings = WeChatSettings.from_mapping(get_config() if config is None else config)

    if transport is None:
        transport = RequestsTransport(timeout=settings.http_timeout)
    if cache is None:
        cache = build_cache(settings.redis_url)

    store = CredentialStore(identity=settings.identity, transport=transport, api_base=settings.api_base)
    manager = TokenCacheManager(store=store, cache=cache, config=settings.cache)
    ctx = ServiceContext(
        identity=settings.identity,
        transport=transport,
        tokens=manager,
        api_base=settings.api_base,
    )
    logger.info("WeChat client created", extra={"app_id": settings.identity.app_id})
    return WeChat(
        settings=settings,
        manager=manager,
        jssdk=JSSDKService(ctx=ctx),
        pay=PayService(ctx=ctx, settings=settings.pay, pay_base=settings.pay_api_base),
        oauth=OAuthService(ctx=ctx, open_base=settings.open_base),
        template=TemplateService(ctx=ctx),
    )


def build_cache(redis_url: str | None) -> Cache:
    """
    Return a Redis cache for ``redis_url``, or an in-process cache when unset.

    :raises RuntimeError: If Redis does not answer ``PING``.
    """
    if not redis_url:
        return InMemoryCache()

    redis_client = redis.Redis.from_url(redis_url)
    try:
        redis_client.ping()
    except RedisError as exc:
        raise RuntimeError(f"Failed to connect to Redis at {redis_url!r}") from exc
    return RedisCache(redis_client)


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    cache: Cache | None = None,
    transport: Transport | None = None,
) -> Flask:
    """
    Build a minimal Flask application hosting the WeChat extension.

    Used by ``flask --app wechat_kit.factory:create_app wechat ...``; host
    applications usually call :func:`wechat_kit.core.extensions.init_app`
    from their own factory instead.
    """
    app = Flask(__name__)
    app.config.from_object(get_config() if config is None else config)

    configure_logging(
        app.config.get("LOG_LEVEL", "INFO"),
        package_level=app.config.get("WECHAT_LOG_LEVEL"),
    )
    init_logging(app)

    from wechat_kit.core import extensions

    extensions.init_app(app, cache=cache, transport=transport)
    return app
