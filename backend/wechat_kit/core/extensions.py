"""Flask extension wiring the WeChat client into a host application."""

from __future__ import annotations

from flask import Flask, current_app

from wechat_kit.core.config import WeChatSettings
from wechat_kit.factory import WeChat, create_client
from wechat_kit.services._shared.ports.cache import Cache
from wechat_kit.services._shared.ports.transport import Transport

EXTENSION_KEY = "wechat"


def init_app(
    app: Flask,
    *,
    cache: Cache | None = None,
    transport: Transport | None = None,
) -> WeChat:
    """Build the WeChat client from ``app.config`` and register it.

    Parameters
    ----------
    app: flask.Flask
        Host application. ``WECHAT_*`` settings and ``REDIS_URL`` are read from
        its config.
    cache: Cache, optional
        Overrides the cache built from ``REDIS_URL``.
    transport: Transport, optional
        Overrides the ``requests`` transport.

    Returns
    -------
    WeChat
        The client stored in ``app.extensions["wechat"]``.

    Raises
    ------
    RuntimeError
        If ``REDIS_URL`` is set but Redis does not answer ``PING``.
    """
    settings = WeChatSettings.from_mapping(app.config)
    client = create_client(settings, cache=cache, transport=transport)
    app.extensions[EXTENSION_KEY] = client

    from wechat_kit.core import errors

    errors.init_app(app)

    from wechat_kit import cli

    cli.init_app(app)
    return client


def get_wechat(app: Flask | None = None) -> WeChat:
    """Return the client registered on ``app`` (defaults to ``current_app``)."""
    target = app or current_app
    client = target.extensions.get(EXTENSION_KEY)
    if client is None:
        raise RuntimeError("WeChat client is not initialized. Call init_app() first.")
    return client
