"""Structured logging for the WeChat client and its Flask host.

Records are rendered as one JSON object per line. Credentials travel in query
strings (``access_token=...``, ``secret=...``), so every record passes through
:class:`SecretRedactionFilter` before it is formatted.
"""

from __future__ import annotations

import json
import logging
import re
import sys
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from flask import Flask, g, has_request_context, request

PACKAGE_LOGGER = "wechat_kit"
REQUEST_ID_HEADER = "X-Request-ID"
CORRELATION_HEADERS = (REQUEST_ID_HEADER, "X-Correlation-ID")

# ``extra`` fields emitted by the services
EXTRA_KEYS = (
    "kind",
    "app_id",
    "ttl",
    "code",
    "method",
    "url",
    "template_id",
    "msgid",
    "out_trade_no",
    "body",
)

_SECRET_PARAMS = re.compile(r"((?:access_token|secret|ticket|refresh_token|key)=)[^&\s'\"]+")


def mask_secret(value: str | None, visible: int = 4) -> str:
    """
    Mask a secret for display, keeping only its last ``visible`` characters.

    >>> mask_secret("abcdef123456")
    '********3456'
    """
    if not value:
        return ""
    if len(value) <= visible:
        return "*" * len(value)
    return "*" * (len(value) - visible) + value[-visible:]


def redact(text: str) -> str:
    """
    Replace credential query parameters in ``text`` with ``***``.

    >>> redact("GET /cgi-bin/ticket?access_token=ABC&type=jsapi")
    'GET /cgi-bin/ticket?access_token=***&type=jsapi'
    """
    return _SECRET_PARAMS.sub(r"\1***", text)


class JSONFormatter(logging.Formatter):
    """Render log records as JSON objects, keeping only known ``extra`` keys."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "time": datetime.fromtimestamp(record.created, timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", None),
        }
        for key in EXTRA_KEYS:
            if not hasattr(record, key):
                continue
            value = getattr(record, key)
            if isinstance(value, bytes):
                value = value.decode("utf-8", "replace")
            payload[key] = value
        if record.exc_info:
            payload["exc_info"] = redact(self.formatException(record.exc_info))
        return json.dumps(payload, default=str, ensure_ascii=False)


class SecretRedactionFilter(logging.Filter):
    """Strip credential query parameters from the message and the ``url`` field."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        cleaned = redact(message)
        if cleaned != message:
            record.msg, record.args = cleaned, None
        url = getattr(record, "url", None)
        if isinstance(url, str):
            record.url = redact(url)
        return True


class RequestIdFilter(logging.Filter):
    """Attach the Flask request id (``None`` outside a request) to each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = ensure_request_id() if has_request_context() else None
        return True


def ensure_request_id() -> str:
    """
    Return the id correlating log lines of the current request.

    Inside a request the first correlation header wins, otherwise a UUID is
    generated; the value is memoized on :data:`flask.g`. Outside a request a
    fresh UUID is returned on every call.
    """
    if not has_request_context():
        return str(uuid4())
    request_id = g.get("request_id")
    if request_id is None:
        request_id = next(
            (request.headers[h] for h in CORRELATION_HEADERS if request.headers.get(h)),
            str(uuid4()),
        )
        g.request_id = request_id
    return request_id


def _level(value: str | int) -> int:
    if isinstance(value, int):
        return value
    resolved = logging.getLevelName(value.strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(level: str | int = "INFO", *, package_level: str | int | None = None) -> None:
    """
    Install a single JSON handler on stdout.

    :param level: Root logger level.
    :param package_level: Level of the ``wechat_kit`` logger; defaults to
        ``level``. ``DEBUG`` here logs raw payment replies.
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())
    handler.addFilter(SecretRedactionFilter())
    handler.addFilter(RequestIdFilter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(_level(level))
    logging.getLogger(PACKAGE_LOGGER).setLevel(_level(package_level if package_level is not None else level))
    # urllib3 logs every outbound URL with its query string
    logging.getLogger("urllib3").setLevel(max(logging.WARNING, _level(level)))


def init_app(app: Flask) -> None:
    """Seed a request id per request and echo it in the ``X-Request-ID`` header."""
    app.logger.addFilter(RequestIdFilter())

    @app.before_request
    def _seed_request_id() -> None:
        ensure_request_id()

    @app.after_request
    def _echo_request_id(response):
        response.headers.setdefault(REQUEST_ID_HEADER, ensure_request_id())
        return response


__all__ = [
    "JSONFormatter",
    "SecretRedactionFilter",
    "configure_logging",
    "ensure_request_id",
    "init_app",
    "mask_secret",
    "redact",
]
