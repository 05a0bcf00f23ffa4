"""Translate package errors into JSON (RFC 7807) problems for a Flask host."""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, has_request_context, jsonify, request

from wechat_kit.core.logger import ensure_request_id
from wechat_kit.services._shared.errors import (
    CacheError,
    RefreshTimeoutError,
    RemoteAPIError,
    ResponseDecodeError,
    SignatureConfigError,
    SignatureMismatchError,
    TransportError,
    WeChatError,
)

log = logging.getLogger(__name__)

# Most specific first; the first match wins.
STATUS_MAP: tuple[tuple[type[WeChatError], HTTPStatus], ...] = (
    (TransportError, HTTPStatus.BAD_GATEWAY),
    (RemoteAPIError, HTTPStatus.BAD_GATEWAY),
    (ResponseDecodeError, HTTPStatus.BAD_GATEWAY),
    (RefreshTimeoutError, HTTPStatus.SERVICE_UNAVAILABLE),
    (CacheError, HTTPStatus.SERVICE_UNAVAILABLE),
    (SignatureMismatchError, HTTPStatus.BAD_REQUEST),
    (SignatureConfigError, HTTPStatus.INTERNAL_SERVER_ERROR),
)


def _as_problem(
    *,
    status: int,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Build an RFC 7807 Problem Details dict.

    :param status: HTTP status code.
    :param code: Stable machine-consumable error code.
    :param message: Human-readable error summary (safe for clients).
    :param details: Optional safe, structured details.
    :returns: Problem+JSON dictionary.
    :rtype: dict
    """
    problem: dict[str, Any] = {
        "type": "about:blank",
        "title": HTTPStatus(status).phrase,
        "status": status,
        "detail": message,
        "instance": request.path if has_request_context() else None,
        "code": code,
    }
    if details:
        problem["details"] = details
    problem["request_id"] = ensure_request_id()
    return problem


def status_for(exc: WeChatError) -> HTTPStatus:
    """Return the HTTP status a host should answer with for ``exc``."""
    for error_type, status in STATUS_MAP:
        if isinstance(exc, error_type):
            return status
    return HTTPStatus.INTERNAL_SERVER_ERROR


def translate_error(exc: WeChatError) -> tuple[dict[str, Any], int]:
    """
    Map a package error to a problem payload and status.

    Transport and platform failures become ``502``, cache failures ``503`` and
    configuration errors ``500``.

    :param exc: Error raised by a service.
    :returns: ``(problem, status)``.
    """
    status = status_for(exc)
    data = exc.to_dict()
    code = data.pop("error")
    message = data.pop("message")
    details = {k: v for k, v in data.items() if v is not None}
    return _as_problem(status=int(status), code=code, message=message, details=details), int(status)


def _problem_response(problem: dict[str, Any]) -> Response:
    """
    Return a Flask response with ``application/problem+json`` media type.

    :param problem: Problem details payload.
    :returns: Flask JSON Response with proper MIME type.
    :rtype: flask.Response
    """
    resp = jsonify(problem)
    resp.mimetype = "application/problem+json"
    return resp


def init_app(app: Flask) -> None:
    """
    Attach the :class:`WeChatError` handler to the Flask app.

    Notes
    -----
    - 5xx are logged as errors, 4xx as warnings.
    - Tracebacks are not logged; the error's own fields carry the context.
    """

    @app.errorhandler(WeChatError)
    def handle_wechat_error(err: WeChatError):
        problem, status = translate_error(err)
        level = log.error if status >= 500 else log.warning
        level(
            "WeChatError: code=%s status=%s msg=%s request_id=%s",
            problem["code"],
            status,
            err.message,
            problem.get("request_id"),
        )
        return _problem_response(problem), status
