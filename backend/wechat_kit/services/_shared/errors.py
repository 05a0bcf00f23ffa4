"""
Domain-level exceptions raised by the credential, signing and feature services.

These exceptions are **framework-agnostic** and never import Flask, requests
or redis. They are the stable contract between the adapters (transport,
cache), the core services and the host application.

The translation to HTTP problem payloads is handled by
``wechat_kit/core/errors.py``.
"""

from __future__ import annotations

from typing import Any

# --------------------------------------------------------------------------- #
# Base type
# --------------------------------------------------------------------------- #


class WeChatError(Exception):
    """
    Base class for all errors raised by this package.

    Notes
    -----
    - ``error`` is a stable machine-readable identifier.
    - Subclasses add their own structured fields and extend :meth:`details`.
    """

    error = "wechat_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def details(self) -> dict[str, Any]:
        """Return structured, secret-free context for this error."""
        return {}

    def to_dict(self) -> dict[str, Any]:
        """
        Serialize the error for reporting.

        :returns: Mapping with ``error``, ``message`` and error-specific details.
        :rtype: dict[str, Any]
        """
        payload: dict[str, Any] = {"error": self.error, "message": self.message}
        payload.update(self.details())
        return payload


# --------------------------------------------------------------------------- #
# Specific errors
# --------------------------------------------------------------------------- #


class TransportError(WeChatError):
    """
    Raised when the remote endpoint could not be reached or answered non-2xx.

    :param message: Human-readable summary.
    :param url: Target URL without its query string.
    :param status_code: HTTP status when a response was received.
    :param timeout: Whether the failure was a timeout.
    """

    error = "transport_error"

    def __init__(
        self,
        message: str,
        *,
        url: str | None = None,
        status_code: int | None = None,
        timeout: bool = False,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code
        self.timeout = timeout

    def details(self) -> dict[str, Any]:
        return {"url": self.url, "status_code": self.status_code, "timeout": self.timeout}


class RemoteAPIError(WeChatError):
    """
    Raised when the platform reports a business error.

    ``code`` is the platform's ``errcode`` for JSON endpoints, or the
    ``return_code`` / ``err_code`` for the XML payment endpoints.
    """

    error = "remote_api_error"

    def __init__(self, code: int | str, message: str, *, kind: str | None = None) -> None:
        super().__init__(f"{kind or 'remote'} error: code={code}, message={message}")
        self.code = code
        self.remote_message = message
        self.kind = kind

    def details(self) -> dict[str, Any]:
        return {"code": self.code, "remote_message": self.remote_message, "kind": self.kind}


class CacheError(WeChatError):
    """Raised when the cache backend fails on ``get``, ``set`` or ``delete``."""

    error = "cache_error"

    def __init__(self, message: str, *, key: str | None = None, operation: str | None = None) -> None:
        super().__init__(message)
        self.key = key
        self.operation = operation

    def details(self) -> dict[str, Any]:
        return {"key": self.key, "operation": self.operation}


class CacheWriteError(CacheError):
    """
    Raised when a freshly refreshed credential could not be persisted.

    The credential itself is valid and carried in :attr:`value` so the caller
    can still use it for the current request.
    """

    error = "cache_write_error"

    def __init__(self, message: str, *, key: str, value: str) -> None:
        super().__init__(message, key=key, operation="set")
        self.value = value


class SignatureConfigError(WeChatError):
    """Raised before any network call when signing inputs are missing."""

    error = "signature_config_error"


class SignatureMismatchError(WeChatError):
    """Raised when a signed payload received from the platform does not verify."""

    error = "signature_mismatch"


class ResponseDecodeError(WeChatError):
    """Raised when a response body is neither valid JSON nor valid XML."""

    error = "response_decode_error"

    def __init__(self, message: str, *, body: bytes | str | None = None) -> None:
        super().__init__(message)
        raw = body.decode("utf-8", "replace") if isinstance(body, bytes) else body
        self.body = (raw or "")[:200]

    def details(self) -> dict[str, Any]:
        return {"body": self.body}


class RefreshTimeoutError(WeChatError):
    """Raised when a caller stops waiting for another caller's refresh."""

    error = "refresh_timeout"

    def __init__(self, kind: str, timeout: float) -> None:
        super().__init__(f"Gave up waiting {timeout}s for {kind} refresh")
        self.kind = kind
        self.timeout = timeout

    def details(self) -> dict[str, Any]:
        return {"kind": self.kind, "timeout": self.timeout}
