from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import requests

from wechat_kit.core.logger import redact
from wechat_kit.services._shared.errors import TransportError

logger = logging.getLogger(__name__)


class RequestsTransport:
    """
    :class:`~wechat_kit.services._shared.ports.Transport` over a ``requests`` session.

    Every call carries ``timeout``; a hung endpoint therefore bounds how long a
    credential refresh can hold its lock.
    """

    def __init__(self, session: requests.Session | None = None, *, timeout: float = 10.0):
        self.session = session or requests.Session()
        self.timeout = timeout

    def get(self, url: str, params: Mapping[str, Any] | None = None) -> bytes:
        return self._send("GET", url, params=params)

    def post(
        self,
        url: str,
        *,
        params: Mapping[str, Any] | None = None,
        json: Any = None,
        data: bytes | str | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> bytes:
        return self._send("POST", url, params=params, json=json, data=data, headers=headers)

    def _send(self, method: str, url: str, **kwargs: Any) -> bytes:
        try:
            resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
            resp.raise_for_status()
        except requests.Timeout as exc:
            logger.warning("HTTP timeout", extra={"method": method, "url": url})
            raise TransportError(f"{method} {url} timed out", url=url, timeout=True) from exc
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            raise TransportError(f"{method} {url} returned {status}", url=url, status_code=status) from exc
        except requests.RequestException as exc:
            raise TransportError(f"{method} {url} failed: {redact(str(exc))}", url=url) from exc
        return resp.content
