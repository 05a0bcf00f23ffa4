from __future__ import annotations

import threading
from collections import deque
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

from wechat_kit.services._shared.errors import TransportError


class Transport(Protocol):
    """
    Port for raw HTTP calls against the platform.

    Implementations return the raw response body and raise
    :class:`~wechat_kit.services._shared.errors.TransportError` for network
    failures, timeouts and non-2xx statuses. Decoding stays in the services.
    """

    def get(self, url: str, params: Mapping[str, Any] | None = None) -> bytes: ...

    def post(
        self,
        url: str,
        *,
        params: Mapping[str, Any] | None = None,
        json: Any = None,
        data: bytes | str | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> bytes: ...


@dataclass(frozen=True, slots=True)
class RecordedCall:
    """A call captured by :class:`StubTransport`."""

    method: str
    url: str
    params: dict[str, Any]
    json: Any = None
    data: bytes | str | None = None


Responder = Callable[[RecordedCall], bytes]


@dataclass
class StubTransport(Transport):
    """
    Deterministic transport used in unit tests.

    Responses are queued per URL (query string excluded). A queued item may be
    raw ``bytes``, a callable receiving the :class:`RecordedCall`, or an
    exception instance to raise.
    """

    calls: list[RecordedCall] = field(default_factory=list)
    _queues: dict[str, deque[bytes | Responder | Exception]] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def queue(self, url: str, *responses: bytes | Responder | Exception) -> None:
        with self._lock:
            self._queues.setdefault(url, deque()).extend(responses)

    def count(self, url: str) -> int:
        return sum(1 for call in self.calls if call.url == url)

    def _reply(self, call: RecordedCall) -> bytes:
        with self._lock:
            self.calls.append(call)
            pending = self._queues.get(call.url)
            if not pending:
                raise TransportError("No stubbed response", url=call.url)
            # The last item is sticky so repeated calls keep getting an answer.
            item = pending.popleft() if len(pending) > 1 else pending[0]
        if isinstance(item, Exception):
            raise item
        if callable(item):
            return item(call)
        return item

    def get(self, url: str, params: Mapping[str, Any] | None = None) -> bytes:
        return self._reply(RecordedCall("GET", url, dict(params or {})))

    def post(
        self,
        url: str,
        *,
        params: Mapping[str, Any] | None = None,
        json: Any = None,
        data: bytes | str | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> bytes:
        return self._reply(RecordedCall("POST", url, dict(params or {}), json=json, data=data))
