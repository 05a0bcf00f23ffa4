"""
wechat_kit.services._shared.ports
=================================

Collection of *ports* (hexagonal interfaces) that define the contracts for
the collaborators the credential core depends on but does not own.

Modules
-------
- :mod:`cache`:
    Defines :class:`~.Cache` for key/value store with TTL semantics, plus
    :class:`~.InMemoryCache`.

- :mod:`transport`:
    Defines :class:`~.Transport` for raw GET/POST calls returning body bytes,
    plus :class:`~.StubTransport` for tests.

Design Notes
------------
Concrete adapters (Redis, requests) implement these interfaces under
``wechat_kit.infra``.
"""

from __future__ import annotations

from .cache import Cache, InMemoryCache
from .transport import RecordedCall, StubTransport, Transport

__all__ = [
    "Cache",
    "InMemoryCache",
    "Transport",
    "StubTransport",
    "RecordedCall",
]
