# wechat_kit/services/credentials/manager.py
from __future__ import annotations

import logging
import threading

from wechat_kit.services._shared.errors import (
    CacheError,
    CacheWriteError,
    RefreshTimeoutError,
    RemoteAPIError,
)
from wechat_kit.services._shared.ports.cache import Cache

from .dto import CacheConfig, CredentialKind, IssuedCredential
from .store import CredentialStore

logger = logging.getLogger(__name__)

# errcodes the platform returns for an invalid or expired access token
INVALID_TOKEN_CODES = frozenset({40001, 40014, 42001})


class TokenCacheManager:
    """
    Serve valid credentials from the cache with single-flight refresh.

    Each :class:`CredentialKind` has its own lock, so a slow ticket refresh
    never serializes access-token readers and vice versa. The manager is built
    once per application identity and shared by reference with every feature
    service.
    """

    def __init__(
        self,
        *,
        store: CredentialStore,
        cache: Cache,
        config: CacheConfig | None = None,
    ) -> None:
        """
        Initialize the manager with its collaborators.

        :param store: Credential store performing the refresh calls.
        :param cache: TTL cache; sole authority on expiry.
        :param config: Per-kind lifetime / safety-margin policies.
        """
        self.store = store
        self.cache = cache
        self.config = config or CacheConfig()
        self._locks: dict[CredentialKind, threading.Lock] = {
            kind: threading.Lock() for kind in CredentialKind
        }

    def cache_key(self, kind: CredentialKind) -> str:
        """Return the cache key of ``kind`` for this application."""
        return f"{kind.value}_{self.store.app_id}"

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    def get_valid(self, kind: CredentialKind, *, timeout: float | None = None) -> str:
        """
        Return a valid credential of ``kind``, refreshing it at most once.

        Concurrent callers on a cold cache block on the kind lock; the first
        one refreshes and populates the cache, the others re-check the cache
        once they hold the lock and return the same value.

        :param kind: Credential to obtain.
        :param timeout: Seconds to wait for the kind lock. ``None`` waits for
            the in-flight refresh to finish.
        :returns: Token or ticket string.
        :raises RefreshTimeoutError: If the lock was not obtained in time.
        :raises TransportError: If the refresh call failed.
        :raises RemoteAPIError: If the platform rejected the refresh.
        :raises CacheWriteError: If the fresh value could not be stored; the
            value is available as ``exc.value``.
        :raises CacheError: If the cache lookup failed.
        """
        lock = self._locks[kind]
        if not lock.acquire(timeout=-1 if timeout is None else timeout):
            raise RefreshTimeoutError(kind.value, timeout)
        try:
            return self._get_or_refresh(kind, timeout)
        finally:
            lock.release()

    def get_usable(self, kind: CredentialKind, *, timeout: float | None = None) -> str:
        """
        Like :meth:`get_valid`, but keep a refreshed credential the cache refused.

        The value carried by :class:`CacheWriteError` is returned and a warning
        is logged; the next call refreshes again.

        :param kind: Credential to obtain.
        :param timeout: Seconds to wait for the kind lock.
        :returns: Token or ticket string.
        """
        try:
            return self.get_valid(kind, timeout=timeout)
        except CacheWriteError as exc:
            logger.warning(
                "Using uncached credential",
                extra={"kind": kind.value, "app_id": self.store.app_id},
            )
            return exc.value

    def invalidate(self, kind: CredentialKind) -> None:
        """
        Drop the cached credential so the next call refreshes it.

        :raises CacheError: If the cache backend failed.
        """
        self.cache.delete(self.cache_key(kind))
        logger.info("Credential invalidated", extra={"kind": kind.value, "app_id": self.store.app_id})

    def discard(self, kind: CredentialKind) -> bool:
        """
        Invalidate ``kind`` on behalf of a failing remote call.

        A cache failure is logged and swallowed so the remote error being
        raised by the caller is not replaced.

        :returns: ``True`` if the entry was dropped.
        """
        try:
            self.invalidate(kind)
        except CacheError:
            logger.warning(
                "Credential could not be invalidated",
                extra={"kind": kind.value, "app_id": self.store.app_id},
            )
            return False
        return True

    # ------------------------------------------------------------------ #
    # Internals (always called with the kind lock held)
    # ------------------------------------------------------------------ #

    def _get_or_refresh(self, kind: CredentialKind, timeout: float | None) -> str:
        key = self.cache_key(kind)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        issued = self._refresh(kind, timeout)
        ttl = self.config.policy_for(kind).store_ttl(issued.expires_in)
        if ttl > 0:
            try:
                self.cache.set(key, issued.value, ttl)
            except CacheError as exc:
                raise CacheWriteError(
                    f"Refreshed {kind.value} could not be cached: {exc}",
                    key=key,
                    value=issued.value,
                ) from exc

        logger.info(
            "Credential refreshed",
            extra={"kind": kind.value, "app_id": self.store.app_id, "ttl": ttl},
        )
        return issued.value

    def _refresh(self, kind: CredentialKind, timeout: float | None) -> IssuedCredential:
        if kind is not CredentialKind.JSAPI_TICKET:
            return self.store.refresh(kind)
        try:
            # the nested access-token wait shares the caller's bound
            return self.store.refresh(
                kind,
                access_token=lambda: self.get_usable(CredentialKind.ACCESS_TOKEN, timeout=timeout),
            )
        except RemoteAPIError as exc:
            if exc.code in INVALID_TOKEN_CODES:
                self.discard(CredentialKind.ACCESS_TOKEN)
            raise
