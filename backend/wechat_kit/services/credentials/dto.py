# wechat_kit/services/credentials/dto.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class CredentialKind(Enum):
    """
    Short-lived credentials the platform issues.

    The value doubles as the cache key prefix.
    """

    ACCESS_TOKEN = "access_token"
    JSAPI_TICKET = "jsapi_ticket"


@dataclass(frozen=True, slots=True)
class IssuedCredential:
    """
    Result of one successful refresh call.

    :param value: Token or ticket string.
    :type value: str
    :param expires_in: Advertised lifetime in seconds (``None`` when omitted).
    :type expires_in: int | None
    """

    value: str
    expires_in: int | None = None


@dataclass(frozen=True, slots=True)
class CredentialPolicy:
    """
    Caching policy for one credential kind.

    :param default_lifetime: Lifetime assumed when the reply omits ``expires_in``.
    :type default_lifetime: int
    :param safety_margin: Seconds subtracted from the lifetime before caching.
    :type safety_margin: int
    """

    default_lifetime: int = 7200
    safety_margin: int = 1500

    def store_ttl(self, expires_in: int | None) -> int:
        """Return the cache TTL for a credential, floored at zero."""
        lifetime = self.default_lifetime if expires_in is None else int(expires_in)
        return max(0, lifetime - self.safety_margin)


@dataclass(frozen=True, slots=True)
class CacheConfig:
    """
    Per-kind policies used by the token cache manager.

    :param policies: Overrides keyed by kind; missing kinds use ``default``.
    :param default: Policy applied to kinds without an override.
    """

    policies: dict[CredentialKind, CredentialPolicy] = field(default_factory=dict)
    default: CredentialPolicy = field(default_factory=CredentialPolicy)

    def policy_for(self, kind: CredentialKind) -> CredentialPolicy:
        return self.policies.get(kind, self.default)
