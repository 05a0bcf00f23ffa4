# wechat_kit/services/oauth/dto.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class OAuthScope(str, Enum):
    """Authorization scopes of the web OAuth flow."""

    BASE = "snsapi_base"
    USERINFO = "snsapi_userinfo"


@dataclass(frozen=True, slots=True)
class UserAccessToken:
    """
    User-scoped access token obtained from an authorization code.

    Distinct from the application access token managed by the credential
    cache; it is never cached by this package.
    """

    access_token: str = field(repr=False)
    expires_in: int
    refresh_token: str = field(repr=False)
    openid: str
    scope: str


@dataclass(frozen=True, slots=True)
class UserInfo:
    """Public profile of a user who granted ``snsapi_userinfo``."""

    openid: str
    nickname: str = ""
    sex: int = 0
    province: str = ""
    city: str = ""
    country: str = ""
    headimgurl: str = ""
    privilege: list[str] = field(default_factory=list)
    unionid: str = ""
