"""Schemas for the user-scoped OAuth endpoints."""

from __future__ import annotations

from typing import Any

from marshmallow import fields, post_load

from wechat_kit.services.oauth.dto import UserAccessToken, UserInfo

from .common import PlatformSchema


class UserAccessTokenSchema(PlatformSchema):
    """Reply of ``/sns/oauth2/access_token`` and ``/sns/oauth2/refresh_token``."""

    access_token = fields.String(required=True)
    expires_in = fields.Integer(load_default=0)
    refresh_token = fields.String(load_default="")
    openid = fields.String(required=True)
    scope = fields.String(load_default="")

    @post_load
    def to_token(self, data: dict[str, Any], **_: Any) -> UserAccessToken:
        return UserAccessToken(**data)


class UserInfoSchema(PlatformSchema):
    """Reply of ``/sns/userinfo``."""

    openid = fields.String(required=True)
    nickname = fields.String(load_default="")
    sex = fields.Integer(load_default=0)
    province = fields.String(load_default="")
    city = fields.String(load_default="")
    country = fields.String(load_default="")
    headimgurl = fields.String(load_default="")
    privilege = fields.List(fields.String(), load_default=list)
    unionid = fields.String(load_default="")

    @post_load
    def to_user(self, data: dict[str, Any], **_: Any) -> UserInfo:
        return UserInfo(**data)
