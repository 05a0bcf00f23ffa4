"""Schemas for the credential-issuing endpoints."""

from __future__ import annotations

from typing import Any

from marshmallow import fields, post_load

from wechat_kit.services.credentials.dto import IssuedCredential

from .common import PlatformSchema


class AccessTokenResponseSchema(PlatformSchema):
    """Reply of ``/cgi-bin/token``."""

    access_token = fields.String(required=True)
    expires_in = fields.Integer(load_default=None)

    @post_load
    def to_credential(self, data: dict[str, Any], **_: Any) -> IssuedCredential:
        return IssuedCredential(value=data["access_token"], expires_in=data["expires_in"])


class TicketResponseSchema(PlatformSchema):
    """Reply of ``/cgi-bin/ticket/getticket``."""

    ticket = fields.String(required=True)
    expires_in = fields.Integer(load_default=None)

    @post_load
    def to_credential(self, data: dict[str, Any], **_: Any) -> IssuedCredential:
        return IssuedCredential(value=data["ticket"], expires_in=data["expires_in"])
