"""Schemas for the template message endpoints."""

from __future__ import annotations

from typing import Any

from marshmallow import fields, post_load

from wechat_kit.services.template.dto import TemplateInfo

from .common import PlatformSchema


class TemplateSendResponseSchema(PlatformSchema):
    """Reply of ``/cgi-bin/message/template/send``."""

    msgid = fields.Integer(required=True)

    @post_load
    def to_msgid(self, data: dict[str, Any], **_: Any) -> int:
        return data["msgid"]


class TemplateInfoSchema(PlatformSchema):
    template_id = fields.String(required=True)
    title = fields.String(load_default="")
    primary_industry = fields.String(load_default="")
    deputy_industry = fields.String(load_default="")
    content = fields.String(load_default="")
    example = fields.String(load_default="")

    @post_load
    def to_info(self, data: dict[str, Any], **_: Any) -> TemplateInfo:
        return TemplateInfo(**data)


class TemplateListResponseSchema(PlatformSchema):
    """Reply of ``/cgi-bin/template/get_all_private_template``."""

    template_list = fields.List(fields.Nested(TemplateInfoSchema), load_default=list)

    @post_load
    def to_list(self, data: dict[str, Any], **_: Any) -> list[TemplateInfo]:
        return data["template_list"]
