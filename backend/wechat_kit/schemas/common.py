"""Common Marshmallow schemas shared by every platform response."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields


class PlatformSchema(Schema):
    """Base schema ignoring fields the platform adds over time."""

    class Meta:
        unknown = EXCLUDE


class PlatformErrorSchema(PlatformSchema):
    """``errcode``/``errmsg`` pair carried by every JSON API response."""

    errcode = fields.Integer(load_default=0)
    errmsg = fields.String(load_default="")


class PayReturnSchema(PlatformSchema):
    """Two-tier status block of the pay XML replies."""

    return_code = fields.String(required=True)
    return_msg = fields.String(load_default="")
    result_code = fields.String(load_default="")
    err_code = fields.String(load_default="")
    err_code_des = fields.String(load_default="")


class EmptySchema(PlatformSchema):
    """Reply carrying nothing beyond ``errcode``/``errmsg``."""
