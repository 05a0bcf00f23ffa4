"""Schemas for the payment XML replies and notifications."""

from __future__ import annotations

from typing import Any

from marshmallow import fields, post_load

from wechat_kit.services.pay.dto import PayNotify, UnifiedOrder

from .common import PlatformSchema


class UnifiedOrderResponseSchema(PlatformSchema):
    """Business block of ``/pay/unifiedorder``."""

    appid = fields.String(required=True)
    mch_id = fields.String(load_default="")
    nonce_str = fields.String(required=True)
    prepay_id = fields.String(required=True)
    trade_type = fields.String(load_default="")
    code_url = fields.String(load_default="")

    @post_load
    def to_order(self, data: dict[str, Any], **_: Any) -> UnifiedOrder:
        return UnifiedOrder(
            app_id=data["appid"],
            mch_id=data["mch_id"],
            nonce_str=data["nonce_str"],
            prepay_id=data["prepay_id"],
            trade_type=data["trade_type"],
            code_url=data["code_url"],
        )


class PayNotifySchema(PlatformSchema):
    """Payment result notification posted to ``notify_url``."""

    appid = fields.String(required=True)
    mch_id = fields.String(required=True)
    openid = fields.String(load_default="")
    is_subscribe = fields.String(load_default="")
    trade_type = fields.String(load_default="")
    bank_type = fields.String(load_default="")
    total_fee = fields.Integer(required=True)
    cash_fee = fields.Integer(load_default=0)
    fee_type = fields.String(load_default="")
    transaction_id = fields.String(required=True)
    out_trade_no = fields.String(required=True)
    attach = fields.String(load_default="")
    time_end = fields.String(load_default="")

    @post_load
    def to_notify(self, data: dict[str, Any], **_: Any) -> PayNotify:
        return PayNotify(
            app_id=data["appid"],
            mch_id=data["mch_id"],
            open_id=data["openid"],
            trade_type=data["trade_type"],
            bank_type=data["bank_type"],
            total_fee=data["total_fee"],
            cash_fee=data["cash_fee"],
            fee_type=data["fee_type"],
            transaction_id=data["transaction_id"],
            out_trade_no=data["out_trade_no"],
            time_end=data["time_end"],
            attach=data["attach"],
            is_subscribe=data["is_subscribe"],
        )
