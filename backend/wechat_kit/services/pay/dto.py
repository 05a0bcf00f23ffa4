# wechat_kit/services/pay/dto.py
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class PayParams:
    """
    Order fields supplied by the caller of a JSAPI payment.

    :param total_fee: Amount in cents, as a decimal string.
    :param create_ip: Client IP (``spbill_create_ip``).
    :param body: Goods description.
    :param out_trade_no: Merchant order number.
    :param open_id: Payer's openid.
    """

    total_fee: str
    create_ip: str
    body: str
    out_trade_no: str
    open_id: str


@dataclass(frozen=True, slots=True)
class UnifiedOrder:
    """Business fields of a successful unified-order reply."""

    app_id: str
    mch_id: str
    nonce_str: str
    prepay_id: str
    trade_type: str = ""
    code_url: str = ""


@dataclass(frozen=True, slots=True)
class JSAPIParams:
    """
    Parameters a web page passes to ``WeixinJSBridge.invoke("getBrandWCPayRequest")``.

    :param app_id: Application id echoed by the unified order.
    :param timestamp: Unix timestamp used in the signature.
    :param nonce_str: Nonce echoed by the unified order.
    :param prepay_id: Prepay id of the order.
    :param sign_type: Always ``"MD5"``.
    :param sign: Upper-case hex signature.
    """

    app_id: str
    timestamp: int
    nonce_str: str
    prepay_id: str
    sign_type: str
    sign: str

    @property
    def package(self) -> str:
        return f"prepay_id={self.prepay_id}"

    def to_dict(self) -> dict[str, str]:
        """Return the camelCase keys the JS bridge expects."""
        return {
            "appId": self.app_id,
            "timeStamp": str(self.timestamp),
            "nonceStr": self.nonce_str,
            "package": self.package,
            "signType": self.sign_type,
            "paySign": self.sign,
        }


@dataclass(frozen=True, slots=True)
class PayNotify:
    """Verified payment result notification."""

    app_id: str
    mch_id: str
    open_id: str
    trade_type: str
    bank_type: str
    total_fee: int
    cash_fee: int
    fee_type: str
    transaction_id: str
    out_trade_no: str
    time_end: str
    attach: str = ""
    is_subscribe: str = ""
