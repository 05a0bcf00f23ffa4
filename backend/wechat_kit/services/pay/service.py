# wechat_kit/services/pay/service.py
from __future__ import annotations

import logging
import time
from collections.abc import Callable

from wechat_kit.schemas.pay import PayNotifySchema, UnifiedOrderResponseSchema
from wechat_kit.services._shared.base import BaseService, ServiceContext
from wechat_kit.services._shared.dto import PaySettings
from wechat_kit.services._shared.errors import SignatureConfigError, SignatureMismatchError
from wechat_kit.services._shared.results import (
    PAY_SUCCESS,
    decode_body,
    parse_pay_result,
    parse_xml,
    render_xml,
    unwrap,
)
from wechat_kit.services.signing import md5_sum, random_str, sign, verify

from .dto import JSAPIParams, PayNotify, PayParams, UnifiedOrder

logger = logging.getLogger(__name__)

DEFAULT_PAY_BASE = "https://api.mch.weixin.qq.com"
UNIFIED_ORDER_PATH = "/pay/unifiedorder"
TRADE_TYPE_JSAPI = "JSAPI"
SIGN_TYPE_MD5 = "MD5"
NONCE_LENGTH = 32

# Field order is fixed by the payment gateway.
ORDER_SIGN_TEMPLATE = (
    "appid=%s&body=%s&mch_id=%s&nonce_str=%s&notify_url=%s&openid=%s"
    "&out_trade_no=%s&spbill_create_ip=%s&total_fee=%s&trade_type=%s&key=%s"
)


class PayService(BaseService):
    """
    JSAPI payments: unified order, front-end parameters and notifications.

    Replies use the two-tier status model: ``return_code`` reports whether the
    request was accepted, ``result_code`` whether the business operation
    succeeded. Business fields are never read when the first tier failed.
    """

    def __init__(
        self,
        *,
        ctx: ServiceContext,
        settings: PaySettings,
        pay_base: str = DEFAULT_PAY_BASE,
        clock: Callable[[], float] | None = None,
    ) -> None:
        """
        Initialize the service.

        :param ctx: Shared application collaborators.
        :param settings: Merchant id, pay key and notify URL.
        :param pay_base: Base URL of the payment gateway.
        :param clock: Source of Unix timestamps; :func:`time.time` when omitted.
        """
        super().__init__(ctx=ctx)
        self.settings = settings
        self.pay_base = pay_base.rstrip("/")
        self._clock = clock

    def _now(self) -> int:
        return int(self._clock() if self._clock is not None else time.time())

    # ------------------------------------------------------------------ #
    # Unified order
    # ------------------------------------------------------------------ #

    def ensure_configured(self) -> None:
        """
        Check the merchant settings required to sign an order.

        :raises SignatureConfigError: If the pay key, merchant id or notify URL
            is missing.
        """
        missing = [
            name
            for name, value in (
                ("api_key", self.settings.api_key),
                ("mch_id", self.settings.mch_id),
                ("notify_url", self.settings.notify_url),
            )
            if not value
        ]
        if missing:
            raise SignatureConfigError(f"Pay settings missing: {', '.join(missing)}")

    def unified_order(self, params: PayParams) -> UnifiedOrder:
        """
        Place a JSAPI unified order and return the prepay details.

        :param params: Order fields.
        :raises SignatureConfigError: Before any call, on missing settings.
        :raises TransportError: On network failure.
        :raises RemoteAPIError: When either status tier is not ``SUCCESS``.
        """
        self.ensure_configured()
        nonce_str = random_str(NONCE_LENGTH)
        order_sign = md5_sum(
            ORDER_SIGN_TEMPLATE
            % (
                self.app_id,
                params.body,
                self.settings.mch_id,
                nonce_str,
                self.settings.notify_url,
                params.open_id,
                params.out_trade_no,
                params.create_ip,
                params.total_fee,
                TRADE_TYPE_JSAPI,
                self.settings.api_key,
            )
        )
        body = render_xml(
            {
                "appid": self.app_id,
                "mch_id": self.settings.mch_id,
                "nonce_str": nonce_str,
                "sign": order_sign,
                "body": params.body,
                "out_trade_no": params.out_trade_no,
                "total_fee": params.total_fee,
                "spbill_create_ip": params.create_ip,
                "notify_url": self.settings.notify_url,
                "trade_type": TRADE_TYPE_JSAPI,
                "openid": params.open_id,
            }
        )
        raw = self.ctx.transport.post(
            f"{self.pay_base}{UNIFIED_ORDER_PATH}",
            data=body,
            headers={"Content-Type": "application/xml; charset=utf-8"},
        )
        logger.debug("Unified order reply", extra={"app_id": self.app_id, "body": raw[:500]})
        order = unwrap(parse_pay_result(decode_body(raw), UnifiedOrderResponseSchema()), kind="unifiedorder")
        logger.info(
            "Unified order placed",
            extra={"app_id": self.app_id, "out_trade_no": params.out_trade_no},
        )
        return order

    def gen_jsapi_params(self, params: PayParams) -> JSAPIParams:
        """
        Place an order and sign the parameters for the JS payment bridge.

        :param params: Order fields.
        :returns: Signed JSAPI parameters.
        :raises SignatureConfigError: Before any call, on missing settings.
        :raises TransportError: On network failure.
        :raises RemoteAPIError: When the unified order failed.
        """
        order = self.unified_order(params)
        timestamp = self._now()
        pay_sign = sign(
            {
                "appId": order.app_id,
                "timeStamp": str(timestamp),
                "nonceStr": order.nonce_str,
                "package": f"prepay_id={order.prepay_id}",
                "signType": SIGN_TYPE_MD5,
            },
            self.settings.api_key,
        )
        return JSAPIParams(
            app_id=order.app_id,
            timestamp=timestamp,
            nonce_str=order.nonce_str,
            prepay_id=order.prepay_id,
            sign_type=SIGN_TYPE_MD5,
            sign=pay_sign,
        )

    # ------------------------------------------------------------------ #
    # Notifications
    # ------------------------------------------------------------------ #

    def parse_notify(self, raw: bytes | str) -> PayNotify:
        """
        Decode and verify a payment result notification.

        :param raw: XML body posted by the payment gateway.
        :returns: Verified notification.
        :raises ResponseDecodeError: On malformed XML.
        :raises RemoteAPIError: When either status tier is not ``SUCCESS``.
        :raises SignatureMismatchError: When the ``sign`` field does not verify.
        :raises SignatureConfigError: When no pay key is configured.
        """
        payload = parse_xml(raw)
        notify = unwrap(parse_pay_result(payload, PayNotifySchema()), kind="pay_notify")
        if not verify(payload, self.settings.api_key):
            logger.warning(
                "Pay notification signature mismatch",
                extra={"app_id": self.app_id, "out_trade_no": notify.out_trade_no},
            )
            raise SignatureMismatchError("Pay notification signature does not verify.")
        return notify

    @staticmethod
    def notify_reply(ok: bool = True, message: str = "OK") -> bytes:
        """Render the XML acknowledgement returned to the payment gateway."""
        return render_xml({"return_code": PAY_SUCCESS if ok else "FAIL", "return_msg": message})
