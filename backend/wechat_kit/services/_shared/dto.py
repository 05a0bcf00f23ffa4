# comments in English; reST docstrings strict
from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class AppIdentity:
    """
    Long-lived application credentials.

    :param app_id: Platform application id.
    :type app_id: str
    :param app_secret: Application secret; excluded from ``repr``.
    :type app_secret: str
    """

    app_id: str
    app_secret: str = field(repr=False)


@dataclass(frozen=True, slots=True)
class PaySettings:
    """
    Merchant settings for the payment flows.

    :param mch_id: Merchant id.
    :type mch_id: str
    :param api_key: Payment API key used for signing; excluded from ``repr``.
    :type api_key: str
    :param notify_url: Callback URL for payment notifications.
    :type notify_url: str
    """

    mch_id: str = ""
    api_key: str = field(default="", repr=False)
    notify_url: str = ""
