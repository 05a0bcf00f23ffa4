# wechat_kit/services/jssdk/dto.py
from __future__ import annotations

from dataclasses import asdict, dataclass


@dataclass(frozen=True, slots=True)
class JSConfig:
    """
    Parameters a web page passes to ``wx.config``.

    :param app_id: Application id.
    :type app_id: str
    :param timestamp: Unix timestamp used in the signature.
    :type timestamp: int
    :param nonce_str: 16-character random string.
    :type nonce_str: str
    :param signature: Lower-case hex SHA-1 of the canonical string.
    :type signature: str
    """

    app_id: str
    timestamp: int
    nonce_str: str
    signature: str

    def to_dict(self) -> dict[str, object]:
        """Return the camelCase keys the JS bridge expects."""
        data = asdict(self)
        return {
            "appId": data["app_id"],
            "timestamp": data["timestamp"],
            "nonceStr": data["nonce_str"],
            "signature": data["signature"],
        }
