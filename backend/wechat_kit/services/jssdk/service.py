# wechat_kit/services/jssdk/service.py
from __future__ import annotations

import logging
import time
from collections.abc import Callable

from wechat_kit.services._shared.base import BaseService, ServiceContext
from wechat_kit.services.credentials.dto import CredentialKind
from wechat_kit.services.signing import random_str, sha1_signature

from .dto import JSConfig

logger = logging.getLogger(__name__)

NONCE_LENGTH = 16


class JSSDKService(BaseService):
    """
    JS-bridge configuration signing.

    The canonical string uses the fixed field order the JS bridge verifies
    against, not the sorted-key path of :func:`~wechat_kit.services.signing.sign`.
    """

    def __init__(self, *, ctx: ServiceContext, clock: Callable[[], float] | None = None) -> None:
        super().__init__(ctx=ctx)
        self._clock = clock

    def _now(self) -> int:
        return int(self._clock() if self._clock is not None else time.time())

    def get_ticket(self) -> str:
        """Return a valid JS-API ticket."""
        return self.credential(CredentialKind.JSAPI_TICKET)

    def get_config(self, uri: str) -> JSConfig:
        """
        Build a signed ``wx.config`` payload for the page at ``uri``.

        :param uri: Full page URL (without the fragment).
        :returns: Signed configuration.
        :raises TransportError: If a credential refresh failed.
        :raises RemoteAPIError: If the platform rejected a credential refresh.
        """
        ticket = self.get_ticket()
        nonce_str = random_str(NONCE_LENGTH)
        timestamp = self._now()
        text = f"jsapi_ticket={ticket}&noncestr={nonce_str}&timestamp={timestamp}&url={uri}"
        logger.debug("JS config signed", extra={"app_id": self.app_id})
        return JSConfig(
            app_id=self.app_id,
            timestamp=timestamp,
            nonce_str=nonce_str,
            signature=sha1_signature(text),
        )
