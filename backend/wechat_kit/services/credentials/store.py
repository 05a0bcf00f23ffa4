# wechat_kit/services/credentials/store.py
from __future__ import annotations

import logging
from collections.abc import Callable

from wechat_kit.schemas.credentials import AccessTokenResponseSchema, TicketResponseSchema
from wechat_kit.services._shared.dto import AppIdentity
from wechat_kit.services._shared.ports.transport import Transport
from wechat_kit.services._shared.results import decode_body, parse_platform_result, unwrap

from .dto import CredentialKind, IssuedCredential

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://api.weixin.qq.com"
ACCESS_TOKEN_PATH = "/cgi-bin/token"
TICKET_PATH = "/cgi-bin/ticket/getticket"


class CredentialStore:
    """
    Holds the application identity and talks to the credential-issuing endpoints.

    The store never caches; it performs exactly one outbound call per
    :meth:`refresh` and returns the parsed credential or raises.
    """

    def __init__(
        self,
        *,
        identity: AppIdentity,
        transport: Transport,
        api_base: str = DEFAULT_API_BASE,
    ) -> None:
        self.identity = identity
        self.transport = transport
        self.api_base = api_base.rstrip("/")

    @property
    def app_id(self) -> str:
        return self.identity.app_id

    def refresh(
        self,
        kind: CredentialKind,
        *,
        access_token: Callable[[], str] | None = None,
    ) -> IssuedCredential:
        """
        Fetch a fresh credential of ``kind`` from the platform.

        :param kind: Credential to fetch.
        :param access_token: Supplier of a valid access token, required for
            kinds that are issued against one (the JS-API ticket).
        :raises TransportError: On network failure or timeout.
        :raises RemoteAPIError: When the platform reports a non-zero ``errcode``.
        :raises ResponseDecodeError: When the body cannot be decoded.
        """
        if kind is CredentialKind.ACCESS_TOKEN:
            return self.fetch_access_token()
        if kind is CredentialKind.JSAPI_TICKET:
            if access_token is None:
                raise ValueError("An access token supplier is required to fetch a ticket.")
            return self.fetch_jsapi_ticket(access_token())
        raise ValueError(f"Unsupported credential kind: {kind!r}")

    def fetch_access_token(self) -> IssuedCredential:
        """Exchange the app id/secret for an application access token."""
        raw = self.transport.get(
            f"{self.api_base}{ACCESS_TOKEN_PATH}",
            params={
                "grant_type": "client_credential",
                "appid": self.identity.app_id,
                "secret": self.identity.app_secret,
            },
        )
        result = parse_platform_result(decode_body(raw), AccessTokenResponseSchema())
        issued = unwrap(result, kind=CredentialKind.ACCESS_TOKEN.value)
        logger.debug("Access token fetched", extra={"app_id": self.app_id})
        return issued

    def fetch_jsapi_ticket(self, access_token: str) -> IssuedCredential:
        """Fetch a JS-API ticket using a valid access token."""
        raw = self.transport.get(
            f"{self.api_base}{TICKET_PATH}",
            params={"access_token": access_token, "type": "jsapi"},
        )
        result = parse_platform_result(decode_body(raw), TicketResponseSchema())
        issued = unwrap(result, kind=CredentialKind.JSAPI_TICKET.value)
        logger.debug("JS-API ticket fetched", extra={"app_id": self.app_id})
        return issued
