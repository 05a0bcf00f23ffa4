# wechat_kit/services/_shared/base.py
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from marshmallow import Schema

from wechat_kit.services._shared.dto import AppIdentity
from wechat_kit.services._shared.ports.transport import Transport
from wechat_kit.services._shared.results import (
    ApiResult,
    Failure,
    decode_body,
    parse_platform_result,
    unwrap,
)
from wechat_kit.services.credentials.dto import CredentialKind
from wechat_kit.services.credentials.manager import INVALID_TOKEN_CODES, TokenCacheManager

DEFAULT_API_BASE = "https://api.weixin.qq.com"


@dataclass(slots=True)
class ServiceContext:
    """
    Collaborators shared by every feature service of one application.

    Built once by :func:`wechat_kit.factory.create_client` and passed by
    reference; nothing here is mutated after construction.

    :param identity: Application id/secret.
    :param transport: HTTP port.
    :param tokens: Credential cache manager of this application.
    :param api_base: Base URL of the JSON API.
    """

    identity: AppIdentity
    transport: Transport
    tokens: TokenCacheManager
    api_base: str = DEFAULT_API_BASE


class BaseService:
    """
    Base class for the feature services.

    Responsibilities
    ----------------
    * Obtain the application access token from the shared manager.
    * Issue JSON API calls and decode them into tagged results.
    * Drop a cached access token the platform reports as invalid.

    Notes
    -----
    - Services never cache credentials themselves; the manager is the only
      owner of the cache.
    - Errors propagate to the caller untouched; no retries here.
    """

    def __init__(self, *, ctx: ServiceContext) -> None:
        """
        Initialize the base service.

        :param ctx: Shared application collaborators.
        :type ctx: ServiceContext
        """
        self.ctx = ctx

    @property
    def app_id(self) -> str:
        return self.ctx.identity.app_id

    def url(self, path: str) -> str:
        return f"{self.ctx.api_base.rstrip('/')}{path}"

    # --------------------------- Credentials --------------------------------

    def credential(self, kind: CredentialKind) -> str:
        """
        Return a valid credential of ``kind``.

        A credential that was refreshed but could not be cached is still used
        for the current call.

        :param kind: Credential to obtain.
        :returns: Token or ticket string.
        """
        return self.ctx.tokens.get_usable(kind)

    def access_token(self) -> str:
        return self.credential(CredentialKind.ACCESS_TOKEN)

    # --------------------------- JSON API calls -----------------------------

    def get_json(
        self,
        path: str,
        *,
        params: Mapping[str, Any],
        schema: Schema,
        kind: str,
        app_token: bool = False,
    ) -> Any:
        """
        GET a JSON endpoint and return the loaded success value.

        :param path: Endpoint path below ``api_base``.
        :param params: Query parameters.
        :param schema: Schema loading the success payload.
        :param kind: Label carried into :class:`RemoteAPIError`.
        :param app_token: Whether the call was authorized with the
            application access token.
        :raises RemoteAPIError: On a non-zero ``errcode``.
        """
        raw = self.ctx.transport.get(self.url(path), params=params)
        return self.unwrap(parse_platform_result(decode_body(raw), schema), kind=kind, app_token=app_token)

    def post_json(
        self,
        path: str,
        *,
        params: Mapping[str, Any],
        payload: Any,
        schema: Schema,
        kind: str,
        app_token: bool = False,
    ) -> Any:
        """POST a JSON body; see :meth:`get_json`."""
        raw = self.ctx.transport.post(self.url(path), params=params, json=payload)
        return self.unwrap(parse_platform_result(decode_body(raw), schema), kind=kind, app_token=app_token)

    # -------------------------- Error handling ------------------------------

    def unwrap(self, result: ApiResult[Any], *, kind: str, app_token: bool = False) -> Any:
        """
        Return the success value or raise, invalidating a rejected token first.

        :raises RemoteAPIError: When ``result`` is a :class:`Failure`.
        """
        if app_token and isinstance(result, Failure) and result.code in INVALID_TOKEN_CODES:
            self.ctx.tokens.discard(CredentialKind.ACCESS_TOKEN)
        return unwrap(result, kind=kind)
