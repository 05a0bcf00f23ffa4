# wechat_kit/services/oauth/service.py
from __future__ import annotations

import logging
from urllib.parse import quote_plus

from flask import redirect as flask_redirect
from werkzeug.wrappers import Response

from wechat_kit.schemas.common import EmptySchema
from wechat_kit.schemas.oauth import UserAccessTokenSchema, UserInfoSchema
from wechat_kit.services._shared.base import BaseService, ServiceContext
from wechat_kit.services._shared.errors import RemoteAPIError

from .dto import OAuthScope, UserAccessToken, UserInfo

logger = logging.getLogger(__name__)

DEFAULT_OPEN_BASE = "https://open.weixin.qq.com"
AUTHORIZE_TEMPLATE = (
    "%s/connect/oauth2/authorize?appid=%s&redirect_uri=%s"
    "&response_type=code&scope=%s&state=%s#wechat_redirect"
)
ACCESS_TOKEN_PATH = "/sns/oauth2/access_token"
REFRESH_TOKEN_PATH = "/sns/oauth2/refresh_token"
CHECK_TOKEN_PATH = "/sns/auth"
USER_INFO_PATH = "/sns/userinfo"


class OAuthService(BaseService):
    """
    Web authorization on behalf of a user.

    The user access token handled here is distinct from the application access
    token and is returned to the caller rather than cached.
    """

    def __init__(self, *, ctx: ServiceContext, open_base: str = DEFAULT_OPEN_BASE) -> None:
        super().__init__(ctx=ctx)
        self.open_base = open_base.rstrip("/")

    # ------------------------------------------------------------------ #
    # Authorization redirect
    # ------------------------------------------------------------------ #

    def get_redirect_url(
        self,
        redirect_uri: str,
        scope: OAuthScope | str = OAuthScope.BASE,
        state: str = "",
    ) -> str:
        """
        Build the authorization URL the user's browser is sent to.

        :param redirect_uri: Callback URL receiving ``code`` and ``state``;
            URL-encoded here.
        :param scope: ``snsapi_base`` or ``snsapi_userinfo``.
        :param state: Opaque value echoed back to the callback.
        """
        scope_value = scope.value if isinstance(scope, OAuthScope) else scope
        return AUTHORIZE_TEMPLATE % (
            self.open_base,
            self.app_id,
            quote_plus(redirect_uri),
            scope_value,
            state,
        )

    def redirect(
        self,
        redirect_uri: str,
        scope: OAuthScope | str = OAuthScope.BASE,
        state: str = "",
    ) -> Response:
        """Return a ``302`` response to the authorization URL."""
        return flask_redirect(self.get_redirect_url(redirect_uri, scope, state), code=302)

    # ------------------------------------------------------------------ #
    # Token exchange
    # ------------------------------------------------------------------ #

    def get_user_access_token(self, code: str) -> UserAccessToken:
        """
        Exchange an authorization ``code`` for a user access token.

        :raises TransportError: On network failure.
        :raises RemoteAPIError: On a non-zero ``errcode`` (e.g. a reused code).
        """
        token = self.get_json(
            ACCESS_TOKEN_PATH,
            params={
                "appid": self.app_id,
                "secret": self.ctx.identity.app_secret,
                "code": code,
                "grant_type": "authorization_code",
            },
            schema=UserAccessTokenSchema(),
            kind="oauth_access_token",
        )
        logger.info("User access token issued", extra={"app_id": self.app_id})
        return token

    def refresh_access_token(self, refresh_token: str) -> UserAccessToken:
        """Renew a user access token with its ``refresh_token``."""
        return self.get_json(
            REFRESH_TOKEN_PATH,
            params={
                "appid": self.app_id,
                "grant_type": "refresh_token",
                "refresh_token": refresh_token,
            },
            schema=UserAccessTokenSchema(),
            kind="oauth_refresh_token",
        )

    def check_access_token(self, access_token: str, openid: str) -> bool:
        """
        Return whether a user access token is still valid.

        A non-zero ``errcode`` yields ``False``; transport failures propagate.
        """
        try:
            self.get_json(
                CHECK_TOKEN_PATH,
                params={"access_token": access_token, "openid": openid},
                schema=EmptySchema(),
                kind="oauth_check",
            )
        except RemoteAPIError as exc:
            logger.debug("User access token rejected", extra={"code": exc.code})
            return False
        return True

    def get_user_info(self, access_token: str, openid: str) -> UserInfo:
        """Fetch the profile of a user who granted ``snsapi_userinfo``."""
        return self.get_json(
            USER_INFO_PATH,
            params={"access_token": access_token, "openid": openid, "lang": "zh_CN"},
            schema=UserInfoSchema(),
            kind="oauth_userinfo",
        )
