"""Settings with environment-based simple classes."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Final

from dotenv import load_dotenv

from wechat_kit.services._shared.dto import AppIdentity, PaySettings
from wechat_kit.services.credentials.dto import CacheConfig, CredentialPolicy

# Public selector env var (keep neutral name to avoid collisions)
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'


DEFAULT_API_BASE: Final[str] = "https://api.weixin.qq.com"
DEFAULT_PAY_API_BASE: Final[str] = "https://api.mch.weixin.qq.com"
DEFAULT_OPEN_BASE: Final[str] = "https://open.weixin.qq.com"

# Load .env in development (no-op when missing)
load_dotenv()


def env_bool(name: str, default: bool = False) -> bool:
    """Parse a boolean flag from an environment variable.

    Parameters
    ----------
    name: str
        Environment variable to inspect.
    default: bool, optional
        Value returned when the variable is unset. Defaults to ``False``.

    Returns
    -------
    bool
        ``True`` if the value resembles ``{"1", "true", "yes", "y", "on"}``
        ignoring case; otherwise ``False`` or ``default`` when missing.
    """
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "y", "on"}


def env_int(name: str, default: int) -> int:
    """Parse an integer from an environment variable, falling back to ``default``."""
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    return int(val)


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    WECHAT_APP_ID: str
        Application id of the official account.
    WECHAT_APP_SECRET: str
        Application secret; never logged.
    WECHAT_PAY_MCH_ID: str
        Merchant id for WeChat Pay.
    WECHAT_PAY_KEY: str
        Payment API key used for signing; never logged.
    WECHAT_PAY_NOTIFY_URL: str
        Callback receiving payment notifications.
    WECHAT_API_BASE: str
        Base URL of the JSON API.
    WECHAT_PAY_API_BASE: str
        Base URL of the payment gateway.
    WECHAT_OPEN_BASE: str
        Base URL of the OAuth authorize page.
    WECHAT_HTTP_TIMEOUT: int
        Timeout in seconds applied to every outbound call.
    WECHAT_TOKEN_SAFETY_MARGIN: int
        Seconds subtracted from a credential's lifetime before caching.
    WECHAT_TOKEN_DEFAULT_LIFETIME: int
        Lifetime assumed when a refresh reply omits ``expires_in``.
    REDIS_URL: str | None
        Shared credential cache; the in-memory cache is used when unset.
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).
    WECHAT_LOG_LEVEL: str | None
        Verbosity of the ``wechat_kit`` loggers; follows ``LOG_LEVEL`` when unset.
    DEBUG: bool
        Toggles Flask debug mode.
    TESTING: bool
        Enables Flask testing mode when ``True``.

    Notes
    -----
    Values are primarily sourced from environment variables, enabling
    configuration without code changes.
    """

    # Application identity
    WECHAT_APP_ID = os.getenv("WECHAT_APP_ID", "")
    WECHAT_APP_SECRET = os.getenv("WECHAT_APP_SECRET", "")

    # Pay
    WECHAT_PAY_MCH_ID = os.getenv("WECHAT_PAY_MCH_ID", "")
    WECHAT_PAY_KEY = os.getenv("WECHAT_PAY_KEY", "")
    WECHAT_PAY_NOTIFY_URL = os.getenv("WECHAT_PAY_NOTIFY_URL", "")

    # Endpoints
    WECHAT_API_BASE = os.getenv("WECHAT_API_BASE", DEFAULT_API_BASE)
    WECHAT_PAY_API_BASE = os.getenv("WECHAT_PAY_API_BASE", DEFAULT_PAY_API_BASE)
    WECHAT_OPEN_BASE = os.getenv("WECHAT_OPEN_BASE", DEFAULT_OPEN_BASE)
    WECHAT_HTTP_TIMEOUT = env_int("WECHAT_HTTP_TIMEOUT", 10)

    # Credential cache
    WECHAT_TOKEN_SAFETY_MARGIN = env_int("WECHAT_TOKEN_SAFETY_MARGIN", 1500)
    WECHAT_TOKEN_DEFAULT_LIFETIME = env_int("WECHAT_TOKEN_DEFAULT_LIFETIME", 7200)
    REDIS_URL = os.getenv("REDIS_URL")

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    WECHAT_LOG_LEVEL = os.getenv("WECHAT_LOG_LEVEL")

    # Flask built-ins
    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development."""

    DEBUG = env_bool("FLASK_DEBUG", True)


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Forces ``TESTING`` mode and disables debug logs.
    - Never talks to Redis unless ``TEST_REDIS_URL`` is set.
    - Propagates exceptions so pytest can surface tracebacks directly.
    """

    TESTING = True
    DEBUG = False
    WECHAT_APP_ID = "wx-test-app"
    WECHAT_APP_SECRET = "test-secret"
    REDIS_URL = os.getenv("TEST_REDIS_URL")
    PROPAGATE_EXCEPTIONS = True


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments."""

    DEBUG = False
    PROPAGATE_EXCEPTIONS = False


# Map names -> classes (simple, explicit)
CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the configuration class inferred from ``APP_ENV``.

    Returns
    -------
    type[BaseConfig]
        Class to pass to :meth:`flask.Config.from_object` or
        :meth:`WeChatSettings.from_mapping`.

    Notes
    -----
    Falls back to :class:`DevelopmentConfig` when ``APP_ENV`` is unset or
    unknown.
    """
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)


@dataclass(frozen=True, slots=True)
class WeChatSettings:
    """Typed view over the ``WECHAT_*`` settings consumed by :func:`create_client`."""

    identity: AppIdentity
    pay: PaySettings = field(default_factory=PaySettings)
    api_base: str = DEFAULT_API_BASE
    pay_api_base: str = DEFAULT_PAY_API_BASE
    open_base: str = DEFAULT_OPEN_BASE
    http_timeout: float = 10.0
    cache: CacheConfig = field(default_factory=CacheConfig)
    redis_url: str | None = None

    @classmethod
    def from_mapping(cls, source: Mapping[str, Any] | type | object) -> WeChatSettings:
        """
        Build settings from a mapping, a Flask ``app.config`` or a config class.

        :param source: Object exposing the ``WECHAT_*`` keys as items or attributes.
        :returns: Immutable settings.
        """
        if isinstance(source, Mapping):
            get = source.get
        else:
            def get(key: str, default: Any = None) -> Any:
                return getattr(source, key, default)

        policy = CredentialPolicy(
            default_lifetime=int(get("WECHAT_TOKEN_DEFAULT_LIFETIME", 7200)),
            safety_margin=int(get("WECHAT_TOKEN_SAFETY_MARGIN", 1500)),
        )
        return cls(
            identity=AppIdentity(
                app_id=get("WECHAT_APP_ID", "") or "",
                app_secret=get("WECHAT_APP_SECRET", "") or "",
            ),
            pay=PaySettings(
                mch_id=get("WECHAT_PAY_MCH_ID", "") or "",
                api_key=get("WECHAT_PAY_KEY", "") or "",
                notify_url=get("WECHAT_PAY_NOTIFY_URL", "") or "",
            ),
            api_base=get("WECHAT_API_BASE", None) or DEFAULT_API_BASE,
            pay_api_base=get("WECHAT_PAY_API_BASE", None) or DEFAULT_PAY_API_BASE,
            open_base=get("WECHAT_OPEN_BASE", None) or DEFAULT_OPEN_BASE,
            http_timeout=float(get("WECHAT_HTTP_TIMEOUT", 10)),
            cache=CacheConfig(default=policy),
            redis_url=get("REDIS_URL", None) or None,
        )
