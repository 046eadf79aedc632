from __future__ import annotations

from decimal import Decimal
from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

EnvName = Literal["test", "production"]

DEFAULT_API_BASE_URL = "http://localhost:8080"
DEFAULT_TOKEN_FILE = "~/.py_bankclient/session.json"
DEFAULT_TOKEN_STORAGE_KEY = "banking_access_token"


def _prefixed(name: str) -> AliasChoices:
    return AliasChoices(f"BANK__{name}", name)


class BaseAppSettings(BaseSettings):
    """
    Common client settings.

    Loaded by pydantic-settings from ENV/.env; every variable may also be given
    with the ``BANK__`` prefix, which wins over the bare name.

    Groups:
    - Backend origin (single external setting; default applies when unset)
    - Persisted session token location
    - Logging (console/JSON, optional rotating file)
    - Exchange preview rate (display estimate only)
    """

    model_config = SettingsConfigDict(env_file=(".env",), env_file_encoding="utf-8", extra="ignore")

    env: EnvName = Field(default="test")
    api_base_url: str = Field(alias="API_BASE_URL", default=DEFAULT_API_BASE_URL, validation_alias=_prefixed("API_BASE_URL"))

    token_file: str = Field(alias="TOKEN_FILE", default=DEFAULT_TOKEN_FILE, validation_alias=_prefixed("TOKEN_FILE"))
    token_storage_key: str = Field(alias="TOKEN_STORAGE_KEY", default=DEFAULT_TOKEN_STORAGE_KEY, validation_alias=_prefixed("TOKEN_STORAGE_KEY"))

    log_level: str = Field(alias="LOG_LEVEL", default="INFO", validation_alias=_prefixed("LOG_LEVEL"))
    json_logs: bool = Field(alias="JSON_LOGS", default=False, validation_alias=_prefixed("JSON_LOGS"))
    logging_enabled: bool = Field(alias="LOGGING_ENABLED", default=True, validation_alias=_prefixed("LOGGING_ENABLED"))

    # Rotation options (used when json_logs is true and log_file is set)
    log_file: str | None = Field(alias="LOG_FILE", default=None, validation_alias=_prefixed("LOG_FILE"))
    log_rotation: Literal["time", "size"] = Field(alias="LOG_ROTATION", default="time", validation_alias=_prefixed("LOG_ROTATION"))
    log_max_bytes: int = Field(alias="LOG_MAX_BYTES", default=10_485_760, validation_alias=_prefixed("LOG_MAX_BYTES"))  # 10 MiB
    log_backup_count: int = Field(alias="LOG_BACKUP_COUNT", default=7, validation_alias=_prefixed("LOG_BACKUP_COUNT"))
    log_rotate_when: str = Field(alias="LOG_ROTATE_WHEN", default="midnight", validation_alias=_prefixed("LOG_ROTATE_WHEN"))
    log_rotate_utc: bool = Field(alias="LOG_ROTATE_UTC", default=True, validation_alias=_prefixed("LOG_ROTATE_UTC"))

    exchange_rate_usd_to_eur: Decimal = Field(
        alias="EXCHANGE_RATE_USD_TO_EUR", default=Decimal("0.92"), validation_alias=_prefixed("EXCHANGE_RATE_USD_TO_EUR")
    )

    @field_validator("api_base_url")
    @classmethod
    def validate_api_base_url(cls, v: str) -> str:
        """Require an absolute http(s) origin; trailing slash is stripped."""
        value = (v or "").strip()
        if not value.startswith(("http://", "https://")):
            raise ValueError("API_BASE_URL must be an http:// or https:// URL")
        return value.rstrip("/")

    @field_validator("token_storage_key")
    @classmethod
    def validate_token_storage_key(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("TOKEN_STORAGE_KEY must be non-empty")
        return v

    @field_validator("exchange_rate_usd_to_eur")
    @classmethod
    def validate_exchange_rate(cls, v: Decimal) -> Decimal:
        if v <= 0:
            raise ValueError("EXCHANGE_RATE_USD_TO_EUR must be positive")
        return v


class TestSettings(BaseAppSettings):
    """
    Test profile.

    - Verbose console logging by default
    - Same backend default origin as production
    """

    model_config = SettingsConfigDict(env_prefix="", extra="ignore")

    env: EnvName = Field(default="test")
    log_level: str = Field(alias="LOG_LEVEL", default="DEBUG", validation_alias=_prefixed("LOG_LEVEL"))
    json_logs: bool = Field(alias="JSON_LOGS", default=False, validation_alias=_prefixed("JSON_LOGS"))


class ProdSettings(BaseAppSettings):
    """
    Production profile.

    JSON logs at INFO by default, suitable for log shipping.
    """

    model_config = SettingsConfigDict(env_prefix="", extra="ignore")

    env: EnvName = Field(default="production")
    log_level: str = Field(alias="LOG_LEVEL", default="INFO", validation_alias=_prefixed("LOG_LEVEL"))
    json_logs: bool = Field(alias="JSON_LOGS", default=True, validation_alias=_prefixed("JSON_LOGS"))


# Profiles that skip .env, for isolated tests
class TestSettingsNoFile(TestSettings):
    model_config = SettingsConfigDict(env_file=(), extra="ignore")


class ProdSettingsNoFile(ProdSettings):
    model_config = SettingsConfigDict(env_file=(), extra="ignore")


@lru_cache(maxsize=8)
def get_settings(forced_env: EnvName | None = None, *, ignore_env_file: bool = False) -> BaseAppSettings:
    """
    Cached settings factory driven by ENV.

    Parameters:
    - forced_env: pick a profile explicitly ("test" or "production"), overriding ENV.
    - ignore_env_file: do not read .env (uses the *NoFile classes).

    Returns:
    - Settings instance for the selected profile.
    """
    import os

    selector: EnvName = forced_env or os.getenv("ENV", "test")  # type: ignore[assignment]
    if selector == "production":
        cls = ProdSettingsNoFile if ignore_env_file else ProdSettings
    else:
        cls = TestSettingsNoFile if ignore_env_file else TestSettings

    instance = cls()
    instance.env = selector  # keep env field consistent with the selected profile
    return instance
