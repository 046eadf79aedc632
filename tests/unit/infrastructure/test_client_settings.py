from __future__ import annotations

from collections.abc import Generator
from contextlib import suppress
from decimal import Decimal

import pytest
from pydantic import ValidationError

from py_bankclient.infrastructure.config.settings import (
    DEFAULT_API_BASE_URL,
    DEFAULT_TOKEN_STORAGE_KEY,
    BaseAppSettings,
    TestSettingsNoFile,
    get_settings,
)


@pytest.fixture(autouse=True)
def clear_env(monkeypatch: pytest.MonkeyPatch) -> Generator:
    # reset cache and variables that may leak from the environment
    with suppress(Exception):
        get_settings.cache_clear()  # type: ignore[attr-defined]
    for key in (
        "ENV",
        "API_BASE_URL",
        "BANK__API_BASE_URL",
        "LOG_LEVEL",
        "BANK__LOG_LEVEL",
        "JSON_LOGS",
        "LOGGING_ENABLED",
        "TOKEN_FILE",
        "TOKEN_STORAGE_KEY",
        "EXCHANGE_RATE_USD_TO_EUR",
    ):
        monkeypatch.delenv(key, raising=False)
    yield
    with suppress(Exception):
        get_settings.cache_clear()  # type: ignore[attr-defined]


def test_settings_test_profile_defaults() -> None:
    s = get_settings(ignore_env_file=True)
    assert s.env == "test"
    assert s.api_base_url == DEFAULT_API_BASE_URL
    assert s.token_storage_key == DEFAULT_TOKEN_STORAGE_KEY
    assert s.exchange_rate_usd_to_eur == Decimal("0.92")
    assert s.log_level.upper() == "DEBUG"
    assert s.json_logs is False
    assert s.logging_enabled is True


def test_settings_prod_profile_defaults() -> None:
    s = get_settings(forced_env="production", ignore_env_file=True)
    assert s.env == "production"
    assert s.log_level.upper() == "INFO"
    assert s.json_logs is True


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("API_BASE_URL", "https://bank.example.com/")
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    monkeypatch.setenv("EXCHANGE_RATE_USD_TO_EUR", "0.95")
    s: BaseAppSettings = get_settings(ignore_env_file=True)
    assert s.api_base_url == "https://bank.example.com"
    assert s.log_level.upper() == "WARNING"
    assert s.exchange_rate_usd_to_eur == Decimal("0.95")


def test_namespaced_env_wins(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("API_BASE_URL", "http://plain:8080")
    monkeypatch.setenv("BANK__API_BASE_URL", "http://namespaced:8080")
    s = get_settings(ignore_env_file=True)
    assert s.api_base_url == "http://namespaced:8080"


def test_forced_env_switch(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENV", "production")
    s = get_settings(forced_env="test", ignore_env_file=True)
    assert s.env == "test"


@pytest.mark.parametrize("url", ["localhost:8080", "ftp://bank", ""])
def test_base_url_must_be_http(url: str) -> None:
    with pytest.raises(ValidationError):
        TestSettingsNoFile(API_BASE_URL=url)


def test_rate_must_be_positive() -> None:
    with pytest.raises(ValidationError):
        TestSettingsNoFile(EXCHANGE_RATE_USD_TO_EUR="0")


def test_logging_enabled_flag(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOGGING_ENABLED", "false")
    s = get_settings(ignore_env_file=True)
    assert s.logging_enabled is False
