"""Tests for runtime settings validation and loading."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from portfolio_ledger.config import (
    AppSettings,
    SettingsLoadError,
    config_load_database_url,
    config_load_settings,
)


def test_config_settings_defaults_use_mock_prices_and_sql_storage() -> None:
    """Default to SQL storage with the offline mock price provider.

    Returns:
        None: Assertions validate defaults.

    Raises:
        AssertionError: Raised when defaults change.
    """

    settings = AppSettings(_env_file=None)

    assert settings.storage_backend == "sql"
    assert settings.price_provider == "mock"
    assert settings.account_write_retry_attempts == 3
    assert settings.log_level == "INFO"


def test_config_settings_normalize_log_level_and_blank_secrets() -> None:
    """Uppercase log level and treat blank API keys as missing.

    Returns:
        None: Assertions validate normalization.

    Raises:
        AssertionError: Raised when normalization fails.
    """

    settings = AppSettings(_env_file=None, log_level="debug", finnhub_api_key="   ")

    assert settings.log_level == "DEBUG"
    assert settings.finnhub_api_key is None


@pytest.mark.parametrize(
    "overrides",
    [
        {"price_provider": "finnhub"},
        {"price_provider": "alpha_vantage", "alpha_vantage_api_key": ""},
        {"log_level": "verbose"},
        {"api_default_limit": 100, "api_max_limit": 10},
        {"storage_backend": "redis"},
        {"database_url": "  "},
    ],
)
def test_config_settings_reject_invalid_values(overrides: dict[str, object]) -> None:
    """Reject settings combinations that cannot start the service.

    Args:
        overrides: Field values passed to the settings model.

    Returns:
        None: Assertions validate rejection.

    Raises:
        AssertionError: Raised when invalid settings are accepted.
    """

    with pytest.raises(ValidationError):
        AppSettings(_env_file=None, **overrides)


def test_config_load_settings_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Load settings from environment variables.

    Args:
        monkeypatch: Pytest monkeypatch fixture.

    Returns:
        None: Assertions validate environment loading.

    Raises:
        AssertionError: Raised when environment values are ignored.
    """

    monkeypatch.setenv("STORAGE_BACKEND", "memory")
    monkeypatch.setenv("PRICE_PROVIDER", "finnhub")
    monkeypatch.setenv("FINNHUB_API_KEY", "secret")

    settings = config_load_settings()

    assert settings.storage_backend == "memory"
    assert settings.price_provider == "finnhub"
    assert settings.finnhub_api_key == "secret"


def test_config_load_settings_wraps_validation_errors(monkeypatch: pytest.MonkeyPatch) -> None:
    """Raise SettingsLoadError when environment values are invalid.

    Args:
        monkeypatch: Pytest monkeypatch fixture.

    Returns:
        None: Assertions validate error wrapping.

    Raises:
        AssertionError: Raised when raw validation errors leak.
    """

    monkeypatch.setenv("PRICE_PROVIDER", "alpha_vantage")
    monkeypatch.delenv("ALPHA_VANTAGE_API_KEY", raising=False)

    with pytest.raises(SettingsLoadError, match="Startup configuration validation failed"):
        config_load_settings()


def test_config_load_database_url_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Load only the database URL for migration tooling.

    Args:
        monkeypatch: Pytest monkeypatch fixture.

    Returns:
        None: Assertions validate URL loading.

    Raises:
        AssertionError: Raised when URL is not loaded.
    """

    monkeypatch.setenv("DATABASE_URL", "sqlite:///ledger.db")
    monkeypatch.setenv("PRICE_PROVIDER", "not-a-provider")

    assert config_load_database_url() == "sqlite:///ledger.db"
