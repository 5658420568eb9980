from __future__ import annotations

import pytest
from pydantic import ValidationError

from app.core.config import Settings
from app.services.rates.cache_service import build_rate_provider


def test_defaults_are_fallback_only():
    settings = Settings(exchange_rate_api_key=None, _env_file=None)
    assert settings.rates_cache_ttl_seconds == 86400
    assert settings.http_timeout_seconds == 5.0
    assert build_rate_provider(settings).live_enabled is False


def test_blank_key_means_unset():
    settings = Settings(exchange_rate_api_key="   ", admin_token="", _env_file=None)
    assert settings.exchange_rate_api_key is None
    assert settings.admin_token is None


def test_key_enables_live_source():
    settings = Settings(exchange_rate_api_key="abc", _env_file=None)
    assert build_rate_provider(settings).live_enabled is True


def test_env_variables_are_read(monkeypatch):
    monkeypatch.setenv("EXCHANGE_RATE_API_KEY", "from-env")
    monkeypatch.setenv("RATES_CACHE_TTL_SECONDS", "600")
    settings = Settings(_env_file=None)
    assert settings.exchange_rate_api_key == "from-env"
    assert settings.rates_cache_ttl_seconds == 600


@pytest.mark.parametrize(
    "field, value",
    [
        ("rates_cache_ttl_seconds", 0),
        ("http_timeout_seconds", -1.0),
        ("http_retries", -1),
        ("exchange_rate_api_url", "not a url"),
    ],
)
def test_invalid_values_rejected(field, value):
    with pytest.raises(ValidationError):
        Settings(**{field: value, "_env_file": None})
