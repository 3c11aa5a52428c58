"""
Tests for configuration management.
"""

import pytest

from shared.config import Settings, get_settings
from shared.errors import ConfigError


def test_settings_loads_valid_env(test_env_vars):
    """Test that settings load correctly from environment variables."""
    settings = Settings(_env_file=None)

    assert settings.supabase_url == "https://test-project.supabase.co"
    assert settings.webhook_secret == test_env_vars["WEBHOOK_SECRET"]
    assert settings.webhook_secret_header == "x-api-key"
    assert settings.elevenlabs_api_key == "test-elevenlabs-key"
    assert settings.elevenlabs_base_url == "https://api.elevenlabs.io"
    assert settings.environment == "development"


def test_settings_validates_supabase_url(test_env_vars, monkeypatch):
    """Test that invalid Supabase URL raises ConfigError."""
    monkeypatch.setenv("SUPABASE_URL", "invalid-url")

    with pytest.raises(ConfigError, match="SUPABASE_URL"):
        Settings(_env_file=None)


def test_settings_strips_trailing_slash(test_env_vars, monkeypatch):
    monkeypatch.setenv("SUPABASE_URL", "https://test-project.supabase.co/")

    assert Settings(_env_file=None).supabase_url == "https://test-project.supabase.co"


def test_settings_validates_service_key(test_env_vars, monkeypatch):
    monkeypatch.setenv("SUPABASE_SERVICE_KEY", "short")

    with pytest.raises(ConfigError, match="SUPABASE_SERVICE_KEY"):
        Settings(_env_file=None)


def test_settings_rejects_short_webhook_secret(test_env_vars, monkeypatch):
    """Test that a weak webhook secret is refused at startup."""
    monkeypatch.setenv("WEBHOOK_SECRET", "too-short")

    with pytest.raises(ConfigError, match="at least 16 characters"):
        Settings(_env_file=None)


def test_settings_missing_webhook_secret(test_env_vars, monkeypatch):
    """Test that get_settings reports a missing secret as ConfigError."""
    monkeypatch.delenv("WEBHOOK_SECRET")
    get_settings.cache_clear()

    with pytest.raises(ConfigError, match="Failed to load configuration"):
        get_settings()


def test_secret_header_lowercased(test_env_vars, monkeypatch):
    monkeypatch.setenv("WEBHOOK_SECRET_HEADER", "X-Worker-Secret")

    settings = Settings(_env_file=None)

    assert settings.webhook_secret_header == "x-worker-secret"
    assert "x-worker-secret" in settings.cors_allow_headers


def test_blank_elevenlabs_key_is_unset(test_env_vars, monkeypatch):
    monkeypatch.setenv("ELEVENLABS_API_KEY", "   ")

    assert Settings(_env_file=None).elevenlabs_api_key is None


def test_cors_headers_not_duplicated(test_env_vars, monkeypatch):
    monkeypatch.setenv("WEBHOOK_SECRET_HEADER", "apikey")

    headers = Settings(_env_file=None).cors_allow_headers

    assert headers == ["authorization", "x-client-info", "apikey", "content-type"]


def test_get_settings_is_cached(test_env_vars):
    assert get_settings() is get_settings()
