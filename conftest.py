"""
Shared pytest fixtures.

Settings are resolved at import time by the API app and module loggers, so the
test environment is seeded before any project module is imported.
"""

import os
import tempfile

import pytest

TEST_ENV = {
    "SUPABASE_URL": "https://test-project.supabase.co",
    "SUPABASE_SERVICE_KEY": "test_service_key_1234567890123456789012345678901234567890",
    "WEBHOOK_SECRET": "test-webhook-secret-0123456789",
    "WEBHOOK_SECRET_HEADER": "x-api-key",
    "ELEVENLABS_API_KEY": "test-elevenlabs-key",
    "ENVIRONMENT": "development",
    "LOG_LEVEL": "DEBUG",
    "LOG_DIR": tempfile.mkdtemp(prefix="pipeline-logs-"),
}

for _key, _value in TEST_ENV.items():
    os.environ.setdefault(_key, _value)


@pytest.fixture
def test_env_vars(monkeypatch):
    """Pin the test environment and reset the cached settings around the test."""
    from shared.config import get_settings

    for key, value in TEST_ENV.items():
        monkeypatch.setenv(key, value)
    get_settings.cache_clear()
    yield TEST_ENV
    get_settings.cache_clear()


@pytest.fixture
def webhook_headers():
    """Headers a worker sends with a valid secret."""
    return {TEST_ENV["WEBHOOK_SECRET_HEADER"]: TEST_ENV["WEBHOOK_SECRET"]}
