import pytest
from pydantic import ValidationError

from src.config import ApiConfig, AppEnvironment, Settings
from src.faasr_client.infrastructure.logging import _security_filter


def test_defaults(monkeypatch):
    monkeypatch.delenv("APP_ENV", raising=False)
    settings = Settings(_env_file=None)

    assert settings.env == AppEnvironment.DEV
    assert settings.api.base_url == "http://localhost:54321/functions/v1"
    assert settings.upload.max_size_bytes == 1024 * 1024
    assert settings.upload.reset_delay_ms == 2000
    assert settings.notification.success_auto_dismiss_ms == 5000

def test_nested_env_overrides(monkeypatch):
    monkeypatch.setenv("APP_ENV", "production")
    monkeypatch.setenv("API__BASE_URL", "https://example.supabase.co/functions/v1/")
    monkeypatch.setenv("UPLOAD__RESET_DELAY_MS", "500")

    settings = Settings(_env_file=None)

    assert settings.env == AppEnvironment.PROD
    assert settings.api.base_url == "https://example.supabase.co/functions/v1"
    assert settings.upload.reset_delay_ms == 500

@pytest.mark.parametrize("url", ["localhost:54321", "ftp://example.com", "not a url"])
def test_base_url_must_be_http(url):
    with pytest.raises(ValidationError):
        ApiConfig(base_url=url)

def test_security_filter_masks_tokens():
    event = {"event": "signed_in", "token": "jwt", "Cookie": "faasr_session=jwt", "user_login": "octocat"}

    filtered = _security_filter(None, "info", event)

    assert filtered["token"] == "***"
    assert filtered["Cookie"] == "***"
    assert filtered["user_login"] == "octocat"

def test_security_filter_matches_key_substrings():
    event = {"event": "seeded", "SESSION_TOKEN": "jwt", "set_cookie": "x", "authorization": "Bearer abc"}

    filtered = _security_filter(None, "info", event)

    assert filtered["SESSION_TOKEN"] == "***"
    assert filtered["set_cookie"] == "***"
    assert filtered["authorization"] == "***"

def test_security_filter_scrubs_credentials_in_text():
    event = {
        "event": "api_request_failed",
        "error": "rejected faasr_session=eyJhbGciOi.payload.sig; Path=/ with Bearer abc123",
        "path": "/auth/session",
    }

    filtered = _security_filter(None, "warning", event)

    assert filtered["error"] == "rejected faasr_session=***; Path=/ with Bearer ***"
    assert filtered["path"] == "/auth/session"
