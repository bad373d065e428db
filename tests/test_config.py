"""Tests for the environment-driven settings."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from inbox.config import Settings, get_settings, reset_settings_cache


def test_defaults() -> None:
    settings = Settings(database_url="sqlite:///:memory:")

    assert settings.outbound_timeout_seconds == 10.0
    assert settings.cors_allow_origins == ["*"]
    assert settings.pusher_enabled is False


def test_sendgrid_settings_come_in_pairs() -> None:
    with pytest.raises(ValidationError):
        Settings(sendgrid_api_key="SG.fake", sendgrid_sender=None)

    with pytest.raises(ValidationError):
        Settings(sendgrid_api_key="SG.fake", sendgrid_sender="not-an-address")


def test_vapid_keys_come_in_pairs() -> None:
    with pytest.raises(ValidationError):
        Settings(web_push_public_key="public", web_push_private_key=None)


def test_settings_are_cached_until_reset(monkeypatch: pytest.MonkeyPatch) -> None:
    first = get_settings()
    monkeypatch.setenv("APP_BASE_URL", "https://staging.example.com")

    assert get_settings() is first

    reset_settings_cache()
    try:
        assert get_settings().app_base_url == "https://staging.example.com"
    finally:
        monkeypatch.delenv("APP_BASE_URL")
        reset_settings_cache()
