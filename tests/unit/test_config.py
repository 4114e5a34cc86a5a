"""Unit tests for environment-driven settings."""

from __future__ import annotations

from pathlib import Path

import pytest

from idp.core.config import get_settings


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_settings_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("IDP_SERVICE_NAME", "IDP_LOG_LEVEL", "IDP_MESSAGES_PATH"):
        monkeypatch.delenv(name, raising=False)

    settings = get_settings()

    assert settings.service_name == "idp"
    assert settings.log_level == "INFO"
    assert settings.messages_path is None


def test_settings_read_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("IDP_SERVICE_NAME", "idp-test")
    monkeypatch.setenv("IDP_LOG_LEVEL", "debug")
    monkeypatch.setenv("IDP_MESSAGES_PATH", "/etc/idp/messages.json")

    settings = get_settings()

    assert settings.log_level == "DEBUG"
    assert settings.messages_path == Path("/etc/idp/messages.json")
    assert settings.safe_for_logging() == {
        "service_name": "idp-test",
        "log_level": "DEBUG",
        "messages_path": "/etc/idp/messages.json",
    }
