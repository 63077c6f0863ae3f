"""Tests for settings loaded from the environment."""

import pytest

from surveyrelay.config import (
    DEFAULT_SHEETS_ENDPOINT,
    DELIVERY_TIMEOUT_KEY,
    LOG_PAYLOAD_KEY,
    SHEETS_ENDPOINT_KEY,
    env_flag,
    load_settings,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in (SHEETS_ENDPOINT_KEY, DELIVERY_TIMEOUT_KEY, LOG_PAYLOAD_KEY):
        monkeypatch.delenv(key, raising=False)


def test_load_settings_defaults():
    settings = load_settings()

    assert settings.endpoint_url == DEFAULT_SHEETS_ENDPOINT
    assert settings.timeout is None
    assert settings.log_payload is False


def test_load_settings_from_environment(monkeypatch):
    monkeypatch.setenv(SHEETS_ENDPOINT_KEY, "https://sheets.example.test/exec")
    monkeypatch.setenv(DELIVERY_TIMEOUT_KEY, "2.5")
    monkeypatch.setenv(LOG_PAYLOAD_KEY, "true")

    settings = load_settings()

    assert settings.endpoint_url == "https://sheets.example.test/exec"
    assert settings.timeout == 2.5
    assert settings.log_payload is True


@pytest.mark.parametrize("value", ["0", "-1", "soon"])
def test_load_settings_rejects_invalid_timeout(monkeypatch, value):
    monkeypatch.setenv(DELIVERY_TIMEOUT_KEY, value)

    with pytest.raises(ValueError):
        load_settings()


@pytest.mark.parametrize(
    "value, expected",
    [("1", True), ("YES", True), ("on", True), ("false", False), ("0", False), ("", False)],
)
def test_env_flag(monkeypatch, value, expected):
    monkeypatch.setenv("SURVEY_TEST_FLAG", value)

    assert env_flag("SURVEY_TEST_FLAG") is expected


def test_env_flag_default(monkeypatch):
    monkeypatch.delenv("SURVEY_TEST_FLAG", raising=False)

    assert env_flag("SURVEY_TEST_FLAG", default=True) is True
