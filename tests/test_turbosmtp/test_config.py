"""Tests for TurboSMTPConfig — env var parsing and credential checks."""

import dataclasses

import pytest

from src.turbosmtp.config import (
    DEFAULT_API_URL,
    DEFAULT_SEND_API_URL,
    ToolSet,
    TurboSMTPConfig,
)
from src.turbosmtp.errors import ConfigError

_ENV_VARS = (
    "TURBOSMTP_CONSUMER_KEY",
    "TURBOSMTP_CONSUMER_SECRET",
    "TURBOSMTP_FROM_EMAIL",
    "TURBOSMTP_SEND_API_URL",
    "TURBOSMTP_API_URL",
    "TURBOSMTP_TOOLSET",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in _ENV_VARS:
        monkeypatch.delenv(key, raising=False)


class TestFromEnv:
    def test_reads_credentials(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TURBOSMTP_CONSUMER_KEY", "k")
        monkeypatch.setenv("TURBOSMTP_CONSUMER_SECRET", "s")
        monkeypatch.setenv("TURBOSMTP_FROM_EMAIL", "me@example.com")
        config = TurboSMTPConfig.from_env()
        assert config.consumer_key == "k"
        assert config.consumer_secret == "s"
        assert config.from_email == "me@example.com"

    def test_defaults_when_env_absent(self) -> None:
        config = TurboSMTPConfig.from_env()
        assert config.consumer_key == ""
        assert config.from_email == ""
        assert config.send_api_url == DEFAULT_SEND_API_URL
        assert config.api_url == DEFAULT_API_URL
        assert config.toolset is ToolSet.ANALYTICS

    def test_url_overrides_strip_trailing_slash(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TURBOSMTP_API_URL", "http://localhost:9000/api/v2/")
        assert TurboSMTPConfig.from_env().api_url == "http://localhost:9000/api/v2"

    def test_toolset_is_case_insensitive(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TURBOSMTP_TOOLSET", "CONFIG")
        assert TurboSMTPConfig.from_env().toolset is ToolSet.CONFIG

    def test_unknown_toolset_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TURBOSMTP_TOOLSET", "everything")
        with pytest.raises(ConfigError, match="TURBOSMTP_TOOLSET"):
            TurboSMTPConfig.from_env()


class TestValidate:
    def test_passes_with_both_credentials(self, config: TurboSMTPConfig) -> None:
        config.validate()
        assert config.missing_credentials == []

    def test_missing_key(self, config: TurboSMTPConfig) -> None:
        broken = dataclasses.replace(config, consumer_key="")
        with pytest.raises(ConfigError, match="TURBOSMTP_CONSUMER_KEY is required"):
            broken.validate()

    def test_missing_both(self) -> None:
        with pytest.raises(ConfigError) as exc_info:
            TurboSMTPConfig().validate()
        assert "TURBOSMTP_CONSUMER_KEY and TURBOSMTP_CONSUMER_SECRET are required" in str(exc_info.value)

    def test_sender_is_optional(self, config: TurboSMTPConfig) -> None:
        dataclasses.replace(config, from_email="").validate()

    def test_non_ascii_secret(self, config: TurboSMTPConfig) -> None:
        broken = dataclasses.replace(config, consumer_secret="sécret€")
        with pytest.raises(ConfigError, match="TURBOSMTP_CONSUMER_SECRET must contain only ASCII"):
            broken.validate()


class TestHeadersAndRepr:
    def test_headers(self, config: TurboSMTPConfig) -> None:
        assert config.headers() == {
            "Content-Type": "application/json",
            "consumerKey": "key_123",
            "consumerSecret": "secret_456",
        }

    def test_repr_hides_secrets(self, config: TurboSMTPConfig) -> None:
        text = repr(config)
        assert "key_123" not in text
        assert "secret_456" not in text
        assert "noreply@example.com" in text

    def test_is_immutable(self, config: TurboSMTPConfig) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.consumer_key = "other"  # type: ignore[misc]
