"""Process-wide TurboSMTP configuration, read once from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum

from src.turbosmtp.errors import ConfigError

DEFAULT_SEND_API_URL = "https://api.turbo-smtp.com/api/v2"
DEFAULT_API_URL = "https://pro.api.serversmtp.com/api/v2"

CONSUMER_KEY_VAR = "TURBOSMTP_CONSUMER_KEY"
CONSUMER_SECRET_VAR = "TURBOSMTP_CONSUMER_SECRET"
FROM_EMAIL_VAR = "TURBOSMTP_FROM_EMAIL"


class ToolSet(str, Enum):
    """Which tool catalog the server advertises.

    The two variants are separate deployments; a server exposes exactly one.
    """

    ANALYTICS = "analytics"  # send_email + analytics lookups
    CONFIG = "config"        # send_email + validate_email_config


@dataclass(frozen=True)
class TurboSMTPConfig:
    """Credentials and endpoints for the TurboSMTP API.

    Built once at startup and handed to TurboSMTPClient by reference; nothing
    downstream re-reads the environment.
    """

    consumer_key: str = ""
    consumer_secret: str = ""
    from_email: str = ""
    send_api_url: str = DEFAULT_SEND_API_URL
    api_url: str = DEFAULT_API_URL
    toolset: ToolSet = ToolSet.ANALYTICS

    @classmethod
    def from_env(cls) -> TurboSMTPConfig:
        """Build TurboSMTPConfig from environment variables."""
        raw_toolset = os.environ.get("TURBOSMTP_TOOLSET", ToolSet.ANALYTICS.value)
        try:
            toolset = ToolSet(raw_toolset.strip().lower())
        except ValueError:
            raise ConfigError(
                f"TURBOSMTP_TOOLSET must be one of "
                f"{', '.join(t.value for t in ToolSet)}; got {raw_toolset!r}"
            ) from None
        return cls(
            consumer_key=os.environ.get(CONSUMER_KEY_VAR, ""),
            consumer_secret=os.environ.get(CONSUMER_SECRET_VAR, ""),
            from_email=os.environ.get(FROM_EMAIL_VAR, ""),
            send_api_url=os.environ.get("TURBOSMTP_SEND_API_URL", DEFAULT_SEND_API_URL).rstrip("/"),
            api_url=os.environ.get("TURBOSMTP_API_URL", DEFAULT_API_URL).rstrip("/"),
            toolset=toolset,
        )

    @property
    def missing_credentials(self) -> list[str]:
        """Names of the required variables that are unset or empty."""
        missing = []
        if not self.consumer_key:
            missing.append(CONSUMER_KEY_VAR)
        if not self.consumer_secret:
            missing.append(CONSUMER_SECRET_VAR)
        return missing

    def validate(self) -> None:
        """Raise ConfigError if either credential is absent or not sendable as a header."""
        missing = self.missing_credentials
        if missing:
            raise ConfigError(
                f"TurboSMTP configuration missing: {' and '.join(missing)} "
                f"{'is' if len(missing) == 1 else 'are'} required"
            )
        for var, value in ((CONSUMER_KEY_VAR, self.consumer_key), (CONSUMER_SECRET_VAR, self.consumer_secret)):
            if not value.isascii():
                raise ConfigError(f"{var} must contain only ASCII characters")

    def headers(self) -> dict[str, str]:
        """Static headers sent on every TurboSMTP request."""
        return {
            "Content-Type": "application/json",
            "consumerKey": self.consumer_key,
            "consumerSecret": self.consumer_secret,
        }

    def __repr__(self) -> str:
        # Keep secrets out of logs and tracebacks.
        return (
            f"TurboSMTPConfig(consumer_key={'***' if self.consumer_key else ''!r}, "
            f"consumer_secret={'***' if self.consumer_secret else ''!r}, "
            f"from_email={self.from_email!r}, send_api_url={self.send_api_url!r}, "
            f"api_url={self.api_url!r}, toolset={self.toolset.value!r})"
        )
