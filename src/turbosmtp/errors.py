"""Error taxonomy shared by the TurboSMTP client and the tool dispatcher."""

from typing import Any


class TurboSMTPError(Exception):
    """Base class for every failure surfaced to a caller."""


class ConfigError(TurboSMTPError):
    """Raised when required credentials are missing from the configuration."""


class ValidationError(TurboSMTPError):
    """Raised for malformed caller input, always before any network call."""


class ProviderError(TurboSMTPError):
    """Raised when TurboSMTP answers with a non-success status or is unreachable.

    ``status_code`` is None for transport failures (DNS, connection reset, ...).
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        payload: Any = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


class UnknownToolError(TurboSMTPError):
    """Raised when a tool name is not in the active catalog."""
