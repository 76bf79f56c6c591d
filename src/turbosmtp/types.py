"""Data types passed between the TurboSMTP client and the tool dispatcher."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class EmailMessage:
    """A single outbound email.

    ``to`` may be one address or a list; the client joins lists with commas
    because that is the form the /mail/send endpoint expects.
    """

    to: list[str] | str
    subject: str
    text: str = ""
    html: str | None = None
    sender: str | None = None  # "from" on the wire; None → configured default


@dataclass(frozen=True)
class AnalyticsQuery:
    """Date-range analytics request. Dates are inclusive ``YYYY-MM-DD`` strings."""

    date_from: str
    date_to: str
    page: int | None = None
    limit: int | None = None
    tz: str | None = None
    filter: str | None = None

    def to_params(self) -> list[tuple[str, str]]:
        """Query-string pairs for the fields that are set, in a stable order."""
        params = [("from", self.date_from), ("to", self.date_to)]
        if self.page:
            params.append(("page", str(self.page)))
        if self.limit:
            params.append(("limit", str(self.limit)))
        if self.tz:
            params.append(("tz", self.tz))
        if self.filter:
            params.append(("filter", self.filter))
        return params


@dataclass(frozen=True)
class ProviderResult:
    """Successful TurboSMTP response. ``data`` is the decoded body, untouched."""

    success: bool
    message: str
    data: Any = None


@dataclass(frozen=True)
class ToolResult:
    """Outcome of one tool call, either a success or an error variant.

    Produced by ToolDispatcher.call_tool() and consumed by the MCP adapter
    (src.server.app) and the CLI commands.
    """

    success: bool
    message: str
    data: Any = None
    error_kind: str | None = None  # error class name when success is False

    @classmethod
    def ok(cls, message: str, data: Any = None) -> "ToolResult":
        return cls(success=True, message=message, data=data)

    @classmethod
    def error(cls, exc: Exception) -> "ToolResult":
        return cls(
            success=False,
            message=f"Error: {exc}",
            error_kind=type(exc).__name__,
        )

    @property
    def is_error(self) -> bool:
        return not self.success
