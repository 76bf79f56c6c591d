"""Tool dispatcher — validates tool arguments, calls TurboSMTP, formats text output."""

import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from src.server.tools import (
    CATALOG,
    parse_analytics_args,
    parse_message_id,
    parse_send_email_args,
)
from src.turbosmtp.client import TurboSMTPClient
from src.turbosmtp.config import CONSUMER_KEY_VAR, CONSUMER_SECRET_VAR, FROM_EMAIL_VAR
from src.turbosmtp.errors import (
    ConfigError,
    ProviderError,
    TurboSMTPError,
    UnknownToolError,
)
from src.turbosmtp.types import ToolResult

logger = logging.getLogger(__name__)

_Handler = Callable[[dict[str, Any]], Awaitable[ToolResult]]


class ToolDispatcher:
    """Routes MCP tool calls to TurboSMTPClient.

    call_tool() never raises for expected failures: validation, configuration
    and provider errors come back as an error-flagged ToolResult so the
    transport layer always has a text response to send.
    """

    def __init__(self, client: TurboSMTPClient) -> None:
        self._client = client
        self._tools = {tool["name"]: tool for tool in CATALOG[client.config.toolset]}
        self._handlers: dict[str, _Handler] = {
            "send_email": self._send_email,
            "get_analytics_data": self._get_analytics_data,
            "get_analytics_data_by_id": self._get_analytics_data_by_id,
            "validate_email_config": self._validate_email_config,
        }

    def list_tools(self) -> list[dict[str, Any]]:
        """Return the static tool catalog for the configured deployment variant."""
        return list(self._tools.values())

    async def call_tool(self, name: str, arguments: dict[str, Any] | None) -> ToolResult:
        """Validate, execute and format one tool call."""
        args = arguments or {}
        try:
            if name not in self._tools:
                raise UnknownToolError(f"Unknown tool: {name}")
            result = await self._handlers[name](args)
        except TurboSMTPError as exc:
            logger.warning("Tool %s failed (%s): %s", name, type(exc).__name__, exc)
            return ToolResult.error(exc)

        logger.info("Tool %s succeeded", name)
        return result

    # ── Handlers ───────────────────────────────────────────────────────────────

    async def _send_email(self, args: dict[str, Any]) -> ToolResult:
        message = parse_send_email_args(args)
        self._client.validate_configuration()
        try:
            result = await self._client.send_email(message)
        except TurboSMTPError as exc:
            raise _with_context(exc, "Error sending email") from exc

        text = (
            "✅ Email sent successfully!\n\n"
            f"Recipients: {', '.join(message.to)}\n"
            f"Subject: {message.subject}\n\n"
            f"Details: {_pretty(result.data)}"
        )
        return ToolResult.ok(text, result.data)

    async def _get_analytics_data(self, args: dict[str, Any]) -> ToolResult:
        query = parse_analytics_args(args)
        self._client.validate_configuration()
        try:
            result = await self._client.get_analytics_data(query)
        except TurboSMTPError as exc:
            raise _with_context(exc, "Error retrieving analytics data") from exc

        lines = [
            "📊 Analytics Data Retrieved Successfully!",
            "",
            f"Date Range: {query.date_from} to {query.date_to}",
        ]
        if query.page:
            lines.append(f"Page: {query.page}")
        if query.limit:
            lines.append(f"Results per page: {query.limit}")
        if query.tz:
            lines.append(f"Timezone: {query.tz}")
        if query.filter:
            lines.append(f"Filter: {query.filter}")
        lines += ["", "📈 Analytics Summary:", _pretty(result.data)]
        return ToolResult.ok("\n".join(lines), result.data)

    async def _get_analytics_data_by_id(self, args: dict[str, Any]) -> ToolResult:
        message_id = parse_message_id(args)
        self._client.validate_configuration()
        try:
            result = await self._client.get_analytics_data_by_id(message_id)
        except TurboSMTPError as exc:
            raise _with_context(exc, "Error retrieving analytics data") from exc

        text = (
            "📊 Analytics Data Retrieved Successfully!\n\n"
            f"Message ID: {message_id}\n\n"
            "📈 Analytics Summary:\n"
            f"{_pretty(result.data)}"
        )
        return ToolResult.ok(text, result.data)

    async def _validate_email_config(self, args: dict[str, Any]) -> ToolResult:
        config = self._client.config
        status = {
            CONSUMER_KEY_VAR: bool(config.consumer_key),
            CONSUMER_SECRET_VAR: bool(config.consumer_secret),
            FROM_EMAIL_VAR: bool(config.from_email),
        }
        report = "\n".join(
            f"{'✅' if configured else '❌'} {var}: {'configured' if configured else 'missing'}"
            for var, configured in status.items()
        )
        try:
            self._client.validate_configuration()
        except ConfigError as exc:
            return ToolResult(
                success=False,
                message=f"Error: {exc}\n\n{report}",
                data=status,
                error_kind=type(exc).__name__,
            )
        return ToolResult.ok(f"✅ TurboSMTP configuration is valid\n\n{report}", status)


def _pretty(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False, default=str)


def _with_context(exc: TurboSMTPError, context: str) -> TurboSMTPError:
    """Return a copy of exc whose message is prefixed with what was being attempted."""
    if isinstance(exc, ProviderError):
        return ProviderError(
            f"{context}: {exc}", status_code=exc.status_code, payload=exc.payload
        )
    return type(exc)(f"{context}: {exc}")
