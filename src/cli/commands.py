"""CLI command implementations — every command goes through ToolDispatcher."""

from __future__ import annotations

import asyncio
import dataclasses
import logging
from typing import Any

import click
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from src.server.app import log_level, serve as serve_stdio
from src.server.dispatcher import ToolDispatcher
from src.turbosmtp.client import turbosmtp_client
from src.turbosmtp.config import ToolSet, TurboSMTPConfig
from src.turbosmtp.types import ToolResult

logger = logging.getLogger(__name__)
console = Console(width=120)


@click.command()
@click.pass_context
def serve(ctx: click.Context) -> None:
    """Run the MCP server on stdio.  Logs to stderr at LOG_LEVEL (default INFO)."""
    config: TurboSMTPConfig = ctx.obj
    if not ctx.find_root().params.get("verbose"):
        logging.getLogger().setLevel(log_level())
    try:
        asyncio.run(serve_stdio(config))
    except KeyboardInterrupt:
        logger.info("Interrupted — goodbye")


@click.command("check-config")
@click.pass_obj
def check_config(config: TurboSMTPConfig) -> None:
    """Report which TurboSMTP variables are configured."""
    _render(_call(config, ToolSet.CONFIG, "validate_email_config", {}))


@click.command()
@click.option("--to", "to", multiple=True, required=True, help="Recipient; repeat for several.")
@click.option("--subject", required=True, help="Email subject.")
@click.option("--text", required=True, help="Plain-text body.")
@click.option("--html", default=None, help="HTML body.")
@click.option("--from", "sender", default=None, help="Sender (defaults to TURBOSMTP_FROM_EMAIL).")
@click.pass_obj
def send(
    config: TurboSMTPConfig,
    to: tuple[str, ...],
    subject: str,
    text: str,
    html: str | None,
    sender: str | None,
) -> None:
    """Send a single email through TurboSMTP."""
    args: dict[str, Any] = {"to": list(to), "subject": subject, "text": text}
    if html is not None:
        args["html"] = html
    if sender is not None:
        args["from"] = sender
    _render(_call(config, config.toolset, "send_email", args))


@click.command()
@click.option("--from", "date_from", required=True, help="Start date (YYYY-MM-DD).")
@click.option("--to", "date_to", required=True, help="End date (YYYY-MM-DD), inclusive.")
@click.option("--page", type=int, default=None, help="Page number.")
@click.option("--limit", type=int, default=None, help="Results per page (1-100).")
@click.option("--tz", default=None, help='Timezone, e.g. "Europe/Rome".')
@click.option("--filter", "filter_", default=None, help="Free-form analytics filter.")
@click.pass_obj
def analytics(
    config: TurboSMTPConfig,
    date_from: str,
    date_to: str,
    page: int | None,
    limit: int | None,
    tz: str | None,
    filter_: str | None,
) -> None:
    """Fetch delivery analytics for a date range."""
    args: dict[str, Any] = {"from": date_from, "to": date_to}
    optional = {"page": page, "limit": limit, "tz": tz, "filter": filter_}
    args.update({k: v for k, v in optional.items() if v is not None})
    _render(_call(config, ToolSet.ANALYTICS, "get_analytics_data", args))


@click.command("analytics-by-id")
@click.argument("message_id")
@click.pass_obj
def analytics_by_id(config: TurboSMTPConfig, message_id: str) -> None:
    """Fetch analytics for a single message ID."""
    _render(_call(config, ToolSet.ANALYTICS, "get_analytics_data_by_id", {"id": message_id}))


# ── Helpers ─────────────────────────────────────────────────────────────────────


def _call(
    config: TurboSMTPConfig, toolset: ToolSet, name: str, args: dict[str, Any]
) -> ToolResult:
    """Run one tool call against the catalog that carries it."""
    return asyncio.run(_call_async(dataclasses.replace(config, toolset=toolset), name, args))


async def _call_async(config: TurboSMTPConfig, name: str, args: dict[str, Any]) -> ToolResult:
    async with turbosmtp_client(config) as client:
        return await ToolDispatcher(client).call_tool(name, args)


def _render(result: ToolResult) -> None:
    """Print the tool result; exit with status 1 if it is an error."""
    if result.success:
        console.print(Panel(Text(result.message), border_style="green"))
        return
    console.print(Panel(Text(result.message), title="[bold red]Failed[/bold red]", border_style="red"))
    raise SystemExit(1)
