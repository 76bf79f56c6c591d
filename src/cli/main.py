"""CLI entry point for the TurboSMTP MCP server."""

import logging

import click
from dotenv import load_dotenv

from src.turbosmtp.config import TurboSMTPConfig
from src.turbosmtp.errors import ConfigError

logger = logging.getLogger(__name__)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log HTTP requests to stderr.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """TurboSMTP MCP server — serve tools, send test emails, inspect analytics."""
    load_dotenv()
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
    )
    try:
        ctx.obj = TurboSMTPConfig.from_env()
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc


# Import and register commands after cli is defined to avoid circular imports.
from src.cli.commands import analytics, analytics_by_id, check_config, send, serve  # noqa: E402

cli.add_command(serve)
cli.add_command(check_config)
cli.add_command(send)
cli.add_command(analytics)
cli.add_command(analytics_by_id)
