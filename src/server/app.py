"""MCP stdio server exposing the TurboSMTP tools.

Registered in an MCP host's server list as::

    {"command": "turbosmtp", "args": ["serve"]}

stdout carries the JSON-RPC stream, so all logging goes to stderr.
"""

import asyncio
import logging
import os
from typing import Any

from dotenv import load_dotenv
from mcp import types
from mcp.server import Server
from mcp.server.stdio import stdio_server

from src.server.dispatcher import ToolDispatcher
from src.turbosmtp.client import turbosmtp_client
from src.turbosmtp.config import TurboSMTPConfig
from src.turbosmtp.errors import ConfigError
from src.turbosmtp.types import ToolResult

logger = logging.getLogger(__name__)

SERVER_NAME = "turbosmtp-email-server"


def to_mcp_tool(definition: dict[str, Any]) -> types.Tool:
    return types.Tool(
        name=definition["name"],
        description=definition["description"],
        inputSchema=definition["inputSchema"],
    )


def to_call_tool_result(result: ToolResult) -> types.CallToolResult:
    """Map a ToolResult onto a single-text-block MCP result."""
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=result.message)],
        isError=result.is_error,
    )


def build_server(dispatcher: ToolDispatcher) -> Server:
    """Return a low-level MCP Server whose handlers delegate to dispatcher."""
    server = Server(SERVER_NAME)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return [to_mcp_tool(t) for t in dispatcher.list_tools()]

    @server.call_tool()
    async def call_tool(name: str, arguments: dict[str, Any]) -> types.CallToolResult:
        result = await dispatcher.call_tool(name, arguments)
        return to_call_tool_result(result)

    return server


async def serve(config: TurboSMTPConfig) -> None:
    """Run the MCP server over stdio until the host closes the stream."""
    try:
        config.validate()
    except ConfigError as exc:
        # Not fatal: tool calls report the missing credentials to the caller.
        logger.warning("%s", exc)

    async with turbosmtp_client(config) as client:
        dispatcher = ToolDispatcher(client)
        server = build_server(dispatcher)
        logger.info(
            "TurboSMTP MCP server started (toolset=%s, tools=%d)",
            config.toolset.value,
            len(dispatcher.list_tools()),
        )
        async with stdio_server() as (read_stream, write_stream):
            await server.run(
                read_stream,
                write_stream,
                server.create_initialization_options(),
            )
    logger.info("TurboSMTP MCP server stopped")


def log_level() -> str:
    """Level name from LOG_LEVEL, defaulting to INFO."""
    return os.environ.get("LOG_LEVEL", "INFO").strip().upper() or "INFO"


def configure_logging() -> None:
    logging.basicConfig(
        level=log_level(),
        format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


# ── Entry point ────────────────────────────────────────────────────────────────


def main() -> None:
    """Start the MCP server.  Called by `python -m src`."""
    load_dotenv()
    configure_logging()

    try:
        config = TurboSMTPConfig.from_env()
    except ConfigError as exc:
        logger.error("%s", exc)
        raise SystemExit(1) from exc

    try:
        asyncio.run(serve(config))
    except KeyboardInterrupt:
        logger.info("Interrupted — goodbye")
