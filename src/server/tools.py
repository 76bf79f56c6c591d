"""Tool catalog and argument validation for the TurboSMTP MCP server."""

import re
from datetime import date
from typing import Any

from src.turbosmtp.client import DATE_RE
from src.turbosmtp.config import ToolSet
from src.turbosmtp.errors import ValidationError
from src.turbosmtp.types import AnalyticsQuery, EmailMessage

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MAX_LIMIT = 100


# ── Tool definitions ───────────────────────────────────────────────────────────

SEND_EMAIL_TOOL: dict[str, Any] = {
    "name": "send_email",
    "description": "Send an email via TurboSMTP",
    "inputSchema": {
        "type": "object",
        "properties": {
            "to": {
                "type": "array",
                "items": {"type": "string"},
                "description": "List of recipient email addresses",
            },
            "subject": {"type": "string", "description": "Email subject"},
            "text": {"type": "string", "description": "Text content of the email"},
            "html": {
                "type": "string",
                "description": "HTML content of the email (optional)",
            },
            "from": {
                "type": "string",
                "description": "Sender email address (optional, uses configured one if not specified)",
            },
        },
        "required": ["to", "subject", "text"],
    },
}

GET_ANALYTICS_DATA_TOOL: dict[str, Any] = {
    "name": "get_analytics_data",
    "description": "Retrieve analytics data from TurboSMTP for a specific date range",
    "inputSchema": {
        "type": "object",
        "properties": {
            "from": {
                "type": "string",
                "description": "Start date for analytics (format: YYYY-MM-DD)",
                "pattern": r"^\d{4}-\d{2}-\d{2}$",
            },
            "to": {
                "type": "string",
                "description": "End date for analytics (format: YYYY-MM-DD)",
                "pattern": r"^\d{4}-\d{2}-\d{2}$",
            },
            "page": {
                "type": "number",
                "description": "Page number (optional)",
                "minimum": 1,
            },
            "limit": {
                "type": "number",
                "description": "Number of results per page (optional)",
                "minimum": 1,
                "maximum": MAX_LIMIT,
            },
            "tz": {
                "type": "string",
                "description": 'Timezone (optional, e.g., "Europe/Rome", "America/New_York")',
            },
            "filter": {
                "type": "string",
                "description": "Filter for analytics data (optional)",
            },
        },
        "required": ["from", "to"],
    },
}

GET_ANALYTICS_DATA_BY_ID_TOOL: dict[str, Any] = {
    "name": "get_analytics_data_by_id",
    "description": "Retrieve analytics data from TurboSMTP by specific message ID",
    "inputSchema": {
        "type": "object",
        "properties": {"id": {"type": "string", "description": "Message ID"}},
        "required": ["id"],
    },
}

VALIDATE_EMAIL_CONFIG_TOOL: dict[str, Any] = {
    "name": "validate_email_config",
    "description": "Check that the TurboSMTP credentials are configured",
    "inputSchema": {"type": "object", "properties": {}, "required": []},
}

#: Catalog per deployment variant. Order is the order advertised to callers.
CATALOG: dict[ToolSet, list[dict[str, Any]]] = {
    ToolSet.ANALYTICS: [
        SEND_EMAIL_TOOL,
        GET_ANALYTICS_DATA_TOOL,
        GET_ANALYTICS_DATA_BY_ID_TOOL,
    ],
    ToolSet.CONFIG: [
        SEND_EMAIL_TOOL,
        VALIDATE_EMAIL_CONFIG_TOOL,
    ],
}


# ── Argument validation ────────────────────────────────────────────────────────


def is_valid_email(value: object) -> bool:
    return isinstance(value, str) and bool(EMAIL_RE.match(value))


def parse_send_email_args(args: dict[str, Any]) -> EmailMessage:
    """Validate send_email arguments and build an EmailMessage.

    Raises:
        ValidationError: on the first rule that fails.
    """
    to = args.get("to")
    if not isinstance(to, list) or not to:
        raise ValidationError('The "to" field must be a non-empty array of email addresses')

    subject = args.get("subject")
    if not isinstance(subject, str) or not subject:
        raise ValidationError('The "subject" field is required and must be a string')

    text = args.get("text")
    if not isinstance(text, str) or not text:
        raise ValidationError('The "text" field is required and must be a string')

    for address in to:
        if not is_valid_email(address):
            raise ValidationError(f"Invalid email address: {address}")

    html = args.get("html")
    if html is not None and not isinstance(html, str):
        raise ValidationError('The "html" field must be a string')

    sender = args.get("from")
    if sender and not is_valid_email(sender):
        raise ValidationError(f"Invalid sender email address: {sender}")

    return EmailMessage(
        to=[str(a) for a in to],
        subject=subject,
        text=text,
        html=html,
        sender=sender or None,
    )


def parse_analytics_args(args: dict[str, Any]) -> AnalyticsQuery:
    """Validate get_analytics_data arguments and build an AnalyticsQuery.

    Raises:
        ValidationError: on the first rule that fails.
    """
    date_from = _parse_date(args.get("from"), "from")
    date_to = _parse_date(args.get("to"), "to")
    if date_from > date_to:
        raise ValidationError('The "from" date must be before or equal to the "to" date')

    page = _optional_int(args.get("page"))
    if args.get("page") is not None and (page is None or page < 1):
        raise ValidationError('The "page" parameter must be a positive integer')

    limit = _optional_int(args.get("limit"))
    if args.get("limit") is not None and (limit is None or not 1 <= limit <= MAX_LIMIT):
        raise ValidationError(
            f'The "limit" parameter must be an integer between 1 and {MAX_LIMIT}'
        )

    tz = _optional_str(args.get("tz"), "tz")
    filter_ = _optional_str(args.get("filter"), "filter")

    return AnalyticsQuery(
        date_from=args["from"],
        date_to=args["to"],
        page=page,
        limit=limit,
        tz=tz,
        filter=filter_,
    )


def parse_message_id(args: dict[str, Any]) -> str:
    """Return the ``id`` argument, raising ValidationError when absent or empty."""
    message_id = args.get("id")
    if message_id is None or message_id == "":
        raise ValidationError('The "id" parameter is required')
    if not isinstance(message_id, str):
        raise ValidationError('The "id" parameter must be a string')
    return message_id


def _parse_date(value: object, name: str) -> date:
    if not isinstance(value, str) or not DATE_RE.match(value):
        raise ValidationError(
            f'The "{name}" parameter is required and must be in YYYY-MM-DD format'
        )
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ValidationError(
            f'The "{name}" parameter is not a valid calendar date: {value}'
        ) from None


def _optional_int(value: object) -> int | None:
    """Coerce a JSON number to int. Non-integers (and bools) return None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def _optional_str(value: object, name: str) -> str | None:
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ValidationError(f'The "{name}" parameter must be a string')
    return value
