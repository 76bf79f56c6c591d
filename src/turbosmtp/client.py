"""TurboSMTP client — wraps the send and analytics endpoints behind a typed async API."""

import logging
import re
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any
from urllib.parse import quote

import httpx

from src.turbosmtp.config import TurboSMTPConfig
from src.turbosmtp.errors import ConfigError, ProviderError, ValidationError
from src.turbosmtp.types import AnalyticsQuery, EmailMessage, ProviderResult

logger = logging.getLogger(__name__)

DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class TurboSMTPClient:
    """Thin async wrapper around the TurboSMTP REST API.

    Every data operation makes exactly one HTTP request: no retries, no
    caching, and the transport's default timeout.  Failures are raised as
    ProviderError with TurboSMTP's own message when the body carries one.

    Usage::

        async with turbosmtp_client(config) as client:
            result = await client.send_email(EmailMessage(to=["a@b.com"], subject="Hi", text="..."))
    """

    def __init__(
        self,
        config: TurboSMTPConfig,
        http: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config
        self._http = http or httpx.AsyncClient()
        self._owns_http = http is None

    @property
    def config(self) -> TurboSMTPConfig:
        return self._config

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def __aenter__(self) -> "TurboSMTPClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # ── Public API ─────────────────────────────────────────────────────────────

    async def send_email(self, message: EmailMessage) -> ProviderResult:
        """Send one email via POST /mail/send.

        A missing sender falls back to the configured TURBOSMTP_FROM_EMAIL.

        Raises:
            ValidationError: if no sender is given and none is configured.
            ProviderError: on a non-2xx response or transport failure.
        """
        recipients = [message.to] if isinstance(message.to, str) else list(message.to)
        sender = message.sender or self._config.from_email
        if not sender:
            raise ValidationError(
                'No sender address: pass "from" or set TURBOSMTP_FROM_EMAIL'
            )

        payload = {
            "to": ",".join(recipients),
            "subject": message.subject,
            "content": message.text or "",
            "html_content": message.html or "",
            "from": sender,
        }
        data = await self._request(
            "POST",
            f"{self._config.send_api_url}/mail/send",
            action="sending email",
            json=payload,
        )
        logger.info("Sent email to %s: %r", payload["to"], message.subject)
        return ProviderResult(success=True, message="Email sent successfully", data=data)

    async def get_analytics_data(self, query: AnalyticsQuery) -> ProviderResult:
        """Fetch analytics for an inclusive date range via GET /analytics.

        Raises:
            ValidationError: if ``from``/``to`` are not YYYY-MM-DD.
            ProviderError: on a non-2xx response or transport failure.
        """
        if not query.date_from or not DATE_RE.match(query.date_from):
            raise ValidationError(
                'The "from" parameter is required and must be in YYYY-MM-DD format.'
            )
        if not query.date_to or not DATE_RE.match(query.date_to):
            raise ValidationError(
                'The "to" parameter is required and must be in YYYY-MM-DD format.'
            )

        data = await self._request(
            "GET",
            f"{self._config.api_url}/analytics",
            action="retrieving analytics data",
            params=query.to_params(),
        )
        return ProviderResult(
            success=True, message="Analytics data successfully retrieved", data=data
        )

    async def get_analytics_data_by_id(self, message_id: str) -> ProviderResult:
        """Fetch analytics for a single message via GET /analytics/{id}.

        Raises:
            ValidationError: if ``message_id`` is empty.
            ProviderError: on a non-2xx response or transport failure.
        """
        if not message_id:
            raise ValidationError('The "id" parameter is required')

        data = await self._request(
            "GET",
            f"{self._config.api_url}/analytics/{quote(str(message_id), safe='')}",
            action="retrieving analytics data",
        )
        return ProviderResult(
            success=True, message="Analytics data successfully retrieved", data=data
        )

    def validate_configuration(self) -> None:
        """Raise ConfigError if either credential is missing. Never touches the network."""
        self._config.validate()

    # ── Internal helpers ───────────────────────────────────────────────────────

    async def _request(self, method: str, url: str, *, action: str, **kwargs: Any) -> Any:
        """Issue one request and return the decoded body.

        Non-JSON bodies are returned as text; an empty body becomes None.
        A malformed endpoint URL override raises ConfigError.
        """
        logger.debug("TurboSMTP → %s %s", method, url)
        try:
            response = await self._http.request(
                method, url, headers=self._config.headers(), **kwargs
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            body = _decode(exc.response)
            logger.error("Error %s: HTTP %d %s", action, exc.response.status_code, body)
            raise ProviderError(
                _provider_message(body) or f"Error {action}: {exc}",
                status_code=exc.response.status_code,
                payload=body,
            ) from exc
        except httpx.InvalidURL as exc:
            logger.error("Error %s: invalid URL %r: %s", action, url, exc)
            raise ConfigError(f"Invalid TurboSMTP API URL {url!r}: {exc}") from exc
        except httpx.HTTPError as exc:
            logger.error("Error %s: %s", action, exc)
            raise ProviderError(f"Error {action}: {exc}") from exc

        return _decode(response)


def _decode(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def _provider_message(body: Any) -> str | None:
    """Extract TurboSMTP's ``message`` field from an error body, if any."""
    if isinstance(body, dict):
        message = body.get("message")
        if message:
            return str(message)
    return None


@asynccontextmanager
async def turbosmtp_client(
    config: TurboSMTPConfig | None = None,
) -> AsyncIterator[TurboSMTPClient]:
    """Async context manager that yields a TurboSMTPClient and closes its HTTP pool.

    Args:
        config: Defaults to TurboSMTPConfig.from_env().

    Example::

        async with turbosmtp_client() as client:
            client.validate_configuration()
            await client.get_analytics_data(AnalyticsQuery("2025-06-01", "2025-06-12"))
    """
    async with httpx.AsyncClient() as http:
        yield TurboSMTPClient(config or TurboSMTPConfig.from_env(), http)
