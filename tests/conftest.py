"""Shared pytest fixtures."""

import json
from collections.abc import AsyncIterator
from typing import Any

import httpx
import pytest

from src.turbosmtp.client import TurboSMTPClient
from src.turbosmtp.config import TurboSMTPConfig


class FakeTurboSMTP:
    """Stands in for the TurboSMTP API: records every request, replies with a canned response."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.body: Any = {"message": "OK", "mid": "msg_001"}
        self.error: Exception | None = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if isinstance(self.body, (dict, list)):
            return httpx.Response(self.status_code, json=self.body)
        return httpx.Response(self.status_code, content=(self.body or "").encode())

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last_request.content)


@pytest.fixture
def config() -> TurboSMTPConfig:
    """A fully configured TurboSMTPConfig (analytics tool set)."""
    return TurboSMTPConfig(
        consumer_key="key_123",
        consumer_secret="secret_456",
        from_email="noreply@example.com",
    )


@pytest.fixture
def provider() -> FakeTurboSMTP:
    return FakeTurboSMTP()


@pytest.fixture
async def client(config: TurboSMTPConfig, provider: FakeTurboSMTP) -> AsyncIterator[TurboSMTPClient]:
    """TurboSMTPClient whose HTTP traffic goes to the FakeTurboSMTP provider."""
    async with httpx.AsyncClient(transport=httpx.MockTransport(provider.handler)) as http:
        yield TurboSMTPClient(config, http)
