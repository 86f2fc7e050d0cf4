"""
Pytest configuration and fixtures.

Provides reusable fixtures for gateway testing:
- mock_http_response: Factory for mocked httpx responses
- mock_http_client: AsyncMock standing in for httpx.AsyncClient
- observer: Observer that records emitted events
- gateway: PubChemGateway wired to the mocked client and recording observer
- route: Builds a URL-dispatching side effect for mock_http_client.get
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from pubchem_gateway import GatewaySettings, PubChemGateway, RequestContext
from pubchem_gateway.observer import GatewayObserver

# =============================================================================
# Recording Observer
# =============================================================================


@dataclass
class RecordedEvent:
    level: int
    message: str
    context: RequestContext | None
    fields: dict[str, Any] = field(default_factory=dict)


class RecordingObserver(GatewayObserver):
    """Keeps every event in memory for assertions."""

    def __init__(self) -> None:
        self.events: list[RecordedEvent] = []

    def emit(self, level, message, context=None, **fields):
        self.events.append(RecordedEvent(level, message, context, fields))

    def at(self, level: int) -> list[RecordedEvent]:
        return [e for e in self.events if e.level == level]

    @property
    def warnings(self) -> list[RecordedEvent]:
        return self.at(logging.WARNING)

    @property
    def errors(self) -> list[RecordedEvent]:
        return self.at(logging.ERROR)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def mock_http_response():
    """Factory for creating mock httpx responses."""

    def _create(
        status_code: int = 200,
        json_data: Any = None,
        text: str = "",
        content: bytes = b"",
        headers: dict | None = None,
        reason_phrase: str = "",
    ):
        response = MagicMock(spec=httpx.Response)
        response.status_code = status_code
        default_headers = {}
        if json_data is not None:
            default_headers["Content-Type"] = "application/json"
        response.headers = {**default_headers, **(headers or {})}
        response.text = text
        response.content = content
        response.reason_phrase = reason_phrase

        if json_data is not None:
            response.json.return_value = json_data
        else:
            response.json.side_effect = ValueError("No JSON")

        return response

    return _create


@pytest.fixture
def settings() -> GatewaySettings:
    """Settings with a generous rate limit so tests are not throttled."""
    return GatewaySettings(
        rate_limit_calls=1000,
        rate_limit_period_seconds=1.0,
        timeout_seconds=5.0,
    )


@pytest.fixture
def observer() -> RecordingObserver:
    return RecordingObserver()


@pytest.fixture
def mock_http_client() -> AsyncMock:
    client = AsyncMock(spec=httpx.AsyncClient)
    client.get = AsyncMock()
    return client


@pytest.fixture
def gateway(settings, observer, mock_http_client) -> PubChemGateway:
    return PubChemGateway(settings, observer=observer, http_client=mock_http_client)


@pytest.fixture
def context() -> RequestContext:
    return RequestContext.create("test", test_case="gateway")


@pytest.fixture
def route() -> Callable[[dict[str, Any]], Callable]:
    """
    Build a side effect that answers by URL substring.

    Values may be a response, an exception instance, or an async callable
    taking the URL.
    """

    def _route(table: dict[str, Any]):
        async def _get(url, *args, **kwargs):
            for fragment, answer in table.items():
                if fragment in url:
                    if isinstance(answer, BaseException):
                        raise answer
                    if callable(answer) and not isinstance(answer, MagicMock):
                        return await answer(url)
                    return answer
            raise AssertionError(f"Unexpected URL requested: {url}")

        return _get

    return _route
