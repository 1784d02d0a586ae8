"""
Shared test fixtures for the weather contract harness.

Provides reusable mock transports, captured-response factories, and
clients wired to the in-process OpenWeather stub.
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import AsyncIterator, Callable, Iterator
from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient

from weather_contract.capture import AsyncResponseCapturer, ResponseCapturer
from weather_contract.config import STUB_API_KEY, HarnessConfig
from weather_contract.models import CapturedResponse
from weather_contract.stub import LONDON_WEATHER, create_stub_app

BASE_URL = "https://api.openweathermap.org/data/2.5"

# Path -> (status, body); dict/list bodies are sent as JSON, str bodies as text/plain
MockRoutes = dict[str, tuple[int, Any]]


def _mock_response(routes: MockRoutes, request: httpx.Request) -> httpx.Response:
    path = request.url.path
    if path not in routes:
        return httpx.Response(404, json={"cod": "404", "message": "Not found"})
    status, body = routes[path]
    if isinstance(body, httpx.Response):
        return body
    if isinstance(body, str):
        return httpx.Response(status, text=body)
    return httpx.Response(status, json=body)


# -----------------------------------------------------------------------------
# Mock HTTP Transports
# -----------------------------------------------------------------------------


class MockTransport(httpx.BaseTransport):
    """
    Mock transport that returns predefined responses.

    Paths listed in errors raise the given exception instead of responding
    (to simulate connect failures and timeouts).
    """

    def __init__(self, routes: MockRoutes, errors: dict[str, Exception] | None = None):
        self.routes = routes
        self.errors = errors or {}
        self.requests: list[httpx.Request] = []

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        error = self.errors.get(request.url.path)
        if error is not None:
            raise error
        return _mock_response(self.routes, request)


class AsyncMockTransport(httpx.AsyncBaseTransport):
    """Async variant; optional per-path delays let cases complete out of order."""

    def __init__(
        self,
        routes: MockRoutes,
        delays: dict[str, float] | None = None,
        errors: dict[str, Exception] | None = None,
    ):
        self.routes = routes
        self.delays = delays or {}
        self.errors = errors or {}
        self.requests: list[httpx.Request] = []
        self.completed: list[str] = []

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        await asyncio.sleep(self.delays.get(path, 0))
        error = self.errors.get(path)
        if error is not None:
            raise error
        self.completed.append(path)
        return _mock_response(self.routes, request)


# -----------------------------------------------------------------------------
# Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture
def make_response() -> Callable[..., CapturedResponse]:
    """Factory for CapturedResponse values with sensible defaults."""

    def factory(
        body: Any = None,
        *,
        status_code: int = 200,
        content_type: str = "application/json; charset=utf-8",
        elapsed_millis: float = 120.0,
        parse_error: str | None = None,
    ) -> CapturedResponse:
        return CapturedResponse(
            url=f"{BASE_URL}/weather",
            status_code=status_code,
            content_type=content_type,
            elapsed_millis=elapsed_millis,
            body_json=body,
            parse_error=parse_error,
            body_text=json.dumps(body) if body is not None else "",
        )

    return factory


@pytest.fixture
def london_weather() -> dict[str, Any]:
    return json.loads(json.dumps(LONDON_WEATHER))


@pytest.fixture
def stub_config() -> HarnessConfig:
    """Config pointing at the upstream URL with the key the stub accepts."""
    return HarnessConfig(base_url=BASE_URL, api_key=STUB_API_KEY)


@pytest.fixture
def stub_capturer() -> Iterator[ResponseCapturer]:
    """Sync capturer routed to the in-process stub app."""
    capturer = ResponseCapturer(client=TestClient(create_stub_app()))
    yield capturer
    capturer.close()


@pytest.fixture
async def async_stub_capturer() -> AsyncIterator[AsyncResponseCapturer]:
    """Async capturer routed to the in-process stub app."""
    client = httpx.AsyncClient(transport=httpx.ASGITransport(app=create_stub_app()))
    capturer = AsyncResponseCapturer(client=client)
    yield capturer
    await capturer.close()
