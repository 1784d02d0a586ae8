"""
Response Capturer

Executes a RequestSpec over HTTP and captures what the assertion engine
needs: status, content type, elapsed time and the parsed JSON body.

HTTP error statuses are returned as data. Only transport failures raise:
- httpx.TimeoutException, or the whole exchange outlasting timeout_ms
  → RequestTimeoutError
- any other httpx.RequestError → NetworkError

httpx applies its timeout to each connect/read/write step, so a body that
trickles in slowly would never trip it. timeout_ms is therefore also
enforced as a deadline on the complete response.

A body that should be JSON but does not parse is not an error here: the
response comes back with body_json=None and parse_error set.
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from urllib.parse import urlencode

import httpx

from .config import HTTP_TIMEOUT_MS
from .errors import NetworkError, RequestTimeoutError
from .models import CapturedResponse, RequestSpec

logger = logging.getLogger(__name__)


def is_json_media_type(media_type: str) -> bool:
    return media_type == "application/json" or media_type.endswith("+json")


def describe_request(spec: RequestSpec) -> str:
    """GET line for logs and error messages, with secret params masked."""
    query = urlencode(spec.masked_params(), safe="*")
    return f"GET {spec.url}?{query}" if query else f"GET {spec.url}"


def capture_response(
    spec: RequestSpec,
    response: httpx.Response,
    elapsed_millis: float,
    content: bytes | None = None,
) -> CapturedResponse:
    """
    Convert an httpx response into a CapturedResponse.

    content is the already-read (decoded) body of a streamed response;
    when omitted the response must have been read.
    """
    if content is None:
        content = response.content
    content_type = response.headers.get("content-type", "")
    media_type = content_type.split(";", 1)[0].strip().lower()

    body_json = None
    parse_error = None
    if is_json_media_type(media_type):
        try:
            body_json = json.loads(content)
        except ValueError as e:
            parse_error = f"invalid JSON body: {e}"
    else:
        parse_error = f"content type {media_type or '(none)'!r} is not JSON"

    if parse_error:
        logger.debug("Body of %s not parsed: %s", describe_request(spec), parse_error)

    return CapturedResponse(
        url=spec.url,
        status_code=response.status_code,
        content_type=content_type,
        elapsed_millis=elapsed_millis,
        body_json=body_json,
        parse_error=parse_error,
        headers={key.lower(): value for key, value in response.headers.items()},
        body_text=content.decode(response.encoding or "utf-8", errors="replace"),
    )


def _transport_failure(spec: RequestSpec, error: httpx.RequestError) -> NetworkError:
    request_line = describe_request(spec)
    if isinstance(error, httpx.TimeoutException):
        return RequestTimeoutError(
            f"Timed out: {request_line} ({type(error).__name__})",
            url=spec.url,
            cause=error,
        )
    return NetworkError(
        f"Transport error: {request_line} ({type(error).__name__}: {error})",
        url=spec.url,
        cause=error,
    )


def _deadline_exceeded(spec: RequestSpec, timeout_ms: float) -> RequestTimeoutError:
    return RequestTimeoutError(
        f"Timed out: {describe_request(spec)} (no complete response within {timeout_ms:g} ms)",
        url=spec.url,
    )


class ResponseCapturer:
    """
    Synchronous capturer backed by httpx.Client.

    Every request is bounded by timeout_ms. A client may be injected (for
    mock transports in tests); otherwise one is created lazily.
    """

    def __init__(
        self,
        timeout_ms: float = HTTP_TIMEOUT_MS,
        client: httpx.Client | None = None,
    ) -> None:
        self.timeout_ms = timeout_ms
        self._client = client

    @property
    def timeout(self) -> httpx.Timeout:
        return httpx.Timeout(self.timeout_ms / 1000)

    @property
    def client(self) -> httpx.Client:
        """Lazy-initialize HTTP client."""
        if self._client is None:
            self._client = httpx.Client(timeout=self.timeout)
        return self._client

    def close(self) -> None:
        """Clean up HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> ResponseCapturer:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def execute(self, spec: RequestSpec) -> CapturedResponse:
        """
        Perform the GET and capture the response.

        The body is streamed so the deadline is checked as chunks arrive.

        Raises:
            RequestTimeoutError: If the deadline elapsed first.
            NetworkError: If the transport failed for any other reason.
        """
        start = time.perf_counter()
        deadline = start + self.timeout_ms / 1000
        try:
            with self.client.stream(
                "GET",
                spec.url,
                params=spec.query_params,
                timeout=self.timeout,
            ) as response:
                chunks: list[bytes] = []
                for chunk in response.iter_bytes():
                    if time.perf_counter() > deadline:
                        raise _deadline_exceeded(spec, self.timeout_ms)
                    chunks.append(chunk)
        except httpx.RequestError as e:
            raise _transport_failure(spec, e) from e
        elapsed_millis = (time.perf_counter() - start) * 1000
        if elapsed_millis > self.timeout_ms:
            raise _deadline_exceeded(spec, self.timeout_ms)

        logger.debug(
            "%s -> %d in %.1f ms",
            describe_request(spec),
            response.status_code,
            elapsed_millis,
        )
        return capture_response(spec, response, elapsed_millis, b"".join(chunks))


class AsyncResponseCapturer:
    """Same contract as ResponseCapturer, backed by httpx.AsyncClient."""

    def __init__(
        self,
        timeout_ms: float = HTTP_TIMEOUT_MS,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.timeout_ms = timeout_ms
        self._client = client

    @property
    def timeout(self) -> httpx.Timeout:
        return httpx.Timeout(self.timeout_ms / 1000)

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-initialize HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def close(self) -> None:
        """Clean up HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def execute(self, spec: RequestSpec) -> CapturedResponse:
        start = time.perf_counter()
        try:
            response = await asyncio.wait_for(
                self.client.get(
                    spec.url,
                    params=spec.query_params,
                    timeout=self.timeout,
                ),
                self.timeout_ms / 1000,
            )
        except asyncio.TimeoutError as e:
            raise _deadline_exceeded(spec, self.timeout_ms) from e
        except httpx.RequestError as e:
            raise _transport_failure(spec, e) from e
        elapsed_millis = (time.perf_counter() - start) * 1000

        logger.debug(
            "%s -> %d in %.1f ms",
            describe_request(spec),
            response.status_code,
            elapsed_millis,
        )
        return capture_response(spec, response, elapsed_millis)
