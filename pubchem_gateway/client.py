"""
PubChem gateway client.

Single choke point for every outbound call:
- Rate limiting (PubChem allows 5 requests/second)
- URL resolution (relative paths against the base URL, absolute URLs verbatim)
- Fixed per-call timeout
- Translation of every non-2xx or timed-out call into one UpstreamError

No retries happen here; retry policy belongs to the caller.
"""

import asyncio
from typing import Any

import httpx

from pubchem_gateway.context import RequestContext
from pubchem_gateway.exceptions import (
    ExternalServiceError,
    GatewayTimeoutError,
    error_for_status,
)
from pubchem_gateway.observer import GatewayObserver, LoggingObserver
from pubchem_gateway.ratelimit import RateLimiter
from pubchem_gateway.settings import GatewaySettings, get_settings


class PubChemGateway:
    """
    Rate-limited HTTP gateway to the PubChem PUG REST API.

    One instance is meant to be shared by every component of a process so
    that they all draw from the same rate limiter.

    Example:
        async with PubChemGateway() as gateway:
            ctx = RequestContext.create("lookup")
            data = await gateway.fetch_json("/compound/cid/2244/synonyms/JSON", ctx)
            png = await gateway.fetch_binary("/compound/cid/2244/PNG", ctx)
    """

    def __init__(
        self,
        settings: GatewaySettings | None = None,
        *,
        rate_limiter: RateLimiter | None = None,
        observer: GatewayObserver | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.settings = settings or get_settings()
        self.base_url = self.settings.base_url.rstrip("/")
        self.timeout = self.settings.timeout_seconds
        self.rate_limiter = rate_limiter or RateLimiter(
            self.settings.rate_limit_calls,
            self.settings.rate_limit_period_seconds,
        )
        self.observer = observer or LoggingObserver(__name__)

        self._client = http_client
        self._owns_client = http_client is None

    async def _get_client(self) -> httpx.AsyncClient:
        """Lazy initialize HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                headers={"User-Agent": self.settings.user_agent},
                follow_redirects=True,
            )
        return self._client

    def resolve_url(self, path: str) -> str:
        """Absolute URLs pass through; anything else is appended to the base URL."""
        if path.startswith("http"):
            return path
        if not path.startswith("/"):
            path = f"/{path}"
        return f"{self.base_url}{path}"

    # =========================================================================
    # Public API
    # =========================================================================

    async def fetch_json(self, path: str, context: RequestContext) -> Any | None:
        """
        GET a JSON endpoint.

        Args:
            path: Path relative to the base URL, or an absolute URL
            context: Request context for tracing

        Returns:
            Parsed JSON, or None for a 204 No Content response

        Raises:
            UpstreamError: The mapped error for any failed call
        """
        url = self.resolve_url(path)
        response = await self._execute(url, context)

        if response.status_code == 204:
            return None

        try:
            return response.json()
        except ValueError as e:
            self.observer.error(
                "PubChem API returned malformed JSON",
                context,
                url=url,
                status=response.status_code,
            )
            raise ExternalServiceError(
                f"Malformed JSON in PubChem response: {e}",
                status_code=response.status_code,
                response_body=self._excerpt(response),
            ) from e

    async def fetch_binary(self, path: str, context: RequestContext) -> bytes:
        """
        GET a binary endpoint (e.g. a PNG depiction).

        Args:
            path: Path relative to the base URL, or an absolute URL
            context: Request context for tracing

        Returns:
            Raw response body

        Raises:
            UpstreamError: The mapped error for any failed call
        """
        url = self.resolve_url(path)
        response = await self._execute(url, context)
        return response.content

    # =========================================================================
    # HTTP Execution
    # =========================================================================

    async def _execute(self, url: str, context: RequestContext) -> httpx.Response:
        """Acquire a permit, perform one GET and check its status."""
        await self.rate_limiter.acquire()

        if self.settings.log_requests:
            self.observer.debug("Executing PubChem API GET request", context, url=url)

        client = await self._get_client()
        try:
            response = await asyncio.wait_for(client.get(url), timeout=self.timeout)
        except (httpx.TimeoutException, asyncio.TimeoutError) as e:
            self.observer.error(
                f"PubChem API request timed out after {self.timeout}s",
                context,
                url=url,
            )
            raise GatewayTimeoutError(
                f"PubChem API request timed out after {self.timeout}s",
                timeout=self.timeout,
            ) from e
        except httpx.RequestError as e:
            self.observer.error("PubChem API request failed", context, url=url, error=str(e))
            raise ExternalServiceError(f"PubChem API request failed: {e}") from e

        if not 200 <= response.status_code < 300:
            body = self._excerpt(response)
            upstream_message = response.headers.get(self.settings.status_message_header)
            error = error_for_status(response.status_code, upstream_message, body)
            self.observer.error(
                "PubChem API request failed",
                context,
                url=url,
                status=response.status_code,
                status_text=response.reason_phrase,
                upstream_message=error.upstream_message,
                response_body=body,
            )
            raise error

        return response

    def _excerpt(self, response: httpx.Response) -> str:
        """Best-effort body text, truncated for diagnostics."""
        try:
            text = response.text
        except (httpx.ResponseNotRead, UnicodeDecodeError):
            return ""
        return text[: self.settings.error_body_max_chars]

    # =========================================================================
    # Cleanup
    # =========================================================================

    async def close(self) -> None:
        """Close the HTTP client if this gateway created it."""
        if self._owns_client and self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
