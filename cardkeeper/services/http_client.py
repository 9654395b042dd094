"""
Rate-limited JSON transport shared by the external lookup clients.

Every outbound call passes through the client's RateLimiter, carries the
client tag header, and is bounded by a timeout. Transient failures (429,
5xx, network errors) are retried with exponential backoff up to
`max_retries` times; everything else surfaces immediately as a typed
CatalogError.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from types import TracebackType
from typing import Any, Self

import httpx

from cardkeeper.config import settings
from cardkeeper.models.failure import CardNotFoundError, CatalogUnavailableError
from cardkeeper.services.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)


def error_details(response: httpx.Response) -> str:
    """Human-readable reason from an error body's `details` field, or the status."""
    try:
        body = response.json()
    except ValueError:
        return f"API Error: {response.status_code}"
    if isinstance(body, dict) and body.get("details"):
        return str(body["details"])
    return f"API Error: {response.status_code}"


class RateLimitedClient:
    """
    Base for async JSON API clients.

    Subclasses add the endpoint methods and call `_request`.
    """

    def __init__(
        self,
        *,
        base_url: str,
        user_agent: str | None = None,
        rate_limiter: RateLimiter | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        retry_base_delay: float | None = None,
        http_client: httpx.AsyncClient | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.user_agent = user_agent or settings.user_agent
        self.rate_limiter = rate_limiter or RateLimiter(settings.min_request_interval)
        self.max_retries = settings.max_retries if max_retries is None else max_retries
        self.retry_base_delay = (
            settings.retry_base_delay if retry_base_delay is None else retry_base_delay
        )
        self._sleep = sleep

        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=timeout or settings.request_timeout,
        )
        self._headers = {
            "User-Agent": self.user_agent,
            "Accept": "application/json",
        }

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    def _retry_delay(self, attempt: int, response: httpx.Response | None = None) -> float:
        if response is not None and response.status_code == 429:
            retry_after = response.headers.get("Retry-After")
            if retry_after and retry_after.isdigit():
                return float(retry_after)
        return self.retry_base_delay * (2**attempt)

    async def _request(
        self,
        method: str,
        path: str,
        *,
        query: str,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> Any:
        """
        Issue one logical call, retrying transient failures.

        Args:
            method: HTTP method
            path: API path (e.g., "/cards/named")
            query: What was looked up, for error messages
            params: Query string parameters
            json: JSON body

        Returns:
            Decoded JSON body

        Raises:
            CardNotFoundError: 404 from the API
            CatalogUnavailableError: Any other failure, after retries
        """
        url = f"{self.base_url}{path}"

        for attempt in range(self.max_retries + 1):
            await self.rate_limiter.wait()
            can_retry = attempt < self.max_retries

            try:
                response = await self._client.request(
                    method, url, params=params, json=json, headers=self._headers
                )
            except httpx.RequestError as e:
                if can_retry:
                    delay = self._retry_delay(attempt)
                    logger.warning(
                        "Request %s %s failed (%s), retrying in %.2fs (attempt %d/%d)",
                        method,
                        path,
                        e,
                        delay,
                        attempt + 1,
                        self.max_retries,
                    )
                    await self._sleep(delay)
                    continue
                raise CatalogUnavailableError(f"{method} {path}: {e}") from e

            if response.status_code == 404:
                raise CardNotFoundError(query, detail=error_details(response))

            if response.status_code == 429 or response.status_code >= 500:
                if can_retry:
                    delay = self._retry_delay(attempt, response)
                    logger.warning(
                        "Request %s %s returned %d, retrying in %.2fs (attempt %d/%d)",
                        method,
                        path,
                        response.status_code,
                        delay,
                        attempt + 1,
                        self.max_retries,
                    )
                    await self._sleep(delay)
                    continue

            if not response.is_success:
                raise CatalogUnavailableError(
                    error_details(response), status=response.status_code
                )

            try:
                return response.json()
            except ValueError as e:
                raise CatalogUnavailableError(f"{method} {path}: invalid JSON body") from e

        # Unreachable: the last attempt either returns or raises
        raise CatalogUnavailableError(f"{method} {path}: retries exhausted")
