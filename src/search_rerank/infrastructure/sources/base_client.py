"""
Base API Client - JSON GET requests with retry, pacing and a circuit breaker.

Behaviour shared by remote search clients:
- 429 responses are retried after Retry-After (or exponential backoff)
- Transport errors are retried with exponential backoff
- Requests are spaced at least min_interval apart, also when issued
  concurrently by the fan-out
- A CircuitBreaker stops hammering a failing service

Failures are logged and reported as None; subclasses decide which error
to raise.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any

import httpx
from typing_extensions import Self

from search_rerank.shared.async_utils import CircuitBreaker
from search_rerank.shared.exceptions import NetworkError

logger = logging.getLogger(__name__)


class BaseAPIClient:
    """
    Base class for remote search API clients.

    Subclasses set `_service_name` and call `_get_json()`.
    """

    _service_name: str = "API"
    _MAX_RETRIES: int = 3

    def __init__(
        self,
        timeout: float = 30.0,
        min_interval: float = 0.0,
        headers: dict[str, str] | None = None,
        circuit_breaker: CircuitBreaker | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize base client.

        Args:
            timeout: Request timeout in seconds
            min_interval: Minimum seconds between request starts (0 disables pacing)
            headers: Default headers for all requests
            circuit_breaker: Shared breaker; a private one (10 failures, 60s) if None
            transport: Optional httpx transport (mock transports in tests)
        """
        self._timeout = timeout
        self._min_interval = min_interval
        self._next_slot = 0.0
        self._client = httpx.AsyncClient(
            timeout=timeout,
            headers=headers or {},
            transport=transport,
            limits=httpx.Limits(max_connections=20, max_keepalive_connections=10, keepalive_expiry=30.0),
        )
        self._circuit_breaker = circuit_breaker or CircuitBreaker(failure_threshold=10, recovery_timeout=60.0)

    async def _rate_limit(self) -> None:
        """
        Wait for this request's send slot.

        The slot is reserved before sleeping, so concurrent callers queue
        up min_interval apart instead of all waking at the same moment.
        """
        if self._min_interval <= 0:
            return
        now = time.monotonic()
        slot = max(now, self._next_slot)
        self._next_slot = slot + self._min_interval
        if slot > now:
            await asyncio.sleep(slot - now)

    async def _get_json(self, url: str, params: dict[str, str] | None = None) -> Any:
        """
        GET a JSON document.

        A 429 is not a circuit breaker failure; transport errors, HTTP
        errors and unreadable bodies are.

        Returns:
            The decoded body, or None if no usable response was received
        """
        for attempt in range(self._MAX_RETRIES + 1):
            retries_left = attempt < self._MAX_RETRIES
            await self._rate_limit()
            try:
                async with self._circuit_breaker:
                    response = await self._client.get(url, params=params)
                    if response.status_code != 429:
                        response.raise_for_status()
                        return response.json()
            except NetworkError:
                logger.warning(f"{self._service_name}: Circuit breaker open, skipping request")
                return None
            except httpx.HTTPStatusError as e:
                logger.error(f"{self._service_name} HTTP error {e.response.status_code}: {e.response.reason_phrase}")
                return None
            except ValueError as e:
                logger.error(f"{self._service_name} returned an unreadable body: {e}")
                return None
            except httpx.RequestError as e:
                if not retries_left:
                    logger.error(f"{self._service_name} request failed: {e}")
                    return None
                logger.warning(f"{self._service_name} request error (attempt {attempt + 1}): {e}")
                await asyncio.sleep(2 ** (attempt + 1))
                continue

            if retries_left:
                delay = self._retry_after(response, attempt)
                logger.warning(
                    f"{self._service_name}: Rate limited (429), retry {attempt + 1}/{self._MAX_RETRIES} in {delay:.1f}s"
                )
                await asyncio.sleep(delay)

        logger.warning(f"{self._service_name}: Rate limit exceeded after {self._MAX_RETRIES} retries")
        return None

    @staticmethod
    def _retry_after(response: httpx.Response, attempt: int) -> float:
        """Retry-After header in seconds, falling back to exponential backoff."""
        try:
            return float(response.headers["Retry-After"])
        except (KeyError, ValueError):
            return float(2 ** (attempt + 1))

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()
