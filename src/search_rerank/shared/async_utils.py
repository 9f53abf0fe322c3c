"""
Async Utilities for the remote search fan-out.

Provides:
- Parallel execution with asyncio.TaskGroup
- Circuit breaker for the remote search API
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, TypeVar

from .exceptions import ErrorContext, NetworkError

if TYPE_CHECKING:
    from collections.abc import Awaitable

logger = logging.getLogger(__name__)

T = TypeVar("T")


# =============================================================================
# Parallel Execution with TaskGroup
# =============================================================================


async def gather_with_errors(
    *coros: Awaitable[T],
    return_exceptions: bool = False,
) -> list[T | Exception]:
    """
    Execute coroutines in parallel using TaskGroup.

    Results keep the position of their coroutine, whatever order the
    tasks complete in.

    Args:
        *coros: Coroutines to execute
        return_exceptions: If True, return exceptions instead of raising

    Returns:
        List of results (or exceptions if return_exceptions=True)

    Example:
        results = await gather_with_errors(
            client.search("rust"),
            client.search("programming"),
            return_exceptions=True,
        )
    """
    if return_exceptions:
        results: list[T | Exception] = [None] * len(coros)  # type: ignore[list-item]

        async def safe_run(coro: Awaitable[T], index: int) -> None:
            try:
                results[index] = await coro
            except Exception as e:
                results[index] = e

        async with asyncio.TaskGroup() as tg:
            for i, coro in enumerate(coros):
                tg.create_task(safe_run(coro, i))
        return results

    # Fail fast on any exception
    async with asyncio.TaskGroup() as tg:
        tasks = [tg.create_task(coro) for coro in coros]
    return [task.result() for task in tasks]


# =============================================================================
# Circuit Breaker
# =============================================================================


class BreakerState(str, Enum):
    CLOSED = "closed"  # Requests pass
    OPEN = "open"  # Requests rejected until recovery_timeout elapses
    HALF_OPEN = "half_open"  # A few trial requests decide


@dataclass
class CircuitBreaker:
    """
    Stops calling the remote search API after repeated failures.

    Any exception raised inside the block counts as a failure. Once
    failure_threshold is reached the breaker opens and every entry raises
    NetworkError. After recovery_timeout it lets up to half_open_max_calls
    trial requests through; one success closes it again.

    Example:
        breaker = CircuitBreaker(failure_threshold=5)

        async with breaker:
            response = await client.get(url)
    """

    failure_threshold: int = 5
    recovery_timeout: float = 30.0
    half_open_max_calls: int = 3

    _state: BreakerState = field(init=False, default=BreakerState.CLOSED)
    _failures: int = field(init=False, default=0)
    _opened_at: float = field(init=False, default=0.0)
    _trial_calls: int = field(init=False, default=0)
    _lock: asyncio.Lock = field(init=False, default_factory=asyncio.Lock)

    @property
    def state(self) -> BreakerState:
        return self._state

    @property
    def is_open(self) -> bool:
        """True while requests are still being rejected."""
        return self._state is BreakerState.OPEN and not self._cooled_down()

    def _cooled_down(self) -> bool:
        return time.monotonic() - self._opened_at > self.recovery_timeout

    def _reject(self, reason: str, retry_after: float) -> NetworkError:
        return NetworkError(reason, context=ErrorContext(operation="search", retry_after=retry_after))

    async def __aenter__(self) -> CircuitBreaker:
        async with self._lock:
            if self._state is BreakerState.OPEN:
                if not self._cooled_down():
                    raise self._reject("Circuit breaker is open", self.recovery_timeout)
                self._state = BreakerState.HALF_OPEN
                self._trial_calls = 0

            if self._state is BreakerState.HALF_OPEN:
                if self._trial_calls >= self.half_open_max_calls:
                    raise self._reject("Circuit breaker is half-open (max calls reached)", self.recovery_timeout / 2)
                self._trial_calls += 1
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        async with self._lock:
            if exc_val is None:
                self._record_success()
            else:
                self._record_failure()

    def _record_success(self) -> None:
        if self._state is BreakerState.HALF_OPEN:
            logger.info("Circuit breaker closed (recovered)")
            self._state = BreakerState.CLOSED
            self._failures = 0
        elif self._failures:
            self._failures -= 1

    def _record_failure(self) -> None:
        self._failures += 1
        if self._state is BreakerState.HALF_OPEN or self._failures >= self.failure_threshold:
            if self._state is not BreakerState.OPEN:
                logger.warning(f"Circuit breaker opened after {self._failures} failures")
            self._state = BreakerState.OPEN
            self._opened_at = time.monotonic()
