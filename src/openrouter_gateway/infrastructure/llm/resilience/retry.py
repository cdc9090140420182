"""Bounded retry with capped exponential backoff for completion requests."""

from __future__ import annotations

import asyncio
import random
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, TypeVar

import structlog

from ....core.exceptions import GatewayError, RequestCancelledError
from ..error_classifier import classify_exception

logger = structlog.get_logger(__name__)

T = TypeVar("T")


@dataclass
class RetryConfig:
    """Configuration for the retry loop.

    ``retry_count`` counts retries, so a request is attempted at most
    ``retry_count + 1`` times.
    """

    retry_count: int = 3
    base_delay_ms: int = 1000
    max_delay_ms: int = 30000
    exponential_base: float = 2.0
    jitter: bool = False

    @property
    def max_attempts(self) -> int:
        return self.retry_count + 1


def compute_backoff_ms(attempt: int, config: RetryConfig) -> float:
    """Delay before ``attempt`` (0-based): ``min(base^attempt * base_delay, max_delay)``."""
    if attempt <= 0:
        return 0.0
    delay = min(config.exponential_base**attempt * config.base_delay_ms, config.max_delay_ms)
    if config.jitter:
        # ±25% spread
        delay += random.uniform(-delay * 0.25, delay * 0.25)
    return delay


async def _wait(delay_seconds: float, cancel_event: asyncio.Event | None) -> None:
    if cancel_event is None:
        await asyncio.sleep(delay_seconds)
        return
    try:
        await asyncio.wait_for(cancel_event.wait(), timeout=delay_seconds)
    except TimeoutError:
        pass


def _check_cancelled(cancel_event: asyncio.Event | None, attempt: int) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise RequestCancelledError("Request cancelled by caller", details={"attempt": attempt + 1})


async def _run_attempt(
    func: Callable[..., Awaitable[T]],
    args: tuple[Any, ...],
    kwargs: dict[str, Any],
    cancel_event: asyncio.Event | None,
    attempt: int,
) -> T:
    """Run one attempt, aborting it as soon as ``cancel_event`` is set.

    A result that arrives after the event was set is discarded.
    """
    if cancel_event is None:
        return await func(*args, **kwargs)

    call = asyncio.ensure_future(func(*args, **kwargs))
    cancelled = asyncio.ensure_future(cancel_event.wait())
    try:
        await asyncio.wait({call, cancelled}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        cancelled.cancel()
        if not call.done():
            call.cancel()

    if cancel_event.is_set() or not call.done():
        if not call.done():
            await asyncio.gather(call, return_exceptions=True)
        elif not call.cancelled():
            call.exception()  # mark a late failure as retrieved
        logger.info("Request attempt aborted by caller", attempt=attempt + 1)
        raise RequestCancelledError("Request cancelled by caller", details={"attempt": attempt + 1})
    return call.result()


async def retry_with_backoff(
    func: Callable[..., Awaitable[T]],
    config: RetryConfig,
    *args: Any,
    cancel_event: asyncio.Event | None = None,
    **kwargs: Any,
) -> T:
    """Execute ``func`` until it succeeds, fails non-retryably or attempts run out.

    Any exception is classified first; only ``NetworkError`` (5xx, timeouts,
    transport failures) is retried. The last observed error is raised once
    all attempts are spent.

    Raises:
        GatewayError: Classified failure of the final or a non-retryable attempt.
        RequestCancelledError: If ``cancel_event`` is set before or during an
            attempt or during a backoff wait.
    """
    last_error: GatewayError | None = None

    for attempt in range(config.max_attempts):
        _check_cancelled(cancel_event, attempt)

        if attempt > 0:
            delay_ms = compute_backoff_ms(attempt, config)
            logger.info(
                "Retrying request",
                attempt=attempt + 1,
                max_attempts=config.max_attempts,
                delay_ms=round(delay_ms),
            )
            await _wait(delay_ms / 1000.0, cancel_event)
            _check_cancelled(cancel_event, attempt)

        try:
            return await _run_attempt(func, args, kwargs, cancel_event, attempt)
        except Exception as e:
            error = classify_exception(e)
            error.details.setdefault("attempts", attempt + 1)
            last_error = error

            if not error.retryable:
                logger.error("Non-retryable error encountered", error_type=type(error).__name__, error=error.message)
                if error is e:
                    raise
                raise error from e

            if attempt == config.max_attempts - 1:
                logger.error("Retry attempts exhausted", attempts=attempt + 1, error=error.message)
                if error is e:
                    raise
                raise error from e

            logger.warning("Request attempt failed", attempt=attempt + 1, error=error.message)

    # Unreachable: max_attempts >= 1 and every path above returns or raises.
    raise last_error or GatewayError("Retry loop finished without a result")


class RetryableClient:
    """Mixin class to add retry functionality to completion clients."""

    def __init__(self, retry_config: RetryConfig | None = None):
        self.retry_config = retry_config or RetryConfig()

    async def execute_with_retry(
        self,
        func: Callable[..., Awaitable[T]],
        *args: Any,
        cancel_event: asyncio.Event | None = None,
        **kwargs: Any,
    ) -> T:
        """Execute function with retry logic."""
        return await retry_with_backoff(func, self.retry_config, *args, cancel_event=cancel_event, **kwargs)
