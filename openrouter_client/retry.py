"""Bounded exponential-backoff retry around single transport attempts."""

import asyncio
import time
from typing import Awaitable, Callable, Optional, TypeVar

from openrouter_client.errors import ClientError, RateLimitError
from openrouter_client.telemetry import logger

T = TypeVar("T")


def backoff_delay(attempt: int) -> float:
    """Seconds to wait after the given zero-based attempt fails (2 ** attempt, no jitter)."""
    return float(2 ** attempt)


async def execute_with_retry(
    fn: Callable[[], Awaitable[T]],
    max_retries: int,
    *,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    honor_retry_after: bool = False,
    total_timeout: Optional[float] = None,
    clock: Callable[[], float] = time.monotonic,
) -> T:
    """Run fn until it succeeds, fails fatally, or attempts run out.

    Attempts are strictly sequential. A ClientError whose ``retryable`` flag
    is False propagates immediately; after the last attempt the last error
    propagates. Any other exception is a bug in fn and propagates unchanged.

    Args:
        fn: Coroutine factory performing one attempt.
        max_retries: Maximum number of attempts; 0 still allows one attempt.
        sleep: Awaitable sleep used between attempts.
        honor_retry_after: Wait at least a RateLimitError's retry_after hint.
        total_timeout: Do not start an attempt that would begin after this
            many seconds from the first one.
        clock: Monotonic time source used for total_timeout.

    Returns:
        The result of the first successful attempt.
    """
    attempts = max(max_retries, 1)
    started = clock()

    for attempt in range(attempts):
        try:
            return await fn()
        except ClientError as exc:
            if not exc.retryable:
                raise

            if attempt == attempts - 1:
                raise

            delay = backoff_delay(attempt)
            if (
                honor_retry_after
                and isinstance(exc, RateLimitError)
                and exc.retry_after is not None
            ):
                delay = max(delay, exc.retry_after)

            if total_timeout is not None:
                elapsed = clock() - started
                if elapsed + delay > total_timeout:
                    logger.warning(
                        "Request failed (attempt %d/%d), retry budget of %ss "
                        "exhausted: %s",
                        attempt + 1,
                        attempts,
                        total_timeout,
                        exc.message,
                    )
                    raise

            logger.warning(
                "Request failed (attempt %d/%d), retrying in %ss: %s",
                attempt + 1,
                attempts,
                delay,
                exc.message,
            )
            await sleep(delay)

    # range(attempts) is never empty, every path above returns or raises.
    raise AssertionError("unreachable")
