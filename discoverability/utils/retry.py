"""
Retry and Polling Utilities

One backoff loop and one polling loop shared by every provider client.
"""

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, TypeVar

from ..errors import ProviderTimeoutError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class RetryConfig:
    """Configuration for retry behavior."""
    max_retries: int = 3
    initial_delay: float = 1.0
    max_delay: float = 10.0
    exponential_base: float = 2.0
    jitter: float = 0.1  # fraction of the delay added at random

    def delay_for(self, attempt: int) -> float:
        """Backoff delay before retry number `attempt` (0-based)."""
        delay = min(
            self.initial_delay * (self.exponential_base ** attempt),
            self.max_delay,
        )
        if self.jitter > 0 and delay > 0:
            delay += random.uniform(0, delay * self.jitter)
        return delay


def is_retryable(error: BaseException) -> bool:
    """Errors opt into retries through a `retryable` attribute."""
    return bool(getattr(error, "retryable", False))


async def retry_async(
    operation: Callable[[], Awaitable[T]],
    config: Optional[RetryConfig] = None,
    description: str = "request",
) -> T:
    """
    Run `operation` with exponential backoff on transient failures.

    Non-retryable errors (auth, other 4xx, parse errors) propagate on the
    first attempt.

    Args:
        operation: Zero-argument coroutine factory
        config: Retry configuration
        description: Label used in log messages

    Returns:
        Result of the first successful attempt
    """
    config = config or RetryConfig()
    attempts = config.max_retries + 1

    for attempt in range(attempts):
        try:
            return await operation()
        except Exception as e:
            if not is_retryable(e) or attempt >= config.max_retries:
                raise

            delay = config.delay_for(attempt)
            logger.warning(
                f"{description} failed (attempt {attempt + 1}/{attempts}), "
                f"retrying in {delay:.1f}s: {e}"
            )
            await asyncio.sleep(delay)

    raise RuntimeError("retry loop exited without return or raise")


async def poll_until(
    fetch: Callable[[], Awaitable[Any]],
    is_done: Callable[[Any], bool],
    interval: float,
    max_attempts: int,
    description: str = "job",
) -> Any:
    """
    Poll `fetch` until `is_done` accepts its result.

    `is_done` may raise to signal a terminal failure reported by the job.

    Raises:
        ProviderTimeoutError: after `max_attempts` polls without completion
    """
    for attempt in range(max_attempts):
        result = await fetch()
        if is_done(result):
            return result

        logger.debug(f"{description} not finished (poll {attempt + 1}/{max_attempts})")
        await asyncio.sleep(interval)

    raise ProviderTimeoutError(
        f"{description} did not complete after {max_attempts} polls"
    )
