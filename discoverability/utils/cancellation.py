"""
Run-scoped cancellation.

A CancellationToken is shared by every call of one test run. Cancelling it
(or passing its deadline) stops in-flight provider requests instead of
leaving them running in the background.
"""

import asyncio
import time
from typing import Awaitable, Optional, TypeVar

from ..errors import ProviderTimeoutError, RunCancelledError

T = TypeVar("T")


class CancellationToken:
    """
    Cancellation flag with an optional deadline.

    Usage:
        token = CancellationToken(timeout=300)
        report = await orchestrator.test_industry_content(..., cancel_token=token)

        # elsewhere
        token.cancel()
    """

    def __init__(self, timeout: Optional[float] = None):
        self._event = asyncio.Event()
        self._deadline = time.monotonic() + timeout if timeout is not None else None

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def expired(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, None when there is no deadline."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def raise_if_stopped(self) -> None:
        if self.cancelled:
            raise RunCancelledError("Run cancelled")
        if self.expired:
            raise RunCancelledError("Run deadline exceeded")

    async def wait(self) -> None:
        await self._event.wait()


async def run_bounded(
    coro: Awaitable[T],
    timeout: Optional[float] = None,
    token: Optional[CancellationToken] = None,
) -> T:
    """
    Await `coro` under a per-call timeout and the run's cancellation token.

    The wrapped task is cancelled (and awaited) when the timeout elapses or
    the token fires, so no request outlives the call.

    Raises:
        ProviderTimeoutError: the per-call timeout elapsed
        RunCancelledError: the token was cancelled or its deadline passed
    """
    if token is not None:
        try:
            token.raise_if_stopped()
        except RunCancelledError:
            if asyncio.iscoroutine(coro):
                coro.close()
            raise

    task = asyncio.ensure_future(coro)
    waiters = {task}
    cancel_waiter = None
    if token is not None:
        cancel_waiter = asyncio.ensure_future(token.wait())
        waiters.add(cancel_waiter)

    limit = timeout
    run_remaining = token.remaining() if token is not None else None
    deadline_is_run = False
    if run_remaining is not None and (limit is None or run_remaining < limit):
        limit = run_remaining
        deadline_is_run = True

    try:
        done, _ = await asyncio.wait(waiters, timeout=limit, return_when=asyncio.FIRST_COMPLETED)
    except asyncio.CancelledError:
        task.cancel()
        raise
    finally:
        if cancel_waiter is not None and not cancel_waiter.done():
            cancel_waiter.cancel()

    if task in done:
        return task.result()

    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        pass
    except Exception:
        # the task failed while being cancelled; the stop reason below wins
        pass

    if token is not None and token.cancelled:
        raise RunCancelledError("Run cancelled")
    if deadline_is_run:
        raise RunCancelledError("Run deadline exceeded")
    raise ProviderTimeoutError(f"Call exceeded {timeout:.0f}s time limit")
