"""
Tests for retry, polling and cancellation utilities
"""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from discoverability.errors import (
    AuthError,
    HTTPError,
    NetworkError,
    ParseError,
    ProviderTimeoutError,
    RunCancelledError,
    error_for_status,
)
from discoverability.utils.cancellation import CancellationToken, run_bounded
from discoverability.utils.retry import RetryConfig, is_retryable, poll_until, retry_async


NO_WAIT = RetryConfig(max_retries=3, initial_delay=0, max_delay=0, jitter=0)


class TestErrorTaxonomy:
    """Test which errors are retryable."""

    @pytest.mark.parametrize("status,retryable", [
        (429, True), (500, True), (503, True), (400, False), (404, False),
    ])
    def test_http_status(self, status, retryable):
        assert is_retryable(error_for_status(status, "x")) is retryable

    def test_auth_statuses(self):
        assert isinstance(error_for_status(401, "x"), AuthError)
        assert isinstance(error_for_status(403, "x"), AuthError)
        assert not is_retryable(error_for_status(401, "x"))

    def test_other_errors(self):
        assert is_retryable(NetworkError("x"))
        assert not is_retryable(ParseError("x"))
        assert not is_retryable(ValueError("x"))


class TestRetryAsync:
    """Test the shared backoff loop."""

    @pytest.mark.asyncio
    async def test_retries_transient_errors(self):
        operation = AsyncMock(side_effect=[NetworkError("reset"), HTTPError("busy", status_code=503), "ok"])

        assert await retry_async(operation, NO_WAIT) == "ok"
        assert operation.await_count == 3

    @pytest.mark.asyncio
    async def test_permanent_error_raised_immediately(self):
        operation = AsyncMock(side_effect=AuthError("denied", status_code=401))

        with pytest.raises(AuthError):
            await retry_async(operation, NO_WAIT)
        assert operation.await_count == 1

    @pytest.mark.asyncio
    async def test_gives_up_after_max_retries(self):
        operation = AsyncMock(side_effect=NetworkError("down"))

        with pytest.raises(NetworkError):
            await retry_async(operation, NO_WAIT)
        assert operation.await_count == 4

    @pytest.mark.asyncio
    async def test_backoff_delays(self):
        config = RetryConfig(max_retries=3, initial_delay=1.0, max_delay=3.0, jitter=0)
        operation = AsyncMock(side_effect=[NetworkError("a"), NetworkError("b"), NetworkError("c"), "ok"])

        with patch("discoverability.utils.retry.asyncio.sleep", new=AsyncMock()) as sleep:
            await retry_async(operation, config)

        assert [call.args[0] for call in sleep.await_args_list] == [1.0, 2.0, 3.0]

    def test_jitter_bounds(self):
        config = RetryConfig(initial_delay=1.0, jitter=0.1)
        for _ in range(20):
            assert 1.0 <= config.delay_for(0) <= 1.1


class TestPollUntil:
    """Test the shared polling loop."""

    @pytest.mark.asyncio
    async def test_returns_when_done(self):
        fetch = AsyncMock(side_effect=[{"status": "processing"}, {"status": "succeeded"}])

        result = await poll_until(fetch, lambda r: r["status"] == "succeeded", interval=0, max_attempts=5)

        assert result == {"status": "succeeded"}
        assert fetch.await_count == 2

    @pytest.mark.asyncio
    async def test_budget_exhausted(self):
        fetch = AsyncMock(return_value={"status": "processing"})

        with pytest.raises(ProviderTimeoutError):
            await poll_until(fetch, lambda r: False, interval=0, max_attempts=3)
        assert fetch.await_count == 3


class TestCancellation:
    """Test run-scoped cancellation and call time limits."""

    @pytest.mark.asyncio
    async def test_completes_normally(self):
        async def work():
            return 42

        assert await run_bounded(work(), timeout=1, token=CancellationToken()) == 42

    @pytest.mark.asyncio
    async def test_already_cancelled(self):
        token = CancellationToken()
        token.cancel()

        with pytest.raises(RunCancelledError, match="Run cancelled"):
            await run_bounded(asyncio.sleep(1), token=token)

    @pytest.mark.asyncio
    async def test_cancel_stops_in_flight_call(self):
        token = CancellationToken()
        stopped = asyncio.Event()

        async def work():
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                stopped.set()
                raise

        async def cancel_soon():
            await asyncio.sleep(0.01)
            token.cancel()

        asyncio.ensure_future(cancel_soon())
        with pytest.raises(RunCancelledError, match="Run cancelled"):
            await run_bounded(work(), timeout=5, token=token)

        assert stopped.is_set()

    @pytest.mark.asyncio
    async def test_run_deadline(self):
        token = CancellationToken(timeout=0.02)

        with pytest.raises(RunCancelledError, match="deadline"):
            await run_bounded(asyncio.sleep(1), timeout=5, token=token)

    @pytest.mark.asyncio
    async def test_call_time_limit(self):
        with pytest.raises(ProviderTimeoutError):
            await run_bounded(asyncio.sleep(1), timeout=0.02)

    @pytest.mark.asyncio
    async def test_errors_propagate(self):
        async def work():
            raise ParseError("bad payload")

        with pytest.raises(ParseError):
            await run_bounded(work(), timeout=1)
