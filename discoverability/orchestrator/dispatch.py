"""
Provider Dispatch

Run-scoped throttling in front of ProviderClient.query():
- at most `concurrency` in-flight calls per provider (asyncio.Semaphore)
- a minimum spacing between consecutive call starts to the same provider

Both limits can be set per provider (ThrottleLimits) to match each
vendor's rate limit.

Each run builds its own dispatcher, so limits and counters never leak
between runs.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Dict, Mapping, Optional

from ..providers.config import ModelSelection
from ..providers.models import ProviderResponse, resolve_provider
from ..reporter.accumulator import RunAccumulator
from ..utils.cancellation import CancellationToken

logger = logging.getLogger(__name__)


DEFAULT_CONCURRENCY = 2
DEFAULT_SPACING_SECONDS = 0.2


@dataclass(frozen=True)
class ThrottleLimits:
    """Pool size and start spacing for one provider."""
    concurrency: int = DEFAULT_CONCURRENCY
    spacing_seconds: float = DEFAULT_SPACING_SECONDS


def provider_key(provider: str) -> str:
    """Canonical provider name, so aliases share limits and throttles."""
    resolved = resolve_provider(provider)
    return resolved.value if resolved else (provider or "").lower()


class ProviderThrottle:
    """
    Bounded pool plus courtesy spacing for one provider.

    Usage:
        async with throttle:
            await client.query(...)
    """

    def __init__(self, concurrency: int = DEFAULT_CONCURRENCY, spacing_seconds: float = DEFAULT_SPACING_SECONDS):
        if concurrency < 1:
            raise ValueError(f"concurrency must be >= 1, got {concurrency}")
        self.spacing_seconds = max(0.0, spacing_seconds)
        self._semaphore = asyncio.Semaphore(concurrency)
        self._spacing_lock = asyncio.Lock()
        self._last_start: Optional[float] = None

    async def acquire(self) -> None:
        await self._semaphore.acquire()
        try:
            await self._wait_for_slot()
        except BaseException:
            self._semaphore.release()
            raise

    def release(self) -> None:
        self._semaphore.release()

    async def _wait_for_slot(self) -> None:
        async with self._spacing_lock:
            loop = asyncio.get_running_loop()
            if self._last_start is not None:
                wait = self._last_start + self.spacing_seconds - loop.time()
                if wait > 0:
                    await asyncio.sleep(wait)
            self._last_start = loop.time()

    async def __aenter__(self):
        await self.acquire()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        self.release()


class ProviderDispatcher:
    """
    Sends queries through per-provider throttles and records every response
    into the run accumulator.
    """

    def __init__(
        self,
        client,
        concurrency: int = DEFAULT_CONCURRENCY,
        spacing_seconds: float = DEFAULT_SPACING_SECONDS,
        accumulator: Optional[RunAccumulator] = None,
        provider_limits: Optional[Mapping[str, ThrottleLimits]] = None,
    ):
        """
        Args:
            client: Object exposing `query(provider, model, prompt, context, cancel_token=...)`
            concurrency: Default in-flight calls allowed per provider
            spacing_seconds: Default minimum gap between call starts to one provider
            accumulator: Run-level counters (a fresh one by default)
            provider_limits: Per-provider overrides of the two defaults
        """
        self.client = client
        self.concurrency = concurrency
        self.spacing_seconds = spacing_seconds
        self.accumulator = accumulator or RunAccumulator()
        self.provider_limits: Dict[str, ThrottleLimits] = {
            provider_key(name): limits for name, limits in (provider_limits or {}).items()
        }
        self._throttles: Dict[str, ProviderThrottle] = {}

    def limits_for(self, provider: str) -> ThrottleLimits:
        default = ThrottleLimits(self.concurrency, self.spacing_seconds)
        return self.provider_limits.get(provider_key(provider), default)

    def throttle_for(self, provider: str) -> ProviderThrottle:
        key = provider_key(provider)
        if key not in self._throttles:
            limits = self.limits_for(key)
            self._throttles[key] = ProviderThrottle(limits.concurrency, limits.spacing_seconds)
        return self._throttles[key]

    async def dispatch(
        self,
        selection: ModelSelection,
        prompt: str,
        context: str,
        cancel_token: Optional[CancellationToken] = None,
    ) -> ProviderResponse:
        """Query one (provider, model). Never raises for provider failures."""
        async with self.throttle_for(selection.provider):
            response = await self.client.query(
                selection.provider,
                selection.model,
                prompt,
                context,
                cancel_token=cancel_token,
            )

        snapshot = await self.accumulator.record(response)
        logger.debug(
            f"Run progress: {snapshot.calls} calls, {snapshot.failures} failed, "
            f"${snapshot.total_cost:.4f}"
        )
        return response
