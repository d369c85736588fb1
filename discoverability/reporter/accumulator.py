"""
Run-level counters shared by concurrent provider calls.
"""

import asyncio
from dataclasses import dataclass

from ..providers.models import ProviderResponse


@dataclass(frozen=True)
class RunSnapshot:
    calls: int = 0
    successes: int = 0
    failures: int = 0
    total_cost: float = 0.0
    total_latency_ms: float = 0.0

    @property
    def average_latency_ms(self) -> float:
        return self.total_latency_ms / self.calls if self.calls else 0.0


class RunAccumulator:
    """
    Tracks call count, cost and latency for one run.

    Updated by the dispatcher after every call; all updates go through an
    asyncio.Lock.
    """

    def __init__(self):
        self._lock = asyncio.Lock()
        self._snapshot = RunSnapshot()

    async def record(self, response: ProviderResponse) -> RunSnapshot:
        async with self._lock:
            current = self._snapshot
            self._snapshot = RunSnapshot(
                calls=current.calls + 1,
                successes=current.successes + (1 if response.success else 0),
                failures=current.failures + (1 if response.is_failed else 0),
                total_cost=current.total_cost + response.cost,
                total_latency_ms=current.total_latency_ms + response.latency_ms,
            )
            return self._snapshot

    def snapshot(self) -> RunSnapshot:
        return self._snapshot
