"""
Provider Data Models

Normalized response type shared by every provider client.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Optional


class Provider(str, Enum):
    """Supported LLM vendors."""
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GOOGLE = "google"
    REPLICATE = "replicate"
    TOGETHER = "together"


# Alternate names accepted by the unified client
PROVIDER_ALIASES: Dict[str, Provider] = {
    "claude": Provider.ANTHROPIC,
    "gemini": Provider.GOOGLE,
    "llama": Provider.REPLICATE,
}


def resolve_provider(name: str) -> Optional[Provider]:
    """Map a provider name or alias to a Provider, None if unsupported."""
    key = (name or "").strip().lower()
    if key in PROVIDER_ALIASES:
        return PROVIDER_ALIASES[key]
    try:
        return Provider(key)
    except ValueError:
        return None


class ResponseStatus(str, Enum):
    """Which variant of ProviderResponse this is."""
    COMPLETED = "completed"  # provider answered (answer may still be a "not found")
    FAILED = "failed"  # call never produced an answer


@dataclass(frozen=True)
class TokenUsage:
    """Token counts and cost (USD) for one call."""
    input: int = 0
    output: int = 0
    cost: float = 0.0

    @property
    def total_tokens(self) -> int:
        return self.input + self.output


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ProviderResponse:
    """
    One API attempt against one (provider, model).

    Built through `completed()` or `failed()`; never mutated afterwards.
    """
    id: str
    provider: str
    model: str
    query: str
    response: str
    success: bool
    confidence: float
    latency_ms: float
    status: ResponseStatus
    token_usage: TokenUsage = field(default_factory=TokenUsage)
    timestamp: datetime = field(default_factory=_utcnow)
    error_message: Optional[str] = None

    def __post_init__(self):
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"confidence must be in [0, 1], got {self.confidence}")

    @classmethod
    def completed(
        cls,
        id: str,
        provider: str,
        model: str,
        query: str,
        response: str,
        success: bool,
        confidence: float,
        latency_ms: float,
        token_usage: TokenUsage,
    ) -> "ProviderResponse":
        return cls(
            id=id,
            provider=provider,
            model=model,
            query=query,
            response=response,
            success=success,
            confidence=confidence,
            latency_ms=latency_ms,
            status=ResponseStatus.COMPLETED,
            token_usage=token_usage,
        )

    @classmethod
    def failed(
        cls,
        provider: str,
        model: str,
        query: str,
        error_message: str,
        latency_ms: float,
    ) -> "ProviderResponse":
        timestamp = _utcnow()
        return cls(
            id=f"error-{int(timestamp.timestamp() * 1000)}",
            provider=provider,
            model=model,
            query=query,
            response="",
            success=False,
            confidence=0.0,
            latency_ms=latency_ms,
            status=ResponseStatus.FAILED,
            token_usage=TokenUsage(),
            timestamp=timestamp,
            error_message=error_message,
        )

    @property
    def is_failed(self) -> bool:
        return self.status is ResponseStatus.FAILED

    @property
    def cost(self) -> float:
        return self.token_usage.cost
