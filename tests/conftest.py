"""
Pytest Configuration and Shared Fixtures

Provides common fixtures and configuration for all test modules.
"""

import pytest
from typing import Callable, List, Optional, Union
from unittest.mock import AsyncMock

from discoverability.analysis.models import ContentFingerprint
from discoverability.evaluation import evaluate_response
from discoverability.providers.config import LLMConfig
from discoverability.providers.models import ProviderResponse, TokenUsage


# ============================================================================
# Fake Provider Client
# ============================================================================

Answer = Union[str, ProviderResponse, Exception]


class FakeProviderClient:
    """
    Stands in for ProviderClient.

    `answer(provider, model, prompt, context)` returns the answer text, a
    ready ProviderResponse, or an Exception (turned into a failed response,
    the way ProviderClient reports errors). `query` is an AsyncMock so tests
    can assert on awaits.
    """

    def __init__(self, answer: Optional[Callable[[str, str, str, str], Answer]] = None, cost: float = 0.001):
        self.answer = answer or (lambda provider, model, prompt, context: "Based on the content, plans start at $99/month.")
        self.cost = cost
        self.calls: List[dict] = []
        self.query = AsyncMock(side_effect=self._query)
        self.close = AsyncMock()

    async def _query(self, provider, model, prompt, context, cancel_token=None):
        self.calls.append({"provider": provider, "model": model, "prompt": prompt, "context": context})
        result = self.answer(provider, model, prompt, context)

        if isinstance(result, ProviderResponse):
            return result
        if isinstance(result, Exception):
            return ProviderResponse.failed(provider, model, prompt, str(result), latency_ms=5.0)

        evaluation = evaluate_response(result)
        return ProviderResponse.completed(
            id=f"{provider}-{len(self.calls)}",
            provider=provider,
            model=model,
            query=prompt,
            response=result,
            success=evaluation.success,
            confidence=evaluation.confidence,
            latency_ms=100.0,
            token_usage=TokenUsage(input=50, output=20, cost=self.cost),
        )


@pytest.fixture
def fake_client() -> FakeProviderClient:
    """Fake client answering every prompt from the content."""
    return FakeProviderClient()


@pytest.fixture
def make_client():
    """FakeProviderClient factory for tests that script the answers."""
    return FakeProviderClient


# ============================================================================
# Mock Data Fixtures
# ============================================================================

@pytest.fixture
def make_response() -> Callable[..., ProviderResponse]:
    """Factory for completed or failed ProviderResponses."""

    def _make(
        provider: str = "openai",
        model: str = "gpt-4",
        success: bool = True,
        confidence: float = 0.7,
        latency_ms: float = 100.0,
        cost: float = 0.0,
        response: str = "Based on the content, yes.",
        query: str = "What does it cost?",
        failed: bool = False,
    ) -> ProviderResponse:
        if failed:
            return ProviderResponse.failed(provider, model, query, "HTTP 500", latency_ms)
        return ProviderResponse.completed(
            id=f"{provider}-{model}",
            provider=provider,
            model=model,
            query=query,
            response=response,
            success=success,
            confidence=confidence,
            latency_ms=latency_ms,
            token_usage=TokenUsage(input=10, output=10, cost=cost),
        )

    return _make


@pytest.fixture
def llm_config() -> LLMConfig:
    """Two providers, one model each."""
    return (
        LLMConfig()
        .with_provider("openai", api_key="sk-test", models=["gpt-4"])
        .with_provider("anthropic", api_key="sk-ant-test", models=["claude-3-haiku-20240307"])
    )


@pytest.fixture
def empty_config() -> LLMConfig:
    return LLMConfig()


@pytest.fixture
def acme_fingerprint() -> ContentFingerprint:
    """Fingerprint of a small cloud company with two competitors."""
    return ContentFingerprint(
        company_name="Acme",
        product_names=("Acme Cloud",),
        unique_claims=(),
        key_phrases=("cloud platform",),
        competitor_names=("Globex", "Initech"),
    )
