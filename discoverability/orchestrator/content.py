"""
Content Test Orchestrator

Runs every (prompt, content chunk) pair against every selected
(provider, model), collects one TestResult per pair and hands them to the
report aggregator.

Usage:
    async with TestOrchestrator.from_settings() as orchestrator:
        report = await orchestrator.test_industry_content(
            "life-sciences", content_chunks, prompts,
        )
        print(export_report(report))
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Dict, List, Mapping, Optional, Sequence

import httpx

from ..analysis.prompts import (
    SAMPLE_CONTENT,
    SAMPLE_PROMPTS,
    build_prompt_generation_query,
    parse_generated_prompts,
)
from ..errors import ConfigurationError, PromptGenerationError
from ..models import ContentAnalysisReport, TestResult
from ..providers.client import ProviderClient
from ..providers.config import LLMConfig, ModelSelection
from ..providers.models import Provider
from ..reporter.accumulator import RunSnapshot
from ..reporter.aggregator import build_report
from ..utils.cancellation import CancellationToken
from ..utils.config import Settings, get_settings
from .dispatch import DEFAULT_CONCURRENCY, DEFAULT_SPACING_SECONDS, ProviderDispatcher, ThrottleLimits

logger = logging.getLogger(__name__)


NO_PROVIDERS_MESSAGE = "No LLM providers configured. Please add API keys for at least one provider."


def resolve_selections(
    config: LLMConfig,
    selected_models: Optional[Sequence[ModelSelection]] = None,
) -> List[ModelSelection]:
    """
    The (provider, model) pairs of a run.

    Raises:
        ConfigurationError: no pair to run against
    """
    selections = list(selected_models) if selected_models is not None else config.available_models()
    if not selections:
        raise ConfigurationError(NO_PROVIDERS_MESSAGE)
    return selections


def limits_from_settings(settings: Settings) -> Dict[str, ThrottleLimits]:
    """Throttle limits for every provider, with per-provider overrides applied."""
    return {
        provider.value: ThrottleLimits(
            concurrency=settings.concurrency_for(provider.value),
            spacing_seconds=settings.spacing_ms_for(provider.value) / 1000,
        )
        for provider in Provider
    }


class BaseOrchestrator:
    """Shared wiring: config, provider client and per-run dispatchers."""

    def __init__(
        self,
        config: LLMConfig,
        client,
        concurrency: int = DEFAULT_CONCURRENCY,
        spacing_seconds: float = DEFAULT_SPACING_SECONDS,
        provider_limits: Optional[Mapping[str, ThrottleLimits]] = None,
    ):
        """
        Args:
            config: Enabled providers and models
            client: ProviderClient (or anything with the same `query` coroutine)
            concurrency: Default in-flight calls allowed per provider
            spacing_seconds: Default minimum gap between call starts to one provider
            provider_limits: Per-provider overrides, keyed by provider name
        """
        self.config = config
        self.client = client
        self.concurrency = concurrency
        self.spacing_seconds = spacing_seconds
        self.provider_limits = dict(provider_limits or {})
        self.last_snapshot: Optional[RunSnapshot] = None
        self._owns_client = False

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """Build an orchestrator (and its ProviderClient) from environment settings."""
        settings = settings or get_settings()
        config = LLMConfig.from_settings(settings)
        orchestrator = cls(
            config,
            ProviderClient.from_settings(config, settings, http_client=http_client),
            concurrency=settings.PROVIDER_CONCURRENCY,
            spacing_seconds=settings.CALL_SPACING_MS / 1000,
            provider_limits=limits_from_settings(settings),
        )
        orchestrator._owns_client = True
        return orchestrator

    def _new_dispatcher(self) -> ProviderDispatcher:
        return ProviderDispatcher(
            self.client,
            self.concurrency,
            self.spacing_seconds,
            provider_limits=self.provider_limits,
        )

    async def close(self):
        if self._owns_client:
            await self.client.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()


class TestOrchestrator(BaseOrchestrator):
    """Content discoverability test runs."""
    __test__ = False  # not a pytest test class

    async def test_industry_content(
        self,
        industry: str,
        content_chunks: Sequence[str],
        prompts: Sequence[str],
        selected_models: Optional[Sequence[ModelSelection]] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> ContentAnalysisReport:
        """
        Test whether the content answers the prompts across providers.

        Args:
            industry: Industry label for the report
            content_chunks: Content sent as context
            prompts: User questions
            selected_models: Pairs to test (default: every configured pair)
            cancel_token: Run-scoped cancellation token

        Returns:
            ContentAnalysisReport (complete even when every call failed)

        Raises:
            ConfigurationError: no provider configured, before any call
        """
        selections = resolve_selections(self.config, selected_models)
        test_date = datetime.now(timezone.utc)
        dispatcher = self._new_dispatcher()

        logger.info(
            f"Testing {industry}: {len(prompts)} prompts x {len(content_chunks)} chunks "
            f"x {len(selections)} models"
        )

        async def run_pair(prompt: str, chunk: str) -> TestResult:
            responses = await asyncio.gather(*[
                dispatcher.dispatch(selection, prompt, chunk, cancel_token)
                for selection in selections
            ])
            return TestResult.from_responses(prompt, chunk, responses)

        test_results = await asyncio.gather(*[
            run_pair(prompt, chunk)
            for prompt in prompts
            for chunk in content_chunks
        ])

        snapshot = self.last_snapshot = dispatcher.accumulator.snapshot()
        logger.info(
            f"Completed {snapshot.calls} calls ({snapshot.failures} failed), "
            f"total cost ${snapshot.total_cost:.4f}"
        )

        return build_report(industry, test_results, test_date)

    async def quick_test(
        self,
        industry: str,
        sample_size: int = 5,
        selected_models: Optional[Sequence[ModelSelection]] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> ContentAnalysisReport:
        """Run the built-in sample prompts against the built-in sample content."""
        return await self.test_industry_content(
            industry,
            list(SAMPLE_CONTENT),
            list(SAMPLE_PROMPTS[:sample_size]),
            selected_models=selected_models,
            cancel_token=cancel_token,
        )

    async def generate_industry_prompts(
        self,
        industry: str,
        prompt_count: int = 5,
        cancel_token: Optional[CancellationToken] = None,
    ) -> List[str]:
        """
        Ask the first configured model for realistic customer questions.

        Raises:
            ConfigurationError: no provider or no model configured
            PromptGenerationError: the generation call failed
        """
        providers = self.config.configured_providers()
        if not providers:
            raise ConfigurationError(NO_PROVIDERS_MESSAGE)

        provider = providers[0]
        models = self.config.models_for(provider)
        if not models:
            raise ConfigurationError(f"No models available for provider: {provider}")

        response = await self.client.query(
            provider,
            models[0],
            build_prompt_generation_query(industry, prompt_count),
            f"This is for the {industry} industry.",
            cancel_token=cancel_token,
        )

        if not response.success:
            raise PromptGenerationError(
                f"Failed to generate prompts: {response.error_message or 'unusable response'}"
            )

        prompts = parse_generated_prompts(response.response, prompt_count)
        logger.info(f"Generated {len(prompts)} prompts for {industry} with {provider}/{models[0]}")
        return prompts
