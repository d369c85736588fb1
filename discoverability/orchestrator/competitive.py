"""
Competitive Test Orchestrator

Fingerprints the user's content once, then asks every selected model the
competitive prompts with no context and measures how visible the user's
company, products and claims are next to competitors.
"""

import asyncio
import logging
from typing import List, Optional, Sequence
from uuid import uuid4

from ..analysis.fingerprint import FingerprintExtractor
from ..analysis.mentions import analyze_mentions
from ..analysis.models import ContentFingerprint
from ..analysis.prompts import generate_competitive_prompts
from ..models import CompetitiveAnalysisResult, ProviderVisibility
from ..providers.config import ModelSelection
from ..providers.models import ProviderResponse
from ..utils.cancellation import CancellationToken
from .content import BaseOrchestrator, resolve_selections
from .dispatch import ProviderDispatcher

logger = logging.getLogger(__name__)


def make_prompt_id(index: int) -> str:
    return f"comp_{index}_{uuid4().hex[:9]}"


def to_visibility(response: ProviderResponse, fingerprint: ContentFingerprint) -> ProviderVisibility:
    analysis = analyze_mentions(response.response, fingerprint)
    return ProviderVisibility(
        provider=response.provider,
        model=response.model,
        response=response.response,
        user_content_mentions=tuple(analysis.user_mentions),
        competitor_mentions=tuple(analysis.competitor_mentions),
        visibility_score=analysis.visibility_score,
        competitive_rank=analysis.competitive_rank,
    )


class CompetitiveTestOrchestrator(BaseOrchestrator):
    """
    Usage:
        async with CompetitiveTestOrchestrator.from_settings() as orchestrator:
            results = await orchestrator.perform_competitive_analysis(chunks, "fintech")
            missed = [r for r in results if r.missed_opportunity]
    """

    async def perform_competitive_analysis(
        self,
        content_chunks: Sequence[str],
        industry: str,
        test_prompts: Optional[Sequence[str]] = None,
        selected_models: Optional[Sequence[ModelSelection]] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> List[CompetitiveAnalysisResult]:
        """
        Measure the user's visibility in answers to competitive prompts.

        Args:
            content_chunks: The user's content (only used for fingerprinting)
            industry: Industry label used in prompts
            test_prompts: Prompts to ask (default: generated from the fingerprint)
            selected_models: Pairs to test (default: every configured pair)
            cancel_token: Run-scoped cancellation token

        Returns:
            One CompetitiveAnalysisResult per prompt, in prompt order

        Raises:
            ConfigurationError: no provider configured, before any call
        """
        selections = resolve_selections(self.config, selected_models)
        dispatcher = self._new_dispatcher()

        fingerprint = await FingerprintExtractor(self.client, dispatcher).extract(
            content_chunks, industry, selections[0], cancel_token=cancel_token,
        )

        if test_prompts is not None:
            prompts = list(test_prompts)
        else:
            prompts = generate_competitive_prompts(industry, fingerprint)

        logger.info(
            f"Competitive analysis for {industry}: {len(prompts)} prompts x {len(selections)} models"
        )

        results = await asyncio.gather(*[
            self._analyze_prompt(dispatcher, index, prompt, selections, fingerprint, cancel_token)
            for index, prompt in enumerate(prompts, start=1)
        ])

        self.last_snapshot = dispatcher.accumulator.snapshot()
        missed = sum(1 for r in results if r.missed_opportunity)
        logger.info(
            f"Competitive analysis complete: {len(results)} prompts, {missed} missed opportunities, "
            f"total cost ${self.last_snapshot.total_cost:.4f}"
        )
        return list(results)

    async def _analyze_prompt(
        self,
        dispatcher: ProviderDispatcher,
        index: int,
        prompt: str,
        selections: Sequence[ModelSelection],
        fingerprint: ContentFingerprint,
        cancel_token: Optional[CancellationToken],
    ) -> CompetitiveAnalysisResult:
        responses = await asyncio.gather(*[
            dispatcher.dispatch(selection, prompt, "", cancel_token)
            for selection in selections
        ])

        visibilities = []
        for response in responses:
            if response.success and response.response:
                visibilities.append(to_visibility(response, fingerprint))
            else:
                logger.info(f"No usable answer from {response.provider}/{response.model} for prompt {index}")

        return CompetitiveAnalysisResult.from_responses(make_prompt_id(index), prompt, visibilities)
