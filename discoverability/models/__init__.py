"""
Discoverability Engine - Result Models

Shared data models produced by the orchestrators and consumed by the
report aggregator. All are value objects: built once, never mutated.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Sequence, Tuple

from ..analysis.mentions import round_half_up
from ..analysis.models import ContentMention
from ..providers.models import ProviderResponse


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


# =============================================================================
# CONTENT TESTING
# =============================================================================


@dataclass(frozen=True)
class TestResult:
    """All provider responses for one (prompt, content chunk) pair."""
    __test__ = False  # not a pytest test class

    prompt: str
    content_chunk: str
    results: Tuple[ProviderResponse, ...]
    overall_success: bool
    average_confidence: float
    average_latency: float
    total_cost: float
    best_performer: Optional[ProviderResponse]
    worst_performer: Optional[ProviderResponse]

    @classmethod
    def from_responses(
        cls,
        prompt: str,
        content_chunk: str,
        responses: Sequence[ProviderResponse],
    ) -> "TestResult":
        """
        Aggregate the responses of one pair.

        Means run over every response, failures included. Best/worst are the
        first responses with the highest/lowest confidence.
        """
        responses = tuple(responses)

        best = worst = None
        for response in responses:
            if best is None or response.confidence > best.confidence:
                best = response
            if worst is None or response.confidence < worst.confidence:
                worst = response

        return cls(
            prompt=prompt,
            content_chunk=content_chunk,
            results=responses,
            overall_success=any(r.success for r in responses),
            average_confidence=_mean([r.confidence for r in responses]),
            average_latency=_mean([r.latency_ms for r in responses]),
            total_cost=sum(r.cost for r in responses),
            best_performer=best,
            worst_performer=worst,
        )


# =============================================================================
# REPORT
# =============================================================================


class GapPriority(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


@dataclass(frozen=True)
class ContentGap:
    """Content that failed to answer one or more prompts."""
    id: str
    title: str
    description: str
    priority: GapPriority
    failed_prompts: Tuple[str, ...]
    estimated_hours: int


@dataclass(frozen=True)
class Recommendation:
    """Actionable insight emitted by the fixed recommendation rules."""
    id: str
    title: str
    description: str
    impact: str
    effort: str
    timeline: str
    category: str
    actions: Tuple[str, ...]


@dataclass(frozen=True)
class ProviderPerformance:
    """Aggregate stats for one (provider, model)."""
    provider: str
    model: str
    success_count: int
    response_count: int
    average_latency: float
    total_cost: float

    @property
    def success_rate(self) -> float:
        return self.success_count / self.response_count if self.response_count else 0.0

    @property
    def cost_per_success(self) -> float:
        if self.success_rate <= 0:
            return float("inf")
        return self.total_cost / (self.response_count * self.success_rate)


@dataclass(frozen=True)
class ContentAnalysisReport:
    """Outcome of one content test run."""
    industry: str
    test_date: datetime
    total_prompts: int
    total_responses: int
    overall_success_rate: float
    average_latency: float
    total_cost: float
    test_results: Tuple[TestResult, ...] = ()
    content_gaps: Tuple[ContentGap, ...] = ()
    recommendations: Tuple[Recommendation, ...] = ()
    provider_performance: Tuple[ProviderPerformance, ...] = ()


# =============================================================================
# COMPETITIVE ANALYSIS
# =============================================================================


MISSED_OPPORTUNITY_THRESHOLD = 20


@dataclass(frozen=True)
class ProviderVisibility:
    """How one provider's answer surfaced the user vs competitors."""
    provider: str
    model: str
    response: str
    user_content_mentions: Tuple[ContentMention, ...]
    competitor_mentions: Tuple[ContentMention, ...]
    visibility_score: int
    competitive_rank: int

    def __post_init__(self):
        if not 0 <= self.visibility_score <= 100:
            raise ValueError(f"visibility_score must be in [0, 100], got {self.visibility_score}")
        if self.competitive_rank != -1 and self.competitive_rank < 1:
            raise ValueError(f"competitive_rank must be -1 or >= 1, got {self.competitive_rank}")


@dataclass(frozen=True)
class CompetitiveAnalysisResult:
    """Visibility of the user's content for one competitive prompt."""
    prompt_id: str
    prompt: str
    responses: Tuple[ProviderVisibility, ...]
    overall_visibility_score: int
    missed_opportunity: bool

    @classmethod
    def from_responses(
        cls,
        prompt_id: str,
        prompt: str,
        responses: Sequence[ProviderVisibility],
    ) -> "CompetitiveAnalysisResult":
        responses = tuple(responses)
        overall = round_half_up(_mean([r.visibility_score for r in responses]))
        return cls(
            prompt_id=prompt_id,
            prompt=prompt,
            responses=responses,
            overall_visibility_score=overall,
            missed_opportunity=is_missed_opportunity(overall),
        )


def is_missed_opportunity(overall_visibility_score: float) -> bool:
    """A prompt where the user's visibility falls below the fixed threshold."""
    return overall_visibility_score < MISSED_OPPORTUNITY_THRESHOLD


__all__ = [
    "TestResult",
    "GapPriority",
    "ContentGap",
    "Recommendation",
    "ProviderPerformance",
    "ContentAnalysisReport",
    "MISSED_OPPORTUNITY_THRESHOLD",
    "ProviderVisibility",
    "CompetitiveAnalysisResult",
    "is_missed_opportunity",
]
