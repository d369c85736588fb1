"""
Report Aggregator

Turns the TestResults of one content run into a ContentAnalysisReport:
overall stats, per-(provider, model) performance, content gaps and a fixed
set of recommendation rules.

Pure: the same results and test_date always produce the same report.
"""

import logging
import math
from datetime import datetime
from typing import Dict, List, Sequence, Tuple

from ..models import (
    ContentAnalysisReport,
    ContentGap,
    GapPriority,
    ProviderPerformance,
    Recommendation,
    TestResult,
)

logger = logging.getLogger(__name__)


GAP_KEY_CHARS = 50
HIGH_PRIORITY_ABOVE = 3
MEDIUM_PRIORITY_ABOVE = 1
HOURS_PER_FAILED_PROMPT = 2

SUCCESS_RATE_MARGIN = 0.2
COST_EFFICIENCY_RATIO = 0.5

COVERAGE_ACTIONS = (
    "Review failed queries to identify missing information",
    "Expand content with relevant details",
    "Add FAQ sections for common questions",
    "Ensure content directly addresses user intent",
)

COST_ACTIONS = (
    "Switch to more cost-effective models for routine queries",
    "Implement tiered model selection based on query complexity",
    "Set up cost monitoring and alerts",
    "Review and optimize token usage",
)


def gap_key(content_chunk: str) -> str:
    return content_chunk[:GAP_KEY_CHARS] + "..."


def gap_priority(failed_count: int) -> GapPriority:
    if failed_count > HIGH_PRIORITY_ABOVE:
        return GapPriority.HIGH
    if failed_count > MEDIUM_PRIORITY_ABOVE:
        return GapPriority.MEDIUM
    return GapPriority.LOW


def summarize_providers(test_results: Sequence[TestResult]) -> List[ProviderPerformance]:
    """Per-(provider, model) stats in first-seen order."""
    stats: Dict[Tuple[str, str], Dict[str, float]] = {}

    for test_result in test_results:
        for response in test_result.results:
            entry = stats.setdefault(
                (response.provider, response.model),
                {"success": 0, "count": 0, "latency": 0.0, "cost": 0.0},
            )
            entry["count"] += 1
            entry["latency"] += response.latency_ms
            entry["cost"] += response.cost
            if response.success:
                entry["success"] += 1

    return [
        ProviderPerformance(
            provider=provider,
            model=model,
            success_count=int(entry["success"]),
            response_count=int(entry["count"]),
            average_latency=entry["latency"] / entry["count"],
            total_cost=entry["cost"],
        )
        for (provider, model), entry in stats.items()
    ]


def find_content_gaps(test_results: Sequence[TestResult]) -> List[ContentGap]:
    """Failed (prompt, chunk) pairs grouped by the start of the chunk."""
    failed: Dict[str, List[str]] = {}
    for test_result in test_results:
        if not test_result.overall_success:
            failed.setdefault(gap_key(test_result.content_chunk), []).append(test_result.prompt)

    return [
        ContentGap(
            id=f"gap-{index}",
            title=f"Content Gap: {content}",
            description=f"This content failed to answer {len(prompts)} user queries effectively.",
            priority=gap_priority(len(prompts)),
            failed_prompts=tuple(prompts),
            estimated_hours=len(prompts) * HOURS_PER_FAILED_PROMPT,
        )
        for index, (content, prompts) in enumerate(failed.items(), start=1)
    ]


def _label(performance: ProviderPerformance) -> str:
    return f"{performance.provider}/{performance.model}"


def _cost_per_success_text(performance: ProviderPerformance) -> str:
    if math.isinf(performance.cost_per_success):
        return "no successful responses"
    return f"${performance.cost_per_success:.4f}"


def build_recommendations(
    test_results: Sequence[TestResult],
    performance: Sequence[ProviderPerformance],
) -> List[Recommendation]:
    """
    Apply the recommendation rules in order: content coverage, provider
    selection, cost optimization.
    """
    drafts: List[dict] = []

    failed_count = sum(1 for r in test_results if not r.overall_success)
    if failed_count:
        drafts.append({
            "title": "Improve Content Coverage",
            "description": (
                f"{failed_count} content pieces failed to answer user queries. "
                "Consider expanding these sections with more comprehensive information."
            ),
            "impact": "High",
            "effort": "Medium",
            "timeline": "2-4 weeks",
            "category": "Content Quality",
            "actions": COVERAGE_ACTIONS,
        })

    if performance:
        # sorted() is stable, so ties keep first-seen order
        best = sorted(performance, key=lambda p: p.success_rate, reverse=True)[0]
        worst = sorted(performance, key=lambda p: p.success_rate)[0]

        if best.success_rate > worst.success_rate + SUCCESS_RATE_MARGIN:
            drafts.append({
                "title": "Optimize LLM Provider Selection",
                "description": (
                    f"{_label(best)} significantly outperforms other models with "
                    f"{best.success_rate * 100:.1f}% success rate vs "
                    f"{worst.success_rate * 100:.1f}% for {_label(worst)}."
                ),
                "impact": "Medium",
                "effort": "Low",
                "timeline": "1 week",
                "category": "Technical Optimization",
                "actions": (
                    f"Prioritize {_label(best)} for production use",
                    "Consider deprecating underperforming models",
                    "Implement model selection logic based on query type",
                    "Monitor performance metrics continuously",
                ),
            })

    if len(performance) >= 2:
        by_cost = sorted(performance, key=lambda p: p.cost_per_success)
        most_efficient, least_efficient = by_cost[0], by_cost[-1]

        if most_efficient.cost_per_success < least_efficient.cost_per_success * COST_EFFICIENCY_RATIO:
            drafts.append({
                "title": "Reduce API Costs",
                "description": (
                    f"{_label(most_efficient)} provides the best cost-per-success ratio at "
                    f"${most_efficient.cost_per_success:.4f} compared to "
                    f"{_cost_per_success_text(least_efficient)} for {_label(least_efficient)}."
                ),
                "impact": "Medium",
                "effort": "Low",
                "timeline": "1 week",
                "category": "Cost Optimization",
                "actions": COST_ACTIONS,
            })

    return [
        Recommendation(id=f"insight-{index}", **draft)
        for index, draft in enumerate(drafts, start=1)
    ]


def build_report(
    industry: str,
    test_results: Sequence[TestResult],
    test_date: datetime,
) -> ContentAnalysisReport:
    """
    Build the report for one content run.

    Args:
        industry: Industry the run targeted
        test_results: One TestResult per (prompt, chunk), in dispatch order
        test_date: Run timestamp (taken once by the orchestrator)

    Returns:
        ContentAnalysisReport
    """
    test_results = tuple(test_results)
    responses = [response for result in test_results for response in result.results]
    response_count = len(responses)

    success_count = sum(1 for r in responses if r.success)
    overall_success_rate = success_count / response_count if response_count else 0.0
    average_latency = (
        sum(r.latency_ms for r in responses) / response_count if response_count else 0.0
    )

    performance = summarize_providers(test_results)
    gaps = find_content_gaps(test_results)
    recommendations = build_recommendations(test_results, performance)

    logger.info(
        f"Report for {industry}: {response_count} responses, "
        f"{overall_success_rate * 100:.1f}% success, {len(gaps)} gaps, "
        f"{len(recommendations)} recommendations"
    )

    return ContentAnalysisReport(
        industry=industry,
        test_date=test_date,
        total_prompts=len({r.prompt for r in test_results}),
        total_responses=response_count,
        overall_success_rate=overall_success_rate,
        average_latency=average_latency,
        total_cost=sum(r.cost for r in responses),
        test_results=test_results,
        content_gaps=tuple(gaps),
        recommendations=tuple(recommendations),
        provider_performance=tuple(performance),
    )
