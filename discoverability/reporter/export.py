"""
Report and competitive-result export to the JSON documents shared with the
presentation layer.
"""

import json
from typing import Any, Dict, Sequence

from ..analysis.models import ContentMention
from ..models import (
    CompetitiveAnalysisResult,
    ContentAnalysisReport,
    ContentGap,
    ProviderPerformance,
    ProviderVisibility,
    Recommendation,
)
from ..readiness.models import ReadinessReport


def _performance_to_dict(performance: ProviderPerformance) -> Dict[str, Any]:
    return {
        "provider": performance.provider,
        "model": performance.model,
        "successRate": performance.success_rate,
        "averageLatency": performance.average_latency,
        "totalCost": performance.total_cost,
        "responseCount": performance.response_count,
    }


def _gap_to_dict(gap: ContentGap) -> Dict[str, Any]:
    return {
        "id": gap.id,
        "title": gap.title,
        "description": gap.description,
        "priority": gap.priority.value,
        "failedPrompts": list(gap.failed_prompts),
        "estimatedHours": gap.estimated_hours,
    }


def _recommendation_to_dict(recommendation: Recommendation) -> Dict[str, Any]:
    return {
        "id": recommendation.id,
        "title": recommendation.title,
        "description": recommendation.description,
        "impact": recommendation.impact,
        "effort": recommendation.effort,
        "timeline": recommendation.timeline,
        "category": recommendation.category,
        "actions": list(recommendation.actions),
    }


def report_to_dict(report: ContentAnalysisReport) -> Dict[str, Any]:
    return {
        "summary": {
            "industry": report.industry,
            "testDate": report.test_date.isoformat(),
            "successRate": f"{report.overall_success_rate * 100:.1f}%",
            "averageLatency": f"{report.average_latency:.0f}ms",
            "totalCost": f"${report.total_cost:.4f}",
            "totalTests": report.total_responses,
        },
        "providerPerformance": [_performance_to_dict(p) for p in report.provider_performance],
        "contentGaps": [_gap_to_dict(g) for g in report.content_gaps],
        "recommendations": [_recommendation_to_dict(r) for r in report.recommendations],
    }


def export_report(report: ContentAnalysisReport) -> str:
    """Serialize a report as 2-space indented JSON."""
    return json.dumps(report_to_dict(report), indent=2)


def _visibility_to_dict(visibility: ProviderVisibility) -> Dict[str, Any]:
    return {
        "provider": visibility.provider,
        "model": visibility.model,
        "response": visibility.response,
        "userContentMentions": [_mention_to_dict(m) for m in visibility.user_content_mentions],
        "competitorMentions": [_mention_to_dict(m) for m in visibility.competitor_mentions],
        "visibilityScore": visibility.visibility_score,
        "competitiveRank": visibility.competitive_rank,
    }


def _mention_to_dict(mention: ContentMention) -> Dict[str, Any]:
    return {
        "source": mention.source,
        "type": mention.content_type.value,
        "snippet": mention.snippet,
        "prominence": mention.prominence,
        "accuracy": mention.accuracy,
    }


def export_competitive_results(results: Sequence[CompetitiveAnalysisResult]) -> str:
    """Serialize competitive analysis results as 2-space indented JSON."""
    return json.dumps(
        [
            {
                "promptId": result.prompt_id,
                "prompt": result.prompt,
                "responses": [_visibility_to_dict(v) for v in result.responses],
                "overallVisibilityScore": result.overall_visibility_score,
                "missedOpportunity": result.missed_opportunity,
            }
            for result in results
        ],
        indent=2,
    )


def readiness_to_dict(report: ReadinessReport) -> Dict[str, Any]:
    """Flatten a readiness report into the analysis document layout."""
    return {
        "overallScore": report.overall_score,
        "structureScore": report.structure.score,
        "clarityScore": report.structure.clarity_score,
        "tokenEfficiency": report.tokens.efficiency_score,
        "embeddingPotential": report.embedding.score,
        "promptCoverage": report.prompt_coverage.coverage_score,
        "tokenCount": report.tokens.total_tokens,
        "readabilityLevel": report.structure.readability_level,
        "avgSentenceLength": report.structure.avg_sentence_length,
        "complexWordsPercent": report.structure.complex_words_percent,
        "potentialImprovement": report.potential_improvement,
        "tokenAnalysis": {
            "headers": report.tokens.header_tokens,
            "content": report.tokens.content_tokens,
            "metadata": report.tokens.metadata_tokens,
        },
        "issues": [
            {"type": i.type, "description": i.description, "severity": i.severity.value}
            for i in report.issues
        ],
        "recommendations": [
            {"title": r.title, "description": r.description, "expectedImprovement": r.expected_improvement}
            for r in report.recommendations
        ],
        "contentGaps": [
            {
                "topic": g.topic,
                "description": g.description,
                "priority": g.priority.value,
                "queryFrequency": g.query_frequency,
                "type": g.gap_type,
            }
            for g in report.content_gaps.gaps
        ],
    }


def export_readiness(report: ReadinessReport) -> str:
    return json.dumps(readiness_to_dict(report), indent=2)
