"""
Readiness Analyzer

Runs the five static analyzers over one document and combines them.
No provider is called.
"""

import logging
from typing import List

from ..analysis.mentions import round_half_up
from .coverage import analyze_prompt_coverage
from .embedding import analyze_embeddings
from .gaps import identify_content_gaps
from .models import ReadinessRecommendation, ReadinessReport
from .structure import analyze_structure
from .tokens import analyze_tokens

logger = logging.getLogger(__name__)

MAX_ISSUES = 10
MAX_RECOMMENDATIONS = 8


def potential_improvement(recommendations: List[ReadinessRecommendation]) -> int:
    """Mean expected improvement over every recommendation, 0 when there are none."""
    if not recommendations:
        return 0
    return round_half_up(sum(r.expected_improvement for r in recommendations) / len(recommendations))


def analyze_readiness(text: str) -> ReadinessReport:
    """
    Analyze how ready a document is to be found and used by LLMs.

    The overall score is the unweighted mean of the structure, token
    efficiency, embedding and prompt coverage scores.

    Args:
        text: Document text

    Returns:
        ReadinessReport with issues capped at 10 and recommendations at 8

    Raises:
        ValueError: text has no readable content
    """
    if not text or not text.strip():
        raise ValueError("No readable content")

    structure = analyze_structure(text)
    tokens = analyze_tokens(text)
    embedding = analyze_embeddings(text)
    prompt_coverage = analyze_prompt_coverage(text)
    content_gaps = identify_content_gaps(text)

    overall = round_half_up(
        (structure.score + tokens.efficiency_score + embedding.score + prompt_coverage.coverage_score) / 4
    )

    issues = structure.issues + tokens.issues + embedding.issues + prompt_coverage.issues
    recommendations = (
        structure.recommendations
        + tokens.recommendations
        + embedding.recommendations
        + prompt_coverage.recommendations
    )

    logger.info(
        f"Readiness: overall {overall}, {len(issues)} issues, "
        f"{content_gaps.gap_count} gaps, {tokens.total_tokens} tokens"
    )

    return ReadinessReport(
        overall_score=overall,
        structure=structure,
        tokens=tokens,
        embedding=embedding,
        prompt_coverage=prompt_coverage,
        content_gaps=content_gaps,
        potential_improvement=potential_improvement(list(recommendations)),
        issues=issues[:MAX_ISSUES],
        recommendations=recommendations[:MAX_RECOMMENDATIONS],
    )
