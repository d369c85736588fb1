"""
Content Readiness

Static checks of a document before any provider is queried:
- Structure: headers, readability, clarity
- Tokens: estimated footprint and efficiency
- Embedding: semantic richness and chunk coherence
- Coverage: common prompt types answered
- Gaps: topics users ask about that the content skips
"""

from .models import (
    EmbeddingAnalysis,
    GapAnalysis,
    PromptCoverageAnalysis,
    PromptMatch,
    ReadinessGap,
    ReadinessIssue,
    ReadinessRecommendation,
    ReadinessReport,
    Severity,
    StructureAnalysis,
    TokenAnalysis,
    TopicKeyword,
)
from .structure import analyze_structure
from .tokens import analyze_tokens, estimate_tokens
from .embedding import analyze_embeddings
from .coverage import analyze_prompt_coverage
from .gaps import identify_content_gaps
from .analyzer import analyze_readiness

__all__ = [
    "EmbeddingAnalysis",
    "GapAnalysis",
    "PromptCoverageAnalysis",
    "PromptMatch",
    "ReadinessGap",
    "ReadinessIssue",
    "ReadinessRecommendation",
    "ReadinessReport",
    "Severity",
    "StructureAnalysis",
    "TokenAnalysis",
    "TopicKeyword",
    "analyze_structure",
    "analyze_tokens",
    "estimate_tokens",
    "analyze_embeddings",
    "analyze_prompt_coverage",
    "identify_content_gaps",
    "analyze_readiness",
]
