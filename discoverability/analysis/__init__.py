"""
Competitive Analysis

- Fingerprint: structured identity record extracted from content
- Mentions: user vs competitor mention detection and scoring
- Prompts: competitive/industry prompt generation
"""

from .models import (
    ContentFingerprint,
    ContentMention,
    ContentType,
    MentionAnalysis,
    PLACEHOLDER_COMPANY,
)
from .mentions import (
    analyze_mentions,
    calculate_competitive_rank,
    calculate_prominence,
    calculate_visibility_score,
    find_mentions,
)
from .fingerprint import FingerprintExtractor, parse_fingerprint
from .prompts import (
    MAX_COMPETITIVE_PROMPTS,
    SAMPLE_CONTENT,
    SAMPLE_PROMPTS,
    build_prompt_generation_query,
    generate_competitive_prompts,
    parse_generated_prompts,
)

__all__ = [
    # Models
    "ContentFingerprint",
    "ContentMention",
    "ContentType",
    "MentionAnalysis",
    "PLACEHOLDER_COMPANY",
    # Mentions
    "analyze_mentions",
    "calculate_competitive_rank",
    "calculate_prominence",
    "calculate_visibility_score",
    "find_mentions",
    # Fingerprint
    "FingerprintExtractor",
    "parse_fingerprint",
    # Prompts
    "MAX_COMPETITIVE_PROMPTS",
    "SAMPLE_CONTENT",
    "SAMPLE_PROMPTS",
    "build_prompt_generation_query",
    "generate_competitive_prompts",
    "parse_generated_prompts",
]
