"""
Readiness Data Models

Results of the static (no LLM call) content readiness analyzers.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Tuple

from ..models import GapPriority


class Severity(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class ReadinessIssue:
    type: str
    description: str
    severity: Severity


@dataclass(frozen=True)
class ReadinessRecommendation:
    title: str
    description: str
    expected_improvement: int


@dataclass(frozen=True)
class DocumentMetadata:
    line_count: int
    word_count: int
    sentence_count: int
    character_count: int
    avg_words_per_sentence: int
    avg_chars_per_word: int


@dataclass(frozen=True)
class StructureAnalysis:
    """Headers, readability and clarity."""
    score: int
    clarity_score: int
    readability_level: str
    avg_sentence_length: int
    complex_words_percent: int
    header_count: int
    header_structure: Tuple[int, ...] = ()
    issues: Tuple[ReadinessIssue, ...] = ()
    recommendations: Tuple[ReadinessRecommendation, ...] = ()


@dataclass(frozen=True)
class TokenAnalysis:
    """Token footprint and efficiency."""
    total_tokens: int
    efficiency_score: int
    header_tokens: int
    content_tokens: int
    metadata_tokens: int
    tokens_per_word: float
    redundancy_score: int
    issues: Tuple[ReadinessIssue, ...] = ()
    recommendations: Tuple[ReadinessRecommendation, ...] = ()


@dataclass(frozen=True)
class EmbeddingAnalysis:
    """How well the content chunks into meaningful embeddings."""
    score: int
    semantic_richness: int
    structural_suitability: int
    contextual_coherence: int
    concept_density: int
    topic_coherence: int
    issues: Tuple[ReadinessIssue, ...] = ()
    recommendations: Tuple[ReadinessRecommendation, ...] = ()


@dataclass(frozen=True)
class PromptMatch:
    count: int
    weight: float
    type: str


@dataclass(frozen=True)
class PromptCoverageAnalysis:
    """Which common question types the content answers."""
    coverage_score: int
    answerability_score: int
    completeness_score: int
    prompt_matches: Dict[str, PromptMatch] = field(default_factory=dict)
    missing_prompt_types: Tuple[str, ...] = ()
    issues: Tuple[ReadinessIssue, ...] = ()
    recommendations: Tuple[ReadinessRecommendation, ...] = ()


@dataclass(frozen=True)
class ReadinessGap:
    topic: str
    description: str
    priority: GapPriority
    query_frequency: int
    gap_type: str  # prompt | contextual | information


@dataclass(frozen=True)
class TopicKeyword:
    word: str
    frequency: int
    relevance: float


@dataclass(frozen=True)
class GapAnalysis:
    gaps: Tuple[ReadinessGap, ...]
    main_topics: Tuple[TopicKeyword, ...]
    coverage_score: int
    gap_count: int


@dataclass(frozen=True)
class ReadinessReport:
    """Combined readiness of one document."""
    overall_score: int
    structure: StructureAnalysis
    tokens: TokenAnalysis
    embedding: EmbeddingAnalysis
    prompt_coverage: PromptCoverageAnalysis
    content_gaps: GapAnalysis
    potential_improvement: int
    issues: Tuple[ReadinessIssue, ...] = ()
    recommendations: Tuple[ReadinessRecommendation, ...] = ()
