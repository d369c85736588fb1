"""
Embedding Analyzer

Judges how well content would chunk into embeddings:
- semantic richness: vocabulary diversity and concept density (40%)
- structural suitability: paragraph size and sentence overlap (30%)
- contextual coherence: topic consistency and context switches (30%)
"""

import re
from collections import Counter
from dataclasses import dataclass
from typing import List

from ..analysis.mentions import round_half_up
from .models import EmbeddingAnalysis, ReadinessIssue, ReadinessRecommendation, Severity
from .text import STOP_WORDS, letters_only, split_paragraphs, split_sentences, split_words

SEMANTIC_WEIGHT = 0.4
STRUCTURAL_WEIGHT = 0.3
CONTEXTUAL_WEIGHT = 0.3

MAX_TOPIC_WORDS = 20
CONCEPT_SUFFIX = re.compile(r"(tion|sion|ment|ness|ity|ism)$")
CONTEXT_SWITCH_KEYWORDS = (
    "however",
    "meanwhile",
    "furthermore",
    "additionally",
    "in contrast",
    "on the other hand",
    "alternatively",
    "conversely",
    "nevertheless",
)


@dataclass(frozen=True)
class SemanticRichness:
    score: int
    vocabulary_diversity: int
    concept_density: int


@dataclass(frozen=True)
class StructuralSuitability:
    score: int
    avg_paragraph_length: int
    coherence: int


@dataclass(frozen=True)
class ContextualCoherence:
    score: int
    topic_coherence: int
    context_switches: int


def is_concept_word(word: str) -> bool:
    """Long words, abstract-noun suffixes and capitalized words, minus stop words."""
    cleaned = letters_only(word)
    if cleaned in STOP_WORDS or len(cleaned) < 3:
        return False
    return len(cleaned) > 4 or bool(CONCEPT_SUFFIX.search(cleaned)) or word[:1].isupper()


def analyze_semantic_richness(text: str) -> SemanticRichness:
    words = split_words(text)
    if not words:
        return SemanticRichness(score=0, vocabulary_diversity=0, concept_density=0)

    diversity = len({letters_only(w) for w in words}) / len(words)
    density = sum(1 for w in words if is_concept_word(w)) / len(words)
    score = min(100.0, diversity * 40 + density * 60)

    return SemanticRichness(
        score=round_half_up(score),
        vocabulary_diversity=round_half_up(diversity * 100),
        concept_density=round_half_up(density * 100),
    )


def sentence_overlap(previous: str, current: str) -> float:
    prev_words = set(previous.lower().split())
    curr_words = set(current.lower().split())
    smaller = min(len(prev_words), len(curr_words))
    if not smaller:
        return 0.0
    return len(prev_words & curr_words) / smaller * 100


def paragraph_coherence(paragraphs: List[str]) -> float:
    """Mean word overlap between consecutive sentences; single-sentence paragraphs count 50."""
    if not paragraphs:
        return 0.0

    total = 0.0
    for paragraph in paragraphs:
        sentences = split_sentences(paragraph)
        if len(sentences) < 2:
            total += 50
            continue
        overlaps = [sentence_overlap(a, b) for a, b in zip(sentences, sentences[1:])]
        total += sum(overlaps) / len(overlaps)
    return total / len(paragraphs)


def analyze_structural_suitability(text: str) -> StructuralSuitability:
    paragraphs = split_paragraphs(text)
    if not paragraphs:
        return StructuralSuitability(score=0, avg_paragraph_length=0, coherence=0)

    avg_length = sum(len(p.split()) for p in paragraphs) / len(paragraphs)
    score = 100.0
    if avg_length < 20:
        score -= 15
    elif avg_length > 200:
        score -= 20

    coherence = paragraph_coherence(paragraphs)
    score *= coherence / 100

    return StructuralSuitability(
        score=max(0, round_half_up(score)),
        avg_paragraph_length=round_half_up(avg_length),
        coherence=round_half_up(coherence),
    )


def extract_topic_words(text: str) -> List[str]:
    """Concept words seen more than once, most frequent first."""
    frequency = Counter(letters_only(w) for w in split_words(text) if is_concept_word(w))
    repeated = [(word, count) for word, count in frequency.items() if count > 1]
    repeated.sort(key=lambda item: item[1], reverse=True)
    return [word for word, _ in repeated[:MAX_TOPIC_WORDS]]


def topic_coherence(topic_words: List[str], sentences: List[str]) -> float:
    if not topic_words or not sentences:
        return 0.0

    coherent = 0
    for sentence in sentences:
        sentence_words = sentence.lower().split()
        if any(topic in word for topic in topic_words for word in sentence_words):
            coherent += 1
    return coherent / len(sentences) * 100


def count_context_switches(sentences: List[str]) -> int:
    return sum(
        1 for sentence in sentences
        if any(keyword in sentence.lower() for keyword in CONTEXT_SWITCH_KEYWORDS)
    )


def analyze_contextual_coherence(text: str) -> ContextualCoherence:
    sentences = split_sentences(text)
    coherence = topic_coherence(extract_topic_words(text), sentences)
    switches = count_context_switches(sentences)
    stability = max(0, 100 - switches * 10)

    return ContextualCoherence(
        score=round_half_up((coherence + stability) / 2),
        topic_coherence=round_half_up(coherence),
        context_switches=switches,
    )


def _issues(
    semantic: SemanticRichness,
    structural: StructuralSuitability,
    contextual: ContextualCoherence,
) -> List[ReadinessIssue]:
    issues = []
    if semantic.concept_density < 15:
        issues.append(ReadinessIssue(
            "Low Concept Density",
            "Content lacks meaningful concepts for rich embeddings",
            Severity.HIGH,
        ))
    if structural.avg_paragraph_length < 15:
        issues.append(ReadinessIssue(
            "Short Paragraphs",
            "Paragraphs too short for meaningful semantic chunks",
            Severity.MEDIUM,
        ))
    if contextual.context_switches > 10:
        issues.append(ReadinessIssue(
            "Frequent Context Switches",
            "Content jumps between topics too frequently",
            Severity.MEDIUM,
        ))
    if semantic.vocabulary_diversity < 30:
        issues.append(ReadinessIssue(
            "Limited Vocabulary",
            "Repetitive vocabulary reduces embedding richness",
            Severity.LOW,
        ))
    return issues


def _recommendations(
    semantic: SemanticRichness,
    structural: StructuralSuitability,
    contextual: ContextualCoherence,
) -> List[ReadinessRecommendation]:
    recommendations = []
    if semantic.concept_density < 20:
        recommendations.append(ReadinessRecommendation(
            "Increase Concept Density",
            "Add more specific terms and technical concepts",
            18,
        ))
    if structural.avg_paragraph_length < 20:
        recommendations.append(ReadinessRecommendation(
            "Expand Paragraphs",
            "Combine related sentences into more substantial paragraphs",
            15,
        ))
    if contextual.topic_coherence < 70:
        recommendations.append(ReadinessRecommendation(
            "Improve Topic Flow",
            "Better organize content to maintain topic coherence",
            12,
        ))
    if semantic.vocabulary_diversity < 40:
        recommendations.append(ReadinessRecommendation(
            "Diversify Vocabulary",
            "Use more varied terminology and synonyms",
            8,
        ))
    return recommendations


def analyze_embeddings(text: str) -> EmbeddingAnalysis:
    """
    Score how well the document would embed.

    Args:
        text: Document text with blank lines between paragraphs

    Returns:
        EmbeddingAnalysis
    """
    semantic = analyze_semantic_richness(text)
    structural = analyze_structural_suitability(text)
    contextual = analyze_contextual_coherence(text)

    score = (
        semantic.score * SEMANTIC_WEIGHT
        + structural.score * STRUCTURAL_WEIGHT
        + contextual.score * CONTEXTUAL_WEIGHT
    )

    return EmbeddingAnalysis(
        score=round_half_up(score),
        semantic_richness=semantic.score,
        structural_suitability=structural.score,
        contextual_coherence=contextual.score,
        concept_density=semantic.concept_density,
        topic_coherence=contextual.topic_coherence,
        issues=tuple(_issues(semantic, structural, contextual)),
        recommendations=tuple(_recommendations(semantic, structural, contextual)),
    )
