"""
Token Analyzer

Estimates how many tokens a document costs and how efficiently they are spent.
"""

import re
from collections import Counter
from dataclasses import dataclass
from typing import List

from ..analysis.mentions import round_half_up
from .models import ReadinessIssue, ReadinessRecommendation, Severity, TokenAnalysis
from .text import is_header, letters_only, non_blank_lines, round_to, split_sentences, split_words

CHARS_PER_TOKEN = 4
TOKENS_PER_WORD = 1.3

METADATA_LINE = (
    re.compile(r"^(author|date|title|version|created|modified):", re.IGNORECASE),
    re.compile(r"^\w+:\s*\w+"),
)

FILLER_WORDS = frozenset({
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "of",
    "with", "by", "very", "really", "quite", "rather", "somewhat", "actually",
    "basically", "literally", "obviously", "clearly",
})


@dataclass(frozen=True)
class Efficiency:
    score: int
    redundancy: int
    avg_tokens_per_sentence: float
    filler_percent: int


def estimate_tokens(text: str) -> int:
    """Larger of the character-based and word-based estimates."""
    by_chars = round_half_up(len(text) / CHARS_PER_TOKEN)
    by_words = round_half_up(len(split_words(text)) * TOKENS_PER_WORD)
    return max(by_chars, by_words)


def is_metadata_line(line: str) -> bool:
    return any(pattern.search(line) for pattern in METADATA_LINE)


def redundancy_score(words: List[str]) -> int:
    """Share of distinct long words repeated more than five times, capped at 50."""
    frequency = Counter(cleaned for cleaned in (letters_only(w) for w in words) if len(cleaned) > 3)
    if not frequency:
        return 0
    repeated = sum(1 for count in frequency.values() if count > 5)
    return min(50, round_half_up(repeated / len(frequency) * 100))


def analyze_efficiency(text: str, total_tokens: int) -> Efficiency:
    words = split_words(text)
    sentences = split_sentences(text)
    redundancy = redundancy_score(words)
    avg_tokens_per_sentence = total_tokens / len(sentences) if sentences else 0.0
    filler_ratio = sum(1 for w in words if letters_only(w) in FILLER_WORDS) / len(words) if words else 0.0

    score = 100.0
    if avg_tokens_per_sentence > 30:
        score -= 15
    if filler_ratio > 0.15:
        score -= 20
    score -= redundancy * 0.5

    return Efficiency(
        score=max(0, round_half_up(score)),
        redundancy=redundancy,
        avg_tokens_per_sentence=avg_tokens_per_sentence,
        filler_percent=round_half_up(filler_ratio * 100),
    )


def _issues(total_tokens: int, efficiency: Efficiency) -> List[ReadinessIssue]:
    issues = []
    if total_tokens > 4000:
        issues.append(ReadinessIssue(
            "High Token Count",
            "Document may exceed typical LLM context windows",
            Severity.HIGH,
        ))
    if efficiency.redundancy > 30:
        issues.append(ReadinessIssue(
            "High Redundancy",
            "Content contains excessive repetition",
            Severity.MEDIUM,
        ))
    if efficiency.avg_tokens_per_sentence > 40:
        issues.append(ReadinessIssue(
            "Dense Sentences",
            "Sentences are too token-heavy for optimal processing",
            Severity.MEDIUM,
        ))
    if efficiency.filler_percent > 20:
        issues.append(ReadinessIssue(
            "Excessive Filler Words",
            "Too many low-value words reduce content efficiency",
            Severity.LOW,
        ))
    return issues


def _recommendations(total_tokens: int, tokens_per_word: float, efficiency: Efficiency) -> List[ReadinessRecommendation]:
    recommendations = []
    if total_tokens > 3000:
        recommendations.append(ReadinessRecommendation(
            "Split Content",
            "Break document into smaller chunks for better LLM processing",
            20,
        ))
    if efficiency.redundancy > 25:
        recommendations.append(ReadinessRecommendation(
            "Reduce Redundancy",
            "Remove repetitive content and consolidate similar information",
            15,
        ))
    if efficiency.filler_percent > 15:
        recommendations.append(ReadinessRecommendation(
            "Remove Filler Words",
            "Eliminate unnecessary words to improve token efficiency",
            10,
        ))
    if tokens_per_word > 1.5:
        recommendations.append(ReadinessRecommendation(
            "Simplify Vocabulary",
            "Use shorter, simpler words to reduce token consumption",
            8,
        ))
    return recommendations


def analyze_tokens(text: str) -> TokenAnalysis:
    """
    Estimate token usage and efficiency.

    Lines are attributed to headers, metadata ("Author: ...") or content,
    each estimated on its own, so the three parts need not sum to the total.

    Args:
        text: Document text

    Returns:
        TokenAnalysis
    """
    total_tokens = estimate_tokens(text)
    word_count = len(split_words(text))
    tokens_per_word = round_to(total_tokens / word_count, 2) if word_count else 0.0

    header_tokens = metadata_tokens = content_tokens = 0
    for line in non_blank_lines(text):
        stripped = line.strip()
        tokens = estimate_tokens(stripped)
        if is_header(stripped):
            header_tokens += tokens
        elif is_metadata_line(stripped):
            metadata_tokens += tokens
        else:
            content_tokens += tokens

    efficiency = analyze_efficiency(text, total_tokens)

    return TokenAnalysis(
        total_tokens=total_tokens,
        efficiency_score=efficiency.score,
        header_tokens=header_tokens,
        content_tokens=content_tokens,
        metadata_tokens=metadata_tokens,
        tokens_per_word=tokens_per_word,
        redundancy_score=efficiency.redundancy,
        issues=tuple(_issues(total_tokens, efficiency)),
        recommendations=tuple(_recommendations(total_tokens, tokens_per_word, efficiency)),
    )
