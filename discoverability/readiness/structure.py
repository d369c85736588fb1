"""
Structure Analyzer

Scores how well a document is organized for AI consumption:
- header hierarchy (30%)
- readability, from a simplified Flesch-Kincaid grade level (40%)
- clarity: long sentences, passive voice, jargon (30%)
"""

import re
from dataclasses import dataclass
from typing import List, Tuple

from ..analysis.mentions import round_half_up
from .models import (
    DocumentMetadata,
    ReadinessIssue,
    ReadinessRecommendation,
    Severity,
    StructureAnalysis,
)
from .text import document_metadata, is_header, letters_only, split_sentences, split_words

HIERARCHY_WEIGHT = 0.3
READABILITY_WEIGHT = 0.4
CLARITY_WEIGHT = 0.3

LONG_SENTENCE_WORDS = 25
COMPLEX_SUFFIX = re.compile(r"(tion|sion|ment|ness|ical|ible|able)$")
PASSIVE_VOICE = re.compile(r"\b(was|were|been|being)\s+\w+ed\b")
JARGON = (
    re.compile(r"ization$"),
    re.compile(r"methodology"),
    re.compile(r"paradigm"),
    re.compile(r"synergy"),
    re.compile(r"optimization"),
    re.compile(r"implementation"),
)
MARKDOWN_HEADER = re.compile(r"^(#{1,6})\s+(.+)")


@dataclass(frozen=True)
class HeaderAnalysis:
    count: int
    structure: Tuple[int, ...]
    hierarchy_score: int


@dataclass(frozen=True)
class Readability:
    score: int
    level: str
    complex_words_percent: int
    grade_level: float


@dataclass(frozen=True)
class Clarity:
    score: int
    problems: Tuple[str, ...]


def is_complex_word(word: str) -> bool:
    cleaned = letters_only(word)
    return len(cleaned) > 6 or bool(COMPLEX_SUFFIX.search(cleaned))


def is_jargon(word: str) -> bool:
    lowered = word.lower()
    return any(pattern.search(lowered) for pattern in JARGON)


def estimate_header_level(text: str, current_level: int) -> int:
    if re.match(r"^\d+\.", text):
        return 1
    if re.match(r"^[a-z]\)", text):
        return current_level + 1
    if len(text) < 50 and text == text.upper():
        return 1
    return max(1, current_level)


def hierarchy_score(levels: List[int]) -> int:
    """50 for having headers, up to 50 more for levels that never skip downwards."""
    if not levels:
        return 0

    score = 50.0
    if len(levels) > 1:
        proper = sum(1 for prev, cur in zip(levels, levels[1:]) if cur <= prev + 1)
        score += proper / (len(levels) - 1) * 50
    return round_half_up(score)


def analyze_headers(text: str) -> HeaderAnalysis:
    levels: List[int] = []
    current_level = 0

    for line in text.split("\n"):
        stripped = line.strip()
        if not stripped:
            continue

        markdown = MARKDOWN_HEADER.match(stripped)
        if markdown:
            levels.append(len(markdown.group(1)))
            continue

        if is_header(stripped):
            current_level = estimate_header_level(stripped, current_level)
            levels.append(current_level)

    return HeaderAnalysis(count=len(levels), structure=tuple(levels), hierarchy_score=hierarchy_score(levels))


def readability_level(grade_level: float) -> str:
    if grade_level <= 8:
        return "Elementary"
    if grade_level <= 12:
        return "High School"
    if grade_level <= 16:
        return "College"
    return "Graduate"


def analyze_readability(text: str) -> Readability:
    words = split_words(text)
    sentences = split_sentences(text)
    if not words or not sentences:
        return Readability(score=0, level="Unknown", complex_words_percent=0, grade_level=0.0)

    avg_sentence_length = len(words) / len(sentences)
    complex_ratio = sum(1 for word in words if is_complex_word(word)) / len(words)
    grade_level = 0.39 * avg_sentence_length + 11.8 * complex_ratio - 15.59

    if grade_level > 16:
        score = 30
    elif grade_level > 13:
        score = 50
    elif grade_level > 10:
        score = 70
    elif grade_level > 8:
        score = 85
    else:
        score = 100

    return Readability(
        score=score,
        level=readability_level(grade_level),
        complex_words_percent=round_half_up(complex_ratio * 100),
        grade_level=grade_level,
    )


def analyze_clarity(text: str) -> Clarity:
    sentences = split_sentences(text)
    words = split_words(text)
    score = 100
    problems = []

    long_sentences = sum(1 for s in sentences if len(s.split()) > LONG_SENTENCE_WORDS)
    if long_sentences > len(sentences) * 0.3:
        score -= 20
        problems.append("Too many long sentences")

    passive = sum(1 for s in sentences if PASSIVE_VOICE.search(s.lower()))
    if passive > len(sentences) * 0.4:
        score -= 15
        problems.append("Excessive passive voice")

    if sum(1 for word in words if is_jargon(word)) > len(words) * 0.1:
        score -= 10
        problems.append("High jargon content")

    return Clarity(score=max(0, score), problems=tuple(problems))


def structure_score(headers: HeaderAnalysis, readability: Readability, clarity: Clarity) -> int:
    score = (
        headers.hierarchy_score * HIERARCHY_WEIGHT
        + readability.score * READABILITY_WEIGHT
        + clarity.score * CLARITY_WEIGHT
    )
    return round_half_up(max(0.0, min(100.0, score)))


def _issues(
    headers: HeaderAnalysis,
    readability: Readability,
    clarity: Clarity,
    metadata: DocumentMetadata,
) -> List[ReadinessIssue]:
    issues = []
    if headers.count == 0:
        issues.append(ReadinessIssue(
            "Missing Headers",
            "Document lacks clear section headers for better organization",
            Severity.HIGH,
        ))
    if readability.grade_level > 16:
        issues.append(ReadinessIssue(
            "High Reading Level",
            "Content is too complex for general audiences",
            Severity.MEDIUM,
        ))
    if metadata.avg_words_per_sentence > 25:
        issues.append(ReadinessIssue(
            "Long Sentences",
            "Sentences are too long, reducing readability",
            Severity.MEDIUM,
        ))
    issues.extend(ReadinessIssue("Clarity Issue", problem, Severity.LOW) for problem in clarity.problems)
    return issues


def _recommendations(
    headers: HeaderAnalysis,
    readability: Readability,
    metadata: DocumentMetadata,
) -> List[ReadinessRecommendation]:
    recommendations = []
    if headers.count < 3 and metadata.word_count > 500:
        recommendations.append(ReadinessRecommendation(
            "Add Section Headers",
            "Break content into clear sections with descriptive headers",
            15,
        ))
    if readability.complex_words_percent > 20:
        recommendations.append(ReadinessRecommendation(
            "Simplify Language",
            "Replace complex terms with simpler alternatives where possible",
            12,
        ))
    if metadata.avg_words_per_sentence > 20:
        recommendations.append(ReadinessRecommendation(
            "Shorten Sentences",
            "Break long sentences into shorter, more digestible chunks",
            10,
        ))
    return recommendations


def analyze_structure(text: str) -> StructureAnalysis:
    """
    Analyze document structure.

    Args:
        text: Document text (newlines preserved)

    Returns:
        StructureAnalysis with the 0-100 structure and clarity scores
    """
    metadata = document_metadata(text)
    headers = analyze_headers(text)
    readability = analyze_readability(text)
    clarity = analyze_clarity(text)

    return StructureAnalysis(
        score=structure_score(headers, readability, clarity),
        clarity_score=clarity.score,
        readability_level=readability.level,
        avg_sentence_length=metadata.avg_words_per_sentence,
        complex_words_percent=readability.complex_words_percent,
        header_count=headers.count,
        header_structure=headers.structure,
        issues=tuple(_issues(headers, readability, clarity, metadata)),
        recommendations=tuple(_recommendations(headers, readability, metadata)),
    )
