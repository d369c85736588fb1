"""
Content Gap Analyzer

Finds topics a document never touches that users commonly ask about.
Three sources of gaps:
- prompt gaps: question types with no matching phrase
- contextual gaps: missing prerequisites, getting started, related topics, ...
- information gaps: no numbers, no lists, thin or short content
"""

import re
from collections import Counter
from dataclasses import dataclass
from typing import List, Tuple

from ..models import GapPriority
from .models import GapAnalysis, ReadinessGap, TopicKeyword
from .text import STOP_WORDS, letters_only, round_to, split_sentences, split_words

MAX_GAPS = 10
MAX_TOPICS = 5

PRIORITY_PENALTY = {GapPriority.HIGH: 15, GapPriority.MEDIUM: 8, GapPriority.LOW: 3}
PRIORITY_RANK = {GapPriority.HIGH: 0, GapPriority.MEDIUM: 1, GapPriority.LOW: 2}

NUMBER = re.compile(r"\b\d+(\.\d+)?\b")
NUMBERED_ITEM = re.compile(r"\d+\.")


@dataclass(frozen=True)
class ExpectedTopic:
    topic: str
    indicators: Tuple[str, ...]
    description: str
    priority: GapPriority
    query_frequency: int


EXPECTED_QUESTIONS = (
    ExpectedTopic("Definition", ("what is", "what are", "definition"),
                  "Clear definitions of key terms", GapPriority.HIGH, 85),
    ExpectedTopic("Benefits", ("benefit", "advantage", "why use"),
                  "Benefits and advantages explanation", GapPriority.HIGH, 78),
    ExpectedTopic("How-to Instructions", ("how to", "step by step", "instructions"),
                  "Step-by-step guidance and instructions", GapPriority.HIGH, 82),
    ExpectedTopic("Best Practices", ("best practice", "recommended", "should"),
                  "Best practices and recommendations", GapPriority.MEDIUM, 65),
    ExpectedTopic("Troubleshooting", ("problem", "issue", "error", "troubleshoot"),
                  "Common problems and solutions", GapPriority.MEDIUM, 71),
    ExpectedTopic("Examples", ("example", "for instance", "case study"),
                  "Concrete examples and use cases", GapPriority.MEDIUM, 68),
    ExpectedTopic("Comparison", ("vs", "versus", "compare", "difference"),
                  "Comparisons with alternatives", GapPriority.LOW, 45),
    ExpectedTopic("Pricing/Cost", ("cost", "price", "pricing", "expensive"),
                  "Cost and pricing information", GapPriority.MEDIUM, 58),
)

CONTEXTUAL_ELEMENTS = (
    ExpectedTopic("Prerequisites", ("prerequisite", "requirement", "before", "needed"),
                  "Prerequisites and requirements", GapPriority.MEDIUM, 62),
    ExpectedTopic("Getting Started", ("getting started", "begin", "first step", "setup"),
                  "Getting started guidance", GapPriority.HIGH, 79),
    ExpectedTopic("Advanced Topics", ("advanced", "expert", "complex", "detailed"),
                  "Advanced or detailed information", GapPriority.LOW, 38),
    ExpectedTopic("Related Topics", ("related", "see also", "similar", "connection"),
                  "Related topics and cross-references", GapPriority.LOW, 42),
    ExpectedTopic("Updates/Changes", ("update", "change", "new", "recent", "version"),
                  "Recent updates and changes", GapPriority.MEDIUM, 55),
)


def _missing(text: str, expected: Tuple[ExpectedTopic, ...], gap_type: str) -> List[ReadinessGap]:
    # plain substring match, so "new" also matches "renewal"
    lowered = text.lower()
    return [
        ReadinessGap(e.topic, e.description, e.priority, e.query_frequency, gap_type)
        for e in expected
        if not any(indicator in lowered for indicator in e.indicators)
    ]


def prompt_gaps(text: str) -> List[ReadinessGap]:
    return _missing(text, EXPECTED_QUESTIONS, "prompt")


def contextual_gaps(text: str) -> List[ReadinessGap]:
    return _missing(text, CONTEXTUAL_ELEMENTS, "contextual")


def information_gaps(text: str) -> List[ReadinessGap]:
    words = split_words(text)
    sentences = split_sentences(text)
    avg_sentence_length = len(words) / len(sentences) if sentences else 0.0

    checks = (
        (not NUMBER.search(text), "Quantitative Data",
         "Specific numbers, statistics, or measurements", GapPriority.MEDIUM, 63),
        ("detail" not in text and "specific" not in text, "Detailed Explanations",
         "More detailed explanations and specifications", GapPriority.MEDIUM, 67),
        ("•" not in text and "-" not in text and not NUMBERED_ITEM.search(text), "Structured Lists",
         "Organized lists and bullet points", GapPriority.LOW, 48),
        (avg_sentence_length < 15, "Comprehensive Content",
         "More comprehensive and detailed content", GapPriority.MEDIUM, 59),
        (len(sentences) < 10, "Content Depth",
         "Deeper exploration of the topic", GapPriority.HIGH, 73),
    )
    return [
        ReadinessGap(topic, description, priority, frequency, "information")
        for missing, topic, description, priority, frequency in checks
        if missing
    ]


def topic_keywords(text: str) -> List[str]:
    keywords = []
    for word in split_words(text.lower()):
        if len(word) > 3 and word not in STOP_WORDS:
            cleaned = letters_only(word)
            if len(cleaned) > 3:
                keywords.append(cleaned)
    return keywords


def main_topics(text: str) -> List[TopicKeyword]:
    """Most frequent repeated keywords; relevance is per-mille share capped at 100."""
    keywords = topic_keywords(text)
    repeated = [(word, count) for word, count in Counter(keywords).items() if count > 1]
    repeated.sort(key=lambda item: item[1], reverse=True)

    return [
        TopicKeyword(word=word, frequency=count, relevance=min(100.0, round_to(count / len(keywords) * 1000, 1)))
        for word, count in repeated[:MAX_TOPICS]
    ]


def gap_coverage_score(gaps: List[ReadinessGap]) -> int:
    if not gaps:
        return 100
    return max(0, 100 - sum(PRIORITY_PENALTY[g.priority] for g in gaps))


def identify_content_gaps(text: str) -> GapAnalysis:
    """
    Identify content gaps.

    Gaps are ordered High, Medium, Low (stable within a priority) and the
    first ten are kept; the coverage score and gap count use all of them.

    Args:
        text: Document text

    Returns:
        GapAnalysis
    """
    gaps = prompt_gaps(text) + contextual_gaps(text) + information_gaps(text)
    gaps.sort(key=lambda g: PRIORITY_RANK[g.priority])

    return GapAnalysis(
        gaps=tuple(gaps[:MAX_GAPS]),
        main_topics=tuple(main_topics(text)),
        coverage_score=gap_coverage_score(gaps),
        gap_count=len(gaps),
    )
