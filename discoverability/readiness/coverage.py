"""
Prompt Coverage Analyzer

Checks which common question types ("What is", "How to", ...) a document
answers, how answerable its sentences are and whether it has the usual
introduction / definition / explanation / examples / conclusion sections.
"""

import re
from dataclasses import dataclass
from typing import Dict, List, Tuple

from ..analysis.mentions import round_half_up
from .models import PromptCoverageAnalysis, PromptMatch, ReadinessIssue, ReadinessRecommendation, Severity
from .text import is_header, non_blank_lines, split_paragraphs, split_sentences


@dataclass(frozen=True)
class PromptType:
    name: str
    patterns: Tuple[str, ...]
    weight: float
    type: str


COMMON_PROMPTS = (
    PromptType("What is", ("what is", "what are", "define", "definition of"), 0.2, "definition"),
    PromptType("How to", ("how to", "how do", "how can", "steps to", "process"), 0.25, "instruction"),
    PromptType("Why", ("why", "reason", "because", "purpose", "benefit"), 0.15, "explanation"),
    PromptType("When", ("when", "timing", "schedule", "time"), 0.1, "temporal"),
    PromptType("Where", ("where", "location", "place"), 0.1, "location"),
    PromptType("Examples", ("example", "for instance", "such as", "including"), 0.15, "example"),
    PromptType("Comparison", ("vs", "versus", "compared to", "difference", "similar"), 0.05, "comparison"),
)

EXPECTED_SECTIONS = ("introduction", "definition", "explanation", "examples", "conclusion")

# first match wins
SECTION_TYPES = (
    (re.compile(r"intro|overview|background"), "introduction"),
    (re.compile(r"definition|what is|meaning"), "definition"),
    (re.compile(r"how|process|steps|method"), "explanation"),
    (re.compile(r"example|instance|case|sample"), "examples"),
    (re.compile(r"conclusion|summary|final"), "conclusion"),
)

QUESTION = re.compile(r"\b(what|how|why|when|where|who|which)\b")
ANSWERS = (
    re.compile(r"\b(is|are|means|refers|involves|includes)\b"),
    re.compile(r"\b(because|due to|results in|leads to)\b"),
    re.compile(r"\b(for example|such as|including)\b"),
)

COVERAGE_WEIGHT = 0.5
ANSWERABILITY_WEIGHT = 0.3
COMPLETENESS_WEIGHT = 0.2


@dataclass(frozen=True)
class Answerability:
    score: int
    question_count: int
    answer_count: int


@dataclass(frozen=True)
class Completeness:
    score: int
    missing_sections: Tuple[str, ...]


def match_prompts(text: str) -> Tuple[Dict[str, PromptMatch], List[PromptType]]:
    """Word-bounded pattern hits per prompt type, and the types with none."""
    lowered = text.lower()
    matches: Dict[str, PromptMatch] = {}
    missing: List[PromptType] = []

    for prompt in COMMON_PROMPTS:
        count = sum(len(re.findall(rf"\b{re.escape(p)}\b", lowered)) for p in prompt.patterns)
        if count:
            matches[prompt.name] = PromptMatch(count=count, weight=prompt.weight, type=prompt.type)
        else:
            missing.append(prompt)

    return matches, missing


def analyze_answerability(text: str) -> Answerability:
    questions = answers = 0
    for sentence in split_sentences(text):
        lowered = sentence.lower().strip()
        if QUESTION.search(lowered):
            questions += 1
        if any(pattern.search(lowered) for pattern in ANSWERS):
            answers += 1

    if questions == 0:
        # declarative content
        score = 80.0 if answers else 60.0
    else:
        score = answers / (questions + answers) * 100

    return Answerability(score=round_half_up(min(100.0, score)), question_count=questions, answer_count=answers)


def section_type(header: str) -> str:
    lowered = header.lower()
    for pattern, name in SECTION_TYPES:
        if pattern.search(lowered):
            return name
    return "general"


def content_sections(text: str) -> List[str]:
    return [section_type(line.strip()) for line in non_blank_lines(text) if is_header(line)]


def analyze_completeness(text: str) -> Completeness:
    sections = content_sections(text)
    found = sum(1 for s in sections if s in EXPECTED_SECTIONS)
    score = found / len(EXPECTED_SECTIONS) * 100

    if len(sections) >= 5:
        score += 10
    if len(sections) >= 3 and len(split_paragraphs(text)) >= 4:
        score += 15

    return Completeness(
        score=round_half_up(min(100.0, score)),
        missing_sections=tuple(s for s in EXPECTED_SECTIONS if s not in sections),
    )


def coverage_score(matches: Dict[str, PromptMatch], answerability: Answerability, completeness: Completeness) -> int:
    total_weight = sum(p.weight for p in COMMON_PROMPTS)
    covered_weight = sum(m.weight for m in matches.values())
    coverage_percent = covered_weight / total_weight * 100

    return round_half_up(
        coverage_percent * COVERAGE_WEIGHT
        + answerability.score * ANSWERABILITY_WEIGHT
        + completeness.score * COMPLETENESS_WEIGHT
    )


def _issues(missing: List[PromptType], answerability: Answerability, completeness: Completeness) -> List[ReadinessIssue]:
    issues = []
    if len(missing) > 3:
        issues.append(ReadinessIssue(
            "Poor Prompt Coverage",
            "Content doesn't address many common question types",
            Severity.HIGH,
        ))
    if answerability.score < 50:
        issues.append(ReadinessIssue(
            "Low Answerability",
            "Content raises questions without providing clear answers",
            Severity.MEDIUM,
        ))
    if completeness.score < 60:
        issues.append(ReadinessIssue(
            "Incomplete Coverage",
            "Content lacks comprehensive coverage of the topic",
            Severity.MEDIUM,
        ))
    if answerability.question_count > answerability.answer_count * 2:
        issues.append(ReadinessIssue(
            "Too Many Unanswered Questions",
            "Content poses more questions than it answers",
            Severity.LOW,
        ))
    return issues


def _recommendations(
    missing: List[PromptType],
    answerability: Answerability,
    completeness: Completeness,
) -> List[ReadinessRecommendation]:
    recommendations = []

    high_value = [p.name for p in missing if p.weight > 0.15]
    if high_value:
        recommendations.append(ReadinessRecommendation(
            "Add Missing Question Types",
            f"Address {', '.join(high_value)} questions",
            20,
        ))
    if answerability.score < 70:
        recommendations.append(ReadinessRecommendation(
            "Improve Answer Clarity",
            "Provide clearer, more direct answers to implied questions",
            15,
        ))
    if completeness.missing_sections:
        recommendations.append(ReadinessRecommendation(
            "Add Missing Sections",
            f"Include {', '.join(completeness.missing_sections)} sections",
            12,
        ))

    missing_names = {p.name for p in missing}
    if "How to" in missing_names:
        recommendations.append(ReadinessRecommendation(
            "Add Step-by-Step Instructions",
            "Include practical how-to guidance",
            18,
        ))
    if "Examples" in missing_names:
        recommendations.append(ReadinessRecommendation(
            "Include More Examples",
            "Add concrete examples and use cases",
            10,
        ))
    return recommendations


def analyze_prompt_coverage(text: str) -> PromptCoverageAnalysis:
    """
    Score how well the document answers common prompt types.

    Args:
        text: Document text

    Returns:
        PromptCoverageAnalysis; prompt_matches keeps COMMON_PROMPTS order
    """
    matches, missing = match_prompts(text)
    answerability = analyze_answerability(text)
    completeness = analyze_completeness(text)

    return PromptCoverageAnalysis(
        coverage_score=coverage_score(matches, answerability, completeness),
        answerability_score=answerability.score,
        completeness_score=completeness.score,
        prompt_matches=matches,
        missing_prompt_types=tuple(p.name for p in missing),
        issues=tuple(_issues(missing, answerability, completeness)),
        recommendations=tuple(_recommendations(missing, answerability, completeness)),
    )
