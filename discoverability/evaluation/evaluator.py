"""
Response Evaluator

Classifies a model answer as success/failure and attaches a heuristic
confidence. Pure functions: the same text always yields the same result.

The failure phrases are matched as English substrings without context, so an
answer such as "I cannot find X in the literature" counts as a failure.
"""

from dataclasses import dataclass
from typing import Tuple


# Answers containing any of these (case-insensitive) did not use the content
FAILURE_INDICATORS: Tuple[str, ...] = (
    "information not available",
    "not available in provided content",
    "i don't have",
    "cannot find",
    "unclear from the content",
    "not mentioned in the context",
    "insufficient information",
)

# Confidence tiers, checked in order
UNAVAILABLE_PHRASE = "information not available"
UNAVAILABLE_CONFIDENCE = 0.0

HEDGE_PHRASES: Tuple[str, ...] = ("might be", "possibly")
HEDGE_CONFIDENCE = 0.3

PROBABLE_PHRASES: Tuple[str, ...] = ("likely", "probably")
PROBABLE_CONFIDENCE = 0.6

CITATION_PHRASES: Tuple[str, ...] = ("according to", "based on")
CITATION_CONFIDENCE = 0.8

DEFAULT_CONFIDENCE = 0.7


@dataclass(frozen=True)
class Evaluation:
    """Outcome of evaluating one answer."""
    success: bool
    confidence: float


def evaluate_success(response: str) -> bool:
    """False when the answer admits the information is missing."""
    lowered = response.lower()
    return not any(indicator in lowered for indicator in FAILURE_INDICATORS)


def calculate_confidence(response: str) -> float:
    """
    Tiered confidence heuristic.

    Only the unavailability check is case-insensitive; the hedge, probable
    and citation tiers match the phrases as written.
    """
    if UNAVAILABLE_PHRASE in response.lower():
        return UNAVAILABLE_CONFIDENCE
    if any(phrase in response for phrase in HEDGE_PHRASES):
        return HEDGE_CONFIDENCE
    if any(phrase in response for phrase in PROBABLE_PHRASES):
        return PROBABLE_CONFIDENCE
    if any(phrase in response for phrase in CITATION_PHRASES):
        return CITATION_CONFIDENCE
    return DEFAULT_CONFIDENCE


def evaluate_response(response: str) -> Evaluation:
    """Evaluate an answer: (success, confidence)."""
    return Evaluation(
        success=evaluate_success(response),
        confidence=calculate_confidence(response),
    )
