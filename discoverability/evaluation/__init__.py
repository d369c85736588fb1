"""Response evaluation heuristics."""

from .evaluator import (
    Evaluation,
    evaluate_response,
    evaluate_success,
    calculate_confidence,
    FAILURE_INDICATORS,
    DEFAULT_CONFIDENCE,
    HEDGE_CONFIDENCE,
    PROBABLE_CONFIDENCE,
    CITATION_CONFIDENCE,
    UNAVAILABLE_CONFIDENCE,
)

__all__ = [
    "Evaluation",
    "evaluate_response",
    "evaluate_success",
    "calculate_confidence",
    "FAILURE_INDICATORS",
    "DEFAULT_CONFIDENCE",
    "HEDGE_CONFIDENCE",
    "PROBABLE_CONFIDENCE",
    "CITATION_CONFIDENCE",
    "UNAVAILABLE_CONFIDENCE",
]
