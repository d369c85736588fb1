"""
Tests for the Response Evaluator

Covers:
- Failure phrase detection
- Confidence tiers and their order
- Purity (same input, same output)
"""

import pytest

from discoverability.evaluation import (
    FAILURE_INDICATORS,
    calculate_confidence,
    evaluate_response,
    evaluate_success,
)


class TestEvaluateSuccess:
    """Test failure phrase detection."""

    def test_unavailable_answer_is_failure(self):
        evaluation = evaluate_response("Information not available in provided content.")

        assert evaluation.success is False
        assert evaluation.confidence == 0.0

    @pytest.mark.parametrize("phrase", FAILURE_INDICATORS)
    def test_every_indicator_fails(self, phrase):
        assert evaluate_success(f"Sorry, {phrase} here.") is False

    def test_indicators_are_case_insensitive(self):
        assert evaluate_success("I DON'T HAVE that detail.") is False

    def test_plain_answer_succeeds(self):
        assert evaluate_success("Plans start at $99/month.") is True

    def test_matching_ignores_context(self):
        """A phrase counts even when it is not about the content."""
        assert evaluate_success("Researchers cannot find a cure yet, but our product helps.") is False


class TestCalculateConfidence:
    """Test the confidence tiers."""

    def test_default_confidence(self):
        assert calculate_confidence("Plans start at $99/month.") == 0.7

    def test_hedge_tier(self):
        assert calculate_confidence("It might be $99.") == 0.3
        assert calculate_confidence("It is possibly $99.") == 0.3

    def test_probable_tier(self):
        assert calculate_confidence("It is likely $99.") == 0.6
        assert calculate_confidence("It is probably $99.") == 0.6

    def test_citation_tier(self):
        assert calculate_confidence("according to the content, it is $99.") == 0.8
        assert calculate_confidence("based on the pricing page, it is $99.") == 0.8

    def test_tiers_checked_in_order(self):
        """Hedging wins over citation when both appear."""
        assert calculate_confidence("based on the page it might be $99") == 0.3

    def test_unavailable_wins_over_everything(self):
        assert calculate_confidence("INFORMATION NOT AVAILABLE, it might be $99") == 0.0

    def test_hedge_tiers_are_case_sensitive(self):
        assert calculate_confidence("Likely $99.") == 0.7
        assert calculate_confidence("According to the page, $99.") == 0.7

    def test_confidence_in_range(self):
        for text in ["", "might be", "likely", "according to", "x" * 5000]:
            assert 0.0 <= calculate_confidence(text) <= 1.0


class TestPurity:
    """Same text always yields the same evaluation."""

    def test_repeated_evaluation_is_identical(self):
        text = "Based on the content, it is probably $99."
        assert evaluate_response(text) == evaluate_response(text)
