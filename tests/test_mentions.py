"""
Tests for the Competitive Mention Analyzer

Covers:
- Prominence and visibility formulas
- Overlapping terms ("Acme" inside "Acme Cloud")
- Competitive rank
- Content type classification
"""

import pytest

from discoverability.analysis import (
    ContentFingerprint,
    ContentMention,
    ContentType,
    analyze_mentions,
    calculate_competitive_rank,
    calculate_prominence,
    calculate_visibility_score,
    find_mentions,
)
from discoverability.analysis.mentions import classify_term, round_half_up


def mention(source, prominence, content_type=ContentType.PRODUCT):
    return ContentMention(
        source=source,
        content_type=content_type,
        snippet=source,
        prominence=prominence,
        accuracy=85,
    )


class TestProminence:
    """Test the position + frequency prominence score."""

    def test_repeated_mention_at_start(self):
        text = "Acme Cloud is the leading platform. Acme Cloud is great."
        assert calculate_prominence(text, "Acme Cloud") == 70

    def test_absent_term_scores_zero(self):
        assert calculate_prominence("Nothing relevant here.", "Acme") == 0

    def test_late_single_mention(self):
        text = "x" * 90 + "Acme" + "y" * 6
        # position 100 - 90 = 10, frequency 20 -> 15
        assert calculate_prominence(text, "Acme") == 15

    def test_frequency_capped(self):
        text = "Acme " * 10
        assert calculate_prominence(text, "Acme") == 100

    def test_case_insensitive(self):
        assert calculate_prominence("ACME rules", "acme") == calculate_prominence("Acme rules", "Acme")

    def test_regex_characters_are_literal(self):
        assert calculate_prominence("We use C++ daily", "C++") > 0
        assert calculate_prominence("We use C daily", "C++") == 0


class TestAnalyzeMentions:
    """Test end-to-end mention analysis."""

    def test_product_mentions_and_visibility(self):
        fingerprint = ContentFingerprint(company_name="Acme", product_names=("Acme Cloud",))
        text = "Acme Cloud is the leading platform. Acme Cloud is great."

        analysis = analyze_mentions(text, fingerprint)

        assert len(analysis.user_mentions) == 2
        assert all(m.source == "Acme Cloud" for m in analysis.user_mentions)
        assert all(m.prominence == 70 for m in analysis.user_mentions)
        assert analysis.visibility_score == 90
        assert analysis.competitive_rank == 1

    def test_shorter_term_scored_on_own_occurrences(self):
        """'Acme' inside 'Acme Cloud' does not lift the standalone 'Acme' mention."""
        fingerprint = ContentFingerprint(company_name="Acme", product_names=("Acme Cloud",))
        text = "Acme Cloud is great. Acme is good."

        analysis = analyze_mentions(text, fingerprint)
        by_source = {m.source: m for m in analysis.user_mentions}

        assert len(analysis.user_mentions) == 2
        # position 100 - 21/34 * 100 = 38.2, frequency 20
        assert by_source["Acme"].prominence == 29
        assert by_source["Acme Cloud"].prominence == 60
        assert analysis.visibility_score == 65
        assert analysis.competitive_rank == 1

    def test_company_term_typed_company(self):
        fingerprint = ContentFingerprint(company_name="Acme", product_names=("Rocket",))
        analysis = analyze_mentions("Acme makes good tools.", fingerprint)

        assert [m.content_type for m in analysis.user_mentions] == [ContentType.COMPANY]

    def test_placeholder_company_is_ignored(self):
        analysis = analyze_mentions("Unknown Company is everywhere.", ContentFingerprint.default())

        assert analysis.user_mentions == []
        assert analysis.visibility_score == 0
        assert analysis.competitive_rank == -1

    def test_snippet_surrounds_occurrence(self):
        text = "a" * 100 + "Globex" + "b" * 100
        fingerprint = ContentFingerprint(competitor_names=("Globex",))

        analysis = analyze_mentions(text, fingerprint)
        snippet = analysis.competitor_mentions[0].snippet

        assert snippet == "a" * 50 + "Globex" + "b" * 50

    def test_one_mention_per_occurrence(self, acme_fingerprint):
        text = "Globex and Initech compete. Globex is bigger."
        analysis = analyze_mentions(text, acme_fingerprint)

        assert [m.source for m in analysis.competitor_mentions] == ["Globex", "Globex", "Initech"]

    def test_user_outranked_by_competitor(self, acme_fingerprint):
        text = "Globex leads. Globex again. Globex wins. Much later in the text you may also find Acme."
        analysis = analyze_mentions(text, acme_fingerprint)

        assert analysis.user_mentioned
        assert analysis.competitive_rank > 1

    def test_competitor_matching_user_term_is_skipped(self):
        fingerprint = ContentFingerprint(company_name="Acme", competitor_names=("acme", "Globex"))
        analysis = analyze_mentions("Acme and Globex.", fingerprint)

        assert [m.source for m in analysis.competitor_mentions] == ["Globex"]

    def test_mention_round_trip(self, acme_fingerprint):
        """Every mention's source appears in its own snippet."""
        text = "Acme Cloud beats Globex. Initech trails Acme."
        analysis = analyze_mentions(text, acme_fingerprint)

        for found in analysis.user_mentions + analysis.competitor_mentions:
            assert found.source.lower() in found.snippet.lower()
            assert 0 <= found.prominence <= 100
            assert 0 <= found.accuracy <= 100

    def test_long_response_penalty(self):
        fingerprint = ContentFingerprint(company_name="Acme")
        short = analyze_mentions("Acme " + "x" * 100, fingerprint)
        long = analyze_mentions("Acme " + "x" * 1100, fingerprint)

        assert short.visibility_score - long.visibility_score >= 10


class TestVisibilityScore:
    """Test the visibility formula bounds."""

    def test_no_mentions_is_zero(self):
        assert calculate_visibility_score([], "anything") == 0

    def test_clamped_to_100(self):
        mentions = [mention("Acme", 100) for _ in range(5)]
        assert calculate_visibility_score(mentions, "Acme") == 100

    def test_bonus_capped_at_30(self):
        mentions = [mention("Acme", 10) for _ in range(6)]
        assert calculate_visibility_score(mentions, "short") == 40


class TestCompetitiveRank:
    """Test user rank among all mentions."""

    def test_unmentioned_user(self):
        assert calculate_competitive_rank([], [mention("Globex", 90)]) == -1

    def test_user_first(self):
        assert calculate_competitive_rank([mention("Acme", 80)], [mention("Globex", 50)]) == 1

    def test_user_behind_competitors(self):
        competitors = [mention("Globex", 90), mention("Initech", 85)]
        assert calculate_competitive_rank([mention("Acme", 40)], competitors) == 3

    def test_ties_keep_user_first(self):
        assert calculate_competitive_rank([mention("Acme", 50)], [mention("Globex", 50)]) == 1


class TestClassification:
    """Test content type guessing for bare terms."""

    @pytest.mark.parametrize("term,expected", [
        ("Globex Corp", ContentType.COMPANY),
        ("Initech Inc", ContentType.COMPANY),
        ("Umbrella Ltd", ContentType.COMPANY),
        ("Hooli", ContentType.PRODUCT),
        ("Pied Piper", ContentType.CLAIM),
    ])
    def test_classify_term(self, term, expected):
        assert classify_term(term) == expected

    def test_find_mentions_uses_given_type(self):
        found = find_mentions("Hooli is nice", [("Hooli", ContentType.CLAIM)])
        assert found[0].content_type == ContentType.CLAIM


class TestRounding:

    def test_half_rounds_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(3.5) == 4
        assert round_half_up(2.4) == 2
