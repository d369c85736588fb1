"""
Competitive Mention Analyzer

Scans a model answer for the user's fingerprint terms (company, products,
claims) and for competitor names, then scores how visible the user is.

Prominence (0-100) per term:
    round((position_score + frequency_score) / 2)
    position_score  = 100 at the start of the text, falling linearly to 0 at the end
    frequency_score = min(occurrences * 20, 100)

Visibility (0-100) per answer:
    clamp(mean(user prominence) + min(user mentions * 10, 30) - length penalty, 0, 100)

Pure text processing, no network calls.
"""

import math
import re
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .models import ContentFingerprint, ContentMention, ContentType, MentionAnalysis


SNIPPET_RADIUS = 50
MENTION_ACCURACY = 85

FREQUENCY_WEIGHT = 20
MENTION_BONUS_PER_MENTION = 10
MENTION_BONUS_CAP = 30
LONG_RESPONSE_CHARS = 1000
LONG_RESPONSE_PENALTY = 10

NOT_MENTIONED_RANK = -1

COMPANY_MARKERS = ("Inc", "Corp", "Ltd")

Span = Tuple[int, int]


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def classify_term(term: str) -> ContentType:
    """Guess the content type of a bare term (used for competitor names)."""
    if any(marker in term for marker in COMPANY_MARKERS):
        return ContentType.COMPANY
    if len(term) < 20 and " " not in term:
        return ContentType.PRODUCT
    return ContentType.CLAIM


def _term_pattern(term: str) -> "re.Pattern[str]":
    return re.compile(re.escape(term), re.IGNORECASE)


def span_prominence(text: str, spans: Sequence[Span]) -> int:
    """Prominence (0-100) of a term from the occurrences attributed to it."""
    if not text or not spans:
        return 0

    first_start = min(start for start, _ in spans)
    position_score = max(0.0, 100 - (first_start / len(text)) * 100)
    frequency_score = min(len(spans) * FREQUENCY_WEIGHT, 100)

    return round_half_up((position_score + frequency_score) / 2)


def calculate_prominence(text: str, term: str) -> int:
    """How noticeably a term appears in the text (0-100)."""
    if not text or not term:
        return 0
    return span_prominence(text, [match.span() for match in _term_pattern(term).finditer(text)])


def _unique_terms(
    typed_terms: Iterable[Tuple[Optional[str], ContentType]],
) -> List[Tuple[str, ContentType]]:
    """Non-empty terms, de-duplicated case-insensitively, first spelling kept."""
    seen = set()
    unique = []
    for term, content_type in typed_terms:
        cleaned = (term or "").strip()
        if cleaned and cleaned.lower() not in seen:
            seen.add(cleaned.lower())
            unique.append((cleaned, content_type))
    return unique


def locate_terms(text: str, terms: Sequence[str]) -> Dict[str, List[Span]]:
    """
    Occurrences of each term in the text.

    Longer terms claim their text first: "Acme" inside "Acme Cloud" is part of
    the product mention, not a separate company mention.
    """
    claimed: List[Span] = []
    located: Dict[str, List[Span]] = {}

    for term in sorted(terms, key=len, reverse=True):
        spans = []
        for match in _term_pattern(term).finditer(text):
            start, end = match.span()
            if any(start < c_end and c_start < end for c_start, c_end in claimed):
                continue
            spans.append((start, end))
        claimed.extend(spans)
        located[term] = spans

    return located


def find_mentions(
    text: str,
    typed_terms: Sequence[Tuple[str, ContentType]],
) -> List[ContentMention]:
    """One ContentMention per (non-overlapping) occurrence of each term."""
    located = locate_terms(text, [term for term, _ in typed_terms])
    mentions = []

    for term, content_type in typed_terms:
        spans = located.get(term, [])
        if not spans:
            continue

        # only occurrences this term owns count, not those claimed by a longer term
        prominence = span_prominence(text, spans)
        for start, end in spans:
            mentions.append(ContentMention(
                source=term,
                content_type=content_type,
                snippet=text[max(0, start - SNIPPET_RADIUS):end + SNIPPET_RADIUS],
                prominence=prominence,
                accuracy=MENTION_ACCURACY,
            ))

    return mentions


def calculate_visibility_score(mentions: Sequence[ContentMention], response: str) -> int:
    """Aggregate visibility of the user's content in one answer (0-100)."""
    if not mentions:
        return 0

    average_prominence = sum(m.prominence for m in mentions) / len(mentions)
    mention_bonus = min(len(mentions) * MENTION_BONUS_PER_MENTION, MENTION_BONUS_CAP)
    length_penalty = LONG_RESPONSE_PENALTY if len(response) > LONG_RESPONSE_CHARS else 0

    score = average_prominence + mention_bonus - length_penalty
    return round_half_up(min(100.0, max(0.0, score)))


def calculate_competitive_rank(
    user_mentions: Sequence[ContentMention],
    competitor_mentions: Sequence[ContentMention],
) -> int:
    """
    1-based rank of the user's strongest mention among all mentions.

    Returns -1 when the user is not mentioned at all.
    """
    if not user_mentions:
        return NOT_MENTIONED_RANK

    best_user = max(user_mentions, key=lambda m: m.prominence)
    ranked = sorted(
        list(user_mentions) + list(competitor_mentions),
        key=lambda m: m.prominence,
        reverse=True,
    )

    for index, mention in enumerate(ranked):
        if mention.source == best_user.source:
            return index + 1
    return NOT_MENTIONED_RANK


def user_terms(fingerprint: ContentFingerprint) -> List[Tuple[str, ContentType]]:
    """Fingerprint terms that identify the user's own content."""
    typed: List[Tuple[str, ContentType]] = []
    if fingerprint.has_known_company:
        typed.append((fingerprint.company_name, ContentType.COMPANY))
    typed.extend((name, ContentType.PRODUCT) for name in fingerprint.product_names)
    typed.extend((claim, ContentType.CLAIM) for claim in fingerprint.unique_claims)
    return _unique_terms(typed)


def analyze_mentions(response: str, fingerprint: ContentFingerprint) -> MentionAnalysis:
    """
    Find user and competitor mentions in one answer and score them.

    Args:
        response: Model answer text
        fingerprint: Identity record of the user's content

    Returns:
        MentionAnalysis with mentions, visibility score and competitive rank
    """
    own_terms = user_terms(fingerprint)
    user_mentions = find_mentions(response, own_terms)

    own_keys = {term.lower() for term, _ in own_terms}
    competitors = [
        (name, content_type)
        for name, content_type in _unique_terms(
            (name, classify_term((name or "").strip())) for name in fingerprint.competitor_names
        )
        if name.lower() not in own_keys
    ]
    competitor_mentions = find_mentions(response, competitors)

    return MentionAnalysis(
        user_mentions=user_mentions,
        competitor_mentions=competitor_mentions,
        visibility_score=calculate_visibility_score(user_mentions, response),
        competitive_rank=calculate_competitive_rank(user_mentions, competitor_mentions),
    )
