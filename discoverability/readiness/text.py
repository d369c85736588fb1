"""
Text helpers shared by the readiness analyzers.

Splitting rules:
    words      - runs of non-whitespace
    sentences  - text between runs of . ! ? (blank pieces dropped)
    paragraphs - text between blank lines
"""

import re
from typing import List

from ..analysis.mentions import round_half_up
from .models import DocumentMetadata

SENTENCE_BREAK = re.compile(r"[.!?]+")
PARAGRAPH_BREAK = re.compile(r"\n\s*\n")

HEADER_PATTERNS = (
    re.compile(r"^#{1,6}\s+"),           # markdown
    re.compile(r"^[A-Z][^.!?]*:?\s*$"),  # capitalized line without sentence punctuation
    re.compile(r"^\d+\.?\s+[A-Z]"),      # numbered
    re.compile(r"^[IVX]+\.?\s+[A-Z]"),   # roman numerals
)

STOP_WORDS = frozenset({
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "of",
    "with", "by", "from", "up", "about", "into", "through", "during", "before",
    "after", "above", "below", "between", "among", "this", "that", "these",
    "those", "is", "was", "are", "were", "been", "be", "have", "has", "had",
    "do", "does", "did", "will", "would", "could", "should",
})


def split_words(text: str) -> List[str]:
    return text.split()


def split_sentences(text: str) -> List[str]:
    return [s for s in SENTENCE_BREAK.split(text) if s.strip()]


def split_paragraphs(text: str) -> List[str]:
    return [p for p in PARAGRAPH_BREAK.split(text) if p.strip()]


def non_blank_lines(text: str) -> List[str]:
    return [line for line in text.split("\n") if line.strip()]


def letters_only(word: str) -> str:
    """Lowercased word with everything but a-z removed."""
    return re.sub(r"[^a-z]", "", word.lower())


def is_header(line: str) -> bool:
    stripped = line.strip()
    return any(pattern.search(stripped) for pattern in HEADER_PATTERNS)


def round_to(value: float, places: int) -> float:
    """Half-up rounding to a number of decimal places."""
    factor = 10 ** places
    return round_half_up(value * factor) / factor


def document_metadata(text: str) -> DocumentMetadata:
    words = split_words(text)
    sentences = split_sentences(text)
    return DocumentMetadata(
        line_count=len(non_blank_lines(text)),
        word_count=len(words),
        sentence_count=len(sentences),
        character_count=len(text),
        avg_words_per_sentence=round_half_up(len(words) / len(sentences)) if sentences else 0,
        avg_chars_per_word=round_half_up(len(text) / len(words)) if words else 0,
    )
