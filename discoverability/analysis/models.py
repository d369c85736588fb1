"""
Competitive Analysis Data Models
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Tuple


PLACEHOLDER_COMPANY = "Unknown Company"


class ContentType(str, Enum):
    """What kind of fingerprint term a mention matched."""
    COMPANY = "company"
    PRODUCT = "product"
    CLAIM = "claim"


@dataclass(frozen=True)
class ContentFingerprint:
    """
    Identity record of a content corpus.

    Extracted once per corpus and read by every competitive analysis of it.
    """
    company_name: str = PLACEHOLDER_COMPANY
    product_names: Tuple[str, ...] = ()
    unique_claims: Tuple[str, ...] = ()
    key_phrases: Tuple[str, ...] = ()
    competitor_names: Tuple[str, ...] = ()

    @classmethod
    def default(cls) -> "ContentFingerprint":
        """Safe fingerprint used when extraction fails."""
        return cls()

    @property
    def has_known_company(self) -> bool:
        return bool(self.company_name) and self.company_name != PLACEHOLDER_COMPANY

    def to_dict(self) -> Dict[str, Any]:
        return {
            "companyName": self.company_name,
            "productNames": list(self.product_names),
            "uniqueClaims": list(self.unique_claims),
            "keyPhrases": list(self.key_phrases),
            "competitorNames": list(self.competitor_names),
        }


@dataclass(frozen=True)
class ContentMention:
    """One occurrence of a fingerprint term in a model answer."""
    source: str  # matched term
    content_type: ContentType
    snippet: str
    prominence: int  # 0-100
    accuracy: int  # 0-100

    def __post_init__(self):
        for name in ("prominence", "accuracy"):
            value = getattr(self, name)
            if not 0 <= value <= 100:
                raise ValueError(f"{name} must be in [0, 100], got {value}")


@dataclass(frozen=True)
class MentionAnalysis:
    """User vs competitor mentions found in one answer."""
    user_mentions: List[ContentMention] = field(default_factory=list)
    competitor_mentions: List[ContentMention] = field(default_factory=list)
    visibility_score: int = 0
    competitive_rank: int = -1

    @property
    def user_mentioned(self) -> bool:
        return bool(self.user_mentions)
