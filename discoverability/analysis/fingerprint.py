"""
Content Fingerprint Extractor

One structured-extraction call that turns a content corpus into a
ContentFingerprint (company, products, claims, key phrases, competitors).

Parse failures never abort a run: a non-JSON answer, missing fields or a
failed call all produce ContentFingerprint.default().
"""

import json
import logging
import re
from typing import Any, Dict, List, Optional, Sequence

from ..providers.config import ModelSelection
from ..utils.cancellation import CancellationToken
from .models import ContentFingerprint, PLACEHOLDER_COMPANY

logger = logging.getLogger(__name__)


FINGERPRINT_FIELDS = ("companyName", "productNames", "uniqueClaims", "keyPhrases", "competitorNames")

MAX_PRODUCT_NAMES = 5
MAX_UNIQUE_CLAIMS = 3
MAX_KEY_PHRASES = 10
MAX_COMPETITOR_NAMES = 8

EXTRACTION_PROMPT_TEMPLATE = """Analyze this {industry} content and extract key identifiers for competitive tracking:

Content:
{content}

Please identify:
1. Company/brand names mentioned
2. Product or service names
3. Unique claims or value propositions
4. Key phrases that identify this content
5. Likely competitor names in this space

Respond with JSON only, using exactly these keys:
{{"companyName": string, "productNames": [string], "uniqueClaims": [string], "keyPhrases": [string], "competitorNames": [string]}}"""


def _find_json_object(text: str) -> Optional[Dict[str, Any]]:
    """Pull the first JSON object out of a model answer."""
    candidates = re.findall(r"```(?:json)?\s*(\{[\s\S]*?\})\s*```", text)
    brace_match = re.search(r"\{[\s\S]*\}", text)
    if brace_match:
        candidates.append(brace_match.group())

    for candidate in candidates:
        try:
            data = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(data, dict):
            return data
    return None


def _string_list(value: Any, limit: int) -> Optional[List[str]]:
    if not isinstance(value, list):
        return None
    items = [item.strip() for item in value if isinstance(item, str) and item.strip()]
    return items[:limit]


def parse_fingerprint(text: str) -> Optional[ContentFingerprint]:
    """
    Parse an extraction answer into a fingerprint.

    Returns None when the answer is not JSON or lacks any required field.
    """
    data = _find_json_object(text or "")
    if data is None:
        return None

    missing = [key for key in FINGERPRINT_FIELDS if key not in data]
    if missing:
        logger.warning(f"Fingerprint JSON missing fields: {', '.join(missing)}")
        return None

    company_name = data["companyName"]
    if not isinstance(company_name, str):
        return None

    products = _string_list(data["productNames"], MAX_PRODUCT_NAMES)
    claims = _string_list(data["uniqueClaims"], MAX_UNIQUE_CLAIMS)
    phrases = _string_list(data["keyPhrases"], MAX_KEY_PHRASES)
    competitors = _string_list(data["competitorNames"], MAX_COMPETITOR_NAMES)
    if products is None or claims is None or phrases is None or competitors is None:
        return None

    return ContentFingerprint(
        company_name=company_name.strip() or PLACEHOLDER_COMPANY,
        product_names=tuple(products),
        unique_claims=tuple(claims),
        key_phrases=tuple(phrases),
        competitor_names=tuple(competitors),
    )


class FingerprintExtractor:
    """
    Extracts a ContentFingerprint with a single LLM call.

    Usage:
        extractor = FingerprintExtractor(provider_client)
        fingerprint = await extractor.extract(chunks, "life-sciences", selection)
    """

    def __init__(self, client, dispatcher=None):
        """
        Args:
            client: Object exposing `query(provider, model, prompt, context, cancel_token=...)`
            dispatcher: Run dispatcher; when given the call goes through its
                throttle and is counted in the run totals
        """
        self.client = client
        self.dispatcher = dispatcher

    async def extract(
        self,
        content_chunks: Sequence[str],
        industry: str,
        selection: ModelSelection,
        cancel_token: Optional[CancellationToken] = None,
    ) -> ContentFingerprint:
        """
        Extract the fingerprint of a corpus.

        Args:
            content_chunks: Content corpus
            industry: Industry label used in the prompt
            selection: (provider, model) to run the extraction on
            cancel_token: Run-scoped cancellation token

        Returns:
            Parsed fingerprint, or the default fingerprint on any failure
        """
        prompt = EXTRACTION_PROMPT_TEMPLATE.format(
            industry=industry,
            content="\n\n".join(content_chunks),
        )

        if self.dispatcher is not None:
            response = await self.dispatcher.dispatch(selection, prompt, "", cancel_token)
        else:
            response = await self.client.query(
                selection.provider,
                selection.model,
                prompt,
                "",
                cancel_token=cancel_token,
            )

        if response.is_failed:
            logger.warning(
                f"Fingerprint extraction call failed ({selection.provider}/{selection.model}): "
                f"{response.error_message}. Using default fingerprint."
            )
            return ContentFingerprint.default()

        fingerprint = parse_fingerprint(response.response)
        if fingerprint is None:
            logger.warning("Fingerprint extraction returned unparseable output. Using default fingerprint.")
            return ContentFingerprint.default()

        logger.info(
            f"Extracted fingerprint: company={fingerprint.company_name}, "
            f"{len(fingerprint.product_names)} products, "
            f"{len(fingerprint.competitor_names)} competitors"
        )
        return fingerprint
