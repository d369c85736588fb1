"""
Prompt Generation

- Competitive prompts built from templates and a content fingerprint
- Parsing of free-text LLM prompt-generation answers
- Built-in sample prompts/content for quick tests
"""

import logging
from typing import List

from .models import ContentFingerprint

logger = logging.getLogger(__name__)


MAX_COMPETITIVE_PROMPTS = 15
MAX_PRODUCTS_FOR_PROMPTS = 3
MAX_CLAIMS_FOR_PROMPTS = 2
COMPANY_PROMPTS_BELOW = 12  # company prompts only while fewer prompts exist

PRODUCT_PROMPT_TEMPLATES = (
    "What are alternatives to {product}?",
    "How does {product} compare to competitors?",
    "What are the pros and cons of {product}?",
    "Is {product} better than other options?",
)

CLAIM_PROMPT_TEMPLATE = "Which {industry} companies can claim this: {claim}?"

COMPANY_PROMPT_TEMPLATES = (
    "What products does {company} offer?",
    "How does {company} compare to other {industry} companies?",
)

GENERIC_PROMPT_TEMPLATES = (
    "What are the best {industry} solutions available?",
    "Which {industry} companies are market leaders?",
    "What are the top {industry} products in the market?",
    "Which {industry} companies have the best reputation?",
    "What should I know about {industry} industry trends?",
    "Which {industry} products are most commonly recommended?",
    "What are the most innovative {industry} companies?",
    "Which {industry} providers have the best customer outcomes?",
)

PROMPT_GENERATION_TEMPLATE = """Generate {count} realistic, specific questions that customers or users would commonly ask about {industry} products, services, or information.

Industry: {industry}

Return only the questions, one per line, without numbering or bullet points. Focus on:
- Product features and capabilities
- Pricing and cost information
- Technical specifications
- Support and service questions
- Compliance and regulatory topics
- Implementation and usage questions

Questions should be the type that would be answered by company documentation, websites, or customer service."""

SAMPLE_PROMPTS = (
    "What are the key features of this product?",
    "How much does this service cost?",
    "What are the system requirements?",
    "How do I get customer support?",
    "What are the security features?",
)

SAMPLE_CONTENT = (
    "Our product offers enterprise-grade security, 24/7 support, and flexible pricing plans starting at $99/month.",
    "We provide comprehensive customer support through chat, email, and phone. Our team is available Monday-Friday 9AM-6PM EST.",
    "System requirements include Windows 10 or macOS 10.15+, 8GB RAM minimum, and internet connection for cloud features.",
)


def industry_label(industry: str) -> str:
    """Human-readable industry name for prompt text ("life-sciences" -> "life sciences")."""
    return " ".join(industry.replace("-", " ").replace("_", " ").split())


def _strip_terminal_punctuation(text: str) -> str:
    return text.strip().rstrip(".!?")


def generate_competitive_prompts(
    industry: str,
    fingerprint: ContentFingerprint,
    max_prompts: int = MAX_COMPETITIVE_PROMPTS,
) -> List[str]:
    """
    Build prompts that invite a model to name products in the user's space.

    Order of priority:
    1. Product prompts for up to 3 products
    2. Claim prompts for up to 2 unique claims
    3. Company prompts (known company, fewer than 12 prompts so far)
    4. Generic industry prompts to fill up to the cap
    """
    label = industry_label(industry)
    prompts: List[str] = []

    def add(prompt: str) -> None:
        if prompt not in prompts:
            prompts.append(prompt)

    for product in fingerprint.product_names[:MAX_PRODUCTS_FOR_PROMPTS]:
        for template in PRODUCT_PROMPT_TEMPLATES:
            add(template.format(product=product))

    for claim in fingerprint.unique_claims[:MAX_CLAIMS_FOR_PROMPTS]:
        add(CLAIM_PROMPT_TEMPLATE.format(industry=label, claim=_strip_terminal_punctuation(claim)))

    if fingerprint.has_known_company and len(prompts) < COMPANY_PROMPTS_BELOW:
        for template in COMPANY_PROMPT_TEMPLATES:
            add(template.format(company=fingerprint.company_name, industry=label))

    for template in GENERIC_PROMPT_TEMPLATES:
        if len(prompts) >= max_prompts:
            break
        add(template.format(industry=label))

    logger.info(f"Generated {min(len(prompts), max_prompts)} competitive prompts")
    return prompts[:max_prompts]


def build_prompt_generation_query(industry: str, count: int) -> str:
    return PROMPT_GENERATION_TEMPLATE.format(count=count, industry=industry)


def parse_generated_prompts(text: str, count: int) -> List[str]:
    """Keep non-empty lines that contain a question mark, capped at `count`."""
    prompts = [line.strip() for line in (text or "").split("\n")]
    return [line for line in prompts if line and "?" in line][:count]
