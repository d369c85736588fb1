"""
LLM Provider Integrations

Clients for the supported vendors behind one `query()` call:
- OpenAI: chat completions
- Anthropic: Claude messages (official SDK)
- Google: Gemini generateContent
- Replicate: Llama predictions (submit + poll)
- Together: Llama inference
- Config: enabled providers/models and credentials
"""

from .models import (
    Provider,
    ProviderResponse,
    ResponseStatus,
    TokenUsage,
    resolve_provider,
)
from .pricing import MODEL_PRICING, calculate_cost, get_model_pricing
from .config import (
    DEFAULT_MODELS,
    ConfigStore,
    LLMConfig,
    ModelSelection,
    ProviderConfig,
)
from .base import BaseProviderClient, Completion, build_prompt
from .openai import OpenAIClient
from .claude import ClaudeClient
from .gemini import GeminiClient
from .replicate import ReplicateClient
from .together import TogetherClient
from .client import ProviderClient

__all__ = [
    # Models
    "Provider",
    "ProviderResponse",
    "ResponseStatus",
    "TokenUsage",
    "resolve_provider",
    # Pricing
    "MODEL_PRICING",
    "calculate_cost",
    "get_model_pricing",
    # Config
    "DEFAULT_MODELS",
    "ConfigStore",
    "LLMConfig",
    "ModelSelection",
    "ProviderConfig",
    # Clients
    "BaseProviderClient",
    "Completion",
    "build_prompt",
    "OpenAIClient",
    "ClaudeClient",
    "GeminiClient",
    "ReplicateClient",
    "TogetherClient",
    "ProviderClient",
]
