"""
LLM Provider Configuration

An explicit configuration value listing which providers and models are
enabled. It is injected into the orchestrators at construction; storing it
is the job of an external ConfigStore.

Environment variables (via Settings):
- OPENAI_API_KEY, OPENAI_ORGANIZATION
- ANTHROPIC_API_KEY
- GOOGLE_API_KEY, GOOGLE_PROJECT_ID
- REPLICATE_API_KEY
- TOGETHER_API_KEY
- <PROVIDER>_MODELS: optional comma-separated model override
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Protocol, Tuple

from ..utils.config import Settings
from .models import Provider, resolve_provider

logger = logging.getLogger(__name__)

REDACTED = "[REDACTED]"

DEFAULT_MODELS: Dict[Provider, Tuple[str, ...]] = {
    Provider.OPENAI: ("gpt-4", "gpt-4-turbo", "gpt-3.5-turbo"),
    Provider.ANTHROPIC: (
        "claude-3-opus-20240229",
        "claude-3-sonnet-20240229",
        "claude-3-haiku-20240307",
    ),
    Provider.GOOGLE: ("gemini-pro", "gemini-pro-vision"),
    Provider.REPLICATE: ("llama-2-70b", "llama-2-13b", "llama-2-7b", "codellama-34b"),
    Provider.TOGETHER: (
        "meta-llama/Llama-2-70b-chat-hf",
        "meta-llama/Llama-2-13b-chat-hf",
        "meta-llama/Llama-2-7b-chat-hf",
        "codellama/CodeLlama-34b-Instruct-hf",
    ),
}


@dataclass(frozen=True)
class ModelSelection:
    """One (provider, model) pair to test."""
    provider: str
    model: str

    @property
    def display_name(self) -> str:
        return f"{self.provider.upper()}: {self.model}"


@dataclass(frozen=True)
class ProviderConfig:
    """Credentials and enabled models for one provider."""
    api_key: str
    models: Tuple[str, ...] = ()
    organization: Optional[str] = None
    project_id: Optional[str] = None

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key) and self.api_key != REDACTED


class ConfigStore(Protocol):
    """Persistence seam for LLMConfig. Implemented outside this package."""

    def load(self) -> "LLMConfig":
        ...

    def save(self, config: "LLMConfig") -> None:
        ...


@dataclass(frozen=True)
class LLMConfig:
    """
    Which providers and models are enabled for a run.

    Usage:
        config = LLMConfig.from_settings(get_settings())
        config = config.with_provider("openai", api_key="sk-...", models=["gpt-4"])

        for selection in config.available_models():
            ...
    """
    providers: Dict[Provider, ProviderConfig] = field(default_factory=dict)

    @classmethod
    def from_settings(cls, settings: Settings) -> "LLMConfig":
        """Build a configuration from environment-backed settings."""
        keys = {
            Provider.OPENAI: settings.OPENAI_API_KEY,
            Provider.ANTHROPIC: settings.ANTHROPIC_API_KEY,
            Provider.GOOGLE: settings.GOOGLE_API_KEY,
            Provider.REPLICATE: settings.REPLICATE_API_KEY,
            Provider.TOGETHER: settings.TOGETHER_API_KEY,
        }

        providers: Dict[Provider, ProviderConfig] = {}
        for provider, api_key in keys.items():
            if not api_key:
                continue
            models = settings.models_override(provider.value) or DEFAULT_MODELS[provider]
            providers[provider] = ProviderConfig(
                api_key=api_key,
                models=tuple(models),
                organization=settings.OPENAI_ORGANIZATION if provider is Provider.OPENAI else None,
                project_id=settings.GOOGLE_PROJECT_ID if provider is Provider.GOOGLE else None,
            )

        config = cls(providers=providers)
        config.log_status()
        return config

    def get(self, provider: str) -> Optional[ProviderConfig]:
        resolved = resolve_provider(provider)
        if resolved is None:
            return None
        return self.providers.get(resolved)

    def is_configured(self, provider: str) -> bool:
        provider_config = self.get(provider)
        return bool(provider_config and provider_config.is_configured)

    def configured_providers(self) -> List[str]:
        """Providers with a usable API key, in declaration order."""
        return [
            provider.value
            for provider, provider_config in self.providers.items()
            if provider_config.is_configured
        ]

    def models_for(self, provider: str) -> List[str]:
        """Enabled models for a provider, falling back to its defaults."""
        resolved = resolve_provider(provider)
        if resolved is None:
            return []
        provider_config = self.providers.get(resolved)
        if provider_config and provider_config.models:
            return list(provider_config.models)
        return list(DEFAULT_MODELS.get(resolved, ()))

    def available_models(self) -> List[ModelSelection]:
        """Every (provider, model) pair across configured providers."""
        return [
            ModelSelection(provider=provider, model=model)
            for provider in self.configured_providers()
            for model in self.models_for(provider)
        ]

    def with_provider(
        self,
        provider: str,
        api_key: str,
        models: Optional[List[str]] = None,
        organization: Optional[str] = None,
        project_id: Optional[str] = None,
    ) -> "LLMConfig":
        """Return a copy with one provider added or replaced."""
        resolved = resolve_provider(provider)
        if resolved is None:
            raise ValueError(f"Unsupported provider: {provider}")

        providers = dict(self.providers)
        providers[resolved] = ProviderConfig(
            api_key=api_key,
            models=tuple(models or DEFAULT_MODELS[resolved]),
            organization=organization,
            project_id=project_id,
        )
        return replace(self, providers=providers)

    def without_provider(self, provider: str) -> "LLMConfig":
        resolved = resolve_provider(provider)
        providers = {p: c for p, c in self.providers.items() if p is not resolved}
        return replace(self, providers=providers)

    def redacted(self) -> Dict[str, Dict]:
        """Shareable export with API keys replaced by a marker."""
        return {
            provider.value: {
                "apiKey": REDACTED,
                "models": list(provider_config.models),
                "organization": provider_config.organization,
                "projectId": provider_config.project_id,
            }
            for provider, provider_config in self.providers.items()
        }

    def merge_imported(self, imported: Dict[str, Dict]) -> "LLMConfig":
        """
        Apply an exported configuration.

        Redacted keys keep the key already present for that provider.
        """
        config = self
        for provider, data in imported.items():
            if not data or resolve_provider(provider) is None:
                continue

            api_key = data.get("apiKey") or ""
            if api_key == REDACTED:
                existing = config.get(provider)
                api_key = existing.api_key if existing else ""

            config = config.with_provider(
                provider,
                api_key=api_key,
                models=data.get("models"),
                organization=data.get("organization"),
                project_id=data.get("projectId"),
            )
        return config

    def log_status(self) -> None:
        configured = self.configured_providers()
        logger.info(
            f"LLM providers configured: {', '.join(configured) if configured else 'none'} "
            f"({len(self.available_models())} models)"
        )
