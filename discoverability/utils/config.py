"""
Configuration Management

Uses Pydantic Settings for environment-based configuration.
Loads from .env file automatically.
"""

from typing import List, Optional
from functools import lru_cache
from pydantic_settings import BaseSettings


def parse_model_list(raw: Optional[str]) -> List[str]:
    """Parse a comma-separated model override (e.g. OPENAI_MODELS)."""
    if not raw:
        return []
    return [model.strip() for model in raw.split(",") if model.strip()]


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # Provider credentials (all optional - only configured providers are tested)
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_ORGANIZATION: Optional[str] = None
    ANTHROPIC_API_KEY: Optional[str] = None
    GOOGLE_API_KEY: Optional[str] = None
    GOOGLE_PROJECT_ID: Optional[str] = None
    REPLICATE_API_KEY: Optional[str] = None
    TOGETHER_API_KEY: Optional[str] = None

    # Comma-separated model overrides (defaults per provider otherwise)
    OPENAI_MODELS: Optional[str] = None
    ANTHROPIC_MODELS: Optional[str] = None
    GOOGLE_MODELS: Optional[str] = None
    REPLICATE_MODELS: Optional[str] = None
    TOGETHER_MODELS: Optional[str] = None

    # Application Settings
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Dispatch (defaults for every provider)
    CALL_SPACING_MS: int = 200
    PROVIDER_CONCURRENCY: int = 2

    # Per-provider dispatch overrides (fall back to the defaults above)
    OPENAI_CONCURRENCY: Optional[int] = None
    ANTHROPIC_CONCURRENCY: Optional[int] = None
    GOOGLE_CONCURRENCY: Optional[int] = None
    REPLICATE_CONCURRENCY: Optional[int] = None
    TOGETHER_CONCURRENCY: Optional[int] = None
    OPENAI_CALL_SPACING_MS: Optional[int] = None
    ANTHROPIC_CALL_SPACING_MS: Optional[int] = None
    GOOGLE_CALL_SPACING_MS: Optional[int] = None
    REPLICATE_CALL_SPACING_MS: Optional[int] = None
    TOGETHER_CALL_SPACING_MS: Optional[int] = None

    # Retries
    MAX_RETRIES: int = 3
    RETRY_INITIAL_DELAY: float = 1.0
    RETRY_MAX_DELAY: float = 10.0

    # Timeouts
    REQUEST_TIMEOUT: float = 60.0
    REPLICATE_POLL_INTERVAL: float = 5.0
    REPLICATE_MAX_POLLS: int = 60

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"  # Ignore extra fields in .env file
        case_sensitive = False  # Allow both UPPERCASE and lowercase

    def models_override(self, provider: str) -> List[str]:
        """Model list override for a provider, empty when not set."""
        return parse_model_list(getattr(self, f"{provider.upper()}_MODELS", None))

    def concurrency_for(self, provider: str) -> int:
        """In-flight call limit for a provider."""
        override = getattr(self, f"{provider.upper()}_CONCURRENCY", None)
        return override if override is not None else self.PROVIDER_CONCURRENCY

    def spacing_ms_for(self, provider: str) -> int:
        """Minimum gap in ms between call starts to a provider."""
        override = getattr(self, f"{provider.upper()}_CALL_SPACING_MS", None)
        return override if override is not None else self.CALL_SPACING_MS


@lru_cache
def get_settings() -> Settings:
    """Get or create cached settings instance."""
    return Settings()
