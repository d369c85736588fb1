"""
Tests for settings and LLM provider configuration

Covers:
- Settings from environment with model overrides
- LLMConfig lookups and immutable updates
- Redacted export / import
"""

import pytest

from discoverability.orchestrator import ThrottleLimits, limits_from_settings
from discoverability.providers.config import DEFAULT_MODELS, LLMConfig, ModelSelection, REDACTED
from discoverability.providers.models import Provider
from discoverability.utils.config import Settings, parse_model_list


PROVIDER_ENV_VARS = (
    "OPENAI_API_KEY", "OPENAI_ORGANIZATION", "ANTHROPIC_API_KEY", "GOOGLE_API_KEY",
    "GOOGLE_PROJECT_ID", "REPLICATE_API_KEY", "TOGETHER_API_KEY",
    "OPENAI_MODELS", "ANTHROPIC_MODELS", "GOOGLE_MODELS", "REPLICATE_MODELS", "TOGETHER_MODELS",
    "PROVIDER_CONCURRENCY", "CALL_SPACING_MS", "REPLICATE_CONCURRENCY", "REPLICATE_CALL_SPACING_MS",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in PROVIDER_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestSettings:
    """Test environment-backed settings."""

    def test_defaults(self, clean_env):
        settings = Settings(_env_file=None)

        assert settings.CALL_SPACING_MS == 200
        assert settings.PROVIDER_CONCURRENCY == 2
        assert settings.MAX_RETRIES == 3
        assert settings.OPENAI_API_KEY is None

    def test_reads_environment(self, clean_env):
        clean_env.setenv("OPENAI_API_KEY", "sk-env")
        clean_env.setenv("OPENAI_MODELS", "gpt-4, gpt-3.5-turbo")

        settings = Settings(_env_file=None)

        assert settings.OPENAI_API_KEY == "sk-env"
        assert settings.models_override("openai") == ["gpt-4", "gpt-3.5-turbo"]

    def test_parse_model_list(self):
        assert parse_model_list(None) == []
        assert parse_model_list(" a, ,b ") == ["a", "b"]

    def test_per_provider_dispatch_overrides(self, clean_env):
        clean_env.setenv("REPLICATE_CONCURRENCY", "1")
        clean_env.setenv("REPLICATE_CALL_SPACING_MS", "1000")

        settings = Settings(_env_file=None)

        assert settings.concurrency_for("replicate") == 1
        assert settings.spacing_ms_for("replicate") == 1000
        assert settings.concurrency_for("openai") == settings.PROVIDER_CONCURRENCY
        assert settings.spacing_ms_for("openai") == settings.CALL_SPACING_MS

    def test_limits_from_settings(self, clean_env):
        settings = Settings(_env_file=None, REPLICATE_CONCURRENCY=1, REPLICATE_CALL_SPACING_MS=1000)

        limits = limits_from_settings(settings)

        assert limits["replicate"] == ThrottleLimits(concurrency=1, spacing_seconds=1.0)
        assert limits["openai"] == ThrottleLimits(concurrency=2, spacing_seconds=0.2)


class TestLLMConfigFromSettings:
    """Test building the provider configuration."""

    def test_only_keyed_providers(self, clean_env):
        settings = Settings(_env_file=None, OPENAI_API_KEY="sk-1", GOOGLE_API_KEY="g-1", GOOGLE_PROJECT_ID="proj")

        config = LLMConfig.from_settings(settings)

        assert config.configured_providers() == ["openai", "google"]
        assert config.models_for("openai") == list(DEFAULT_MODELS[Provider.OPENAI])
        assert config.get("gemini").project_id == "proj"

    def test_model_override(self, clean_env):
        settings = Settings(_env_file=None, ANTHROPIC_API_KEY="sk-ant", ANTHROPIC_MODELS="claude-3-haiku-20240307")

        config = LLMConfig.from_settings(settings)

        assert config.available_models() == [ModelSelection("anthropic", "claude-3-haiku-20240307")]

    def test_no_keys(self, clean_env):
        assert LLMConfig.from_settings(Settings(_env_file=None)).available_models() == []


class TestLLMConfig:
    """Test lookups and immutable updates."""

    def test_with_provider_returns_new_config(self, llm_config):
        updated = llm_config.with_provider("together", api_key="t-1", models=["m"])

        assert "together" in updated.configured_providers()
        assert "together" not in llm_config.configured_providers()

    def test_without_provider(self, llm_config):
        assert llm_config.without_provider("claude").configured_providers() == ["openai"]

    def test_unsupported_provider(self, llm_config):
        with pytest.raises(ValueError):
            llm_config.with_provider("mistral", api_key="x")

    def test_available_models_order(self, llm_config):
        assert [s.display_name for s in llm_config.available_models()] == [
            "OPENAI: gpt-4",
            "ANTHROPIC: claude-3-haiku-20240307",
        ]

    def test_is_configured(self, llm_config):
        assert llm_config.is_configured("openai")
        assert not llm_config.is_configured("replicate")
        assert not llm_config.is_configured("mistral")


class TestExportImport:
    """Test sharing a configuration without its keys."""

    def test_redacted_export_hides_keys(self, llm_config):
        exported = llm_config.redacted()

        assert exported["openai"]["apiKey"] == REDACTED
        assert exported["openai"]["models"] == ["gpt-4"]
        assert "sk-test" not in str(exported)

    def test_import_keeps_existing_keys(self, llm_config):
        imported = {
            "openai": {"apiKey": REDACTED, "models": ["gpt-4-turbo"]},
            "google": {"apiKey": REDACTED, "models": ["gemini-pro"]},
            "together": {"apiKey": "t-new", "models": ["meta-llama/Llama-2-7b-chat-hf"]},
        }

        merged = llm_config.merge_imported(imported)

        assert merged.get("openai").api_key == "sk-test"
        assert merged.models_for("openai") == ["gpt-4-turbo"]
        assert not merged.is_configured("google")
        assert merged.get("together").api_key == "t-new"
