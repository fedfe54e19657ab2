"""Tests for provider and sampler factories."""

import pytest

from providers.anthropic import AnthropicProvider
from providers.factory import (
    build_sampler,
    get_provider,
    model_config_from_settings,
    provider_types,
)
from providers.openai_compatible import OpenAICompatibleProvider
from providers.sampler import LangChainSampler
from shared.config import Settings


class TestGetProvider:
    def test_anthropic(self):
        assert isinstance(get_provider("anthropic"), AnthropicProvider)

    @pytest.mark.parametrize("provider_type", ["openai", "grok", "openrouter", "ollama", "vllm", "lm_studio"])
    def test_openai_compatible(self, provider_type):
        provider = get_provider(provider_type)
        assert isinstance(provider, OpenAICompatibleProvider)
        assert provider.provider_type == provider_type

    def test_unknown_provider(self):
        with pytest.raises(ValueError, match="Unknown sampler provider"):
            get_provider("carrier-pigeon")

    def test_provider_types(self):
        assert provider_types()[0] == "anthropic"
        assert "ollama" in provider_types()


class TestModelConfigFromSettings:
    def test_uses_sampler_settings_and_matching_key(self):
        settings = Settings(
            _env_file=None,
            sampler_provider="grok",
            sampler_model="grok-3",
            xai_api_key="x-key",
            anthropic_api_key="a-key",
        )
        config = model_config_from_settings(settings)
        assert config.provider_type == "grok"
        assert config.model_id == "grok-3"
        assert config.api_key == "x-key"


class TestBuildSampler:
    def test_builds_sampler_with_timeout(self):
        settings = Settings(
            _env_file=None,
            sampler_provider="ollama",
            sampler_model="llama3",
            sampler_timeout_seconds=12.5,
        )
        sampler = build_sampler(settings)
        assert isinstance(sampler, LangChainSampler)
        assert sampler.timeout_seconds == 12.5
        assert sampler.model_name == "llama3"

    def test_missing_key_raises(self):
        settings = Settings(_env_file=None, sampler_provider="anthropic", anthropic_api_key="")
        with pytest.raises(ValueError, match="API key is required"):
            build_sampler(settings)
