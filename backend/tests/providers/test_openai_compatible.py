"""Tests for the unified OpenAI-compatible provider."""

import pytest

from langchain_openai import ChatOpenAI

from providers.base import ModelConfig
from providers.openai_compatible import PROVIDER_CONFIGS, OpenAICompatibleProvider


def make_config(provider_type: str, api_key: str = "", api_base: str = "") -> ModelConfig:
    return ModelConfig(
        provider_type=provider_type,
        model_id="test-model-id",
        api_base=api_base,
        api_key=api_key,
    )


class TestInstantiation:
    @pytest.mark.parametrize("provider_type", list(PROVIDER_CONFIGS.keys()))
    def test_provider_instantiation(self, provider_type):
        provider = OpenAICompatibleProvider(provider_type)
        assert provider.provider_config == PROVIDER_CONFIGS[provider_type]

    def test_unknown_provider_raises_error(self):
        with pytest.raises(KeyError, match="Unknown provider type"):
            OpenAICompatibleProvider("unknown_provider")


class TestGetLlm:
    @pytest.mark.parametrize("provider_type", ["openai", "grok", "openrouter"])
    def test_cloud_providers_need_key(self, provider_type):
        with pytest.raises(ValueError, match="API key is required"):
            OpenAICompatibleProvider(provider_type).get_llm(make_config(provider_type))

    @pytest.mark.parametrize("provider_type", ["ollama", "vllm", "lm_studio"])
    def test_local_providers_work_without_key(self, provider_type):
        llm = OpenAICompatibleProvider(provider_type).get_llm(make_config(provider_type))
        assert isinstance(llm, ChatOpenAI)
        assert llm.model_name == "test-model-id"
        assert llm.openai_api_base == PROVIDER_CONFIGS[provider_type].default_base_url

    def test_configured_base_overrides_default(self):
        llm = OpenAICompatibleProvider("ollama").get_llm(
            make_config("ollama", api_base="http://gpu-box:11434/v1")
        )
        assert llm.openai_api_base == "http://gpu-box:11434/v1"

    def test_openrouter_headers(self):
        llm = OpenAICompatibleProvider("openrouter").get_llm(make_config("openrouter", api_key="k"))
        assert llm.default_headers == {"X-Title": "Council"}
