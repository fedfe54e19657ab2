"""Factory functions for creating providers and the sampler."""

from shared.config import Settings
from .anthropic import AnthropicProvider
from .base import LLMProvider, ModelConfig
from .openai_compatible import PROVIDER_CONFIGS, OpenAICompatibleProvider
from .sampler import LangChainSampler


def provider_types() -> list[str]:
    """All supported provider type names."""
    return ["anthropic", *PROVIDER_CONFIGS.keys()]


def get_provider(provider_type: str) -> LLMProvider:
    """Return the provider for a type name.

    Raises:
        ValueError: If provider_type is not supported
    """
    if provider_type == "anthropic":
        return AnthropicProvider()
    if provider_type in PROVIDER_CONFIGS:
        return OpenAICompatibleProvider(provider_type)
    raise ValueError(
        f"Unknown sampler provider '{provider_type}'. Valid types: {provider_types()}"
    )


def model_config_from_settings(settings: Settings) -> ModelConfig:
    """Build the sampler's ModelConfig from COUNCIL_SAMPLER_* settings."""
    return ModelConfig(
        provider_type=settings.sampler_provider,
        model_id=settings.sampler_model,
        api_base=settings.sampler_api_base,
        api_key=settings.provider_api_key(settings.sampler_provider),
    )


def build_sampler(settings: Settings) -> LangChainSampler:
    """Build the configured sampler.

    Raises:
        ValueError: If the provider is unknown or its API key is missing
    """
    config = model_config_from_settings(settings)
    llm = get_provider(config.provider_type).get_llm(config)
    return LangChainSampler(
        llm,
        timeout_seconds=settings.sampler_timeout_seconds,
        model_name=config.model_id,
    )
