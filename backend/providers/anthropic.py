"""Anthropic Claude provider.

Claude is the default voice of every council member. Anthropic needs a
valid API key, unlike the local OpenAI-compatible servers.
"""

from langchain_anthropic import ChatAnthropic

from .base import LLMProvider, ModelConfig


class AnthropicProvider(LLMProvider):
    """Provider for Anthropic Claude models via langchain-anthropic."""

    def get_llm(self, config: ModelConfig) -> ChatAnthropic:
        """Return a ChatAnthropic client.

        Raises:
            ValueError: If api_key is not provided
        """
        if not config.api_key:
            raise ValueError(
                "Anthropic API key is required. "
                "Set it via the COUNCIL_ANTHROPIC_API_KEY environment variable."
            )

        kwargs: dict = {"model": config.model_id, "api_key": config.api_key}
        if config.api_base:
            kwargs["base_url"] = config.api_base
        return ChatAnthropic(**kwargs)
