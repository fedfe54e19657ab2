"""Base classes and models for sampler backends."""

from abc import ABC, abstractmethod

from langchain_core.language_models.chat_models import BaseChatModel
from pydantic import BaseModel


class ModelConfig(BaseModel):
    """Configuration for the chat model behind the sampler.

    Attributes:
        provider_type: Backend family (e.g., "anthropic", "openai", "ollama")
        model_id: Model identifier (e.g., "claude-sonnet-4-20250514")
        api_base: Base URL for the API endpoint (empty uses the provider default)
        api_key: API key (empty string for local servers)
    """

    model_config = {"frozen": True}

    provider_type: str
    model_id: str
    api_base: str = ""
    api_key: str = ""


class LLMProvider(ABC):
    """Abstract base class for chat model providers.

    Each provider turns a ModelConfig into a LangChain chat model that the
    sampler adapter can bind generation parameters to.
    """

    @abstractmethod
    def get_llm(self, config: ModelConfig) -> BaseChatModel:
        """Return a configured chat model.

        Raises:
            ValueError: If the configuration is missing something the
                provider requires (typically the API key)
        """
        pass
