"""Provider for every OpenAI-compatible API.

OpenAI itself, xAI Grok, OpenRouter and local servers (Ollama, vLLM, LM Studio) all
speak the same protocol through LangChain's ChatOpenAI and differ only in
base URL, key requirements and headers.
"""

from dataclasses import dataclass

from langchain_openai import ChatOpenAI

from .base import LLMProvider, ModelConfig


@dataclass
class ProviderConfig:
    """Per-backend defaults for an OpenAI-compatible provider.

    Attributes:
        default_base_url: API endpoint used when no api_base is configured
            (None uses OpenAI's default)
        api_key_required: Whether an API key must be provided
        api_key_env_var: Environment variable named in the missing-key error
        default_headers: Extra HTTP headers sent with every request
    """

    default_base_url: str | None = None
    api_key_required: bool = True
    api_key_env_var: str = ""
    default_headers: dict[str, str] | None = None


PROVIDER_CONFIGS: dict[str, ProviderConfig] = {
    "openai": ProviderConfig(api_key_env_var="COUNCIL_OPENAI_API_KEY"),
    "grok": ProviderConfig(
        default_base_url="https://api.x.ai/v1",
        api_key_env_var="COUNCIL_XAI_API_KEY",
    ),
    "openrouter": ProviderConfig(
        default_base_url="https://openrouter.ai/api/v1",
        api_key_env_var="COUNCIL_OPENROUTER_API_KEY",
        default_headers={"X-Title": "Council"},
    ),
    "ollama": ProviderConfig(
        default_base_url="http://localhost:11434/v1",
        api_key_required=False,
    ),
    "vllm": ProviderConfig(
        default_base_url="http://localhost:8000/v1",
        api_key_required=False,
    ),
    "lm_studio": ProviderConfig(
        default_base_url="http://localhost:1234/v1",
        api_key_required=False,
    ),
}


class OpenAICompatibleProvider(LLMProvider):
    """ChatOpenAI-backed provider for one of PROVIDER_CONFIGS."""

    def __init__(self, provider_type: str):
        """
        Raises:
            KeyError: If provider_type is not recognized
        """
        if provider_type not in PROVIDER_CONFIGS:
            raise KeyError(
                f"Unknown provider type: {provider_type}. "
                f"Valid types: {list(PROVIDER_CONFIGS.keys())}"
            )
        self.provider_type = provider_type
        self.provider_config = PROVIDER_CONFIGS[provider_type]

    def get_llm(self, config: ModelConfig) -> ChatOpenAI:
        """Return a ChatOpenAI client configured for this backend.

        Raises:
            ValueError: If api_key is required but not provided
        """
        if self.provider_config.api_key_required and not config.api_key:
            raise ValueError(
                f"{self.provider_type.title()} API key is required. "
                f"Set it via the {self.provider_config.api_key_env_var} environment variable."
            )

        kwargs: dict = {"model": config.model_id}

        if base_url := (config.api_base or self.provider_config.default_base_url):
            kwargs["base_url"] = base_url

        # Local servers accept any key
        kwargs["api_key"] = config.api_key or "not-needed"

        if self.provider_config.default_headers:
            kwargs["default_headers"] = self.provider_config.default_headers

        return ChatOpenAI(**kwargs)
