"""Sampler backends: LangChain chat model providers and the sampler adapter."""

from .base import LLMProvider, ModelConfig
from .factory import build_sampler, get_provider, provider_types
from .sampler import LangChainSampler

__all__ = [
    "LLMProvider",
    "ModelConfig",
    "LangChainSampler",
    "build_sampler",
    "get_provider",
    "provider_types",
]
