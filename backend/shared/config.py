"""
Centralized configuration for the council backend.

All settings are loaded from COUNCIL_* environment variables (or a .env
file) with defaults matching the reference council configuration.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="COUNCIL_",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Council API"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False

    # CORS settings
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    # Storage
    storage_backend: Literal["memory", "supabase"] = "memory"
    supabase_url: str = ""
    supabase_service_role_key: str = ""
    supabase_db_url: str = ""

    # Sampler (text generation backend)
    sampler_provider: str = "anthropic"
    sampler_model: str = "claude-sonnet-4-20250514"
    sampler_api_base: str = ""
    sampler_timeout_seconds: float = Field(default=60.0, gt=0)

    # LLM Provider API Keys
    anthropic_api_key: str = ""
    openai_api_key: str = ""
    xai_api_key: str = ""
    openrouter_api_key: str = ""

    # Admission control
    hourly_debate_limit: int = Field(default=50, ge=1)
    total_debate_limit: int = Field(default=1000, ge=1)

    # Input guard
    max_topic_length: int = Field(default=5000, ge=1)

    # Opinion and vote sampling
    opinion_max_tokens: int = Field(default=300, ge=1)
    opinion_temperature: float = Field(default=0.8, ge=0.0, le=2.0)
    vote_max_tokens: int = Field(default=500, ge=1)
    vote_temperature: float = Field(default=0.7, ge=0.0, le=2.0)

    def provider_api_key(self, provider_type: str) -> str:
        """Return the configured API key for a provider type ("" if none)."""
        keys = {
            "anthropic": self.anthropic_api_key,
            "openai": self.openai_api_key,
            "grok": self.xai_api_key,
            "openrouter": self.openrouter_api_key,
        }
        return keys.get(provider_type, "")


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
