"""Application configuration using pydantic-settings.

Provides type-safe, validated configuration from environment variables
with sensible defaults for development.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # ========== Cache (Upstash Redis) ==========
    upstash_redis_rest_url: str = Field(default="", description="Upstash Redis REST URL")
    upstash_redis_rest_token: str = Field(default="", description="Upstash Redis REST Token")

    # ========== Completion service ==========
    llm_provider: Literal["groq", "gemini"] = "groq"
    groq_api_key: str = Field(default="", description="Groq API Key")
    groq_base_url: str = Field(
        default="https://api.groq.com/openai/v1",
        description="OpenAI-compatible chat completions base URL",
    )
    llm_model: str = "openai/gpt-oss-120b"
    gemini_api_key: str = Field(default="", description="Google Gemini API Key")
    gemini_model: str = "gemini-2.5-flash"

    # ========== Reddit ==========
    reddit_base_url: str = "https://www.reddit.com"
    reddit_user_agent: str = "UniHandle/1.0 (student insights aggregator)"
    reddit_max_concurrency: int = Field(default=4, ge=1, le=16)

    # ========== CORS ==========
    client_origin_str: str = Field(
        default="",
        alias="CLIENT_ORIGIN",
        description="Comma-separated allowed browser origins (empty allows any)",
    )

    # ========== Rate Limiting ==========
    rate_limit_enabled: bool = Field(default=False)
    rate_limit_requests_per_minute: int = Field(default=30, ge=1)

    # ========== Application ==========
    app_name: str = "UniHandle Insights"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Application environment",
    )
    debug: bool = Field(default=False)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    # ========== Computed Properties ==========
    @computed_field
    @property
    def cors_origins(self) -> list[str]:
        """Parse allowed origins; an empty setting allows any origin."""
        origins = [o.strip() for o in self.client_origin_str.split(",") if o.strip()]
        return origins or ["*"]

    @computed_field
    @property
    def redis_available(self) -> bool:
        """Check if Redis credentials are configured."""
        return bool(self.upstash_redis_rest_url.strip() and self.upstash_redis_rest_token.strip())


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
