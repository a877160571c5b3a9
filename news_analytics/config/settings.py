"""Application settings using Pydantic Settings for environment-based configuration."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Central configuration for the news-analytics application.

    All settings can be overridden via environment variables.
    Prefix is not used to allow standard env var names (e.g., HUGGINGFACE_API_KEY).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    debug: bool = False

    # API server
    api_host: str = "0.0.0.0"
    api_port: int = 3000
    cors_origins: str = "*"
    cors_allow_credentials: bool = False
    request_timeout_seconds: float = Field(default=60.0, ge=0.0)
    topics_request_timeout_seconds: float = Field(default=180.0, ge=0.0)

    # Rate limiting (opt-in)
    rate_limit_enabled: bool = False
    rate_limit_default: str = "60/minute"
    rate_limit_topics: str = "10/minute"
    rate_limit_storage_uri: str = "memory://"

    # Hugging Face Inference API
    huggingface_api_key: SecretStr | None = None
    huggingface_base_url: str = "https://api-inference.huggingface.co"

    # NewsAPI (comma-separated for multiple keys with rotation)
    newsapi_api_keys: str | None = None
    newsapi_url: str = "https://newsapi.org/v2/everything"

    # Upstream calls
    upstream_timeout_seconds: float = Field(default=30.0, gt=0.0, le=300.0)
    max_http_retries: int = Field(default=3, ge=0, le=10)
    max_backoff_seconds: float = Field(default=60.0, ge=1.0, le=300.0)
    circuit_failure_threshold: int = Field(default=5, ge=1, le=100)
    circuit_recovery_timeout: float = Field(default=60.0, gt=0.0)

    # Observability
    metrics_port: int = 8000
    service_name: str = "news-analytics"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def huggingface_configured(self) -> bool:
        """Check if the Hugging Face Inference API is configured."""
        return self.huggingface_api_key is not None

    @property
    def newsapi_configured(self) -> bool:
        """Check if at least one NewsAPI key is configured."""
        return bool(self.newsapi_api_keys and self.newsapi_api_keys.strip(" ,"))


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are loaded only once.
    Clear cache with get_settings.cache_clear() if needed.
    """
    return Settings()
