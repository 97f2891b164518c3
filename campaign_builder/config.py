"""
Application configuration.

This module provides centralized configuration management using Pydantic.
Values can be overridden with ``CAMPAIGN_BUILDER_`` prefixed environment
variables, e.g. ``CAMPAIGN_BUILDER_VALIDATION__DEBOUNCE_MS=500``.
"""

from typing import List, Optional
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ValidationConfig(BaseModel):
    """Validation engine configuration."""
    debounce_ms: int = Field(default=300, ge=0)
    warning_ratio: float = 0.80
    danger_ratio: float = 0.95
    default_limit: int = 100  # used when a platform has no explicit cap

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000


class PreviewConfig(BaseModel):
    """Preview truncation configuration."""
    max_ads_per_ad_group: int = 5
    max_ad_groups_per_campaign: int = 10
    max_keyword_rows: int = 50


class RedisConfig(BaseModel):
    """Redis configuration for the shared validation result store."""
    url: str = "redis://localhost:6379"
    password: Optional[str] = None
    prefix: str = "cb:"
    result_ttl: int = 3600  # 1 hour

    # Key prefixes
    validation_prefix: str = "validation:"


class ServerConfig(BaseModel):
    """Server configuration."""
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    cors_origins: List[str] = ["*"]


class Settings(BaseSettings):
    """Application settings."""
    validation: ValidationConfig = ValidationConfig()
    preview: PreviewConfig = PreviewConfig()
    redis: RedisConfig = RedisConfig()
    server: ServerConfig = ServerConfig()

    model_config = SettingsConfigDict(
        env_prefix="CAMPAIGN_BUILDER_",
        env_nested_delimiter="__",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


# Create global settings instance
settings = Settings()

# Export individual configs for convenience
validation_config = settings.validation
preview_config = settings.preview
redis_config = settings.redis
server_config = settings.server
