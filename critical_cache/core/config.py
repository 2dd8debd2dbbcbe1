"""Application configuration using Pydantic settings."""

from functools import lru_cache
from typing import List, Literal, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central application configuration."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", case_sensitive=False)

    app_name: str = "Critical CSS Resolver"
    environment: str = "development"
    debug: bool = True
    log_level: Optional[Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"]] = None

    api_v1_prefix: str = "/v1"
    cors_allowed_origins: List[str] = ["*"]

    site_url: str = "http://localhost"
    content_snapshot_path: Optional[str] = None

    redis_url: str = "redis://localhost:6379/0"
    redis_socket_timeout_seconds: float = 2.0

    celery_broker_url: str | None = None
    celery_result_backend: str | None = None

    storage_backend: Literal["memory", "redis"] = "memory"
    fragment_key_prefix: str = "critical_css:"
    fragment_ttl_seconds: int = 7 * 24 * 60 * 60

    page_cache_backend: Literal["memory", "redis"] = "memory"
    page_cache_key_prefix: str = "page_cache:"

    provider_sample_size: int = 10

    cache_bypass_param: str = "donotcachepage"
    cache_bypass_secret: Optional[str] = None

    auth_jwt_secret: str = "change-me"
    auth_token_header: str = "Authorization"

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value):
        return value.upper() if isinstance(value, str) else value


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""

    return Settings()


settings = get_settings()
