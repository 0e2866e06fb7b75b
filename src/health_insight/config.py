"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    api_token: str
    off_base_url: str = "https://world.openfoodfacts.org"
    off_user_agent: str = "HealthInsight/1.0 (support@healthinsight.app)"
    off_timeout_seconds: float = 10
    search_debounce_seconds: float = 0.45
    search_page_size: int = 30
    local_search_limit: int = 10
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
