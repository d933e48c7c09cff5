"""Application configuration."""

import os
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    llm_api_key: str
    llm_base_url: str = "https://openrouter.ai/api/v1"
    llm_model: str = "gpt-4o"
    llm_backend: Literal["httpx", "openai"] = "httpx"
    llm_timeout_seconds: float = 60.0
    pipeline_timeout_seconds: float = 180.0
    photo_fetch_timeout_seconds: float = 20.0
    log_level: str = "INFO"
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def supabase_configured(self) -> bool:
        """Return True when the health data store can be reached."""
        return bool(self.supabase_url and self.supabase_service_key)
