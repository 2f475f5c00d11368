"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    auth0_domain: str
    auth0_audience: str
    auth0_namespace: str = ""
    admin_role: str = "admin"
    sessions_table: str = "checkin_sessions"
    store_timeout_seconds: int = 10
    jwks_cache_seconds: int = 600
    history_limit: int = 50
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
