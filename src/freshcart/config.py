"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_anon_key: str
    nearby_function_enabled: bool = False
    openai_api_key: str | None = None
    openai_model: str = "gpt-4o"
    product_cache_ttl_seconds: int = 86400
    nearby_radius_km: float = 5.0
    near_detection_radius_km: float = 1.0
    very_close_radius_km: float = 0.5
    cheapest_radius_km: float = 0.035
    proximity_max_sessions: int = 1024
    proximity_idle_ttl_seconds: int = 3600
    high_accuracy_timeout_ms: int = 8000
    high_accuracy_max_age_ms: int = 60000
    low_accuracy_timeout_ms: int = 15000
    low_accuracy_max_age_ms: int = 300000
    cors_allowed_origins: str = "*"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_allowed_origins(raw: str | None) -> list[str]:
    """Parse a comma-separated list of CORS origins."""
    if raw is None:
        return []
    cleaned = raw.strip()
    if cleaned == "*":
        return ["*"]
    return [chunk.strip() for chunk in cleaned.split(",") if chunk.strip()]
