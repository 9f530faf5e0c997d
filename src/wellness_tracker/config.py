"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    openai_api_key: str
    openai_model: str = "gpt-5.2"
    openai_reasoning_effort: str | None = "low"
    openai_store: bool = False
    openai_timeout_seconds: float = 60.0
    state_backend: str = "file"
    state_dir: str = "user_data"
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    supabase_state_table: str = "app_state"
    report_dir: str = "reports"
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_state_backend(raw: str) -> str:
    """Normalize the configured state backend name."""
    backend = raw.strip().lower()
    if backend in {"", "file", "json"}:
        return "file"
    if backend == "supabase":
        return "supabase"
    raise ValueError(f"Unknown state backend: {raw!r}")
