"""
Application configuration via pydantic-settings.

Loads values from .env file with sensible defaults for local development.
Use ``get_settings()`` to obtain the cached singleton instance.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Meeting Recap settings loaded from environment / .env file.

    All settings can be overridden via environment variables or a `.env` file.
    Field names map directly to env var names (case-insensitive).

    Attributes:
        gemini_api_key: Credential for the generative-model provider.
        gemini_fallback_models: Static candidate list used when model
            discovery fails.
        summary_store: Which backend persists summaries per call
            ("sqlite", "stream", "memory" or "none").
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Silently ignore unrecognized env vars
    )

    # --- Application ---
    app_env: str = "development"  # "production" hides error details
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    log_level: str = "INFO"

    # --- Inbound auth ---
    # Empty = no authentication on /api/v1/ routes
    api_key: str = ""

    # --- Gemini provider ---
    gemini_api_key: str = ""
    gemini_api_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    gemini_fallback_models: list[str] = [
        "gemini-pro",
        "gemini-1.5-pro",
        "gemini-1.5-flash",
        "gemini-1.0-pro",
    ]
    gemini_model_marker: str = "gemini"  # Discovered names must contain this
    probe_prompt: str = "Hello"

    # --- Retry policy ---
    generation_retry_budget: int = 3
    rate_limit_backoff_seconds: float = 2.0

    # --- Media ---
    media_soft_limit_mb: float = 20.0  # Advisory warning only
    media_hard_limit_mb: float = 0.0  # 0 = never reject
    http_timeout_seconds: float = 120.0

    # --- Hardening ---
    summarize_deadline_seconds: float = 0.0  # 0 = no deadline

    # --- Summary store ---
    summary_store: str = "sqlite"
    database_url: str = "sqlite+aiosqlite:///data/recap.db"
    stream_api_key: str = ""
    stream_api_secret: str = ""
    stream_call_type: str = "default"

    @property
    def is_production(self) -> bool:
        return self.app_env.lower() == "production"


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide Settings (the .env file is read once)."""
    return Settings()
