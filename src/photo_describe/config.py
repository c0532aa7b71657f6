"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

DEFAULT_DESCRIPTION_PROMPT = (
    "Describe this image in character as an overly earnest cultural critic. "
    "Be concise and to the point. Be very specific and detailed. "
    "Every description MUST find a satirical angle, "
    "even if it seems outlandish or farfetched."
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    storage_bucket: str = "photos"
    signed_url_ttl_seconds: int = 3600
    openai_api_key: str
    openai_model: str = "gpt-4.1-nano-2025-04-14"
    openai_max_tokens: int = 128
    openai_timeout_seconds: float = 60.0
    description_prompt: str = DEFAULT_DESCRIPTION_PROMPT
    analysis_delay_ms: int = 2000
    guard_terminal_writes: bool = True
    subscriber_poll_interval_seconds: float = 1.0
    session_cookie_name: str = "photo_describe_session_id"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
