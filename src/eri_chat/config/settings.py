"""Application settings via environment variables."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings via environment variables."""

    # Completion provider selection
    # Options: "groq" (OpenAI-compatible HTTP API) or "anthropic" (Messages API)
    llm_provider: Literal["groq", "anthropic"] = "groq"

    # Groq
    groq_api_key: str = ""
    groq_base_url: str = "https://api.groq.com/openai/v1"

    # Anthropic
    anthropic_api_key: str = ""

    # Model tiers, tried in this order (Groq ids; other providers have their
    # own defaults in config.models)
    primary_model: str = "llama-3.3-70b-versatile"
    secondary_model: str = "meta-llama/llama-4-scout-17b-16e-instruct"
    tertiary_model: str = "llama-3.1-8b-instant"

    # Speech-to-text
    transcription_model: str = "whisper-large-v3"

    # Generation
    completion_temperature: float = 0.7
    completion_max_tokens: int = 1500
    follow_up_max_tokens: int = 1000

    # Tool-call handling
    schema_retry_attempts: int = 3
    tool_requery_attempts: int = 3

    # OpenWeatherMap
    openweather_api_key: str = ""
    openweather_base_url: str = "https://api.openweathermap.org"

    # Calendar used for "Today"/"Tomorrow" labels
    timezone: str = "Asia/Tokyo"

    # Outbound HTTP timeout in seconds; None disables client-side timeouts
    http_timeout_seconds: float | None = None

    # Logging
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
