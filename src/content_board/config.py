"""Application configuration via pydantic-settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file.

    Credentials are optional. An empty key disables the strategy that needs it
    and never raises.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Platform credentials
    youtube_api_key: str = ""
    youtube_proxy_url: str = ""

    # Gemini (optional video transcription)
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"

    # Retry envelope
    max_attempts: int = 3
    attempt_timeout_seconds: float = 30.0
    backoff_initial_seconds: float = 1.0
    backoff_max_seconds: float = 5.0

    # Per-call timeouts
    page_timeout_seconds: float = 15.0
    oembed_timeout_seconds: float = 10.0
    api_timeout_seconds: float = 10.0
    transcription_timeout_seconds: float = 20.0

    # Acceptance thresholds (characters, after trimming)
    min_result_chars: int = 50
    min_article_chars: int = 100
    rich_article_chars: int = 200
    min_transcript_chars: int = 100
    rich_video_chars: int = 200
    min_description_chars: int = 20
    min_title_chars: int = 5

    # App
    environment: str = "development"
    log_level: str = "INFO"
    port: int = 8080


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings. Lazy initialization to avoid import-time errors."""
    return Settings()
