# ABOUTME: Centralized configuration using Pydantic Settings.
# ABOUTME: Loads Gemini, retry, locale and logging settings from environment and .env file.

from functools import lru_cache

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # AI / Gemini
    gemini_api_key: SecretStr | None = None
    gemini_model: str = "gemini-2.5-flash"
    ai_temperature: float = 0.6

    # Delays (seconds) between attempts on quota errors; one retry per entry
    retry_delays: list[float] = [2.0, 5.0, 15.0]

    # Locale
    default_timezone: str = "America/New_York"
    publication_hour: int = 7  # Briefs are always framed as delivered at 7 AM local

    # Logging
    log_level: str = "INFO"
    log_format: str = "console"  # "console" or "json"

    @field_validator("publication_hour")
    @classmethod
    def _check_hour(cls, value: int) -> int:
        if not 0 <= value <= 23:
            raise ValueError("publication_hour must be between 0 and 23")
        return value

    @field_validator("retry_delays")
    @classmethod
    def _check_delays(cls, value: list[float]) -> list[float]:
        if any(delay < 0 for delay in value):
            raise ValueError("retry_delays must be non-negative")
        return value


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Settings are loaded from environment variables and .env file.
    GEMINI_API_KEY is optional here - it is only required when a generation call is made.
    """
    return Settings()
