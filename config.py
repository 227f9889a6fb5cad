"""Service configuration — environment-driven settings via pydantic-settings.

Variables carry the PRAYER_ prefix (PRAYER_DEFAULT_METHOD=ISNA, ...) and may
come from a .env file. get_settings() is cached: one instance per process.
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from methods import AsrJuristic, Method


class Settings(BaseSettings):
    """Service settings from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="PRAYER_", env_file=".env", case_sensitive=False,
    )

    # Calculation defaults when a request does not name them
    default_method: Method = Method.MWL
    default_asr: AsrJuristic = AsrJuristic.STANDARD

    # Upper bound for the days parameter of range requests
    max_days: int = 31

    # API
    cors_origins: list[str] = ["*"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @field_validator("max_days")
    @classmethod
    def positive_max_days(cls, v: int) -> int:
        if v < 1:
            raise ValueError("max_days must be at least 1")
        return v

    @field_validator("log_format")
    @classmethod
    def known_log_format(cls, v: str) -> str:
        v = v.lower()
        if v not in ("json", "text"):
            raise ValueError("log_format must be 'json' or 'text'")
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()
