"""Application configuration read from the environment (and `.env`)."""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    DATABASE_URL: str = "sqlite:///./openinvite.db"
    LOG_LEVEL: str = "INFO"
    SEED_MOCK_DATA: bool = True
    ENABLE_BACKGROUND_TASKS: bool = False
    ENFORCE_RSVP_DEADLINE: bool = False
    MAX_OCCURRENCES: int = 5
    RECURRENCE_HORIZON_DAYS: int = 60


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
