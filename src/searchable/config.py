from __future__ import annotations

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SearchConfig(BaseModel):
    """Search execution configuration values."""

    # Upper bound on aspects running at once in `Search.perform_async`
    max_concurrency: int = Field(default=4, ge=1)
    log_level: str = "WARNING"


class DatabaseConfig(BaseModel):
    """Database configuration values."""

    # Default to docker-compose service credentials
    url: str = "postgresql+psycopg://user:password@db:5432/searchable"
    echo: bool = False


class Settings(BaseSettings):
    """Top-level settings loaded from environment variables and .env only."""

    model_config = SettingsConfigDict(
        env_prefix="SEARCHABLE_",
        env_nested_delimiter="__",
        env_file=".env",
        extra="ignore",
    )

    search: SearchConfig = SearchConfig()
    database: DatabaseConfig = DatabaseConfig()


def load_settings() -> Settings:
    """Load settings from environment variables and .env only."""
    return Settings()  # type: ignore[call-arg]
