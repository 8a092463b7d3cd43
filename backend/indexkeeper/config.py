"""
Application configuration loaded from environment variables.
"""
from functools import lru_cache
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # MongoDB
    mongo_uri: str = "mongodb://mongodb:27017"
    database_name: str = "app_db"

    # Index manifest (JSON) describing the collection bindings
    manifest_path: Optional[str] = None

    # Reconciliation behaviour
    sync_on_startup: bool = False
    fail_fast: bool = True
    drift_check: Literal["off", "warn", "error"] = "off"

    # Logging
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
