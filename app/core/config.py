"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.
"""

from functools import lru_cache
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # MongoDB
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db: str = "mentorship_db"

    # Collections (member directory is owned by another system)
    users_collection: str = "users"
    assignments_collection: str = "mentor_mentee_assignments"
    schedules_collection: str = "meeting_schedules"
    statuses_collection: str = "meeting_statuses"

    # App
    environment: str = "development"
    log_level: str = "INFO"
    cors_origins: List[str] = ["*"]

    @property
    def is_development(self) -> bool:
        """Internal error detail is only echoed to callers in development."""
        return self.environment.lower() == "development"

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
