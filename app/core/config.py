"""
Application configuration using Pydantic Settings.

Loads configuration from environment variables (.env file).
"""

from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Project Info
    PROJECT_NAME: str = "Vigor recovery scoring and activity generosity engine"
    VERSION: str = "0.1.0"
    AUTHORS: List[str] = ["Vigor contributors"]
    PROJECT_URL: str = ""

    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:///./vigor.db"

    # Recovery baseline
    BASELINE_WINDOW_DAYS: int = 30
    BASELINE_MIN_DAYS: int = 5

    # Activity ring transform
    DEFAULT_GENEROSITY_PRESET: str = "balanced"

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")


# Global settings instance
settings = Settings()
