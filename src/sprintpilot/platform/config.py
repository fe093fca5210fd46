"""
SprintPilot Configuration Management

Uses Pydantic Settings for type-safe configuration from environment variables.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    # =========================================================================
    # APPLICATION
    # =========================================================================
    APP_NAME: str = "SprintPilot"
    APP_ENV: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "info"
    VERSION: str = "0.1.0"

    # =========================================================================
    # API SERVER
    # =========================================================================
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    CORS_ORIGINS: str = "http://localhost:3000"

    # =========================================================================
    # STORAGE (Sprint, holiday and history documents)
    # =========================================================================
    DATABASE_URL: str = "sqlite:///data/sprintpilot.db"
    DATABASE_ECHO: bool = False

    # =========================================================================
    # HOLIDAY LOOKUP
    # =========================================================================
    HOLIDAY_API_URL: str = "http://localhost:8080/api/holidays"
    HOLIDAY_API_TIMEOUT: float = 5.0
    HOLIDAY_LOCATION: str = ""

    # =========================================================================
    # OPENAI (Summaries / Export documents)
    # =========================================================================
    OPENAI_API_KEY: str = ""
    OPENAI_MODEL: str = "gpt-4o"
    OPENAI_TEMPERATURE: float = 0.4

    # =========================================================================
    # SPRINT DEFAULTS
    # =========================================================================
    DEFAULT_SPRINT_DURATION: int = 10

    # =========================================================================
    # OBSERVABILITY
    # =========================================================================
    METRICS_ENABLED: bool = True

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Singleton instance for easy import
settings = get_settings()
