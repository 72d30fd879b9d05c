"""
Configuration settings for the Trip Packs Backend.

This module handles application configuration using Pydantic settings.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    # Application
    app_name: str = "Trip Packs Backend"
    api_version: str = "v1"
    debug: bool = False

    # Database Configuration (local single-writer store)
    database_url: str = "sqlite+aiosqlite:///./trips.db"
    db_echo: bool = False

    # Logging
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
