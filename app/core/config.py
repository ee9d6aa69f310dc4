"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Key-value store backend: "sql" or "mongo"
    store_backend: str = "sql"

    # SQL backend (SQLite file by default, any SQLAlchemy URL works)
    database_url: str = "sqlite:///./campusprep.db"

    # MongoDB backend
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db: str = "campusprep"

    # Content generation (OpenAI-compatible, DeepSeek by default)
    ai_api_key: str = ""
    ai_base_url: str = "https://api.deepseek.com/v1"
    ai_model: str = "deepseek-chat"

    # Drives
    logo_url_template: str = "https://logo.clearbit.com/{domain}.com"

    # Admin session identity
    admin_email: str = "admin@campus.edu"

    # App
    debug: bool = False

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
