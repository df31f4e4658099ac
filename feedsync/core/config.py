"""
Application configuration using Pydantic settings
"""

from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables"""

    # Application
    app_name: str = "Feedsync API"
    version: str = "1.0.0"
    environment: str = "development"
    debug: bool = True
    api_v1_prefix: str = "/api/v1"

    # Database
    database_url: str = "sqlite+aiosqlite:///./feedsync.db"
    db_echo: bool = False
    db_create_tables: bool = True  # create tables at startup; disable when Alembic owns the schema

    # API
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: List[str] = ["*"]

    # Feed fetching
    fetch_timeout_seconds: float = 60.0
    fetch_user_agent: str = "Mozilla/5.0 (compatible; Feedsync/1.0)"

    # Upsert chunking (records per write call)
    stock_only_chunk_size: int = 500
    full_import_chunk_size: int = 300

    # Single-vendor import endpoint
    import_secret: str = ""
    import_feed_url: str = ""

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def async_database_url(self) -> str:
        """Database URL with an async driver"""
        url = str(self.database_url)
        if url.startswith("postgresql://"):
            return url.replace("postgresql://", "postgresql+asyncpg://", 1)
        if url.startswith("sqlite:///"):
            return url.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
        return url


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
