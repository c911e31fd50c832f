"""
Database Configuration

Loads database settings from environment variables.
Supports PostgreSQL (asyncpg) in production and SQLite (aiosqlite) locally.
"""

import re
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database configuration loaded from environment."""

    # Main database URL
    database_url: str = ""

    # Connection pool settings (ignored for SQLite)
    pool_size: int = 5
    max_overflow: int = 10
    pool_timeout: int = 30
    pool_recycle: int = 1800  # 30 minutes

    # Echo SQL statements (for debugging)
    echo_sql: bool = False

    # Create missing tables on startup
    create_tables: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def async_database_url(self) -> str:
        """
        Convert standard PostgreSQL URL to async version.
        Ensures +asyncpg driver is specified.
        """
        url = self.database_url

        if not url:
            raise ValueError("DATABASE_URL environment variable is not set")

        if url.startswith("postgres://"):
            url = url.replace("postgres://", "postgresql://", 1)

        if "postgresql://" in url and "+asyncpg" not in url:
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)

        if url.startswith("sqlite://"):
            url = url.replace("sqlite://", "sqlite+aiosqlite://", 1)

        # asyncpg does not understand these query parameters
        url = re.sub(r"[&?](channel_binding|sslmode)=[^&]*", "", url)
        if "&" in url and "?" not in url:
            url = url.replace("&", "?", 1)

        return url

    @property
    def is_sqlite(self) -> bool:
        return self.async_database_url.startswith("sqlite")

    @property
    def use_ssl(self) -> bool:
        """SSL is requested through sslmode=require on PostgreSQL URLs."""
        return "sslmode=require" in self.database_url


@lru_cache()
def get_database_settings() -> DatabaseSettings:
    """
    Get cached database settings.
    Uses lru_cache to avoid reloading on every call.
    """
    return DatabaseSettings()


# Convenience function
def get_database_url() -> str:
    """Get the async database URL."""
    return get_database_settings().async_database_url
