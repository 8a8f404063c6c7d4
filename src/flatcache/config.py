"""
Configuration management using pydantic-settings.

Loads configuration from FLATCACHE_* environment variables and .env files.
Settings are frozen: a cache keeps the configuration it was built with for
its whole lifetime. Use ``model_copy(update=...)`` to derive a variant.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# One week, the conventional default for page caches.
DEFAULT_EXPIRE_SECONDS = 7 * 24 * 60 * 60


class Settings(BaseSettings):
    """Cache settings loaded from environment variables.

    Optional (all prefixed with FLATCACHE_):
        CACHE_DIR: Directory holding the cache files
        USE_CACHE: Serve reads from the cache
        STORE_CACHE: Write entries to the cache (also gates purge)
        USE_ZIP: Gzip entries on write and decode them on read
        CONVERT_TO_ZIP: Rewrite legacy plain entries as gzip when read
        CACHE_EXPIRE: Seconds before purge removes an entry (0 = never)
        LOG_LEVEL: Logging level
    """

    model_config = SettingsConfigDict(
        env_prefix="FLATCACHE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    CACHE_DIR: Path = Field(default=Path("cache"), description="Cache directory")

    USE_CACHE: bool = Field(default=True, description="Serve reads from the cache")
    STORE_CACHE: bool = Field(default=True, description="Write entries to the cache")

    USE_ZIP: bool = Field(default=True, description="Gzip cache entries")
    CONVERT_TO_ZIP: bool = Field(
        default=True,
        description="Convert uncompressed entries to gzip when they are read",
    )

    CACHE_EXPIRE: int = Field(
        default=DEFAULT_EXPIRE_SECONDS,
        ge=0,
        description="Seconds before an entry is purged (0 disables expiry)",
    )

    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING", description="Logging level"
    )

    @field_validator("CACHE_DIR")
    @classmethod
    def expand_cache_dir(cls, v: Path) -> Path:
        """Expand a leading ~ in the cache directory."""
        return v.expanduser()

    @property
    def cache_dir(self) -> Path:
        """Get cache directory (lowercase alias)."""
        return self.CACHE_DIR

    @property
    def read_enabled(self) -> bool:
        """Whether get() may serve entries."""
        return self.USE_CACHE

    @property
    def write_enabled(self) -> bool:
        """Whether set() and purge() may touch the filesystem."""
        return self.STORE_CACHE

    @property
    def compress(self) -> bool:
        """Whether entries are gzip-encoded."""
        return self.USE_ZIP

    @property
    def convert_on_read(self) -> bool:
        """Whether plain entries are rewritten as gzip when read."""
        return self.USE_ZIP and self.CONVERT_TO_ZIP

    @property
    def expire_seconds(self) -> int:
        """Get purge threshold in seconds (lowercase alias)."""
        return self.CACHE_EXPIRE

    def display(self) -> dict[str, str | int | bool]:
        """Return settings as a flat dict for display."""
        return {
            "CACHE_DIR": str(self.CACHE_DIR),
            "USE_CACHE": self.USE_CACHE,
            "STORE_CACHE": self.STORE_CACHE,
            "USE_ZIP": self.USE_ZIP,
            "CONVERT_TO_ZIP": self.CONVERT_TO_ZIP,
            "CACHE_EXPIRE": self.CACHE_EXPIRE,
            "LOG_LEVEL": self.LOG_LEVEL,
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings singleton.

    Returns:
        Settings instance loaded from environment.

    Raises:
        ValidationError: If settings are invalid.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
