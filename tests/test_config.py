"""
Tests for configuration module.
"""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from flatcache.config import (
    DEFAULT_EXPIRE_SECONDS,
    Settings,
    clear_settings_cache,
    get_settings,
)


class TestSettingsLoading:
    """Tests for loading Settings from the environment."""

    def test_settings_loads_from_env(self, tmp_path: Path) -> None:
        """Test that settings correctly loads prefixed environment variables."""
        env_vars = {
            "FLATCACHE_CACHE_DIR": str(tmp_path / "c"),
            "FLATCACHE_USE_CACHE": "false",
            "FLATCACHE_STORE_CACHE": "true",
            "FLATCACHE_USE_ZIP": "0",
            "FLATCACHE_CONVERT_TO_ZIP": "no",
            "FLATCACHE_CACHE_EXPIRE": "60",
            "FLATCACHE_LOG_LEVEL": "DEBUG",
        }

        with patch.dict(os.environ, env_vars, clear=False):
            settings = Settings(_env_file=None)

        assert settings.CACHE_DIR == tmp_path / "c"
        assert settings.USE_CACHE is False
        assert settings.STORE_CACHE is True
        assert settings.USE_ZIP is False
        assert settings.CONVERT_TO_ZIP is False
        assert settings.CACHE_EXPIRE == 60
        assert settings.LOG_LEVEL == "DEBUG"

    def test_unprefixed_variables_ignored(self) -> None:
        """Test that a bare CACHE_EXPIRE does not leak into settings."""
        with patch.dict(os.environ, {"CACHE_EXPIRE": "5"}, clear=False):
            settings = Settings(_env_file=None)

        assert settings.CACHE_EXPIRE == DEFAULT_EXPIRE_SECONDS

    def test_negative_expiry_rejected(self) -> None:
        """Test that CACHE_EXPIRE must be non-negative."""
        with pytest.raises(ValidationError):
            Settings(_env_file=None, CACHE_EXPIRE=-1)

    def test_invalid_log_level_rejected(self) -> None:
        """Test that LOG_LEVEL must be a known level."""
        with pytest.raises(ValidationError):
            Settings(_env_file=None, LOG_LEVEL="LOUD")

    def test_cache_dir_expands_user(self) -> None:
        """Test that ~ in CACHE_DIR is expanded."""
        settings = Settings(_env_file=None, CACHE_DIR="~/flatcache")
        assert settings.CACHE_DIR == Path.home() / "flatcache"


class TestSettingsDefaults:
    """Tests for Settings default values."""

    def test_defaults(self) -> None:
        """Test default values when nothing is configured."""
        settings = Settings(_env_file=None)

        assert settings.CACHE_DIR == Path("cache")
        assert settings.USE_CACHE is True
        assert settings.STORE_CACHE is True
        assert settings.USE_ZIP is True
        assert settings.CONVERT_TO_ZIP is True
        assert settings.CACHE_EXPIRE == 7 * 24 * 3600


class TestSettingsAccessors:
    """Tests for Settings properties and methods."""

    def test_lowercase_aliases(self, make_settings) -> None:
        """Test that the lowercase properties mirror the fields."""
        settings = make_settings(USE_CACHE=False, STORE_CACHE=True, USE_ZIP=True, CACHE_EXPIRE=10)

        assert settings.cache_dir == settings.CACHE_DIR
        assert settings.read_enabled is False
        assert settings.write_enabled is True
        assert settings.compress is True
        assert settings.expire_seconds == 10

    def test_convert_requires_compression(self, make_settings) -> None:
        """Test that conversion on read only applies when compressing."""
        assert make_settings(USE_ZIP=True, CONVERT_TO_ZIP=True).convert_on_read is True
        assert make_settings(USE_ZIP=False, CONVERT_TO_ZIP=True).convert_on_read is False

    def test_settings_are_frozen(self, make_settings) -> None:
        """Test that settings cannot be changed after construction."""
        settings = make_settings()
        with pytest.raises(ValidationError):
            settings.USE_CACHE = False

    def test_model_copy_derives_variant(self, make_settings) -> None:
        """Test that model_copy produces an independent variant."""
        settings = make_settings()
        variant = settings.model_copy(update={"USE_CACHE": False})

        assert settings.USE_CACHE is True
        assert variant.USE_CACHE is False

    def test_display(self, make_settings) -> None:
        """Test the display dict."""
        display = make_settings(CACHE_EXPIRE=42).display()

        assert display["CACHE_EXPIRE"] == 42
        assert isinstance(display["CACHE_DIR"], str)
        assert set(display) == {
            "CACHE_DIR",
            "USE_CACHE",
            "STORE_CACHE",
            "USE_ZIP",
            "CONVERT_TO_ZIP",
            "CACHE_EXPIRE",
            "LOG_LEVEL",
        }


class TestSettingsCache:
    """Tests for settings caching."""

    def test_get_settings_returns_same_instance(self) -> None:
        """Test that get_settings returns cached instance."""
        settings1 = get_settings()
        settings2 = get_settings()

        assert settings1 is settings2

    def test_clear_settings_cache_clears_cache(self) -> None:
        """Test that clear_settings_cache clears the cache."""
        settings1 = get_settings()
        clear_settings_cache()
        settings2 = get_settings()

        assert settings1 is not settings2
