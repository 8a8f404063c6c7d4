"""
Pytest configuration and fixtures for flatcache tests.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Callable, Generator

import pytest

from flatcache.config import Settings, clear_settings_cache


class RecordingLogger:
    """Logger stand-in that records (level, message, fields) tuples."""

    def __init__(self) -> None:
        self.records: list[tuple[str, str, dict[str, Any]]] = []

    def _record(self, level: str, msg: str, *args: Any, **kwargs: Any) -> None:
        kwargs.pop("exc_info", None)
        self.records.append((level, msg % args if args else msg, kwargs))

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._record("debug", msg, *args, **kwargs)

    def critical(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._record("critical", msg, *args, **kwargs)

    def messages(self, level: str) -> list[str]:
        return [msg for lvl, msg, _ in self.records if lvl == level]


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    """Provide a cache directory path that does not exist yet."""
    return tmp_path / "cache"


@pytest.fixture
def make_settings(cache_dir: Path) -> Callable[..., Settings]:
    """Build Settings pointing at cache_dir, ignoring any .env file.

    Defaults are plain (uncompressed) storage with a one hour expiry;
    keyword arguments override individual fields.
    """

    def _make(**overrides: Any) -> Settings:
        values: dict[str, Any] = {
            "CACHE_DIR": cache_dir,
            "USE_CACHE": True,
            "STORE_CACHE": True,
            "USE_ZIP": False,
            "CONVERT_TO_ZIP": False,
            "CACHE_EXPIRE": 3600,
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _make


@pytest.fixture
def recording_logger() -> RecordingLogger:
    """Provide a logger that records messages for assertions."""
    return RecordingLogger()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Strip FLATCACHE_* variables and reset the settings cache around each test."""
    for name in list(os.environ):
        if name.startswith("FLATCACHE_"):
            monkeypatch.delenv(name, raising=False)
    clear_settings_cache()
    yield
    clear_settings_cache()
