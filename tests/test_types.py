"""
Tests for core types.
"""

from __future__ import annotations

import gzip
from pathlib import Path

from flatcache.types import CacheEntry, is_gzip


def make_entry(mtime: float) -> CacheEntry:
    return CacheEntry(name="k", path=Path("k"), size=1, mtime=mtime, compressed=False)


class TestIsGzip:
    """Tests for gzip magic detection."""

    def test_detects_gzip(self) -> None:
        assert is_gzip(gzip.compress(b"data"))

    def test_plain_bytes(self) -> None:
        assert not is_gzip(b"<html>")
        assert not is_gzip(b"\x1f")
        assert not is_gzip(b"")


class TestCacheEntry:
    """Tests for CacheEntry age and expiry."""

    def test_age(self) -> None:
        """Test age relative to a fixed now."""
        assert make_entry(mtime=1000.0).age(now=1250.0) == 250.0

    def test_expired_strictly_greater(self) -> None:
        """Test that an entry exactly at the threshold is kept."""
        entry = make_entry(mtime=1000.0)

        assert entry.is_expired(100, now=1100.0) is False
        assert entry.is_expired(100, now=1101.0) is True

    def test_zero_expiry_never_expires(self) -> None:
        """Test that an expiry of 0 disables expiry."""
        assert make_entry(mtime=0.0).is_expired(0, now=1e12) is False
