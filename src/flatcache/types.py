"""
Core types for flatcache.

A cache entry has no metadata of its own: it is a file in the cache
directory, and its modification time is the only expiry signal. CacheEntry
is a read-only snapshot of such a file, used for inspection and listing.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path

GZIP_MAGIC = b"\x1f\x8b"

# Keeps an otherwise empty cache directory present in packaging/VCS.
PLACEHOLDER_NAME = ".placeholder"


def is_gzip(data: bytes) -> bool:
    """Check whether data starts with the gzip magic header."""
    return data[:2] == GZIP_MAGIC


@dataclass(frozen=True)
class CacheEntry:
    """Snapshot of one cache file."""

    name: str
    path: Path
    size: int
    mtime: float
    compressed: bool

    def age(self, now: float | None = None) -> float:
        """Seconds since the entry was last written."""
        if now is None:
            now = time.time()
        return now - self.mtime

    def is_expired(self, expire_seconds: int, now: float | None = None) -> bool:
        """Whether a purge pass with this threshold would remove the entry.

        An expiry of 0 means entries never expire.
        """
        if expire_seconds == 0:
            return False
        return self.age(now) > expire_seconds
