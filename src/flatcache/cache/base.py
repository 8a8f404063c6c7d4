"""
Base classes for caching.

This module defines:
- CacheProtocol: Abstract interface every cache backend implements
- NullCache: Backend that stores nothing, for when caching is switched off

The interface follows the usual simple-cache contract: get/set/delete/clear/
has plus batch forms. Implementations never raise on per-key failures; they
report a miss or a False result instead.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from datetime import timedelta
from typing import Any

CacheValue = bytes | str
TTL = int | timedelta | None


class CacheProtocol(ABC):
    """Abstract interface for cache implementations."""

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """Get a value from the cache, or default on a miss."""
        ...

    @abstractmethod
    def set(self, key: str, value: CacheValue, ttl: TTL = None) -> bool:
        """Store a value in the cache. Returns True on success."""
        ...

    @abstractmethod
    def has(self, key: str) -> bool:
        """Check if a key exists in the cache."""
        ...

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Delete a value from the cache. Deleting a missing key succeeds."""
        ...

    @abstractmethod
    def clear(self) -> bool:
        """Remove every entry from the cache."""
        ...

    def get_multiple(self, keys: Iterable[str], default: Any = None) -> dict[str, Any]:
        """Get several values at once, keyed by the requested keys."""
        return {key: self.get(key, default) for key in keys}

    def set_multiple(
        self,
        values: Mapping[str, CacheValue] | Iterable[tuple[str, CacheValue]],
        ttl: TTL = None,
    ) -> bool:
        """Store several values. Every pair is attempted even after a failure."""
        items = values.items() if isinstance(values, Mapping) else values
        ok = True
        for key, value in items:
            ok = self.set(key, value, ttl) and ok
        return ok

    def delete_multiple(self, keys: Iterable[str]) -> bool:
        """Delete several keys. Every key is attempted even after a failure."""
        ok = True
        for key in keys:
            ok = self.delete(key) and ok
        return ok


class NullCache(CacheProtocol):
    """Cache that never stores anything.

    Every read is a miss and every write is refused, which lets callers keep
    a single code path whether or not caching is configured.
    """

    def get(self, key: str, default: Any = None) -> Any:
        return default

    def set(self, key: str, value: CacheValue, ttl: TTL = None) -> bool:
        return False

    def has(self, key: str) -> bool:
        return False

    def delete(self, key: str) -> bool:
        return True

    def clear(self) -> bool:
        return True
