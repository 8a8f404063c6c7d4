"""flatcache: a flat-directory file cache with optional gzip and mtime expiry."""

from flatcache.cache.base import CacheProtocol, NullCache
from flatcache.cache.file_cache import FileCache, sanitize_key
from flatcache.config import Settings, get_settings
from flatcache.exceptions import ConfigurationError, FlatCacheError
from flatcache.types import CacheEntry

__version__ = "0.1.0"

__all__ = [
    "CacheEntry",
    "CacheProtocol",
    "ConfigurationError",
    "FileCache",
    "FlatCacheError",
    "NullCache",
    "Settings",
    "get_settings",
    "sanitize_key",
]
