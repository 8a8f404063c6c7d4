"""
File-based cache.

Each entry is a single file in one flat directory, named after the
sanitized key. Entries are optionally gzip-compressed. There is no
per-entry metadata: the file's modification time is the only expiry
signal, and expired files are only removed by an explicit purge pass, so a
read after expiry still returns the stale value until purge runs.

Known limitations:
- Sanitization is lossy. Keys that differ only in characters replaced by
  sanitize_key() share one file.
- Writes overwrite the file in place rather than going through a temp file
  and rename, so a concurrent reader may observe a partial write.
- There is no locking. Two writers to one key race and the last one wins.
"""

from __future__ import annotations

import gzip
import logging
import os
import time
import zlib
from pathlib import Path
from typing import Any

from flatcache.cache.base import TTL, CacheProtocol, CacheValue
from flatcache.config import Settings
from flatcache.exceptions import ConfigurationError
from flatcache.logging import ContextLogger, get_logger, log_context
from flatcache.types import PLACEHOLDER_NAME, CacheEntry, is_gzip

_UNSAFE_KEY_CHARS = str.maketrans({c: "." for c in '/\\?%*:|"<>'})


def sanitize_key(key: str) -> str:
    """Replace characters the filesystem won't like with '.'.

    Not reversible: "a/b" and "a:b" both map to "a.b".
    """
    return key.translate(_UNSAFE_KEY_CHARS)


def _is_file(path: Path) -> bool:
    # Path.is_file() still raises for e.g. ENAMETOOLONG; such a path holds no entry.
    try:
        return path.is_file()
    except (OSError, ValueError):
        return False


class FileCache(CacheProtocol):
    """Flat-directory cache of (optionally gzipped) files.

    Per-key failures never raise. A failed read is a miss (the default is
    returned) and a failed write or delete returns False. The only errors
    raised are ConfigurationError from the constructor.
    """

    def __init__(
        self,
        settings: Settings,
        logger: ContextLogger | logging.Logger | None = None,
        purge_on_init: bool = True,
    ) -> None:
        """Initialize the cache and purge expired entries.

        Args:
            settings: Cache configuration, fixed for the cache's lifetime.
            logger: Optional logger; a ContextLogger or a stdlib Logger.
                Defaults to the module logger.
            purge_on_init: Run a purge pass once the directory is verified.

        Raises:
            ConfigurationError: If the cache directory cannot be created, or
                writes are enabled and the directory is not writable.
        """
        self.settings = settings
        self._logger = logger if logger is not None else get_logger(__name__)
        self.cache_dir = Path(settings.cache_dir)

        if (settings.read_enabled or settings.write_enabled) and not self.cache_dir.is_dir():
            try:
                self.cache_dir.mkdir(mode=0o700, parents=True, exist_ok=True)
            except OSError as e:
                self._fail(f"Configured cache directory [{self.cache_dir}] does not exist!", e)
            if not self.cache_dir.is_dir():
                self._fail(f"Configured cache directory [{self.cache_dir}] does not exist!")

        if settings.write_enabled and not os.access(self.cache_dir, os.W_OK):
            self._fail(f"Configured cache directory [{self.cache_dir}] lacks write permission!")

        if purge_on_init:
            self.purge()

    def _fail(self, message: str, cause: OSError | None = None) -> None:
        context: dict[str, Any] = {"cache_dir": str(self.cache_dir)}
        if cause is not None:
            context["error"] = str(cause)
        self._logger.critical(message, extra=context)
        raise ConfigurationError(message, context=context) from cause

    def path_for(self, key: str) -> Path:
        """Get the file path that stores a key."""
        return self.cache_dir / sanitize_key(key)

    def get(self, key: str, default: Any = None) -> Any:
        """Get the cached bytes for a key.

        With compression enabled, both gzip and plain files are accepted;
        plain files are optionally rewritten as gzip (see convert_on_read).

        Args:
            key: Logical cache key.
            default: Returned on a miss, when reads are disabled, or when
                the file cannot be read.

        Returns:
            The cached bytes, or default.
        """
        if not self.settings.read_enabled:
            return default

        path = self.path_for(key)
        if not _is_file(path):
            self._logger.debug("Cache miss for [%s]", key)
            return default

        try:
            raw = path.read_bytes()
        except OSError as e:
            self._logger.debug("Cache read failed for [%s]: %s", key, e)
            return default

        self._logger.debug("Cache hit for [%s]", key)

        if not self.settings.compress:
            return raw

        if is_gzip(raw):
            try:
                return gzip.decompress(raw)
            except (OSError, EOFError, zlib.error) as e:
                self._logger.debug("Cache entry [%s] is not valid gzip: %s", key, e)
                return default

        if self.settings.convert_on_read:
            self._convert_to_gzip(path, raw)
        return raw

    def _convert_to_gzip(self, path: Path, raw: bytes) -> None:
        # Writes during a read; the read result stands regardless.
        try:
            path.write_bytes(gzip.compress(raw))
        except (OSError, ValueError) as e:
            self._logger.debug("Could not convert [%s] to gzip: %s", path.name, e)

    def set(self, key: str, value: CacheValue, ttl: TTL = None) -> bool:
        """Store a value under a key, overwriting any existing entry.

        Args:
            key: Logical cache key.
            value: Bytes to store; str values are encoded as UTF-8. Any other
                type is refused (returns False) rather than coerced.
            ttl: Accepted for interface compatibility and ignored. Expiry is
                global (CACHE_EXPIRE) and based on file modification time.

        Returns:
            True if the entry was fully written, False otherwise.
        """
        if not self.settings.write_enabled:
            return False

        path = self.path_for(key)
        self._logger.debug("Writing key [%s] to [%s]", key, path)
        if ttl is not None:
            self._logger.debug("Ignoring per-key ttl for [%s]", key)

        if isinstance(value, str):
            data = value.encode("utf-8")
        elif isinstance(value, (bytes, bytearray, memoryview)):
            data = bytes(value)
        else:
            self._logger.debug("Refusing non-bytes value of type %s for [%s]", type(value).__name__, key)
            return False

        if self.settings.compress:
            data = gzip.compress(data)

        try:
            path.write_bytes(data)
        except (OSError, ValueError) as e:
            self._logger.debug("Cache write failed for [%s]: %s", key, e)
            return False
        return True

    def has(self, key: str) -> bool:
        """Check whether an entry file exists. Expiry is not considered."""
        return _is_file(self.path_for(key))

    def delete(self, key: str) -> bool:
        """Delete an entry. Returns True if it is gone afterwards."""
        path = self.path_for(key)
        if not _is_file(path):
            return True
        try:
            path.unlink()
        except FileNotFoundError:
            return True
        except OSError as e:
            self._logger.debug("Cache delete failed for [%s]: %s", key, e)
            return False
        return True

    def _scan(self) -> list[os.DirEntry[str]] | None:
        """List entry files, skipping the placeholder and subdirectories.

        Returns None if the directory cannot be read.
        """
        try:
            with os.scandir(self.cache_dir) as it:
                found = list(it)
        except OSError as e:
            self._logger.debug("Cannot open cache directory [%s]: %s", self.cache_dir, e)
            return None

        files = []
        for entry in found:
            if entry.name == PLACEHOLDER_NAME:
                continue
            try:
                if entry.is_dir():
                    continue
            except OSError:
                continue
            files.append(entry)
        return files

    def clear(self) -> bool:
        """Remove every entry except the placeholder file.

        Returns:
            False if the directory cannot be read or any removal failed.
        """
        with log_context(cache_dir=self.cache_dir, operation="clear"):
            files = self._scan()
            if files is None:
                return False

            ok = True
            for entry in files:
                try:
                    os.unlink(entry.path)
                except OSError as e:
                    self._logger.debug("Could not remove [%s]: %s", entry.name, e)
                    ok = False
            return ok

    def purge(self) -> int:
        """Remove entries older than CACHE_EXPIRE seconds.

        Does nothing when writes are disabled or expiry is 0. Best effort:
        an unreadable directory or an undeletable file is logged and skipped.

        Returns:
            Number of entries removed.
        """
        expire = self.settings.expire_seconds
        if not self.settings.write_enabled or expire == 0:
            return 0

        with log_context(cache_dir=self.cache_dir, operation="purge"):
            self._logger.debug("Purging old cache entries")
            files = self._scan()
            if files is None:
                return 0

            now = time.time()
            removed = 0
            for entry in files:
                try:
                    mtime = entry.stat().st_mtime
                except OSError:
                    continue
                if now - mtime <= expire:
                    continue
                try:
                    os.unlink(entry.path)
                except OSError as e:
                    self._logger.debug("Could not purge [%s]: %s", entry.name, e)
                    continue
                removed += 1

            self._logger.debug("Purged %d cache entries", removed)
            return removed

    def entries(self) -> list[CacheEntry]:
        """List the entries currently on disk, sorted by name."""
        files = self._scan()
        if files is None:
            return []

        result = []
        for entry in files:
            try:
                stat = entry.stat()
                with open(entry.path, "rb") as f:
                    head = f.read(2)
            except OSError:
                continue
            result.append(
                CacheEntry(
                    name=entry.name,
                    path=Path(entry.path),
                    size=stat.st_size,
                    mtime=stat.st_mtime,
                    compressed=is_gzip(head),
                )
            )
        return sorted(result, key=lambda e: e.name)
