"""
Exception hierarchy for flatcache.

All exceptions inherit from FlatCacheError, which carries optional context
for structured error handling and logging.

Only construction can fail loudly. Per-operation filesystem errors are
handled inside the cache and degrade to a miss or a False result.
"""

from __future__ import annotations

from typing import Any


class FlatCacheError(Exception):
    """Base exception for all flatcache errors.

    Attributes:
        message: Human-readable error message.
        context: Optional structured context for logging/debugging.
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({ctx_str})"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, context={self.context!r})"


class ConfigurationError(FlatCacheError):
    """Raised when the cache cannot be used with the given configuration.

    Examples:
        - Cache directory does not exist and cannot be created
        - Cache directory lacks write permission while writes are enabled

    Context should include:
        - cache_dir: The configured cache directory
    """

    pass
