"""
Custom exception hierarchy for tempstore.

All exceptions inherit from StoreError, which provides optional context
for structured error handling and logging.
"""

from __future__ import annotations

from typing import Any


class StoreError(Exception):
    """Base exception for all tempstore errors.

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


class ConfigurationError(StoreError):
    """Raised when configuration is invalid or missing.

    Examples:
        - Backing file path pointing at a directory
    """

    pass


class DatabaseCorruptError(StoreError):
    """Raised when the backing file exists but does not hold a JSON object.

    This is the only failure a provider surfaces at load time; a missing
    file is recovered to an empty database instead.

    Context should include:
        - path: The backing file path
        - error: The parser error message, if any
    """

    pass


class ValueEncodingError(StoreError):
    """Raised when a value cannot be mapped to a tagged entry.

    Context should include:
        - type: The Python type that was rejected
        - mode: The encoding mode ("tagged" or "legacy")
    """

    pass
