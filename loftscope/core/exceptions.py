"""Loftscope custom exceptions.

The analysis core reports problems as data (``None``, empty results,
diagnostics). These exceptions only travel between the outer surfaces and the
helpers they call directly.
"""

from __future__ import annotations

from typing import Any


class LoftscopeError(Exception):
    """Base exception for Loftscope errors."""


class SourceReadError(LoftscopeError):
    """A source file could not be read or decoded."""


class SymbolNotFoundError(LoftscopeError):
    """No entity with the requested name exists in the file."""


class ConfigError(LoftscopeError):
    """Configuration could not be loaded or validated."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.details = details or {}

    @classmethod
    def parse_error(cls, path: str, reason: str) -> ConfigError:
        return cls(
            f"Failed to parse config at {path}: {reason}",
            {"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> ConfigError:
        return cls(
            f"Invalid value for '{field}': {reason}",
            {"field": field, "value": str(value), "reason": reason},
        )
