# src/rolling_id/core/errors.py
"""Exception hierarchy for the rolling identifier store."""

from __future__ import annotations

from enum import Enum


class RollingIdError(Exception):
    """Base class for all rolling-id failures."""


class ConfigurationError(RollingIdError, ValueError):
    """Raised when a step size or window is outside its valid range."""


class LoadErrorKind(str, Enum):
    """Reasons a persisted chain could not be loaded."""

    MISSING = "missing"
    TRUNCATED = "truncated"
    MALFORMED = "malformed"


class LoadError(RollingIdError):
    """Raised when the persisted record cannot be turned back into a chain."""

    def __init__(self, kind: LoadErrorKind, location: str, reason: str | None = None) -> None:
        self.kind = kind
        self.location = location
        self.reason = reason
        message = f"Could not load seed record from {location} ({kind.value})"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class PersistError(RollingIdError):
    """Raised when writing or renaming the seed record fails."""

    def __init__(self, location: str, reason: str) -> None:
        self.location = location
        self.reason = reason
        super().__init__(f"Could not persist seed record to {location}: {reason}")


def validate_step_size(step_size: int) -> int:
    """Return ``step_size`` if positive, otherwise raise ConfigurationError."""
    if isinstance(step_size, bool) or not isinstance(step_size, int):
        raise ConfigurationError(f"Step size must be an integer, got {step_size!r}")
    if step_size <= 0:
        raise ConfigurationError(f"Step size must be positive, got {step_size}")
    return step_size


def validate_window(window: int) -> int:
    """Return ``window`` if non-negative, otherwise raise ConfigurationError."""
    if isinstance(window, bool) or not isinstance(window, int):
        raise ConfigurationError(f"Window must be an integer, got {window!r}")
    if window < 0:
        raise ConfigurationError(f"Window must not be negative, got {window}")
    return window
