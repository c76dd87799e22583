"""Rotating identifiers derived from a windowed one-way seed chain."""

from rolling_id.core.errors import (
    ConfigurationError,
    LoadError,
    LoadErrorKind,
    PersistError,
    RollingIdError,
)
from rolling_id.core.seed import Id, Seed
from rolling_id.services import PersistenceStore, RotatingIdStore, SeedChain

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "Id",
    "LoadError",
    "LoadErrorKind",
    "PersistError",
    "PersistenceStore",
    "RollingIdError",
    "RotatingIdStore",
    "Seed",
    "SeedChain",
]
