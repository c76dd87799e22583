"""Seed chain services for rolling-id."""

from .chain import SeedChain
from .persistence import Found, LoadResult, Malformed, NotFound, PersistenceStore
from .rotating_store import RotatingIdStore, get_rotating_id_store

__all__ = [
    "SeedChain",
    "PersistenceStore",
    "LoadResult", "Found", "NotFound", "Malformed",
    "RotatingIdStore",
    "get_rotating_id_store",
]
