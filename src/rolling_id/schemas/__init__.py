"""Pydantic schemas for rolling-id."""

from .record import PersistedRecord

__all__ = ["PersistedRecord"]
