# src/rolling_id/utils/hash.py
"""Hashing helpers built on BLAKE3's key-derivation mode."""

from __future__ import annotations

import blake3

SEED_STEP_CONTEXT = "rolling-id 2024 seed step"
IDENTIFIER_CONTEXT = "rolling-id 2024 identifier"


def derive_key(context: str, material: bytes, length: int = 32) -> bytes:
    """Derive ``length`` bytes from ``material`` under a fixed context string.

    Distinct contexts yield independent outputs for the same material, which
    keeps the seed successor and the published identifier unrelated.
    """
    return blake3.blake3(material, derive_key_context=context).digest(length=length)
