# src/rolling_id/core/seed.py
"""Seed and identifier primitives.

A :class:`Seed` is a secret anchored to a step-aligned timestamp. Advancing
it by one step is deterministic and one-way: the successor seed and the
identifier it publishes are both derived from the current seed through
BLAKE3 key derivation under separate contexts, so neither reveals the seed
that produced them.

Text formats:
    Seed: ``"<timestamp>:<64 hex chars>"``
    Id:   ``"<32 hex chars>"``
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass, field

from rolling_id.utils.hash import IDENTIFIER_CONTEXT, SEED_STEP_CONTEXT, derive_key

SEED_VALUE_BYTES = 32
ID_VALUE_BYTES = 16


def _decode_hex(data: str, expected_length: int, label: str) -> bytes:
    try:
        decoded = bytes.fromhex(data)
    except ValueError as err:
        raise ValueError(f"Invalid {label} hex encoding: {err}") from err
    if len(decoded) != expected_length:
        raise ValueError(f"{label} must be {expected_length} bytes, got {len(decoded)}")
    return decoded


@dataclass(frozen=True, slots=True)
class Id:
    """Externally visible rotating identifier."""

    value: bytes

    def serialize(self) -> str:
        return self.value.hex()

    @classmethod
    def parse(cls, text: str) -> Id:
        return cls(_decode_hex(text.strip(), ID_VALUE_BYTES, "Identifier"))

    def __str__(self) -> str:
        return self.serialize()


@dataclass(frozen=True, slots=True, order=True)
class Seed:
    """Immutable chain state anchored to ``timestamp``.

    Seeds compare by timestamp first. ``value`` is excluded from ``repr`` so
    secrets do not end up in logs or tracebacks by accident.
    """

    timestamp: int
    value: bytes = field(repr=False)

    @classmethod
    def fresh_random(cls, timestamp: int) -> Seed:
        """Return a seed at ``timestamp`` drawn from the OS CSPRNG."""
        return cls(timestamp, secrets.token_bytes(SEED_VALUE_BYTES))

    def step_forward(self, step_size: int) -> tuple[Seed, Id]:
        """Return ``(successor, identifier)`` one step after this seed.

        The identifier is the one the successor publishes, so
        ``successor.current_id()`` always equals the returned ``Id``.
        """
        successor = Seed(
            self.timestamp + step_size,
            derive_key(SEED_STEP_CONTEXT, self.value, SEED_VALUE_BYTES),
        )
        return successor, successor.current_id()

    def current_id(self) -> Id:
        """Return the identifier published for this seed's time bucket."""
        return Id(derive_key(IDENTIFIER_CONTEXT, self.value, ID_VALUE_BYTES))

    def serialize(self) -> str:
        return f"{self.timestamp}:{self.value.hex()}"

    @classmethod
    def parse(cls, text: str) -> Seed:
        """Parse the output of :meth:`serialize`.

        Raises:
            ValueError: If the text is not a ``timestamp:hex`` pair.
        """
        timestamp_part, sep, value_part = text.strip().partition(":")
        if not sep:
            raise ValueError("Seed text must be '<timestamp>:<hex>'")
        try:
            timestamp = int(timestamp_part)
        except ValueError as err:
            raise ValueError(f"Invalid seed timestamp: {timestamp_part!r}") from err
        return cls(timestamp, _decode_hex(value_part, SEED_VALUE_BYTES, "Seed"))
