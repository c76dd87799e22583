# src/rolling_id/services/chain.py
"""Windowed seed chain.

A chain holds two seeds: ``newest``, which tracks the current time bucket
and produces identifiers, and ``oldest``, the earliest seed still retained.
Anyone handed ``oldest`` can regenerate every identifier from its timestamp
up to ``newest``. ``oldest`` is pulled forward whenever the gap exceeds the
window.

The window check runs after each advance of ``newest``, so the gap may reach
``window + step_size`` before ``oldest`` catches up. Retained history is
bounded by ``window + step_size``, not by ``window``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from rolling_id.core.errors import validate_step_size, validate_window
from rolling_id.core.seed import Id, Seed
from rolling_id.schemas.record import PersistedRecord
from rolling_id.utils.time import round_down_timestamp

logger = logging.getLogger(__name__)

SeedFactory = Callable[[int], Seed]


class SeedChain:
    """Two-seed sliding window over a one-way seed chain."""

    def __init__(self, oldest: Seed, newest: Seed, window: int) -> None:
        if oldest.timestamp > newest.timestamp:
            raise ValueError("oldest seed must not be newer than newest seed")
        self._oldest = oldest
        self._newest = newest
        self._window = validate_window(window)

    @classmethod
    def create_new(
        cls,
        now: int,
        step_size: int,
        window: int,
        *,
        seed_factory: SeedFactory = Seed.fresh_random,
    ) -> SeedChain:
        """Start an unrelated chain whose newest seed sits at ``now``.

        The oldest seed is drawn at ``now - window`` rounded down to the step
        grid and the newest seed is stepped up from it, so the fresh chain
        covers at least a full window and ``newest`` lands exactly on ``now``.
        With a window that is not a multiple of the step the gap starts
        between ``window`` and ``window + step_size``.
        """
        validate_step_size(step_size)
        validate_window(window)
        now = round_down_timestamp(now, step_size)

        oldest = seed_factory(round_down_timestamp(now - window, step_size))
        newest = oldest
        while newest.timestamp < now:
            newest, _ = newest.step_forward(step_size)
        return cls(oldest, newest, window)

    @classmethod
    def from_record(cls, record: PersistedRecord) -> SeedChain:
        return cls(Seed.parse(record.oldest), Seed.parse(record.newest), record.window)

    def to_record(self) -> PersistedRecord:
        return PersistedRecord(
            window=self._window,
            oldest=self._oldest.serialize(),
            newest=self._newest.serialize(),
        )

    @property
    def oldest(self) -> Seed:
        return self._oldest

    @property
    def newest(self) -> Seed:
        return self._newest

    @property
    def window(self) -> int:
        return self._window

    @property
    def span(self) -> int:
        """Seconds between the oldest and newest retained seeds."""
        return self._newest.timestamp - self._oldest.timestamp

    def step_to(self, now: int, step_size: int) -> Id:
        """Advance the chain to the bucket containing ``now``.

        Returns the identifier for that bucket. Queries at or before the
        newest seed's bucket do not mutate the chain and return the
        identifier already published for it, so the clock never rewinds
        the chain.
        """
        now = round_down_timestamp(now, step_size)
        if self._newest.timestamp >= now:
            if self._newest.timestamp > now:
                logger.warning(
                    "Clock regression: requested bucket %d is before newest seed at %d",
                    now,
                    self._newest.timestamp,
                )
            return self._newest.current_id()

        identifier = self._newest.current_id()
        while self._newest.timestamp < now:
            self._newest, identifier = self._newest.step_forward(step_size)
            if self.span > self._window:
                self._oldest, _ = self._oldest.step_forward(step_size)
        return identifier

    def change_window(self, new_window: int, step_size: int) -> None:
        """Set the window and drop history older than it allows.

        Shrinking is irreversible: widening the window later cannot bring
        back seeds that were already stepped past.
        """
        self._window = validate_window(new_window)
        while self.span > self._window:
            self._oldest, _ = self._oldest.step_forward(step_size)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SeedChain):
            return NotImplemented
        return (
            self._oldest == other._oldest
            and self._newest == other._newest
            and self._window == other._window
        )

    def __repr__(self) -> str:
        return (
            f"SeedChain(oldest_ts={self._oldest.timestamp}, "
            f"newest_ts={self._newest.timestamp}, window={self._window})"
        )
