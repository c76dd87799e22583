# src/rolling_id/services/rotating_store.py
"""Persistent, cached front-end for a windowed seed chain."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable

from rolling_id.core.errors import validate_step_size, validate_window
from rolling_id.core.seed import Id, Seed
from rolling_id.core.settings import Settings, settings as default_settings
from rolling_id.services.chain import SeedChain, SeedFactory
from rolling_id.services.persistence import Found, Malformed, NotFound, PersistenceStore
from rolling_id.utils.time import current_timestamp, round_down_timestamp

logger = logging.getLogger(__name__)

Clock = Callable[[], int]


class RotatingIdStore:
    """Issue the current rotating identifier for one storage location.

    Every cache miss performs exactly one load, step and save cycle; the disk
    record is authoritative. The in-memory cache only skips repeated cycles
    within the same time bucket and is lost on restart.
    """

    def __init__(
        self,
        location: str | os.PathLike[str],
        step_size: int,
        window: int,
        *,
        clock: Clock = current_timestamp,
        seed_factory: SeedFactory = Seed.fresh_random,
    ) -> None:
        self._step_size = validate_step_size(step_size)
        self._window = validate_window(window)
        self._clock = clock
        self._seed_factory = seed_factory
        self._persistence = PersistenceStore(location)
        self._cached_timestamp: int | None = None
        self._cached_id: Id | None = None

        match self._persistence.load():
            case Found():
                logger.debug("Using existing seed record at %s", self.location)
            case NotFound():
                logger.info("No seed record at %s; starting a new chain", self.location)
                self._bootstrap()
            case Malformed(kind=kind, reason=reason):
                logger.warning(
                    "Discarding %s seed record at %s (%s); starting a new chain",
                    kind.value,
                    self.location,
                    reason,
                )
                self._bootstrap()

    @property
    def location(self) -> str:
        return self._persistence.location

    @property
    def step_size(self) -> int:
        return self._step_size

    @property
    def window(self) -> int:
        return self._window

    def _rounded_now(self) -> int:
        return round_down_timestamp(self._clock(), self._step_size)

    def _new_chain(self, now: int) -> SeedChain:
        return SeedChain.create_new(
            now,
            self._step_size,
            self._window,
            seed_factory=self._seed_factory,
        )

    def _bootstrap(self) -> None:
        self._persistence.save(self._new_chain(self._rounded_now()))

    def get_current_id(self) -> Id:
        """Return the identifier for the current time bucket.

        Raises:
            LoadError: If the stored record has gone missing or is corrupt.
            PersistError: If the advanced chain cannot be written back.
        """
        now = self._rounded_now()
        if self._cached_id is not None and now == self._cached_timestamp:
            return self._cached_id

        chain = self._persistence.require()
        identifier = chain.step_to(now, self._step_size)
        self._persistence.save(chain)

        self._cached_timestamp = now
        self._cached_id = identifier
        return identifier

    def change_window(self, new_window: int) -> None:
        """Change how much history the stored chain retains.

        Shrinking discards seeds immediately; a later increase does not bring
        them back. The identifier cache is kept since identifiers do not
        depend on the window.
        """
        validate_window(new_window)
        if new_window == self._window:
            return

        chain = self._persistence.require()
        chain.change_window(new_window, self._step_size)
        self._persistence.save(chain)
        self._window = new_window
        logger.info("Changed window for %s to %d seconds", self.location, new_window)

    def get_seed_and_rotate(self) -> Seed:
        """Disclose the oldest retained seed and replace the chain.

        The chain is first stepped to now, so the disclosed seed is the oldest
        one the window allows at this moment. A new, unrelated chain is then
        persisted and the cache is dropped.
        """
        now = self._rounded_now()
        if not self._persistence.exists():
            # Nothing to disclose; hand back a value that discloses nothing.
            disclosed = self._seed_factory(
                round_down_timestamp(now - self._window, self._step_size)
            )
        else:
            chain = self._persistence.require()
            chain.step_to(now, self._step_size)
            disclosed = chain.oldest

        self._persistence.save(self._new_chain(now))
        self._cached_timestamp = None
        self._cached_id = None
        logger.info(
            "Rotated seed chain at %s; disclosed seed from %d",
            self.location,
            disclosed.timestamp,
        )
        return disclosed

    def make_seed_current(self) -> None:
        """Bring the stored chain up to the current bucket."""
        self.get_current_id()


def get_rotating_id_store(config: Settings | None = None) -> RotatingIdStore:
    """Return a store configured from application settings."""
    config = config or default_settings
    return RotatingIdStore(
        config.storage_location,
        config.step_size_seconds,
        config.window_seconds,
    )
