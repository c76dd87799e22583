# src/rolling_id/services/persistence.py
"""Durable, crash-safe storage for a single seed chain."""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

from pydantic import ValidationError

from rolling_id.core.errors import LoadError, LoadErrorKind, PersistError
from rolling_id.schemas.record import RECORD_FIELD_COUNT, PersistedRecord
from rolling_id.services.chain import SeedChain

logger = logging.getLogger(__name__)

TEMP_SUFFIX = ".tmp"
# Longest accepted record line; real lines are under 100 characters.
MAX_LINE_LENGTH = 256


@dataclass(frozen=True, slots=True)
class Found:
    """A complete record was read and parsed."""

    chain: SeedChain


@dataclass(frozen=True, slots=True)
class NotFound:
    """No record exists at the location."""


@dataclass(frozen=True, slots=True)
class Malformed:
    """A record exists but could not be accepted."""

    kind: LoadErrorKind
    reason: str


LoadResult = Found | NotFound | Malformed


class PersistenceStore:
    """Atomic load/save of a :class:`SeedChain` to a three-line text file.

    Saves go to a temporary file in the destination directory which is then
    renamed over the destination, so readers see either the previous record
    or the new one. No locking is done; one writer per location is assumed.
    """

    def __init__(self, location: str | os.PathLike[str]) -> None:
        self._path = Path(location)

    @property
    def location(self) -> str:
        return str(self._path)

    def exists(self) -> bool:
        return self._path.exists()

    def load(self) -> LoadResult:
        """Read the record, reporting the outcome as a tagged result."""
        try:
            with self._path.open("r", encoding="utf-8") as infile:
                lines = [infile.readline(MAX_LINE_LENGTH) for _ in range(RECORD_FIELD_COUNT)]
        except FileNotFoundError:
            return NotFound()
        except (OSError, UnicodeDecodeError) as err:
            return Malformed(LoadErrorKind.MALFORMED, str(err))

        if any(len(line) >= MAX_LINE_LENGTH and not line.endswith("\n") for line in lines):
            return Malformed(
                LoadErrorKind.MALFORMED,
                f"line longer than {MAX_LINE_LENGTH} characters",
            )

        # readline() returns "" once the file is exhausted
        present = [line for line in lines if line]
        if len(present) < RECORD_FIELD_COUNT:
            return Malformed(
                LoadErrorKind.TRUNCATED,
                f"expected {RECORD_FIELD_COUNT} lines, found {len(present)}",
            )

        try:
            record = PersistedRecord.from_lines(lines)
            chain = SeedChain.from_record(record)
        except (ValidationError, ValueError) as err:
            return Malformed(LoadErrorKind.MALFORMED, str(err))

        logger.debug("Loaded seed record from %s", self._path)
        return Found(chain)

    def require(self) -> SeedChain:
        """Load the chain or raise :class:`LoadError`.

        Raises:
            LoadError: With kind ``missing``, ``truncated`` or ``malformed``.
        """
        result = self.load()
        match result:
            case Found(chain=chain):
                return chain
            case NotFound():
                raise LoadError(LoadErrorKind.MISSING, self.location)
            case Malformed(kind=kind, reason=reason):
                raise LoadError(kind, self.location, reason)
        raise AssertionError(f"Unhandled load result: {result!r}")  # pragma: no cover

    def save(self, chain: SeedChain) -> None:
        """Atomically replace the stored record with ``chain``.

        Raises:
            PersistError: If writing, flushing or renaming fails. A temporary
                file left behind by a failed save is not cleaned up.
        """
        payload = chain.to_record().to_text()
        directory = self._path.parent
        try:
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self._path.name}.",
                suffix=TEMP_SUFFIX,
                dir=directory,
            )
            try:
                outfile = os.fdopen(fd, "w", encoding="utf-8")
            except Exception:
                os.close(fd)
                raise
            with outfile:
                outfile.write(payload)
                outfile.flush()
                os.fsync(outfile.fileno())
            os.replace(tmp_name, self._path)
            self._sync_directory(directory)
        except OSError as err:
            raise PersistError(self.location, str(err)) from err

        logger.debug("Saved seed record to %s", self._path)

    @staticmethod
    def _sync_directory(directory: Path) -> None:
        """Flush the directory entry so the rename itself is durable."""
        dir_fd = os.open(directory, os.O_RDONLY)
        try:
            os.fsync(dir_fd)
        finally:
            os.close(dir_fd)
