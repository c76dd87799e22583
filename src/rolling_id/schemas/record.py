"""Schema for the on-disk seed record."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from rolling_id.core.seed import Seed

RECORD_FIELD_COUNT = 3


class PersistedRecord(BaseModel):
    """Three-field record stored one field per line.

    Line order is fixed: window, oldest seed, newest seed. There is no
    version tag or checksum.
    """

    model_config = ConfigDict(frozen=True)

    window: int = Field(ge=0)
    oldest: str
    newest: str

    @field_validator("oldest", "newest")
    @classmethod
    def _check_seed_text(cls, value: str) -> str:
        Seed.parse(value)
        return value

    def to_text(self) -> str:
        """Render the record as newline-terminated lines."""
        return f"{self.window}\n{self.oldest}\n{self.newest}\n"

    @classmethod
    def from_lines(cls, lines: list[str]) -> PersistedRecord:
        """Build a record from exactly the first three lines of a file.

        Raises:
            pydantic.ValidationError: If a field fails to parse.
        """
        window, oldest, newest = (line.strip() for line in lines[:RECORD_FIELD_COUNT])
        return cls(window=window, oldest=oldest, newest=newest)
