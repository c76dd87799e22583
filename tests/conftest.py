# tests/conftest.py
from __future__ import annotations

import hashlib
from collections.abc import Callable
from itertools import count
from pathlib import Path

import pytest

from rolling_id.core.seed import SEED_VALUE_BYTES, Seed

STEP_SIZE = 100
WINDOW = 1000
START_TIME = 10_000


class FakeClock:
    """Controllable wall clock returning integer seconds."""

    def __init__(self, now: int = START_TIME) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += seconds


def make_seed_factory() -> Callable[[int], Seed]:
    """Return a factory producing distinct, reproducible seeds."""
    counter = count(1)

    def _factory(timestamp: int) -> Seed:
        material = f"test-seed-{next(counter)}".encode()
        return Seed(timestamp, hashlib.sha256(material).digest()[:SEED_VALUE_BYTES])

    return _factory


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def seed_factory() -> Callable[[int], Seed]:
    return make_seed_factory()


@pytest.fixture()
def storage_path(tmp_path: Path) -> Path:
    return tmp_path / "seeds.txt"
