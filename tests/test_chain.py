"""Tests for the windowed seed chain."""

from __future__ import annotations

import logging
import random

import pytest

from rolling_id.core.errors import ConfigurationError
from rolling_id.core.seed import Seed
from rolling_id.services.chain import SeedChain
from tests.conftest import STEP_SIZE, WINDOW, make_seed_factory

ORIGIN = Seed(0, bytes(32))


def _chain_at_10000() -> SeedChain:
    return SeedChain.create_new(10_000, STEP_SIZE, WINDOW, seed_factory=make_seed_factory())


class TestCreateNew:
    """Fresh chain construction."""

    def test_anchors_oldest_one_window_back(self) -> None:
        chain = _chain_at_10000()
        assert chain.oldest.timestamp == 9000
        assert chain.newest.timestamp == 10_000
        assert chain.window == WINDOW

    def test_newest_is_stepped_from_oldest(self) -> None:
        chain = _chain_at_10000()
        expected = chain.oldest
        for _ in range(10):
            expected, _ = expected.step_forward(STEP_SIZE)
        assert chain.newest == expected

    def test_rounds_now_down(self) -> None:
        chain = SeedChain.create_new(10_099, STEP_SIZE, WINDOW, seed_factory=make_seed_factory())
        assert chain.newest.timestamp == 10_000

    def test_zero_window_keeps_single_seed(self) -> None:
        chain = SeedChain.create_new(10_000, STEP_SIZE, 0, seed_factory=make_seed_factory())
        assert chain.oldest == chain.newest

    def test_uses_secure_random_by_default(self) -> None:
        first = SeedChain.create_new(10_000, STEP_SIZE, WINDOW)
        second = SeedChain.create_new(10_000, STEP_SIZE, WINDOW)
        assert first.oldest.value != second.oldest.value

    @pytest.mark.parametrize(("step_size", "window"), [(0, 10), (-5, 10), (10, -1)])
    def test_rejects_invalid_configuration(self, step_size: int, window: int) -> None:
        with pytest.raises(ConfigurationError):
            SeedChain.create_new(10_000, step_size, window)


class TestStepTo:
    """Advancing the chain with time."""

    def test_concrete_scenario(self) -> None:
        chain = _chain_at_10000()
        oldest_at_9000 = chain.oldest
        chain.step_to(10_250, STEP_SIZE)

        assert chain.newest.timestamp == 10_200
        assert chain.oldest.timestamp == 9200
        expected_oldest, _ = oldest_at_9000.step_forward(STEP_SIZE)
        expected_oldest, _ = expected_oldest.step_forward(STEP_SIZE)
        assert chain.oldest == expected_oldest

        chain.change_window(500, STEP_SIZE)
        assert chain.oldest.timestamp == 9700
        assert chain.window == 500

    def test_returns_identifier_of_final_step(self) -> None:
        chain = _chain_at_10000()
        start = chain.newest
        identifier = chain.step_to(10_300, STEP_SIZE)

        seed = start
        for _ in range(3):
            seed, expected = seed.step_forward(STEP_SIZE)
        assert identifier == expected

    def test_same_bucket_is_idempotent(self) -> None:
        chain = _chain_at_10000()
        first = chain.step_to(10_400, STEP_SIZE)
        snapshot = (chain.oldest, chain.newest)
        second = chain.step_to(10_499, STEP_SIZE)
        assert first == second
        assert (chain.oldest, chain.newest) == snapshot

    def test_query_at_creation_bucket_returns_current_identifier(self) -> None:
        chain = _chain_at_10000()
        seed = chain.oldest
        for _ in range(10):
            seed, expected = seed.step_forward(STEP_SIZE)
        assert chain.step_to(10_000, STEP_SIZE) == expected

    def test_clock_regression_is_a_pure_read(self, caplog: pytest.LogCaptureFixture) -> None:
        chain = _chain_at_10000()
        current = chain.step_to(10_500, STEP_SIZE)
        snapshot = (chain.oldest, chain.newest)

        with caplog.at_level(logging.WARNING, logger="rolling_id.services.chain"):
            stale = chain.step_to(9_000, STEP_SIZE)

        assert stale == current
        assert (chain.oldest, chain.newest) == snapshot
        assert "Clock regression" in caplog.text

    def test_determinism_across_independent_chains(self) -> None:
        queries = [10_050, 10_300, 10_300, 11_999, 12_000, 15_432]
        first = SeedChain(ORIGIN, ORIGIN, WINDOW)
        second = SeedChain(ORIGIN, ORIGIN, WINDOW)
        assert [first.step_to(q, STEP_SIZE) for q in queries] == [
            second.step_to(q, STEP_SIZE) for q in queries
        ]

    def test_window_bound_and_monotonic_bucket(self) -> None:
        rng = random.Random(1234)
        step_size = 60
        window = 600
        chain = SeedChain.create_new(100_000, step_size, window, seed_factory=make_seed_factory())
        now = 100_000
        last_newest = chain.newest.timestamp
        for _ in range(200):
            now += rng.randint(-300, 900)
            chain.step_to(now, step_size)
            assert chain.span <= window + step_size
            assert chain.oldest.timestamp <= chain.newest.timestamp
            assert chain.newest.timestamp >= last_newest
            last_newest = chain.newest.timestamp

    def test_unaligned_window_keeps_newest_on_step_grid(self) -> None:
        chain = SeedChain.create_new(1000, STEP_SIZE, 150, seed_factory=make_seed_factory())
        assert chain.oldest.timestamp == 800
        assert chain.newest.timestamp == 1000

        chain.step_to(1120, STEP_SIZE)
        assert chain.newest.timestamp == 1100
        assert chain.newest.timestamp % STEP_SIZE == 0
        assert chain.oldest.timestamp % STEP_SIZE == 0

    def test_gap_may_exceed_window_by_up_to_one_step(self) -> None:
        # A window that is not a multiple of the step leaves the gap above it.
        window = 150
        chain = SeedChain.create_new(1000, STEP_SIZE, window, seed_factory=make_seed_factory())
        assert chain.span == 200
        assert window < chain.span <= window + STEP_SIZE

        for now in range(1100, 2000, STEP_SIZE):
            chain.step_to(now, STEP_SIZE)
            assert window < chain.span <= window + STEP_SIZE


class TestChangeWindow:
    """Window reconfiguration."""

    def test_shrinking_drops_history(self) -> None:
        chain = _chain_at_10000()
        chain.change_window(300, STEP_SIZE)
        assert chain.oldest.timestamp == 9700
        assert chain.newest.timestamp == 10_000

    def test_growing_does_not_restore_history(self) -> None:
        chain = _chain_at_10000()
        chain.change_window(300, STEP_SIZE)
        chain.change_window(5000, STEP_SIZE)
        assert chain.oldest.timestamp == 9700
        assert chain.window == 5000

    def test_growing_keeps_oldest_until_gap_reaches_new_window(self) -> None:
        chain = _chain_at_10000()
        chain.change_window(2000, STEP_SIZE)
        chain.step_to(10_500, STEP_SIZE)
        assert chain.oldest.timestamp == 9000

    def test_shrink_preserves_derivable_history(self) -> None:
        chain = _chain_at_10000()
        original_oldest = chain.oldest
        chain.change_window(500, STEP_SIZE)
        seed = original_oldest
        while seed.timestamp < chain.oldest.timestamp:
            seed, _ = seed.step_forward(STEP_SIZE)
        assert seed == chain.oldest

    def test_rejects_negative_window(self) -> None:
        with pytest.raises(ConfigurationError):
            _chain_at_10000().change_window(-1, STEP_SIZE)


def test_record_round_trip() -> None:
    chain = _chain_at_10000()
    chain.step_to(11_000, STEP_SIZE)
    assert SeedChain.from_record(chain.to_record()) == chain


def test_constructor_rejects_inverted_seeds() -> None:
    later, _ = ORIGIN.step_forward(STEP_SIZE)
    with pytest.raises(ValueError):
        SeedChain(later, ORIGIN, WINDOW)
