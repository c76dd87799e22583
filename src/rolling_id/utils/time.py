# src/rolling_id/utils/time.py
"""Time utilities for seed chains."""

import time


def current_timestamp() -> int:
    """Return the current wall-clock time as integer seconds since the epoch."""
    return int(time.time())


def round_down_timestamp(timestamp: int, step_size: int) -> int:
    """Round ``timestamp`` down to the nearest multiple of ``step_size``."""
    return timestamp - timestamp % step_size
