"""Wall-clock helpers."""

import time


def now_ms() -> int:
    """Return the current wall-clock time in whole milliseconds since the Unix epoch."""
    return time.time_ns() // 1_000_000