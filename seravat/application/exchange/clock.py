"""Wall-clock source for request timestamps."""

import time
from typing import Callable

Clock = Callable[[], int]


def now_ms() -> int:
    """Current Unix time in milliseconds."""
    return int(time.time() * 1000)
