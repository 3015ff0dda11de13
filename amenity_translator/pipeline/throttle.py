"""Fixed-interval scheduling for outbound model calls."""

import time
from typing import Callable, Optional


class FixedIntervalThrottle:
    """
    Spaces successive calls at least ``interval`` seconds apart.

    The first ``wait()`` returns immediately; later calls sleep only for the
    part of the interval that has not already elapsed.
    """

    def __init__(
        self,
        interval: float,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.interval = max(0.0, interval)
        self.sleep = sleep
        self.clock = clock
        self._last: Optional[float] = None

    def wait(self) -> float:
        """Block until the interval has passed; return the seconds slept."""
        slept = 0.0
        if self._last is not None and self.interval > 0:
            remaining = self.interval - (self.clock() - self._last)
            if remaining > 0:
                self.sleep(remaining)
                slept = remaining
        self._last = self.clock()
        return slept

    def reset(self) -> None:
        self._last = None
