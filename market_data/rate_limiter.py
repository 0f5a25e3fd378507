"""
Fixed-interval rate limiter

Waits min_interval seconds between the end of one request and the start of
the next. Clock and sleep are injectable so callers can be tested without
real waits.
"""

import logging
import time
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class RateLimiter:
    """Gate that releases at most one request per min_interval seconds"""

    def __init__(self, min_interval: float,
                 clock: Optional[Callable[[], float]] = None,
                 sleep: Optional[Callable[[float], None]] = None):
        """
        Initialize the rate limiter.

        Args:
            min_interval: Minimum seconds between consecutive acquires
            clock: Monotonic clock returning seconds (default: time.monotonic)
            sleep: Function used to wait (default: time.sleep)
        """
        if min_interval < 0:
            raise ValueError(f"min_interval must be non-negative, got {min_interval}")

        self.min_interval = min_interval
        self.clock = clock or time.monotonic
        self.sleep = sleep or time.sleep
        self._last_release: Optional[float] = None

    def acquire(self) -> float:
        """
        Block until the next request may proceed.

        The interval is measured from the last release(), or from the last
        acquire() if the caller never releases.

        Returns:
            Seconds spent waiting
        """
        waited = 0.0
        if self._last_release is not None:
            remaining = self.min_interval - (self.clock() - self._last_release)
            if remaining > 0:
                logger.debug(f"Rate limiting: sleeping {remaining:.3f}s")
                self.sleep(remaining)
                waited = remaining

        self._last_release = self.clock()
        return waited

    def release(self) -> None:
        """Mark the end of a request; the next acquire waits min_interval from now"""
        self._last_release = self.clock()

    def reset(self) -> None:
        """Forget the previous release so the next acquire is immediate"""
        self._last_release = None
