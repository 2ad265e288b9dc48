"""
Minimum-interval rate limiter for outbound scrape requests.

One instance is shared by every caller of the scraping backend. Entering
the limiter waits out the rest of the interval since the previous dispatch
and holds a lock until the request returns, so at most one request is in
flight at any time.
"""

import logging
import threading
import time
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class RateLimiter:
    """Serializes requests and spaces dispatches at least min_interval apart."""

    def __init__(
        self,
        min_interval: float,
        name: str = "",
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Args:
            min_interval: Minimum seconds between two dispatches.
            name: Human-readable name for logging.
            clock: Monotonic time source (injectable for tests).
            sleep: Sleep function (injectable for tests).
        """
        self.min_interval = min_interval
        self.name = name or f"limiter({min_interval}s)"
        self._clock = clock
        self._sleep = sleep
        self._last_dispatch: Optional[float] = None
        self._lock = threading.Lock()

    def _wait(self) -> None:
        wait_time = 0.0
        if self._last_dispatch is not None:
            elapsed = self._clock() - self._last_dispatch
            wait_time = max(0.0, self.min_interval - elapsed)

        if wait_time > 0:
            logger.debug(f"[{self.name}] Rate limiting: waiting {wait_time:.2f}s")
            self._sleep(wait_time)

        self._last_dispatch = self._clock()

    def __enter__(self):
        self._lock.acquire()
        try:
            self._wait()
        except BaseException:
            self._lock.release()
            raise
        return self

    def __exit__(self, *args):
        self._lock.release()
