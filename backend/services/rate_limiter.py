"""
Process-wide request throttle for upstream services with a usage policy.

Nominatim allows at most one request per second per application. Every
outbound call acquires the limiter first; a call that would arrive too
early sleeps for the remainder of the interval.
"""
from __future__ import annotations

import threading
import time
from typing import Callable, Optional


class RateLimiter:
    def __init__(
        self,
        min_interval: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._lock = threading.Lock()
        self._last_request_ts: Optional[float] = None

    def acquire(self) -> float:
        """Block until a request may be sent; return the seconds waited."""
        with self._lock:
            waited = 0.0
            if self._last_request_ts is not None:
                delta = self._clock() - self._last_request_ts
                if delta < self.min_interval:
                    waited = self.min_interval - delta
                    self._sleep(waited)
            self._last_request_ts = self._clock()
            return waited

    def reset(self) -> None:
        with self._lock:
            self._last_request_ts = None
