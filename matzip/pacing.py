"""
Per-provider call pacing.

Each external provider gets its own ``Pacer`` so that no more than one
call is issued per pacing window. A pacer is shared by every request
thread that uses its client, so waiting is serialised under a lock.
Clock and sleep are injectable so tests can assert pacing without real
timers.
"""
from __future__ import annotations

import logging
import threading
import time
from typing import Callable

logger = logging.getLogger(__name__)


class Pacer:
    """Enforce a minimum interval between successive calls."""

    def __init__(
        self,
        interval: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.interval = max(0.0, interval)
        self._clock = clock
        self._sleep = sleep
        self._last: float | None = None
        self._lock = threading.Lock()

    def wait(self) -> float:
        """Block until the window opens; return the seconds slept."""
        with self._lock:
            now = self._clock()
            waited = 0.0
            if self._last is not None:
                remaining = self.interval - (now - self._last)
                if remaining > 0:
                    self._sleep(remaining)
                    waited = remaining
                    now = self._clock()
            self._last = now
            return waited

    def backoff(self, seconds: float) -> None:
        """Fixed extra pause, e.g. after a provider rate-limit response."""
        if seconds <= 0:
            return
        logger.info("Backing off for %.1fs", seconds)
        with self._lock:
            self._sleep(seconds)
            self._last = self._clock()


class NoPacer(Pacer):
    """Pacer that never sleeps."""

    def __init__(self) -> None:
        super().__init__(0.0, sleep=lambda _seconds: None)
