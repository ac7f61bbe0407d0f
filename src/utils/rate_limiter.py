"""Client-side request throttling."""

import threading
import time
from collections import deque
from typing import Deque

from src.utils.logger import setup_logger

logger = setup_logger(__name__)


class RateLimiter:
    """
    Sliding-window limiter shared by the threads serving requests.

    Sync endpoints run in a worker pool, so slots are claimed under a lock.
    """

    def __init__(self, max_requests: int, time_window: float = 60):
        """
        Initialize rate limiter.

        Args:
            max_requests: Requests allowed per window
            time_window: Window length in seconds
        """
        self.max_requests = max_requests
        self.time_window = time_window
        self._sent: Deque[float] = deque()
        self._lock = threading.Lock()

    def _expire(self, now: float) -> None:
        while self._sent and self._sent[0] <= now - self.time_window:
            self._sent.popleft()

    def acquire(self) -> bool:
        """Claim a slot if one is free in the current window."""
        with self._lock:
            now = time.monotonic()
            self._expire(now)
            if len(self._sent) < self.max_requests:
                self._sent.append(now)
                return True
            return False

    def delay(self) -> float:
        """Seconds until the oldest request in a full window expires."""
        with self._lock:
            if len(self._sent) < self.max_requests:
                return 0.0
            return max(0.0, self._sent[0] + self.time_window - time.monotonic())

    def wait_if_needed(self) -> None:
        """Block until a slot is claimed."""
        while not self.acquire():
            wait_time = self.delay()
            logger.info(f"Rate limit reached, waiting {wait_time:.2f} seconds")
            time.sleep(wait_time)
