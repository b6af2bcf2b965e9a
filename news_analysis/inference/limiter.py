"""Client-side request rate limiting."""

from __future__ import annotations

import asyncio
import logging
import time
from collections import deque

logger = logging.getLogger(__name__)


class RateLimiter:
    """Sliding one-minute window shared by every caller of a client."""

    def __init__(self, max_per_minute: int, window: float = 60.0) -> None:
        self._max_per_minute = max_per_minute
        self._window = window
        self._sent: deque[float] = deque()
        self._lock = asyncio.Lock()

    async def acquire(self) -> None:
        """Wait until a request slot is free, then take it."""
        async with self._lock:
            while True:
                now = time.monotonic()
                while self._sent and now - self._sent[0] >= self._window:
                    self._sent.popleft()

                if len(self._sent) < self._max_per_minute:
                    self._sent.append(now)
                    return

                wait = self._window - (now - self._sent[0])
                logger.debug(f"Rate limit reached, waiting {wait:.2f}s")
                await asyncio.sleep(wait)

    @property
    def in_window(self) -> int:
        return len(self._sent)
