"""Sliding-window request limiter keyed by client identity.

Each client's recent request timestamps live in a ``cachetools.TTLCache``
entry that expires one window after its last update, so idle clients are
swept lazily and the number of tracked clients stays bounded.
"""

import logging
import math
import threading
import time
from collections import deque
from collections.abc import Callable

from cachetools import TTLCache

from pharmagenie.domain.exceptions import RateLimitExceededError

logger = logging.getLogger(__name__)


class SlidingWindowRateLimiter:
    """Allows at most ``max_requests`` per client in any ``window_seconds`` span."""

    def __init__(
        self,
        *,
        max_requests: int = 20,
        window_seconds: float = 60.0,
        max_clients: int = 10_000,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._max_requests = max_requests
        self._window = window_seconds
        self._clock = clock
        self._clients: TTLCache[str, deque[float]] = TTLCache(
            maxsize=max_clients, ttl=window_seconds, timer=clock
        )
        self._lock = threading.Lock()

    @property
    def max_requests(self) -> int:
        return self._max_requests

    def hit(self, client_id: str) -> int:
        """Record one request; returns the requests left in the window.

        Raises:
            RateLimitExceededError: If the client is over its budget.
        """
        with self._lock:
            now = self._clock()
            timestamps = self._clients.get(client_id)
            if timestamps is None:
                timestamps = deque()
            window_start = now - self._window
            while timestamps and timestamps[0] <= window_start:
                timestamps.popleft()

            if len(timestamps) >= self._max_requests:
                retry_after = max(1, math.ceil(timestamps[0] + self._window - now))
                # Re-store so the entry lives as long as its timestamps do.
                self._clients[client_id] = timestamps
                logger.warning(
                    "Rate limit exceeded for %s (%d requests in %ss)",
                    client_id,
                    len(timestamps),
                    self._window,
                )
                raise RateLimitExceededError(client_id, self._max_requests, retry_after)

            timestamps.append(now)
            self._clients[client_id] = timestamps
            return self._max_requests - len(timestamps)

    def reset(self, client_id: str | None = None) -> None:
        with self._lock:
            if client_id is None:
                self._clients.clear()
            else:
                self._clients.pop(client_id, None)
