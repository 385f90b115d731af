"""
In-process sliding-window rate limiter keyed by client identifier.

Each identifier keeps the timestamps of its recent requests. Every call to
``admit`` counts as a request, including calls that end up rejected.
"""

import logging
import threading
import time
from collections import OrderedDict
from collections.abc import Callable

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "Rate limit exceeded. Please try again shortly."


class RateLimiter:
    """Sliding-window limiter with bounded per-client memory.

    Identifiers with no timestamps left inside the window are swept at most
    once per window, and once ``max_clients`` identifiers are tracked the
    least recently seen one is evicted.
    """

    def __init__(
        self,
        window_seconds: float = 60.0,
        max_requests: int = 30,
        max_clients: int = 10_000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.window_seconds = window_seconds
        self.max_requests = max_requests
        self.max_clients = max_clients
        self._clock = clock
        self._windows: OrderedDict[str, list[float]] = OrderedDict()
        self._lock = threading.Lock()
        self._last_sweep = clock()

    def admit(self, client_id: str) -> bool:
        """Record a request from ``client_id`` and return whether it is allowed."""
        with self._lock:
            now = self._clock()
            if now - self._last_sweep >= self.window_seconds:
                self._sweep_locked(now)

            recent = [
                ts
                for ts in self._windows.get(client_id, [])
                if now - ts < self.window_seconds
            ]
            recent.append(now)
            self._windows[client_id] = recent
            self._windows.move_to_end(client_id)

            while len(self._windows) > self.max_clients:
                evicted, _ = self._windows.popitem(last=False)
                logger.debug(f"Evicted least recently seen client {evicted}")

            allowed = len(recent) <= self.max_requests

        if not allowed:
            logger.warning(
                f"Client {client_id} throttled: {len(recent)} requests "
                f"in {self.window_seconds:g}s window"
            )
        return allowed

    def sweep(self) -> int:
        """Drop identifiers with no requests inside the window."""
        with self._lock:
            return self._sweep_locked(self._clock())

    def _sweep_locked(self, now: float) -> int:
        stale = [
            client_id
            for client_id, timestamps in self._windows.items()
            if not timestamps or now - timestamps[-1] >= self.window_seconds
        ]
        for client_id in stale:
            del self._windows[client_id]
        self._last_sweep = now
        if stale:
            logger.debug(f"Swept {len(stale)} idle clients from rate limiter")
        return len(stale)

    def reset(self) -> None:
        """Forget every tracked client."""
        with self._lock:
            self._windows.clear()
            self._last_sweep = self._clock()

    def __len__(self) -> int:
        return len(self._windows)

    def request_count(self, client_id: str) -> int:
        """Number of requests from ``client_id`` inside the current window."""
        with self._lock:
            now = self._clock()
            return sum(
                1
                for ts in self._windows.get(client_id, [])
                if now - ts < self.window_seconds
            )
