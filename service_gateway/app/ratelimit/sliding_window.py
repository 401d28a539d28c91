"""
Sliding window rate limiter for the Gateway service.

Each API key holds two deques of request instants, one pruned to the last
minute and one to the last hour. A request is admitted only when both
windows are below their ceilings; admission records the instant in both.
"""

import math
import threading
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Callable, Deque, Dict, Optional

from shared.logging import get_logger

MINUTE_WINDOW_SECONDS = 60.0
HOUR_WINDOW_SECONDS = 3600.0


def _seconds_until_expiry(instant: float, window: float, now: float) -> int:
    # An instant exactly one window old still counts
    return max(0, math.floor(instant + window - now)) + 1


@dataclass
class RateWindowState:
    """Request instants of one API key."""

    minute: Deque[float] = field(default_factory=deque)
    hour: Deque[float] = field(default_factory=deque)
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def prune(self, now: float) -> None:
        """Drop instants that fell out of each window."""
        minute_floor = now - MINUTE_WINDOW_SECONDS
        while self.minute and self.minute[0] < minute_floor:
            self.minute.popleft()

        hour_floor = now - HOUR_WINDOW_SECONDS
        while self.hour and self.hour[0] < hour_floor:
            self.hour.popleft()

    def is_empty(self) -> bool:
        return not self.minute and not self.hour


class SlidingWindowRateLimiter:
    """In-process per-key limiter with a minute and an hour ceiling."""

    def __init__(
        self,
        requests_per_minute: int,
        requests_per_hour: int,
        clock: Callable[[], float] = time.monotonic,
        sweep_interval_seconds: Optional[float] = 300.0,
    ):
        self.requests_per_minute = requests_per_minute
        self.requests_per_hour = requests_per_hour
        self.logger = get_logger("gateway.rate_limiter")
        self._clock = clock
        self._sweep_interval = sweep_interval_seconds
        self._states: Dict[str, RateWindowState] = {}
        # Guards the map only; window mutation happens under each state's lock
        self._lock = threading.Lock()
        self._last_sweep = clock()

    def admit(self, credential: str) -> bool:
        """Admit and record a request for ``credential``, or reject it."""
        now = self._clock()
        self._maybe_sweep(now)

        with self._lock:
            state = self._states.get(credential)
            if state is None:
                state = RateWindowState()
                self._states[credential] = state
            # Hand-off: the state cannot be evicted while we hold its lock
            state.lock.acquire()

        try:
            state.prune(now)

            if len(state.minute) >= self.requests_per_minute:
                return False
            if len(state.hour) >= self.requests_per_hour:
                return False

            state.minute.append(now)
            state.hour.append(now)
            return True
        finally:
            state.lock.release()

    def get_status(self, credential: str) -> Dict[str, Any]:
        """Current window usage for ``credential`` without recording a request.

        ``reset_in_seconds`` is the wait until a request would be admitted
        again when either window is full, and otherwise the time until the
        oldest minute entry expires.
        """
        now = self._clock()
        with self._lock:
            state = self._states.get(credential)
            if state is not None:
                state.lock.acquire()

        minute_count = 0
        hour_count = 0
        oldest_minute: Optional[float] = None
        oldest_hour: Optional[float] = None
        if state is not None:
            try:
                state.prune(now)
                minute_count = len(state.minute)
                hour_count = len(state.hour)
                if state.minute:
                    oldest_minute = state.minute[0]
                if state.hour:
                    oldest_hour = state.hour[0]
            finally:
                state.lock.release()

        waits = []
        if oldest_minute is not None and minute_count >= self.requests_per_minute:
            waits.append(_seconds_until_expiry(oldest_minute, MINUTE_WINDOW_SECONDS, now))
        if oldest_hour is not None and hour_count >= self.requests_per_hour:
            waits.append(_seconds_until_expiry(oldest_hour, HOUR_WINDOW_SECONDS, now))

        if waits:
            reset_in = max(waits)
        elif oldest_minute is not None:
            reset_in = _seconds_until_expiry(oldest_minute, MINUTE_WINDOW_SECONDS, now)
        else:
            reset_in = int(MINUTE_WINDOW_SECONDS)

        minute_remaining = max(0, self.requests_per_minute - minute_count)
        hour_remaining = max(0, self.requests_per_hour - hour_count)
        return {
            "minute_count": minute_count,
            "minute_limit": self.requests_per_minute,
            "minute_remaining": minute_remaining,
            "hour_count": hour_count,
            "hour_limit": self.requests_per_hour,
            "hour_remaining": hour_remaining,
            "remaining": min(minute_remaining, hour_remaining),
            "reset_in_seconds": reset_in,
        }

    def reset(self, credential: str) -> bool:
        """Forget all recorded requests for ``credential``."""
        with self._lock:
            removed = self._states.pop(credential, None) is not None
        if removed:
            self.logger.info("Rate limit state reset")
        return removed

    def evict_idle(self, now: Optional[float] = None) -> int:
        """Drop keys whose windows are both empty after pruning."""
        if now is None:
            now = self._clock()

        evicted = 0
        with self._lock:
            for credential in list(self._states):
                state = self._states[credential]
                with state.lock:
                    state.prune(now)
                    if state.is_empty():
                        del self._states[credential]
                        evicted += 1
            self._last_sweep = now

        if evicted:
            self.logger.debug("Evicted idle rate limit state", evicted=evicted, tracked=len(self._states))
        return evicted

    @property
    def tracked_credentials(self) -> int:
        with self._lock:
            return len(self._states)

    def _maybe_sweep(self, now: float) -> None:
        if self._sweep_interval is None:
            return
        if now - self._last_sweep >= self._sweep_interval:
            self.evict_idle(now)
