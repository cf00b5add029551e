"""Thread-safe health bookkeeping for a single body part."""
from __future__ import annotations

import threading

DEFAULT_REGEN_RATE = 0.1  # fraction of maximum per second
CRITICAL_FRACTION = 0.2


class HealthTracker:
    """Current/maximum health with saturating damage and lazy regeneration.

    Regeneration is not driven by a timer; callers tick ``update(now)`` and
    the tracker heals by ``regen_rate * elapsed * maximum`` since the last
    tick. Every method takes the tracker's own lock, so independent
    trackers never contend.
    """

    def __init__(self, maximum: float = 100.0, regen_rate: float = DEFAULT_REGEN_RATE) -> None:
        if maximum <= 0:
            raise ValueError("maximum health must be positive")
        if regen_rate < 0:
            raise ValueError("regeneration rate cannot be negative")
        self._lock = threading.Lock()
        self._current = maximum
        self._maximum = maximum
        self._regen_rate = regen_rate
        self._last_update: float | None = None

    @property
    def current(self) -> float:
        with self._lock:
            return self._current

    @property
    def maximum(self) -> float:
        return self._maximum

    @property
    def regen_rate(self) -> float:
        with self._lock:
            return self._regen_rate

    def set_regen_rate(self, rate: float) -> None:
        if rate < 0:
            raise ValueError("regeneration rate cannot be negative")
        with self._lock:
            self._regen_rate = rate

    def reduce(self, amount: float) -> float:
        """Apply damage and return how much was actually taken."""
        with self._lock:
            if amount <= 0:
                return 0.0
            actual = min(amount, self._current)
            self._current = max(0.0, self._current - actual)
            return actual

    def heal(self, amount: float) -> float:
        """Restore health and return how much was actually restored."""
        with self._lock:
            if amount <= 0:
                return 0.0
            actual = min(amount, self._maximum - self._current)
            self._current = min(self._maximum, self._current + actual)
            return actual

    def update(self, now: float) -> None:
        """Regenerate for the time elapsed since the previous update.

        The first call only records the baseline. Non-increasing timestamps
        are ignored.
        """
        with self._lock:
            if self._last_update is None:
                self._last_update = now
                return
            elapsed = now - self._last_update
            if elapsed <= 0:
                return
            regen = self._regen_rate * elapsed * self._maximum
            self._current = min(self._maximum, self._current + regen)
            self._last_update = now

    def is_critical(self) -> bool:
        with self._lock:
            return self._current < self._maximum * CRITICAL_FRACTION

    def percentage(self) -> float:
        with self._lock:
            return self._current / self._maximum * 100.0
