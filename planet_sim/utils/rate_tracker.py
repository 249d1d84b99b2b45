"""Measured update/frame rates and the simulated time rate they imply."""

import time
from typing import Callable

_UNITS = (
    ("d", 86_400_000),
    ("h", 3_600_000),
    ("m", 60_000),
    ("s", 1_000),
    ("ms", 1),
)


def format_duration(seconds: float) -> str:
    """Compact human duration, e.g. 5400 -> '1h 30m', 0.25 -> '250ms'."""
    total_ms = int(round(seconds * 1000)) if seconds > 0 else 0
    if total_ms == 0:
        return "0s"
    parts = []
    for unit, size in _UNITS:
        count, total_ms = divmod(total_ms, size)
        if count:
            parts.append(f"{count}{unit}")
    return " ".join(parts)


def format_time_rate(simulated_seconds_per_second: float) -> str:
    """Render a time rate for display, e.g. '1h 30m/s'."""
    return f"{format_duration(simulated_seconds_per_second)}/s"


class RateTracker:
    """Counts ticks and frames over fixed windows of real time.

    Rates are published when a window closes, so they read 0 until the
    first full window has passed.
    """

    def __init__(self, time_source: Callable[[], float] = time.monotonic, window: float = 1.0):
        if window <= 0:
            raise ValueError(f"window must be positive, got {window}")
        self._now = time_source
        self.window = window

        self.ups = 0.0
        self.fps = 0.0
        self.simulated_rate = 0.0

        self._window_start = self._now()
        self._updates = 0
        self._frames = 0
        self._simulated = 0.0

    def track_update(self, count: int = 1, simulated_seconds: float = 0.0):
        """Record `count` ticks covering `simulated_seconds` of simulated time."""
        self._roll()
        self._updates += count
        self._simulated += simulated_seconds

    def track_frame(self):
        self._roll()
        self._frames += 1

    def _roll(self):
        now = self._now()
        elapsed = now - self._window_start
        if elapsed < self.window:
            return
        self.ups = self._updates / elapsed
        self.fps = self._frames / elapsed
        self.simulated_rate = self._simulated / elapsed
        self._updates = 0
        self._frames = 0
        self._simulated = 0.0
        self._window_start = now

    def summary(self) -> str:
        return f"FPS: {self.fps:.0f}  UPS: {self.ups:.0f}  {format_time_rate(self.simulated_rate)}"
