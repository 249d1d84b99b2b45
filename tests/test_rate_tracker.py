"""Tests for rate tracking and duration formatting."""

import pytest
from planet_sim.utils.rate_tracker import RateTracker, format_duration, format_time_rate


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


@pytest.mark.parametrize("seconds, expected", [
    (0.0, "0s"),
    (-3.0, "0s"),
    (0.25, "250ms"),
    (1.0, "1s"),
    (61.5, "1m 1s 500ms"),
    (5400.0, "1h 30m"),
    (90061.0, "1d 1h 1m 1s"),
])
def test_format_duration(seconds, expected):
    assert format_duration(seconds) == expected


def test_format_time_rate():
    assert format_time_rate(3600.0) == "1h/s"


def test_rates_published_per_window():
    """Counts are divided by the elapsed window once it closes."""
    clock = FakeClock()
    tracker = RateTracker(time_source=clock, window=1.0)

    for _ in range(30):
        tracker.track_frame()
        tracker.track_update(count=2, simulated_seconds=4.0)
    assert tracker.fps == 0.0
    assert tracker.ups == 0.0

    clock.now = 1.0
    tracker.track_frame()

    assert tracker.fps == 30.0
    assert tracker.ups == 60.0
    assert tracker.simulated_rate == 120.0
    assert "FPS: 30" in tracker.summary()
    assert "2m/s" in tracker.summary()


def test_rates_reset_between_windows():
    clock = FakeClock()
    tracker = RateTracker(time_source=clock, window=0.5)

    tracker.track_update(count=10)
    clock.now = 0.5
    tracker.track_update(count=1)
    assert tracker.ups == 20.0

    clock.now = 1.0
    tracker.track_frame()
    assert tracker.ups == 2.0
    assert tracker.fps == 0.0


def test_invalid_window():
    with pytest.raises(ValueError):
        RateTracker(window=0.0)
