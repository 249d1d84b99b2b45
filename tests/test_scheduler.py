"""Tests for tick scheduling."""

import numpy as np
import pytest
from planet_sim.errors import ConfigurationError, InvariantViolation
from planet_sim.physics.body_store import Body, BodyStore
from planet_sim.physics.nbody import NBodySystem
from planet_sim.physics.scheduler import RateLimits, TickScheduler

WIDE_LIMITS = RateLimits(
    min_ticks_per_second=1.0,
    max_ticks_per_second=1000.0,
    min_seconds_per_tick=0.125,
    max_seconds_per_tick=64.0,
)


class RecordingSystem(NBodySystem):
    """NBodySystem that remembers every dt it was stepped with."""

    def __init__(self, **kwargs):
        super().__init__(G=1.0, epsilon=0.1, **kwargs)
        self.dts = []

    def step(self, store, dt):
        self.dts.append(dt)
        super().step(store, dt)


class FailingSystem(NBodySystem):
    def step(self, store, dt):
        raise InvariantViolation("boom")


def make_store():
    return BodyStore([
        Body(position=[0.0, 0.0], velocity=[0.0, 0.0], mass=1.0),
        Body(position=[10.0, 0.0], velocity=[0.0, 0.3], mass=0.01),
    ])


def make_scheduler(ticks=4.0, seconds=1.0, **kwargs):
    system = RecordingSystem()
    kwargs.setdefault("limits", WIDE_LIMITS)
    return TickScheduler(make_store(), system, ticks_per_second=ticks, seconds_per_tick=seconds, **kwargs)


def test_advance_runs_due_ticks():
    """One real second at 4 ticks/s runs four ticks of seconds_per_tick each."""
    scheduler = make_scheduler(ticks=4.0, seconds=2.0)

    steps = scheduler.advance(1.0)

    assert steps == 4
    assert scheduler.system.dts == [2.0, 2.0, 2.0, 2.0]
    assert scheduler.clock.accumulated_real_time == 0.0
    assert scheduler.clock.simulated_time == 8.0
    assert scheduler.clock.tick_count == 4


def test_leftover_time_carries_over():
    """Partial tick intervals accumulate across frames."""
    scheduler = make_scheduler(ticks=4.0)

    assert scheduler.advance(0.125) == 0
    assert scheduler.clock.accumulated_real_time == 0.125
    assert scheduler.advance(0.125) == 1
    assert scheduler.clock.accumulated_real_time == 0.0
    assert scheduler.advance(0.375) == 1
    assert scheduler.clock.accumulated_real_time == 0.125


def test_advance_moves_bodies():
    scheduler = make_scheduler()
    before = np.array(scheduler.store.positions)
    scheduler.advance(1.0)
    assert not np.allclose(scheduler.store.positions, before)


def test_step_cap_discards_excess_time():
    """A long stall runs at most max_steps_per_advance ticks and drops the rest."""
    scheduler = make_scheduler(ticks=60.0, max_steps_per_advance=5)

    steps = scheduler.advance(1000.0)

    assert steps == 5
    assert len(scheduler.system.dts) == 5
    assert scheduler.clock.accumulated_real_time < 1.0 / 60.0
    assert np.isclose(
        scheduler.clock.dropped_real_time + scheduler.clock.accumulated_real_time + 5 / 60.0, 1000.0
    )
    # The next ordinary frame is not burdened by the stall
    assert scheduler.advance(1.0 / 60.0) <= 2


def test_accumulator_bounded_after_every_pass():
    """The residual stays below one tick interval whatever the frame times."""
    scheduler = make_scheduler(ticks=30.0, max_steps_per_advance=8)
    rng = np.random.default_rng(7)

    for real_dt in rng.exponential(0.05, size=300):
        scheduler.advance(real_dt)
        assert 0.0 <= scheduler.clock.accumulated_real_time < scheduler.clock.tick_interval


def test_decoupled_dials():
    """Twice the ticks at half the seconds per tick covers the same simulated time."""
    coarse = make_scheduler(ticks=4.0, seconds=2.0)
    fine = make_scheduler(ticks=8.0, seconds=1.0)

    coarse.advance(1.0)
    fine.advance(1.0)

    assert coarse.clock.simulated_time == fine.clock.simulated_time == 8.0
    assert len(fine.system.dts) == 2 * len(coarse.system.dts)
    assert coarse.simulated_seconds_per_real_second == fine.simulated_seconds_per_real_second == 8.0


@pytest.mark.parametrize("value, expected", [(0.0, 1.0), (-5.0, 1.0), (5000.0, 1000.0), (90.0, 90.0)])
def test_set_ticks_per_second_clamps(value, expected):
    scheduler = make_scheduler()
    assert scheduler.set_ticks_per_second(value) == expected
    assert scheduler.ticks_per_second == expected


@pytest.mark.parametrize("value, expected", [(0.0, 0.125), (1e9, 64.0), (3.0, 3.0)])
def test_set_seconds_per_tick_clamps(value, expected):
    scheduler = make_scheduler()
    assert scheduler.set_seconds_per_tick(value) == expected
    assert scheduler.seconds_per_tick == expected


def test_nan_rates_are_ignored():
    scheduler = make_scheduler(ticks=4.0, seconds=2.0)
    assert scheduler.set_ticks_per_second(float("nan")) == 4.0
    assert scheduler.set_seconds_per_tick(float("nan")) == 2.0


def test_rate_change_keeps_accumulator():
    """Raising the tick rate does not rescale time already accumulated."""
    scheduler = make_scheduler(ticks=4.0)
    scheduler.advance(0.125)

    scheduler.set_ticks_per_second(8.0)

    assert scheduler.clock.accumulated_real_time == 0.125
    assert scheduler.advance(0.0) == 1
    assert scheduler.clock.accumulated_real_time == 0.0


def test_step_factors():
    """Discrete intents multiply or divide and stay within bounds."""
    scheduler = make_scheduler(ticks=60.0, seconds=1.0)

    assert scheduler.increase_ticks_per_second() == 90.0
    assert scheduler.decrease_ticks_per_second() == 60.0
    assert scheduler.increase_seconds_per_tick() == 2.0
    assert scheduler.decrease_seconds_per_tick() == 1.0

    for _ in range(20):
        scheduler.increase_seconds_per_tick()
        scheduler.increase_ticks_per_second()
    assert scheduler.seconds_per_tick == 64.0
    assert scheduler.ticks_per_second == 1000.0

    for _ in range(40):
        scheduler.decrease_seconds_per_tick()
        scheduler.decrease_ticks_per_second()
    assert scheduler.seconds_per_tick == 0.125
    assert scheduler.ticks_per_second == 1.0


def test_initial_rates_out_of_bounds():
    """Out-of-range initial rates are fatal configuration errors."""
    with pytest.raises(ConfigurationError):
        make_scheduler(ticks=0.5)
    with pytest.raises(ConfigurationError):
        make_scheduler(seconds=100.0)
    with pytest.raises(ConfigurationError):
        make_scheduler(ticks=float("nan"))
    with pytest.raises(ConfigurationError):
        make_scheduler(limits=RateLimits(min_ticks_per_second=10.0, max_ticks_per_second=5.0))
    with pytest.raises(ConfigurationError):
        make_scheduler(max_steps_per_advance=0)
    with pytest.raises(ConfigurationError):
        make_scheduler(max_steps_per_advance=float("nan"))
    with pytest.raises(ConfigurationError):
        make_scheduler(max_steps_per_advance=2.5)
    with pytest.raises(ConfigurationError):
        make_scheduler(tick_step_factor=1.0)


def test_default_limits():
    scheduler = TickScheduler(make_store(), NBodySystem())
    assert scheduler.ticks_per_second == 60.0
    assert scheduler.seconds_per_tick == 1.0
    assert scheduler.limits == RateLimits()


def test_backwards_and_invalid_real_time():
    """Negative frame time counts as zero; non-finite frame time is an error."""
    scheduler = make_scheduler(ticks=4.0)
    scheduler.advance(0.125)

    assert scheduler.advance(-3.0) == 0
    assert scheduler.clock.accumulated_real_time == 0.125

    with pytest.raises(InvariantViolation):
        scheduler.advance(float("nan"))
    with pytest.raises(InvariantViolation):
        scheduler.advance(float("inf"))


def test_step_failure_propagates():
    scheduler = TickScheduler(make_store(), FailingSystem(), ticks_per_second=4.0)
    with pytest.raises(InvariantViolation):
        scheduler.advance(1.0)
    assert scheduler.clock.tick_count == 0
