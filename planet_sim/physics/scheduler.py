"""Fixed-cadence tick scheduling.

Two dials are kept independent:

* ticks per second - how many physics steps run per real second (accuracy);
* seconds per tick - how much simulated time one step covers (speed).

The host calls `TickScheduler.advance` once per rendered frame with the real
time that elapsed. Real time is accumulated and paid out in whole tick
intervals, so the cadence does not drift with the frame rate.
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from planet_sim.errors import ConfigurationError, InvariantViolation
from planet_sim.physics.body_store import BodyStore
from planet_sim.physics.nbody import NBodySystem

logger = logging.getLogger(__name__)


@dataclass
class RateLimits:
    """Bounds for the two user-adjustable rates."""
    min_ticks_per_second: float = 1.0
    max_ticks_per_second: float = 2000.0
    min_seconds_per_tick: float = 1.0
    max_seconds_per_tick: float = 3600.0

    def validate(self):
        """Raise ConfigurationError unless 0 < min <= max for both rates."""
        pairs = (
            ("ticks_per_second", self.min_ticks_per_second, self.max_ticks_per_second),
            ("seconds_per_tick", self.min_seconds_per_tick, self.max_seconds_per_tick),
        )
        for label, low, high in pairs:
            if not (math.isfinite(low) and math.isfinite(high)) or low <= 0.0 or low > high:
                raise ConfigurationError(f"Invalid {label} bounds [{low}, {high}]")


@dataclass
class SimulationClock:
    """Mutable timing state owned by the scheduler."""
    ticks_per_second: float = 60.0
    seconds_per_tick: float = 1.0
    accumulated_real_time: float = 0.0
    simulated_time: float = 0.0
    tick_count: int = 0
    dropped_real_time: float = 0.0

    @property
    def tick_interval(self) -> float:
        """Real seconds between ticks."""
        return 1.0 / self.ticks_per_second


def _clamp(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)


class TickScheduler:
    """Drives an `NBodySystem` over a `BodyStore` at a real-time cadence."""

    DEFAULT_MAX_STEPS_PER_ADVANCE = 250
    DEFAULT_TICK_STEP_FACTOR = 1.5
    DEFAULT_TIME_STEP_FACTOR = 2.0

    def __init__(
        self,
        store: BodyStore,
        system: NBodySystem,
        ticks_per_second: float = 60.0,
        seconds_per_tick: float = 1.0,
        limits: Optional[RateLimits] = None,
        max_steps_per_advance: int = DEFAULT_MAX_STEPS_PER_ADVANCE,
        tick_step_factor: float = DEFAULT_TICK_STEP_FACTOR,
        time_step_factor: float = DEFAULT_TIME_STEP_FACTOR,
    ):
        """Initialize the scheduler.

        Args:
            store: Bodies to advance
            system: Physics used for each tick
            ticks_per_second: Initial tick rate, must lie within limits
            seconds_per_tick: Initial simulated seconds per tick, must lie within limits
            limits: Bounds for both rates (default: RateLimits())
            max_steps_per_advance: Most ticks a single `advance` call may run
            tick_step_factor: Multiplier used by increase/decrease_ticks_per_second
            time_step_factor: Multiplier used by increase/decrease_seconds_per_tick

        Raises:
            ConfigurationError: If an initial rate is out of bounds or a
                parameter is invalid
        """
        self.store = store
        self.system = system
        self.limits = limits or RateLimits()
        self.limits.validate()

        if (not isinstance(max_steps_per_advance, (int, np.integer)) or isinstance(max_steps_per_advance, bool)
                or max_steps_per_advance < 1):
            raise ConfigurationError(f"max_steps_per_advance must be an integer of at least 1, got {max_steps_per_advance!r}")
        for label, factor in (("tick_step_factor", tick_step_factor), ("time_step_factor", time_step_factor)):
            if not math.isfinite(factor) or factor <= 1.0:
                raise ConfigurationError(f"{label} must be greater than 1, got {factor}")

        if not self.limits.min_ticks_per_second <= ticks_per_second <= self.limits.max_ticks_per_second:
            raise ConfigurationError(
                f"Initial ticks_per_second {ticks_per_second} outside "
                f"[{self.limits.min_ticks_per_second}, {self.limits.max_ticks_per_second}]"
            )
        if not self.limits.min_seconds_per_tick <= seconds_per_tick <= self.limits.max_seconds_per_tick:
            raise ConfigurationError(
                f"Initial seconds_per_tick {seconds_per_tick} outside "
                f"[{self.limits.min_seconds_per_tick}, {self.limits.max_seconds_per_tick}]"
            )

        self.max_steps_per_advance = int(max_steps_per_advance)
        self.tick_step_factor = float(tick_step_factor)
        self.time_step_factor = float(time_step_factor)
        self.clock = SimulationClock(
            ticks_per_second=float(ticks_per_second),
            seconds_per_tick=float(seconds_per_tick),
        )

    @property
    def ticks_per_second(self) -> float:
        return self.clock.ticks_per_second

    @property
    def seconds_per_tick(self) -> float:
        return self.clock.seconds_per_tick

    @property
    def simulated_seconds_per_real_second(self) -> float:
        """Nominal time rate, assuming the host keeps up with the tick rate."""
        return self.clock.ticks_per_second * self.clock.seconds_per_tick

    def advance(self, real_dt: float) -> int:
        """Run the ticks that are due after `real_dt` more real seconds.

        At most `max_steps_per_advance` ticks run per call. Whatever is still
        owed after that (e.g. after the host stalled) is dropped rather than
        queued, leaving less than one tick interval in the accumulator.

        Args:
            real_dt: Wall-clock seconds since the previous call

        Returns:
            Number of ticks run

        Raises:
            InvariantViolation: If real_dt is not finite, or a step failed
        """
        real_dt = float(real_dt)
        if not math.isfinite(real_dt):
            raise InvariantViolation(f"Elapsed real time must be finite, got {real_dt}")
        if real_dt < 0.0:
            logger.warning("Clock went backwards by %.6fs; treating frame as zero length", -real_dt)
            real_dt = 0.0

        clock = self.clock
        interval = clock.tick_interval
        clock.accumulated_real_time += real_dt

        steps = 0
        while clock.accumulated_real_time >= interval and steps < self.max_steps_per_advance:
            self.system.step(self.store, clock.seconds_per_tick)
            clock.accumulated_real_time -= interval
            clock.simulated_time += clock.seconds_per_tick
            clock.tick_count += 1
            steps += 1

        if clock.accumulated_real_time >= interval:
            remainder = math.fmod(clock.accumulated_real_time, interval)
            dropped = clock.accumulated_real_time - remainder
            clock.dropped_real_time += dropped
            clock.accumulated_real_time = remainder
            logger.debug(
                "Step cap of %d reached; dropped %.4fs of real time", self.max_steps_per_advance, dropped
            )

        return steps

    def set_ticks_per_second(self, value: float) -> float:
        """Set the tick rate, clamped to the configured bounds.

        Returns:
            The tick rate now in effect
        """
        value = float(value)
        if math.isnan(value):
            logger.warning("Ignoring NaN ticks_per_second; keeping %s", self.clock.ticks_per_second)
            return self.clock.ticks_per_second
        clamped = _clamp(value, self.limits.min_ticks_per_second, self.limits.max_ticks_per_second)
        if clamped != value:
            logger.debug("ticks_per_second %s clamped to %s", value, clamped)
        self.clock.ticks_per_second = clamped
        return clamped

    def set_seconds_per_tick(self, value: float) -> float:
        """Set the simulated seconds per tick, clamped to the configured bounds.

        Returns:
            The seconds per tick now in effect
        """
        value = float(value)
        if math.isnan(value):
            logger.warning("Ignoring NaN seconds_per_tick; keeping %s", self.clock.seconds_per_tick)
            return self.clock.seconds_per_tick
        clamped = _clamp(value, self.limits.min_seconds_per_tick, self.limits.max_seconds_per_tick)
        if clamped != value:
            logger.debug("seconds_per_tick %s clamped to %s", value, clamped)
        self.clock.seconds_per_tick = clamped
        return clamped

    def increase_ticks_per_second(self) -> float:
        value = self.set_ticks_per_second(self.clock.ticks_per_second * self.tick_step_factor)
        logger.info("Ticks per second now %g", value)
        return value

    def decrease_ticks_per_second(self) -> float:
        value = self.set_ticks_per_second(self.clock.ticks_per_second / self.tick_step_factor)
        logger.info("Ticks per second now %g", value)
        return value

    def increase_seconds_per_tick(self) -> float:
        value = self.set_seconds_per_tick(self.clock.seconds_per_tick * self.time_step_factor)
        logger.info("Seconds per tick now %g", value)
        return value

    def decrease_seconds_per_tick(self) -> float:
        value = self.set_seconds_per_tick(self.clock.seconds_per_tick / self.time_step_factor)
        logger.info("Seconds per tick now %g", value)
        return value
