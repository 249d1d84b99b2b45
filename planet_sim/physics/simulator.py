"""Main simulator controller."""

import logging
from pathlib import Path
from typing import Callable, Iterable, Optional, Union

from planet_sim.io.world_loader import load_world
from planet_sim.physics.body_store import Body, BodyStore, StoreSnapshot
from planet_sim.physics.diagnostics import Diagnostics
from planet_sim.physics.nbody import NBodySystem
from planet_sim.physics.scheduler import TickScheduler
from planet_sim.utils.config import SimulationConfig

logger = logging.getLogger(__name__)


class Simulator:
    """Owns one simulation instance: bodies, physics and tick scheduling.

    Nothing here is global, so several instances can run side by side.
    """

    def __init__(
        self,
        store: BodyStore,
        system: NBodySystem,
        scheduler: Optional[TickScheduler] = None,
    ):
        """Initialize simulator.

        Args:
            store: Bodies to simulate
            system: Physics used for each tick
            scheduler: Tick scheduler (default: TickScheduler with default rates)
        """
        self.store = store
        self.system = system
        self.scheduler = scheduler or TickScheduler(store, system)
        self.diagnostics = Diagnostics.for_system(system)

        # Called with the number of ticks run after every advance()
        self.on_advance_callback: Optional[Callable[[int], None]] = None

    @classmethod
    def from_config(cls, config: SimulationConfig, bodies: Union[BodyStore, Iterable[Body]]) -> "Simulator":
        """Wire up a simulator from a validated config.

        Raises:
            ConfigurationError: If the config or bodies are invalid
        """
        config.validate()
        store = bodies if isinstance(bodies, BodyStore) else BodyStore(bodies)
        system = NBodySystem(
            G=config.gravitational_constant,
            epsilon=config.softening,
            integrator=config.integrator,
        )
        scheduler = TickScheduler(
            store,
            system,
            ticks_per_second=config.ticks_per_second,
            seconds_per_tick=config.seconds_per_tick,
            limits=config.limits,
            max_steps_per_advance=config.max_steps_per_advance,
            tick_step_factor=config.tick_step_factor,
            time_step_factor=config.time_step_factor,
        )
        logger.debug(
            "Simulator ready: %d bodies, %s, %g ticks/s, %g s/tick",
            len(store), system.integrator.name, scheduler.ticks_per_second, scheduler.seconds_per_tick,
        )
        return cls(store, system, scheduler)

    @classmethod
    def from_world(cls, path: Union[str, Path, None] = None, config: Optional[SimulationConfig] = None) -> "Simulator":
        """Load a world file (bundled solar system if None) and wire it up."""
        config = config or SimulationConfig()
        config.validate()
        store = load_world(
            path,
            seed=config.seed,
            G=config.gravitational_constant,
            recenter=config.recenter,
        )
        return cls.from_config(config, store)

    @property
    def time(self) -> float:
        """Simulated seconds elapsed."""
        return self.scheduler.clock.simulated_time

    @property
    def step_count(self) -> int:
        return self.scheduler.clock.tick_count

    def advance(self, real_dt: float) -> int:
        """Forward one frame's elapsed real time to the scheduler."""
        steps = self.scheduler.advance(real_dt)
        if self.on_advance_callback is not None:
            self.on_advance_callback(steps)
        return steps

    def snapshot(self) -> StoreSnapshot:
        return self.store.snapshot()

    def get_energy(self) -> float:
        """Total (kinetic + softened potential) energy."""
        return self.diagnostics.total_energy(self.store)
