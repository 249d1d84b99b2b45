"""Physics engine: body state, gravity step and tick scheduling."""

from planet_sim.physics.body_store import Body, BodyStore, StoreSnapshot
from planet_sim.physics.nbody import NBodySystem
from planet_sim.physics.scheduler import RateLimits, SimulationClock, TickScheduler

__all__ = [
    "Body",
    "BodyStore",
    "StoreSnapshot",
    "NBodySystem",
    "RateLimits",
    "SimulationClock",
    "TickScheduler",
]
