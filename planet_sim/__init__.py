"""
Planet Simulator - gravitational N-body dynamics with live time control.

Features:
- Softened O(N^2) gravity with symplectic integration
- Independent tick-rate (accuracy) and time-scale (speed) dials
- Bounded catch-up so a stalled host never spirals
- JSON/YAML world files with stable-orbit placement
- Headless CLI and a matplotlib live viewer
"""

__version__ = "0.1.0"

from planet_sim.errors import ConfigurationError, InvariantViolation, PlanetSimError
from planet_sim.physics.body_store import Body, BodyStore
from planet_sim.physics.nbody import NBodySystem
from planet_sim.physics.scheduler import TickScheduler
from planet_sim.physics.simulator import Simulator

__all__ = [
    "Body",
    "BodyStore",
    "NBodySystem",
    "TickScheduler",
    "Simulator",
    "ConfigurationError",
    "InvariantViolation",
    "PlanetSimError",
]
