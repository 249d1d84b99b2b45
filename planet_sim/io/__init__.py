"""World file loading."""

from planet_sim.io.world_loader import build_bodies, load_world, read_world, stable_orbit

__all__ = ["build_bodies", "load_world", "read_world", "stable_orbit"]
