"""Explicit Euler integrator (baseline, O(h) accuracy, not symplectic)."""

from typing import Tuple

import numpy as np

from planet_sim.physics.integrators.base import AccelerationFn, Integrator


class EulerIntegrator(Integrator):
    """Explicit Euler - positions advance with the old velocity.

    Orbits spiral outwards with it; kept as a baseline to compare the
    symplectic schemes against.
    """

    @property
    def name(self) -> str:
        return "euler"

    @property
    def order(self) -> int:
        return 1

    def step(
        self,
        positions: np.ndarray,
        velocities: np.ndarray,
        acceleration: AccelerationFn,
        dt: float,
    ) -> Tuple[np.ndarray, np.ndarray]:
        """Euler step: v_new = v + a*dt, r_new = r + v*dt."""
        accelerations = acceleration(positions)
        new_velocities = velocities + accelerations * dt
        new_positions = positions + velocities * dt
        return new_positions, new_velocities
