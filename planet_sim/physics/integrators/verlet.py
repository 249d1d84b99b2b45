"""Velocity Verlet / leapfrog integrator (O(h^2) accuracy, symplectic)."""

from typing import Tuple

import numpy as np

from planet_sim.physics.integrators.base import AccelerationFn, Integrator


class VerletIntegrator(Integrator):
    """Velocity Verlet in kick-drift-kick form.

    1. v_half = v + 0.5*a(r)*dt
    2. r_new = r + v_half*dt
    3. v_new = v_half + 0.5*a(r_new)*dt

    Two force evaluations per step. Accelerations are not cached between
    steps, so a step depends only on (positions, velocities, dt).
    """

    @property
    def name(self) -> str:
        return "verlet"

    @property
    def order(self) -> int:
        return 2

    @property
    def symplectic(self) -> bool:
        return True

    def step(
        self,
        positions: np.ndarray,
        velocities: np.ndarray,
        acceleration: AccelerationFn,
        dt: float,
    ) -> Tuple[np.ndarray, np.ndarray]:
        v_half = velocities + acceleration(positions) * (0.5 * dt)
        new_positions = positions + v_half * dt
        new_velocities = v_half + acceleration(new_positions) * (0.5 * dt)
        return new_positions, new_velocities
