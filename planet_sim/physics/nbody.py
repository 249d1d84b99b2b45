"""Core N-body physics step."""

import logging
import math
from typing import Optional, Union

import numpy as np

from planet_sim.errors import ConfigurationError, InvariantViolation
from planet_sim.physics.body_store import BodyStore
from planet_sim.physics.force_calculator import ForceCalculator
from planet_sim.physics.integrators import get_integrator
from planet_sim.physics.integrators.base import Integrator

logger = logging.getLogger(__name__)


class NBodySystem:
    """N-body gravitational system.

    Holds the physical constants and numerical scheme, and advances a
    `BodyStore` by one step at a time. It keeps no per-step state, so
    `step(store, dt)` is a pure function of the store contents and `dt`.
    """

    G = 1.0  # Gravitational constant (normalized units)
    EPSILON_DEFAULT = 1e-3  # Default softening length

    def __init__(
        self,
        G: Optional[float] = None,
        epsilon: Optional[float] = None,
        integrator: Union[Integrator, str, None] = None,
        force_calculator: Optional[ForceCalculator] = None,
    ):
        """Initialize N-body system.

        Args:
            G: Gravitational constant (default: 1.0, normalized units)
            epsilon: Softening length, must be > 0 (default: EPSILON_DEFAULT)
            integrator: Integrator instance or name (default: symplectic Euler)
            force_calculator: Pairwise force kernel (default: vectorized)

        Raises:
            ConfigurationError: If G is negative or epsilon is not positive
        """
        self.G = float(self.G if G is None else G)
        self.epsilon = float(self.EPSILON_DEFAULT if epsilon is None else epsilon)
        if not math.isfinite(self.G) or self.G < 0.0:
            raise ConfigurationError(f"Gravitational constant must be finite and non-negative, got {self.G}")
        if not math.isfinite(self.epsilon) or self.epsilon <= 0.0:
            raise ConfigurationError(f"Softening length must be positive, got {self.epsilon}")

        if integrator is None:
            integrator = "symplectic_euler"
        if isinstance(integrator, str):
            try:
                integrator = get_integrator(integrator)
            except ValueError as exc:
                raise ConfigurationError(str(exc)) from exc
        self.integrator = integrator
        self.force_calculator = force_calculator or ForceCalculator()

    def compute_accelerations(self, positions: np.ndarray, masses: np.ndarray) -> np.ndarray:
        """Net softened gravitational acceleration on every body, (n, dim)."""
        return self.force_calculator.compute_accelerations(positions, masses, self.G, self.epsilon)

    def step(self, store: BodyStore, dt: float) -> None:
        """Advance every body in `store` by exactly `dt` simulated seconds.

        The new state is computed off to the side and only written back if
        it is entirely finite.

        Raises:
            InvariantViolation: If dt is not positive and finite, or the
                step produced non-finite values. The store is unchanged.
        """
        dt = float(dt)
        if not math.isfinite(dt) or dt <= 0.0:
            raise InvariantViolation(f"Time step must be positive and finite, got {dt}")

        masses = store.masses

        def acceleration(positions: np.ndarray) -> np.ndarray:
            return self.compute_accelerations(positions, masses)

        # Overflow is reported below as an InvariantViolation
        with np.errstate(over="ignore", invalid="ignore"):
            new_positions, new_velocities = self.integrator.step(
                store.positions, store.velocities, acceleration, dt
            )

        if not (np.all(np.isfinite(new_positions)) and np.all(np.isfinite(new_velocities))):
            bad = np.flatnonzero(
                ~(np.all(np.isfinite(new_positions), axis=1) & np.all(np.isfinite(new_velocities), axis=1))
            )
            raise InvariantViolation(
                f"Non-finite state after {self.integrator.name} step with dt={dt} "
                f"for bodies {[store.names[i] for i in bad]}"
            )

        store.replace_state(new_positions, new_velocities)
