"""Abstract base class for numerical integrators."""

from abc import ABC, abstractmethod
from typing import Callable, Tuple

import numpy as np

AccelerationFn = Callable[[np.ndarray], np.ndarray]


class Integrator(ABC):
    """Abstract interface for numerical integrators."""

    @abstractmethod
    def step(
        self,
        positions: np.ndarray,
        velocities: np.ndarray,
        acceleration: AccelerationFn,
        dt: float,
    ) -> Tuple[np.ndarray, np.ndarray]:
        """Perform one integration step.

        Implementations must not modify their inputs.

        Args:
            positions: Current positions (n, dim)
            velocities: Current velocities (n, dim)
            acceleration: Maps positions (n, dim) to accelerations (n, dim)
            dt: Time step

        Returns:
            Tuple of (new_positions, new_velocities)
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the name of this integrator."""
        pass

    @property
    @abstractmethod
    def order(self) -> int:
        """Return the order of accuracy (1 for the Euler variants, 2 for Verlet)."""
        pass

    @property
    def symplectic(self) -> bool:
        """Whether the scheme bounds long-run energy drift."""
        return False
