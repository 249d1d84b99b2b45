"""Conserved-quantity diagnostics for N-body simulations."""

from typing import Tuple, Union

import numpy as np

from planet_sim.physics.body_store import BodyStore, StoreSnapshot

State = Union[BodyStore, StoreSnapshot]


class Diagnostics:
    """Compute energy and momentum consistent with the softened force law."""

    def __init__(self, G: float = 1.0, epsilon: float = 1e-3):
        """Initialize diagnostics.

        Args:
            G: Gravitational constant
            epsilon: Softening length (must match the force calculation)
        """
        self.G = G
        self.epsilon = epsilon

    @classmethod
    def for_system(cls, system) -> "Diagnostics":
        """Diagnostics matching an `NBodySystem`'s G and softening."""
        return cls(G=system.G, epsilon=system.epsilon)

    def kinetic_energy(self, state: State) -> float:
        """K = 0.5 * sum m_i * |v_i|^2"""
        v_sq = np.sum(state.velocities ** 2, axis=1)
        return float(0.5 * np.sum(state.masses * v_sq))

    def potential_energy(self, state: State) -> float:
        """Softened potential energy.

        U = -G * sum_{i<j} m_i * m_j / sqrt(r_ij^2 + eps^2)
        """
        positions = state.positions
        masses = state.masses
        n = len(masses)
        if n < 2:
            return 0.0
        i_idx, j_idx = np.triu_indices(n, k=1)
        r_diff = positions[j_idx] - positions[i_idx]
        r_soft = np.sqrt(np.sum(r_diff ** 2, axis=1) + self.epsilon ** 2)
        return float(-self.G * np.sum(masses[i_idx] * masses[j_idx] / r_soft))

    def compute_energies(self, state: State) -> Tuple[float, float, float]:
        """Return (kinetic_energy, potential_energy, total_energy)."""
        K = self.kinetic_energy(state)
        U = self.potential_energy(state)
        return K, U, K + U

    def total_energy(self, state: State) -> float:
        return self.compute_energies(state)[2]

    def linear_momentum(self, state: State) -> np.ndarray:
        """P = sum m_i * v_i, shape (dim,)."""
        return np.sum(state.masses[:, np.newaxis] * state.velocities, axis=0)

    def angular_momentum(self, state: State) -> Union[float, np.ndarray]:
        """L = sum m_i * (r_i x v_i) about the origin.

        A scalar (the z component) for 2D systems, a 3-vector for 3D ones.
        """
        positions = state.positions
        p = state.masses[:, np.newaxis] * state.velocities
        if positions.shape[1] == 2:
            return float(np.sum(positions[:, 0] * p[:, 1] - positions[:, 1] * p[:, 0]))
        return np.sum(np.cross(positions, p), axis=0)

    def center_of_mass(self, state: State) -> np.ndarray:
        masses = state.masses
        return np.sum(masses[:, np.newaxis] * state.positions, axis=0) / np.sum(masses)
