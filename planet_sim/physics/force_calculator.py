"""Softened pairwise gravity.

Every ordered pair (i, j), i != j, contributes

    a_i += G * m_j * (p_j - p_i) / (|p_j - p_i|^2 + eps^2)^(3/2)

which is Newton's F = G m_i m_j / r^2 along the line from i to j, divided by
m_i, with Plummer softening so coincident bodies give a finite (zero)
contribution instead of a division by zero. O(N^2) per evaluation.
"""

from typing import Literal

import numpy as np


class ForceCalculator:
    """Pairwise acceleration kernel.

    Both methods sum contributions to body i in ascending j order, so the
    result is reproducible bit for bit for a given input.
    """

    def __init__(self, method: Literal["vectorized", "direct"] = "vectorized"):
        if method not in ("vectorized", "direct"):
            raise ValueError(f"Unknown force method '{method}'. Use 'vectorized' or 'direct'")
        self.method = method

    def compute_accelerations(
        self,
        positions: np.ndarray,
        masses: np.ndarray,
        G: float,
        epsilon: float,
    ) -> np.ndarray:
        """Compute the net gravitational acceleration on every body.

        Args:
            positions: (n, dim) positions
            masses: (n,) masses
            G: Gravitational constant
            epsilon: Softening length (> 0)

        Returns:
            (n, dim) accelerations
        """
        if self.method == "direct":
            return self._compute_direct(positions, masses, G, epsilon)
        return self._compute_vectorized(positions, masses, G, epsilon)

    def _compute_vectorized(self, positions, masses, G, epsilon) -> np.ndarray:
        n, dim = positions.shape
        # r_diff[i, j] = p_j - p_i: (1,n,dim) - (n,1,dim) -> (n,n,dim)
        pos_i = np.reshape(positions, (n, 1, dim))
        pos_j = np.reshape(positions, (1, n, dim))
        r_diff = pos_j - pos_i
        r_sq = np.sum(np.square(r_diff), axis=2)
        r_soft_cubed = np.power(r_sq + epsilon ** 2, 1.5)

        m_j = np.expand_dims(masses, 0)
        magnitude = G * m_j / r_soft_cubed
        # No self-force
        magnitude = magnitude * (1.0 - np.eye(n))

        return np.sum(np.expand_dims(magnitude, 2) * r_diff, axis=1)

    def _compute_direct(self, positions, masses, G, epsilon) -> np.ndarray:
        n = positions.shape[0]
        accelerations = np.zeros_like(positions)
        eps_sq = epsilon ** 2
        for i in range(n):
            for j in range(n):
                if i == j:
                    continue
                r_diff = positions[j] - positions[i]
                r_soft_cubed = (np.dot(r_diff, r_diff) + eps_sq) ** 1.5
                accelerations[i] += G * masses[j] / r_soft_cubed * r_diff
        return accelerations
