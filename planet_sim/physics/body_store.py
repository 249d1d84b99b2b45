"""Authoritative physical state of every body in the simulation."""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

import numpy as np

from planet_sim.errors import ConfigurationError, InvariantViolation

logger = logging.getLogger(__name__)

DEFAULT_COLOR = (1.0, 1.0, 1.0, 1.0)


@dataclass
class Body:
    """A point mass plus the display metadata a renderer needs."""
    position: Sequence[float]
    velocity: Sequence[float]
    mass: float
    name: str = ""
    radius: float = 0.0
    color: Tuple[float, float, float, float] = DEFAULT_COLOR


@dataclass(frozen=True)
class StoreSnapshot:
    """Immutable copy of the store, safe to hand to a renderer."""
    positions: np.ndarray
    velocities: np.ndarray
    masses: np.ndarray
    names: Tuple[str, ...] = field(default_factory=tuple)
    radii: Optional[np.ndarray] = None
    colors: Optional[np.ndarray] = None

    def __len__(self) -> int:
        return self.positions.shape[0]


def _read_only(array: np.ndarray) -> np.ndarray:
    view = array.view()
    view.flags.writeable = False
    return view


def _frozen_copy(array: np.ndarray) -> np.ndarray:
    copy = np.array(array, copy=True)
    copy.flags.writeable = False
    return copy


class BodyStore:
    """Ordered collection of bodies indexed 0..N-1.

    State lives in three arrays: positions (n, dim), velocities (n, dim) and
    masses (n,). Callers get read-only views; the only mutation path is
    `replace_state`, which swaps in the full state of every body at once so
    nobody can observe a half-applied step.
    """

    def __init__(self, bodies: Iterable[Body]):
        """Build the store from initial bodies.

        Args:
            bodies: Initial bodies, in index order

        Raises:
            ConfigurationError: If there are no bodies, a mass is not positive
                and finite, or positions/velocities are malformed
        """
        bodies = list(bodies)
        if not bodies:
            raise ConfigurationError("A simulation needs at least one body")

        positions = []
        velocities = []
        masses = []
        radii = []
        colors = []
        dim = None
        for index, body in enumerate(bodies):
            label = body.name or f"body {index}"
            try:
                position = np.asarray(body.position, dtype=np.float64)
                velocity = np.asarray(body.velocity, dtype=np.float64)
                mass = float(body.mass)
                radius = float(body.radius)
                color = tuple(float(c) for c in body.color)
            except (TypeError, ValueError) as exc:
                raise ConfigurationError(f"{label}: non-numeric state ({exc})") from exc
            if len(color) == 3:
                color = color + (1.0,)
            if len(color) != 4:
                raise ConfigurationError(f"{label}: color must be RGB or RGBA, got {len(color)} channels")

            if position.ndim != 1 or position.shape[0] not in (2, 3):
                raise ConfigurationError(f"{label}: position must be a 2D or 3D vector, got shape {position.shape}")
            if velocity.shape != position.shape:
                raise ConfigurationError(f"{label}: velocity shape {velocity.shape} does not match position shape {position.shape}")
            if dim is None:
                dim = position.shape[0]
            elif position.shape[0] != dim:
                raise ConfigurationError(f"{label}: expected {dim}D vectors like the first body, got {position.shape[0]}D")
            if not np.isfinite(mass) or mass <= 0.0:
                raise ConfigurationError(f"{label}: mass must be positive and finite, got {mass}")
            if not (np.all(np.isfinite(position)) and np.all(np.isfinite(velocity))):
                raise ConfigurationError(f"{label}: position and velocity must be finite")
            if not np.isfinite(radius) or radius < 0.0:
                raise ConfigurationError(f"{label}: radius must be non-negative and finite, got {radius}")

            positions.append(position)
            velocities.append(velocity)
            masses.append(mass)
            radii.append(radius)
            colors.append(color)

        self._positions = np.array(positions, dtype=np.float64)
        self._velocities = np.array(velocities, dtype=np.float64)
        self._masses = np.array(masses, dtype=np.float64)
        self._masses.flags.writeable = False
        self._names = tuple(body.name or f"body-{i}" for i, body in enumerate(bodies))
        self._radii = _frozen_copy(np.array(radii, dtype=np.float64))
        self._colors = _frozen_copy(np.array(colors, dtype=np.float64))

        logger.debug("Body store created with %d bodies in %dD", len(self), self.dim)

    def __len__(self) -> int:
        return self._masses.shape[0]

    def __getitem__(self, index: int) -> Body:
        return Body(
            position=self._positions[index].copy(),
            velocity=self._velocities[index].copy(),
            mass=float(self._masses[index]),
            name=self._names[index],
            radius=float(self._radii[index]),
            color=tuple(self._colors[index]),
        )

    def __iter__(self) -> Iterator[Body]:
        for index in range(len(self)):
            yield self[index]

    @property
    def dim(self) -> int:
        return self._positions.shape[1]

    @property
    def positions(self) -> np.ndarray:
        return _read_only(self._positions)

    @property
    def velocities(self) -> np.ndarray:
        return _read_only(self._velocities)

    @property
    def masses(self) -> np.ndarray:
        return _read_only(self._masses)

    @property
    def names(self) -> List[str]:
        return list(self._names)

    def index_of(self, name: str) -> int:
        """Return the index of the body called `name`."""
        try:
            return self._names.index(name)
        except ValueError:
            raise KeyError(name) from None

    def snapshot(self) -> StoreSnapshot:
        """Return an immutable copy of the current state."""
        return StoreSnapshot(
            positions=_frozen_copy(self._positions),
            velocities=_frozen_copy(self._velocities),
            masses=self._masses,
            names=self._names,
            radii=self._radii,
            colors=self._colors,
        )

    def replace_state(self, positions: np.ndarray, velocities: np.ndarray) -> None:
        """Replace the position and velocity of every body in one go.

        Reserved for the integrator. Both arrays are copied.

        Raises:
            InvariantViolation: If either array does not have shape (n, dim)
        """
        positions = np.asarray(positions, dtype=np.float64)
        velocities = np.asarray(velocities, dtype=np.float64)
        expected = self._positions.shape
        if positions.shape != expected or velocities.shape != expected:
            raise InvariantViolation(
                f"State shape mismatch: expected {expected}, got positions {positions.shape} "
                f"and velocities {velocities.shape}"
            )
        self._positions = positions.copy()
        self._velocities = velocities.copy()

    def recenter(self) -> None:
        """Shift positions and velocities into the centre-of-mass frame.

        Setup-time helper; a system built around a single heavy star otherwise
        drifts with the star's recoil.
        """
        masses = self._masses[:, np.newaxis]
        total_mass = np.sum(self._masses)
        com = np.sum(masses * self._positions, axis=0) / total_mass
        com_velocity = np.sum(masses * self._velocities, axis=0) / total_mass
        self.replace_state(self._positions - com, self._velocities - com_velocity)
        logger.debug("Recentred on centre of mass %s (velocity %s)", com, com_velocity)
