"""Tests for the body store."""

import numpy as np
import pytest
from planet_sim.errors import ConfigurationError, InvariantViolation
from planet_sim.physics.body_store import Body, BodyStore


def make_store():
    return BodyStore([
        Body(position=[0.0, 0.0], velocity=[0.0, 0.0], mass=10.0, name="star"),
        Body(position=[1.0, 0.0], velocity=[0.0, 2.0], mass=1.0, name="planet", color=(0.2, 0.4, 1.0)),
    ])


def test_store_construction():
    """Test arrays, names and per-index access."""
    store = make_store()

    assert len(store) == 2
    assert store.dim == 2
    assert store.names == ["star", "planet"]
    assert np.allclose(store.positions, [[0.0, 0.0], [1.0, 0.0]])
    assert np.allclose(store.masses, [10.0, 1.0])

    planet = store[1]
    assert planet.name == "planet"
    assert planet.mass == 1.0
    assert np.allclose(planet.velocity, [0.0, 2.0])
    # RGB colors get an opaque alpha channel
    assert planet.color == (0.2, 0.4, 1.0, 1.0)
    assert store.index_of("planet") == 1
    with pytest.raises(KeyError):
        store.index_of("comet")


def test_store_views_are_read_only():
    """Callers cannot mutate a body through the exposed arrays."""
    store = make_store()

    with pytest.raises(ValueError):
        store.positions[0, 0] = 5.0
    with pytest.raises(ValueError):
        store.velocities[1, 1] = 5.0
    with pytest.raises(ValueError):
        store.masses[0] = 5.0

    body = store[0]
    body.position[0] = 99.0
    assert store.positions[0, 0] == 0.0


@pytest.mark.parametrize("mass", [0.0, -1.0, float("nan"), float("inf")])
def test_store_rejects_bad_mass(mass):
    """Non-positive or non-finite masses are rejected at construction."""
    with pytest.raises(ConfigurationError):
        BodyStore([Body(position=[0.0, 0.0], velocity=[0.0, 0.0], mass=mass)])


def test_store_rejects_malformed_bodies():
    """Test dimension and finiteness checks."""
    with pytest.raises(ConfigurationError):
        BodyStore([])
    with pytest.raises(ConfigurationError):
        BodyStore([Body(position=[0.0], velocity=[0.0], mass=1.0)])
    with pytest.raises(ConfigurationError):
        BodyStore([Body(position=[0.0, 0.0], velocity=[0.0, 0.0, 0.0], mass=1.0)])
    with pytest.raises(ConfigurationError):
        BodyStore([
            Body(position=[0.0, 0.0], velocity=[0.0, 0.0], mass=1.0),
            Body(position=[0.0, 0.0, 1.0], velocity=[0.0, 0.0, 0.0], mass=1.0),
        ])
    with pytest.raises(ConfigurationError):
        BodyStore([Body(position=[np.nan, 0.0], velocity=[0.0, 0.0], mass=1.0)])
    with pytest.raises(ConfigurationError):
        BodyStore([Body(position=[0.0, 0.0], velocity=[0.0, 0.0], mass=1.0, color=(1.0, 0.0))])


@pytest.mark.parametrize("radius", ["big", -1.0, float("nan"), float("inf")])
def test_store_rejects_bad_radius(radius):
    """Radii must be non-negative finite numbers."""
    with pytest.raises(ConfigurationError):
        BodyStore([Body(position=[0.0, 0.0], velocity=[0.0, 0.0], mass=1.0, radius=radius)])


def test_snapshot_is_immutable_copy():
    """A snapshot keeps the state it was taken with."""
    store = make_store()
    snapshot = store.snapshot()

    store.replace_state(store.positions + 1.0, store.velocities)

    assert len(snapshot) == 2
    assert np.allclose(snapshot.positions, [[0.0, 0.0], [1.0, 0.0]])
    with pytest.raises(ValueError):
        snapshot.positions[0, 0] = 1.0


def test_replace_state_shape_mismatch():
    """A malformed update is refused and leaves the store untouched."""
    store = make_store()
    with pytest.raises(InvariantViolation):
        store.replace_state(np.zeros((3, 2)), np.zeros((3, 2)))
    with pytest.raises(InvariantViolation):
        store.replace_state(np.zeros((2, 2)), np.zeros((2, 3)))
    assert np.allclose(store.positions, [[0.0, 0.0], [1.0, 0.0]])


def test_recenter():
    """Recentring zeroes centre of mass and total momentum."""
    store = make_store()
    store.recenter()

    masses = store.masses[:, np.newaxis]
    assert np.allclose(np.sum(masses * store.positions, axis=0), 0.0)
    assert np.allclose(np.sum(masses * store.velocities, axis=0), 0.0)
    # Relative geometry is preserved
    assert np.allclose(store.positions[1] - store.positions[0], [1.0, 0.0])
