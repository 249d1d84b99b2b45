"""Tests for numerical integrators."""

import numpy as np
import pytest
from planet_sim.physics.body_store import Body, BodyStore
from planet_sim.physics.diagnostics import Diagnostics
from planet_sim.physics.integrators import (
    EulerIntegrator,
    SymplecticEulerIntegrator,
    VerletIntegrator,
    get_integrator,
    list_integrators,
)
from planet_sim.physics.nbody import NBodySystem


def constant_gravity(positions):
    return np.tile([0.0, -2.0], (positions.shape[0], 1))


def initial_state():
    return np.array([[0.0, 0.0]]), np.array([[1.0, 0.0]])


def test_euler_integrator():
    """Positions advance with the old velocity."""
    integrator = EulerIntegrator()
    positions, velocities = initial_state()

    new_pos, new_vel = integrator.step(positions, velocities, constant_gravity, 0.5)

    assert np.array_equal(new_vel, [[1.0, -1.0]])
    assert np.array_equal(new_pos, [[0.5, 0.0]])
    assert integrator.name == "euler"
    assert integrator.order == 1
    assert not integrator.symplectic


def test_symplectic_euler_integrator():
    """Positions advance with the freshly kicked velocity."""
    integrator = SymplecticEulerIntegrator()
    positions, velocities = initial_state()

    new_pos, new_vel = integrator.step(positions, velocities, constant_gravity, 0.5)

    assert np.array_equal(new_vel, [[1.0, -1.0]])
    assert np.array_equal(new_pos, [[0.5, -0.5]])
    assert integrator.name == "symplectic_euler"
    assert integrator.order == 1
    assert integrator.symplectic


def test_verlet_integrator():
    """Verlet is exact for constant acceleration."""
    integrator = VerletIntegrator()
    positions, velocities = initial_state()

    new_pos, new_vel = integrator.step(positions, velocities, constant_gravity, 0.5)

    # y = v_y t + 0.5 a t^2 = -0.25
    assert np.array_equal(new_pos, [[0.5, -0.25]])
    assert np.array_equal(new_vel, [[1.0, -1.0]])
    assert integrator.name == "verlet"
    assert integrator.order == 2
    assert integrator.symplectic


@pytest.mark.parametrize("name", ["euler", "symplectic_euler", "verlet"])
def test_integrators_do_not_modify_inputs(name):
    integrator = get_integrator(name)
    positions, velocities = initial_state()
    integrator.step(positions, velocities, constant_gravity, 0.5)
    assert np.array_equal(positions, [[0.0, 0.0]])
    assert np.array_equal(velocities, [[1.0, 0.0]])


def test_integrator_registry():
    """Test lookup by name."""
    assert list_integrators()[0] == "symplectic_euler"
    assert set(list_integrators()) == {"euler", "symplectic_euler", "verlet"}
    assert isinstance(get_integrator("VERLET"), VerletIntegrator)
    with pytest.raises(ValueError):
        get_integrator("rk4")


def test_symplectic_schemes_bound_energy_drift():
    """Explicit Euler gains energy on a circular orbit; the symplectic schemes do not."""
    def energy_drift(name):
        store = BodyStore([
            Body(position=[0.0, 0.0], velocity=[0.0, 0.0], mass=1.0),
            Body(position=[1.0, 0.0], velocity=[0.0, 1.0], mass=1e-6),
        ])
        system = NBodySystem(G=1.0, epsilon=1e-3, integrator=name)
        diagnostics = Diagnostics.for_system(system)
        E0 = diagnostics.total_energy(store)
        for _ in range(2000):
            system.step(store, 0.01)
        return abs(diagnostics.total_energy(store) - E0) / abs(E0)

    euler = energy_drift("euler")
    symplectic = energy_drift("symplectic_euler")
    verlet = energy_drift("verlet")

    assert euler > 0.05
    assert symplectic < 0.01
    assert verlet < 0.01
