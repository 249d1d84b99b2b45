"""Numerical integrators for N-body simulations."""

from typing import Dict, List, Type

from planet_sim.physics.integrators.base import Integrator
from planet_sim.physics.integrators.euler import EulerIntegrator
from planet_sim.physics.integrators.symplectic_euler import SymplecticEulerIntegrator
from planet_sim.physics.integrators.verlet import VerletIntegrator

_INTEGRATORS: Dict[str, Type[Integrator]] = {
    "symplectic_euler": SymplecticEulerIntegrator,
    "verlet": VerletIntegrator,
    "euler": EulerIntegrator,
}


def list_integrators() -> List[str]:
    """Names accepted by `get_integrator`, default first."""
    return list(_INTEGRATORS)


def get_integrator(name: str) -> Integrator:
    """Get an integrator instance by name.

    Raises:
        ValueError: If the name is unknown
    """
    integrator_class = _INTEGRATORS.get(name.lower())
    if integrator_class is None:
        raise ValueError(f"Unknown integrator '{name}'. Available: {list_integrators()}")
    return integrator_class()


__all__ = [
    "Integrator",
    "EulerIntegrator",
    "SymplecticEulerIntegrator",
    "VerletIntegrator",
    "get_integrator",
    "list_integrators",
]
