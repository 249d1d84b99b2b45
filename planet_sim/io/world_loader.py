"""Build the initial Body Store from a world description.

World files list stars and planets; planets may carry moons as `children`:

    {"stars":   [{"name": "Sol", "mass": 1.989e30, "diameter": 1.39e9,
                  "height": 0, "color": [1.0, 0.8, 0.3, 1.0]}],
     "planets": [{"name": "Earth", "mass": 5.97e24, "diameter": 1.27e7,
                  "height": 1.496e8, "color": [0.2, 0.4, 1.0, 1.0],
                  "children": [{"name": "Moon", ...}]}]}

`height` is the orbital radius in kilometres. Every orbiting body starts on
a circular orbit around its parent at a random phase.
"""

import json
import logging
from importlib import resources
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import numpy as np

from planet_sim.errors import ConfigurationError
from planet_sim.physics.body_store import Body, BodyStore

logger = logging.getLogger(__name__)

G_SI = 6.67430e-11
KM_TO_M = 1_000.0
DEFAULT_WORLD = "sol.json"


def stable_orbit(
    parent: Body,
    mass: float,
    radius: float,
    phase: float,
    G: float = G_SI,
):
    """Position and velocity for a circular orbit around `parent`.

    Args:
        parent: Body being orbited
        mass: Mass of the orbiting body
        radius: Orbital radius (simulation units)
        phase: Angle from the +x axis, radians
        G: Gravitational constant

    Returns:
        Tuple of (position, velocity) as 2D arrays
    """
    parent_position = np.asarray(parent.position, dtype=np.float64)
    parent_velocity = np.asarray(parent.velocity, dtype=np.float64)
    offset = radius * np.array([np.cos(phase), np.sin(phase)])
    position = parent_position + offset

    # Speed sqrt(G(M+m)/r), perpendicular to the radius (counter-clockwise)
    speed = np.sqrt(G * (parent.mass + mass) / radius)
    tangent = np.array([-np.sin(phase), np.cos(phase)])
    velocity = parent_velocity + speed * tangent
    return position, velocity


def _require(params: Mapping[str, Any], key: str, where: str):
    if key not in params:
        raise ConfigurationError(f"{where}: missing required field '{key}'")
    return params[key]


def _number(params: Mapping[str, Any], key: str, where: str, default=None) -> float:
    value = params.get(key, default) if default is not None else _require(params, key, where)
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{where}: field '{key}' must be a number, got {value!r}") from None


def _common(params: Mapping[str, Any], where: str) -> Dict[str, Any]:
    if not isinstance(params, Mapping):
        raise ConfigurationError(f"{where}: expected an object, got {type(params).__name__}")
    name = str(params.get("name", where))
    mass = _number(params, "mass", name)
    if not mass > 0.0:
        raise ConfigurationError(f"{name}: mass must be positive, got {mass}")
    color = params.get("color", (1.0, 1.0, 1.0, 1.0))
    if not isinstance(color, (list, tuple)):
        raise ConfigurationError(f"{name}: color must be a list of 3 or 4 numbers, got {color!r}")
    return {
        "name": name,
        "mass": mass,
        "radius": 0.5 * _number(params, "diameter", name, default=0.0),
        "color": tuple(color),
    }


def _orbiting(parent: Body, params: Mapping[str, Any], where: str, rng, G: float) -> Body:
    common = _common(params, where)
    height = _number(params, "height", common["name"]) * KM_TO_M
    if not height > 0.0:
        raise ConfigurationError(f"{common['name']}: height must be positive, got {height / KM_TO_M} km")
    phase = np.pi * rng.uniform(0.0, 2.0)
    position, velocity = stable_orbit(parent, common["mass"], height, phase, G=G)
    logger.debug("%s initial velocity: %s", common["name"], velocity)
    return Body(position=position, velocity=velocity, **common)


def build_bodies(
    world: Mapping[str, Any],
    seed: Optional[int] = None,
    G: float = G_SI,
) -> List[Body]:
    """Turn a parsed world description into bodies.

    Order: stars, then each planet followed by its children.

    Args:
        world: Mapping with a non-empty `stars` list and an optional `planets` list
        seed: Seed for the orbital phases
        G: Gravitational constant used for orbital speeds

    Raises:
        ConfigurationError: If the description is malformed
    """
    if not isinstance(world, Mapping):
        raise ConfigurationError(f"World must be an object, got {type(world).__name__}")
    stars = world.get("stars") or []
    planets = world.get("planets") or []
    if not isinstance(stars, list) or not stars:
        raise ConfigurationError("World needs a non-empty 'stars' list")
    if not isinstance(planets, list):
        raise ConfigurationError("World 'planets' must be a list")

    rng = np.random.default_rng(seed)

    primary = Body(position=np.zeros(2), velocity=np.zeros(2), **_common(stars[0], "star 0"))
    bodies = [primary]
    for index, params in enumerate(stars[1:], start=1):
        bodies.append(_orbiting(primary, params, f"star {index}", rng, G))

    for index, params in enumerate(planets):
        planet = _orbiting(primary, params, f"planet {index}", rng, G)
        children = params.get("children") or []
        if not isinstance(children, list):
            raise ConfigurationError(f"{planet.name}: 'children' must be a list")
        bodies.append(planet)
        for child_index, child in enumerate(children):
            bodies.append(_orbiting(planet, child, f"{planet.name} child {child_index}", rng, G))

    return bodies


def read_world(path: Union[str, Path]) -> Dict[str, Any]:
    """Parse a JSON or YAML world file.

    Raises:
        ConfigurationError: If the file cannot be read or parsed
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigurationError(f"Cannot read world file {path}: {exc}") from exc

    if path.suffix in ('.yaml', '.yml'):
        try:
            import yaml
        except ImportError:
            raise ImportError("YAML support requires PyYAML. Install with: pip install pyyaml")
        try:
            return yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Cannot parse world file {path}: {exc}") from exc

    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Cannot parse world file {path}: {exc}") from exc


def default_world_path() -> Path:
    """Path of the bundled solar-system world."""
    return Path(str(resources.files("planet_sim.data").joinpath(DEFAULT_WORLD)))


def load_world(
    path: Union[str, Path, None] = None,
    seed: Optional[int] = None,
    G: float = G_SI,
    recenter: bool = True,
) -> BodyStore:
    """Load a world file into a new Body Store.

    Args:
        path: World file (.json, .yaml); the bundled solar system if None
        seed: Seed for orbital phases
        G: Gravitational constant used for orbital speeds
        recenter: Move into the centre-of-mass frame after placement

    Returns:
        BodyStore in world-file order

    Raises:
        ConfigurationError: If the file is missing or malformed
    """
    path = default_world_path() if path is None else Path(path)
    bodies = build_bodies(read_world(path), seed=seed, G=G)
    store = BodyStore(bodies)
    if recenter:
        store.recenter()
    logger.debug("Loaded %d bodies from %s", len(store), path)
    return store
