"""Configuration management."""

import json
import math
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Optional

from planet_sim.errors import ConfigurationError
from planet_sim.physics.integrators import list_integrators
from planet_sim.physics.scheduler import RateLimits


@dataclass
class SimulationConfig:
    """Simulation configuration.

    Defaults are SI units, matching world files (metres, kilograms, seconds).
    """
    # Physics
    gravitational_constant: float = 6.67430e-11
    softening: float = 1000.0
    integrator: str = "symplectic_euler"

    # Time control
    ticks_per_second: float = 60.0
    min_ticks_per_second: float = 1.0
    max_ticks_per_second: float = 2000.0
    seconds_per_tick: float = 1.0
    min_seconds_per_tick: float = 1.0
    max_seconds_per_tick: float = 3600.0
    max_steps_per_advance: int = 250
    tick_step_factor: float = 1.5
    time_step_factor: float = 2.0

    # World setup
    seed: Optional[int] = None
    recenter: bool = True

    @property
    def limits(self) -> RateLimits:
        return RateLimits(
            min_ticks_per_second=self.min_ticks_per_second,
            max_ticks_per_second=self.max_ticks_per_second,
            min_seconds_per_tick=self.min_seconds_per_tick,
            max_seconds_per_tick=self.max_seconds_per_tick,
        )

    def validate(self) -> "SimulationConfig":
        """Check every field, raising ConfigurationError on the first bad one.

        Returns:
            self, for chaining
        """
        if not math.isfinite(self.gravitational_constant) or self.gravitational_constant < 0:
            raise ConfigurationError(f"gravitational_constant must be non-negative, got {self.gravitational_constant}")
        if not math.isfinite(self.softening) or self.softening <= 0:
            raise ConfigurationError(f"softening must be positive, got {self.softening}")
        if self.integrator.lower() not in list_integrators():
            raise ConfigurationError(f"Unknown integrator '{self.integrator}'. Available: {list_integrators()}")

        limits = self.limits
        limits.validate()
        if not limits.min_ticks_per_second <= self.ticks_per_second <= limits.max_ticks_per_second:
            raise ConfigurationError(
                f"ticks_per_second {self.ticks_per_second} outside "
                f"[{limits.min_ticks_per_second}, {limits.max_ticks_per_second}]"
            )
        if not limits.min_seconds_per_tick <= self.seconds_per_tick <= limits.max_seconds_per_tick:
            raise ConfigurationError(
                f"seconds_per_tick {self.seconds_per_tick} outside "
                f"[{limits.min_seconds_per_tick}, {limits.max_seconds_per_tick}]"
            )

        if (not isinstance(self.max_steps_per_advance, int) or isinstance(self.max_steps_per_advance, bool)
                or self.max_steps_per_advance < 1):
            raise ConfigurationError(
                f"max_steps_per_advance must be an integer of at least 1, got {self.max_steps_per_advance!r}"
            )
        if self.tick_step_factor <= 1 or self.time_step_factor <= 1:
            raise ConfigurationError("tick_step_factor and time_step_factor must be greater than 1")
        if self.seed is not None and (not isinstance(self.seed, int) or isinstance(self.seed, bool)):
            raise ConfigurationError(f"seed must be an integer or null, got {self.seed!r}")
        if not isinstance(self.recenter, bool):
            raise ConfigurationError(f"recenter must be true or false, got {self.recenter!r}")
        return self


def _is_yaml(path: Path) -> bool:
    return path.suffix in ('.yaml', '.yml')


def load_config(config_path: str) -> SimulationConfig:
    """Load configuration from file.

    Args:
        config_path: Path to config file (.json or .yaml)

    Returns:
        Validated SimulationConfig

    Raises:
        ConfigurationError: If the file cannot be read or holds unknown or
            invalid settings
    """
    config_path = Path(config_path)

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            if _is_yaml(config_path):
                try:
                    import yaml
                except ImportError:
                    raise ImportError("YAML support requires PyYAML. Install with: pip install pyyaml")
                try:
                    data = yaml.safe_load(f)
                except yaml.YAMLError as exc:
                    raise ConfigurationError(f"Cannot parse config {config_path}: {exc}") from exc
            else:
                data = json.load(f)
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigurationError(f"Cannot read config {config_path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Cannot parse config {config_path}: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config {config_path} must contain a mapping, got {type(data).__name__}")

    known = {f.name for f in fields(SimulationConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigurationError(f"Unknown config keys in {config_path}: {unknown}")

    try:
        return SimulationConfig(**data).validate()
    except (TypeError, AttributeError) as exc:
        raise ConfigurationError(f"Invalid value in config {config_path}: {exc}") from exc


def save_config(config: SimulationConfig, output_path: str):
    """Save configuration to file.

    Args:
        config: SimulationConfig object
        output_path: Output file path (.json or .yaml)
    """
    output_path = Path(output_path)
    data = asdict(config)

    with open(output_path, 'w') as f:
        if _is_yaml(output_path):
            try:
                import yaml
            except ImportError:
                raise ImportError("YAML support requires PyYAML. Install with: pip install pyyaml")
            yaml.dump(data, f, default_flow_style=False)
        else:
            json.dump(data, f, indent=2)
