"""Configuration and rate reporting utilities."""

from planet_sim.utils.config import SimulationConfig, load_config, save_config
from planet_sim.utils.rate_tracker import RateTracker, format_duration, format_time_rate

__all__ = [
    "SimulationConfig",
    "load_config",
    "save_config",
    "RateTracker",
    "format_duration",
    "format_time_rate",
]
