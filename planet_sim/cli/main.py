"""CLI main entry point."""

import argparse
import logging
import os
import sys
from typing import List, Optional

import numpy as np

from planet_sim.errors import ConfigurationError
from planet_sim.physics.integrators import list_integrators
from planet_sim.physics.simulator import Simulator
from planet_sim.utils.config import SimulationConfig, load_config
from planet_sim.utils.rate_tracker import format_duration, format_time_rate

logger = logging.getLogger(__name__)

LOG_ENV_VAR = "PLANET_SIM_LOG"
LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR')

# argparse dest -> SimulationConfig field
_OVERRIDES = {
    'ticks': 'ticks_per_second',
    'seconds_per_tick': 'seconds_per_tick',
    'integrator': 'integrator',
    'softening': 'softening',
    'max_steps': 'max_steps_per_advance',
    'seed': 'seed',
}


def build_config(args) -> SimulationConfig:
    """Config file (if any) with command-line overrides applied."""
    config = load_config(args.config) if args.config else SimulationConfig()
    for dest, field_name in _OVERRIDES.items():
        value = getattr(args, dest)
        if value is not None:
            setattr(config, field_name, value)
    if args.no_recenter:
        config.recenter = False
    return config.validate()


def run_headless(sim: Simulator, frames: int, fps: float, report_every: int):
    """Drive the simulator with a synthetic frame clock and print diagnostics."""
    diagnostics = sim.diagnostics
    real_dt = 1.0 / fps
    scheduler = sim.scheduler

    print(f"Bodies: {len(sim.store)}, Integrator: {sim.system.integrator.name}, "
          f"eps: {sim.system.epsilon:g}")
    print(f"Ticks/s: {scheduler.ticks_per_second:g}, s/tick: {scheduler.seconds_per_tick:g}, "
          f"time rate: {format_time_rate(scheduler.simulated_seconds_per_real_second)}")

    K0, U0, E0 = diagnostics.compute_energies(sim.store)
    P0 = diagnostics.linear_momentum(sim.store)

    print(f"{'Frame':<8} {'Ticks':<8} {'Sim time':<16} {'K':<12} {'U':<12} {'E':<12} {'dE/E0':<10} {'|dP|':<10}")
    print("-" * 94)
    print(f"{0:<8} {0:<8} {'0s':<16} {K0:<12.4g} {U0:<12.4g} {E0:<12.4g} {0.0:<10.4f}% {0.0:<10.3g}")

    for frame in range(1, frames + 1):
        sim.advance(real_dt)
        if frame % report_every == 0 or frame == frames:
            K, U, E = diagnostics.compute_energies(sim.store)
            dE = (E - E0) / abs(E0) * 100 if abs(E0) > 0 else 0.0
            dP = float(np.linalg.norm(diagnostics.linear_momentum(sim.store) - P0))
            print(f"{frame:<8} {sim.step_count:<8} {format_duration(sim.time):<16} "
                  f"{K:<12.4g} {U:<12.4g} {E:<12.4g} {dE:<10.4f}% {dP:<10.3g}")

    dropped = scheduler.clock.dropped_real_time
    if dropped > 0:
        print(f"Step cap dropped {dropped:.3f}s of real time")
    print("Simulation complete!")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Planet Simulator - gravitational N-body simulation")

    parser.add_argument('world', nargs='?', default=None,
                       help='World file (.json or .yaml); bundled solar system if omitted')
    parser.add_argument('--config', type=str, default=None,
                       help='SimulationConfig file (.json or .yaml)')

    # Time control
    parser.add_argument('--ticks', type=float, default=None,
                       help='Ticks per second. More ticks give a more accurate simulation')
    parser.add_argument('--seconds-per-tick', type=float, default=None,
                       help='Simulated seconds advanced by each tick')
    parser.add_argument('--max-steps', type=int, default=None,
                       help='Most ticks run per frame before excess time is dropped')

    # Physics
    parser.add_argument('--integrator', type=str, default=None, choices=list_integrators(),
                       help='Numerical integrator (default: symplectic_euler)')
    parser.add_argument('--softening', type=float, default=None,
                       help='Softening length in metres')
    parser.add_argument('--seed', type=int, default=None,
                       help='Seed for orbital phases')
    parser.add_argument('--no-recenter', action='store_true',
                       help='Keep world-file coordinates instead of the centre-of-mass frame')

    # Headless run
    parser.add_argument('--frames', type=int, default=600,
                       help='Number of frames to simulate headless')
    parser.add_argument('--fps', type=float, default=60.0,
                       help='Frames per second (synthetic clock when headless)')
    parser.add_argument('--report-every', type=int, default=60,
                       help='Print diagnostics every N frames')

    # Rendering
    parser.add_argument('--view', action='store_true',
                       help='Open the live viewer instead of running headless')
    parser.add_argument('--velocity-vectors', action='store_true',
                       help='Draw velocity vectors in the viewer')

    # Info
    parser.add_argument('--list-integrators', action='store_true',
                       help='List available integrators and exit')
    parser.add_argument('--log-level', type=str, default=None,
                       choices=LOG_LEVELS,
                       help=f'Logging level (default: ${LOG_ENV_VAR} or WARNING)')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    level = args.log_level or os.environ.get(LOG_ENV_VAR, "WARNING").upper()
    if level not in LOG_LEVELS:
        parser.error(f"${LOG_ENV_VAR} must be one of {', '.join(LOG_LEVELS)}, got {level!r}")
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    if args.list_integrators:
        print("Available integrators:")
        for name in list_integrators():
            print(f"  - {name}")
        return 0

    if args.frames < 0 or args.fps <= 0 or args.report_every < 1:
        parser.error("--frames must be >= 0, --fps > 0 and --report-every >= 1")

    try:
        config = build_config(args)
        sim = Simulator.from_world(args.world, config)
    except ConfigurationError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    if args.view:
        from planet_sim.render.viewer import LiveViewer

        LiveViewer(sim, fps=args.fps, show_velocity=args.velocity_vectors).run()
    else:
        run_headless(sim, args.frames, args.fps, args.report_every)
    return 0


if __name__ == '__main__':
    sys.exit(main())
