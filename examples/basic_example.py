"""Basic example of using the planet simulator."""

from planet_sim import Simulator
from planet_sim.utils import SimulationConfig, format_duration, format_time_rate


def main():
    """Run the bundled solar system for one simulated day per real second."""
    config = SimulationConfig(
        integrator="verlet",
        ticks_per_second=240.0,
        seconds_per_tick=360.0,
        seed=42,
    )

    # Bundled world: the Sun, five planets and three moons
    sim = Simulator.from_world(config=config)

    print("Running simulation...")
    print(f"Time rate: {format_time_rate(sim.scheduler.simulated_seconds_per_real_second)}")
    print(f"Initial energy: {sim.get_energy():.6e}")

    # 30 seconds of frames at 60 fps
    for frame in range(1800):
        sim.advance(1.0 / 60.0)
        if frame % 300 == 0:
            print(f"Frame {frame}: Time={format_duration(sim.time)}, Energy={sim.get_energy():.6e}")

    print(f"Final energy: {sim.get_energy():.6e}")
    print("Simulation complete!")


if __name__ == "__main__":
    main()
