"""Live 2D viewer using matplotlib."""

import logging
import time
from typing import Optional, Tuple

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.animation import FuncAnimation

from planet_sim.physics.simulator import Simulator
from planet_sim.ui.controls import handle_key
from planet_sim.utils.rate_tracker import RateTracker, format_time_rate

logger = logging.getLogger(__name__)


class LiveViewer:
    """Animate a `Simulator` in a matplotlib window.

    Each animation frame forwards the real time since the previous frame to
    the simulator and redraws the snapshot. `[`/`]` change ticks per second,
    `-`/`+` change simulated seconds per tick. Pan and zoom come from the
    matplotlib navigation toolbar.
    """

    def __init__(
        self,
        simulator: Simulator,
        fps: float = 60.0,
        figsize: Tuple[int, int] = (9, 9),
        show_velocity: bool = False,
    ):
        self.simulator = simulator
        self.fps = fps
        self.figsize = figsize
        self.show_velocity = show_velocity
        self.tracker = RateTracker()

        self.fig = None
        self.ax = None
        self.scatter = None
        self.quiver = None
        self.hud = None
        self.animation: Optional[FuncAnimation] = None
        self._last_frame: Optional[float] = None

    def _setup(self):
        snapshot = self.simulator.snapshot()
        pos_2d = snapshot.positions[:, :2]

        self.fig, self.ax = plt.subplots(figsize=self.figsize)
        self.fig.patch.set_facecolor((0.1, 0.1, 0.1))
        self.ax.set_facecolor((0.1, 0.1, 0.1))
        self.ax.set_aspect('equal')
        self.ax.set_title('Planet Simulation', color='white')
        self.ax.tick_params(colors='gray')

        margin = 0.15
        extent = np.max(np.abs(pos_2d - pos_2d.mean(axis=0))) if len(pos_2d) > 1 else 1.0
        half = max(extent, 1.0) * (1 + margin)
        center = pos_2d.mean(axis=0)
        self.ax.set_xlim(center[0] - half, center[0] + half)
        self.ax.set_ylim(center[1] - half, center[1] + half)

        self.scatter = self.ax.scatter(
            pos_2d[:, 0], pos_2d[:, 1],
            c=snapshot.colors, s=self._marker_sizes(snapshot.radii), edgecolors='none'
        )
        if self.show_velocity:
            vel_2d = snapshot.velocities[:, :2]
            self.quiver = self.ax.quiver(
                pos_2d[:, 0], pos_2d[:, 1], vel_2d[:, 0], vel_2d[:, 1],
                color='white', alpha=0.4, angles='xy'
            )
        self.hud = self.ax.text(
            0.01, 0.01, "", transform=self.ax.transAxes, color='white', family='monospace', fontsize=9
        )
        self.fig.canvas.mpl_connect('key_press_event', self._on_key)

    @staticmethod
    def _marker_sizes(radii: np.ndarray) -> np.ndarray:
        # Log-scaled; real radii span four orders of magnitude
        radii = np.maximum(np.asarray(radii, dtype=float), 1.0)
        return 4.0 + 6.0 * np.log10(radii / radii.min() + 1.0) ** 2

    def _on_key(self, event):
        if handle_key(self.simulator.scheduler, event.key):
            self._update_hud()

    def _update_hud(self):
        scheduler = self.simulator.scheduler
        self.hud.set_text(
            f"{self.tracker.summary()}\n"
            f"ticks/s: {scheduler.ticks_per_second:.4g}  s/tick: {scheduler.seconds_per_tick:.4g}  "
            f"target: {format_time_rate(scheduler.simulated_seconds_per_real_second)}"
        )

    def _frame(self, _frame_index):
        now = time.perf_counter()
        real_dt = 0.0 if self._last_frame is None else now - self._last_frame
        self._last_frame = now

        steps = self.simulator.advance(real_dt)
        self.tracker.track_update(steps, steps * self.simulator.scheduler.seconds_per_tick)
        self.tracker.track_frame()

        snapshot = self.simulator.snapshot()
        pos_2d = snapshot.positions[:, :2]
        self.scatter.set_offsets(pos_2d)
        if self.quiver is not None:
            self.quiver.set_offsets(pos_2d)
            self.quiver.set_UVC(snapshot.velocities[:, 0], snapshot.velocities[:, 1])
        self._update_hud()
        return (self.scatter, self.hud)

    def run(self):
        """Open the window and block until it is closed."""
        self._setup()
        self.animation = FuncAnimation(
            self.fig, self._frame, interval=1000.0 / self.fps, blit=False, cache_frame_data=False
        )
        logger.debug("Viewer running at %g fps", self.fps)
        plt.show()
