"""
observations/visualize.py

Watch. Compare. Adjust.

The interesting thing is never one curve but two: the weather the colony
was given, and the temperature it actually held.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Iterable, Optional, Sequence
import numpy as np

if TYPE_CHECKING:
    from thermo_swarm.experiments.example import ExperimentResult


class TrajectoryPlotter:
    """
    Time/temperature plots of exogenous and controlled trajectories.

    The core never calls this; it only consumes (times, temperatures).
    """

    def __init__(self, title: str = "", figsize: tuple = (10, 6)):
        self.title = title
        self.figsize = figsize
        self.lines = 0

        # Lazy import matplotlib
        self._plt = None
        self._fig = None
        self._ax = None

    def _setup_plot(self):
        """Initialize matplotlib figure."""
        import matplotlib.pyplot as plt
        self._plt = plt

        self._fig, self._ax = plt.subplots(figsize=self.figsize)
        self._ax.set_xlabel("Time (min)")
        self._ax.set_ylabel("Temperature (°C)")
        if self.title:
            self._ax.set_title(self.title)

    def add_line(
        self,
        times: Sequence[float],
        temperatures: Sequence[float],
        label: Optional[str] = None,
        **style
    ) -> None:
        """Add one (times, temperatures) line; extra points are dropped."""
        if self._plt is None:
            self._setup_plot()

        times = np.asarray(times, dtype=np.float64)
        temperatures = np.asarray(temperatures, dtype=np.float64)
        n = min(len(times), len(temperatures))

        self._ax.plot(times[:n], temperatures[:n], label=label, **style)
        self.lines += 1

    def add_result(self, result: ExperimentResult, label: Optional[str] = None) -> None:
        """Exogenous curve once, then the controlled trajectory."""
        if self.lines == 0:
            self.add_line(
                result.times, result.external,
                label="external", color="#888888", linestyle="--"
            )
        if label is None:
            label = f"controlled (delay={result.trajectory.delay})"
        self.add_line(result.times, result.controlled, label=label)

    def save(self, path: str) -> None:
        """Save current figure to file."""
        if self._fig is not None:
            self._ax.legend()
            self._fig.savefig(path, dpi=150)

    def show(self) -> None:
        if self._plt is not None:
            self._ax.legend()
            self._plt.show()

    def close(self) -> None:
        """Close the figure."""
        if self._plt is not None:
            self._plt.close(self._fig)
            self._plt = None
            self._fig = None
            self._ax = None


def plot_results(
    results: Iterable[ExperimentResult],
    title: str = "",
    save_path: Optional[str] = None,
    show: bool = True,
) -> None:
    """Plot several results of the same weather on one figure."""
    plotter = TrajectoryPlotter(title=title)

    try:
        for result in results:
            plotter.add_result(result)

        if save_path:
            plotter.save(save_path)
        if show:
            plotter.show()

    finally:
        plotter.close()
