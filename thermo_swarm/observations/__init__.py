"""
Observation tools: watch the trajectory before explaining it.
"""

from .visualize import TrajectoryPlotter, plot_results

__all__ = ["TrajectoryPlotter", "plot_results"]
