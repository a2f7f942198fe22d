"""Trajectory analysis package."""

__version__ = "0.1.0"
__description__ = "Streaming analysis of molecular dynamics trajectories"

from . import analysis, utils

__all__ = [
    "analysis",
    "utils",
    "__version__",
    "__description__",
]
