"""
Properties averaged over molecular dynamics trajectories.

Frames are read one at a time through ASE and accumulated into a
histogram that is normalized once at the end of the trajectory:
- Radial Distribution Function (RDF)
"""

from .cell import CellShape, UnitCell, parse_cell
from .errors import (
    AnalysisError,
    ConfigurationError,
    ErrorKind,
    OutputError,
    SelectionError,
    TrajectoryError,
)
from .histogram import Histogram
from .parameters import AverageOptions, RdfParameters
from .properties.rdf import RDF, RdfResult
from .selection import Selection
from .trajectory import Frame, Trajectory

__all__ = [
    "AnalysisError",
    "AverageOptions",
    "CellShape",
    "ConfigurationError",
    "ErrorKind",
    "Frame",
    "Histogram",
    "OutputError",
    "RDF",
    "RdfParameters",
    "RdfResult",
    "Selection",
    "SelectionError",
    "Trajectory",
    "TrajectoryError",
    "UnitCell",
    "parse_cell",
]
