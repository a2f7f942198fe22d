"""Properties averaged over trajectory frames."""

from .base import AverageCommand, run_average
from .rdf import RDF, RdfResult

__all__ = ["AverageCommand", "RDF", "RdfResult", "run_average"]
