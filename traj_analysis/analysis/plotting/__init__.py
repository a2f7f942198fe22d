"""Plotting backends for computed properties."""

from .matplotlib_backend import plot_rdf_matplotlib

__all__ = ["plot_rdf_matplotlib"]
