"""CLI commands module."""

from . import rdf

__all__ = ["rdf"]
