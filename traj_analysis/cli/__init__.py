"""Command line interface for trajectory analysis."""
