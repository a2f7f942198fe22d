"""Utilities module for trajectory analysis."""

from .logger import (
    AnalysisLogger,
    Verbosity,
    configure_logger,
    debug,
    error,
    get_logger,
    info,
    set_logger,
    warning,
)

__all__ = [
    "AnalysisLogger",
    "Verbosity",
    "configure_logger",
    "get_logger",
    "set_logger",
    "info",
    "debug",
    "warning",
    "error",
]
