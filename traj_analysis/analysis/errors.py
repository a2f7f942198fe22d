"""Error types raised by the trajectory analysis commands."""

from enum import Enum


class ErrorKind(str, Enum):
    """Category of a failure, used by callers to pick an exit code."""

    CONFIGURATION = "configuration"
    IO = "io"
    READ = "read"


class AnalysisError(Exception):
    """Base class for all errors raised by an analysis run."""

    kind: ErrorKind = ErrorKind.CONFIGURATION


class ConfigurationError(AnalysisError, ValueError):
    """Invalid options, raised before any frame is processed."""

    kind = ErrorKind.CONFIGURATION


class SelectionError(ConfigurationError):
    """Malformed selection string."""


class OutputError(AnalysisError, OSError):
    """The output destination can not be written."""

    kind = ErrorKind.IO


class TrajectoryError(AnalysisError):
    """The trajectory or its topology can not be used."""

    kind = ErrorKind.READ
