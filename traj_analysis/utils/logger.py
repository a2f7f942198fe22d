"""Analysis logger with Rich formatting."""

import inspect
import time
from datetime import datetime
from enum import IntEnum
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.text import Text


class Verbosity(IntEnum):
    """How much the logger prints."""

    QUIET = 0
    NORMAL = 1
    VERBOSE = 2


class AnalysisLogger:
    """Logger printing to a Rich console, with timing and calling module."""

    def __init__(self, console: Optional[Console] = None, verbosity: Verbosity = Verbosity.NORMAL):
        """
        Initialize the logger.

        Args:
            console: Rich Console instance. If None, logs go to stderr.
            verbosity: QUIET only shows errors, VERBOSE also shows debug messages
        """
        self.console = console or Console(stderr=True)
        self.verbosity = verbosity
        self.start_time = time.time()

    def _get_caller_info(self) -> str:
        """Get the module path of the first caller outside this file."""
        frame = inspect.currentframe()
        try:
            caller_frame = frame
            while caller_frame is not None and caller_frame.f_code.co_filename == __file__:
                caller_frame = caller_frame.f_back
            if caller_frame:
                file_path = Path(caller_frame.f_code.co_filename)
                parts = file_path.parts
                if "traj_analysis" in parts:
                    return str(Path(*parts[parts.index("traj_analysis"):]))
                return file_path.name
            return "unknown"
        finally:
            del frame

    def _format_duration(self, elapsed: float) -> str:
        if elapsed < 1:
            return f"{elapsed*1000:.0f}ms"
        elif elapsed < 60:
            return f"{elapsed:.1f}s"
        elif elapsed < 3600:
            minutes = int(elapsed // 60)
            return f"{minutes}m{elapsed % 60:.1f}s"
        else:
            hours = int(elapsed // 3600)
            minutes = int((elapsed % 3600) // 60)
            return f"{hours}h{minutes}m{elapsed % 60:.1f}s"

    def _log_message(self, level: str, message: str, level_color: str, minimum: Verbosity) -> None:
        """Format as ``[time] (duration) {origin} LEVEL: message`` and print."""
        if self.verbosity < minimum:
            return

        caller_info = self._get_caller_info()

        text = Text()
        text.append(f"[{datetime.now().strftime('%H:%M:%S')}] ", style="dim blue")
        text.append(f"({self._format_duration(time.time() - self.start_time)}) ", style="dim green")
        text.append(f"{{{caller_info}}} ", style="dim yellow")
        text.append(f"{level}: ", style=f"bold {level_color}")
        text.append(message, style="white")

        self.console.print(text)

    def info(self, message: str) -> None:
        self._log_message("INFO", message, "blue", Verbosity.NORMAL)

    def debug(self, message: str) -> None:
        self._log_message("DEBUG", message, "magenta", Verbosity.VERBOSE)

    def warning(self, message: str) -> None:
        self._log_message("WARNING", message, "yellow", Verbosity.NORMAL)

    def error(self, message: str) -> None:
        self._log_message("ERROR", message, "red", Verbosity.QUIET)

    def success(self, message: str) -> None:
        self._log_message("SUCCESS", message, "green", Verbosity.NORMAL)

    def step(self, message: str) -> None:
        self._log_message("STEP", message, "cyan", Verbosity.NORMAL)

    def reset_timer(self) -> None:
        self.start_time = time.time()


_global_logger: Optional[AnalysisLogger] = None


def get_logger() -> AnalysisLogger:
    """Get the global logger instance, creating it on first use."""
    global _global_logger
    if _global_logger is None:
        _global_logger = AnalysisLogger()
    return _global_logger


def set_logger(logger: AnalysisLogger) -> None:
    """Replace the global logger instance."""
    global _global_logger
    _global_logger = logger


def configure_logger(verbose: bool = False, quiet: bool = False) -> AnalysisLogger:
    """Install a global logger matching the --verbose / --quiet flags."""
    if quiet:
        verbosity = Verbosity.QUIET
    elif verbose:
        verbosity = Verbosity.VERBOSE
    else:
        verbosity = Verbosity.NORMAL

    logger = AnalysisLogger(verbosity=verbosity)
    set_logger(logger)
    return logger


def info(message: str) -> None:
    get_logger().info(message)


def debug(message: str) -> None:
    get_logger().debug(message)


def warning(message: str) -> None:
    get_logger().warning(message)


def error(message: str) -> None:
    get_logger().error(message)
