# tests/test_logger.py
import io

import pytest
from rich.console import Console

from traj_analysis.utils import logger as logger_module
from traj_analysis.utils.logger import AnalysisLogger, Verbosity, configure_logger


def make_logger(verbosity):
    buffer = io.StringIO()
    return AnalysisLogger(console=Console(file=buffer, width=200), verbosity=verbosity), buffer


@pytest.mark.parametrize(
    "verbosity, shown",
    [
        (Verbosity.QUIET, {"ERROR"}),
        (Verbosity.NORMAL, {"INFO", "WARNING", "ERROR", "SUCCESS", "STEP"}),
        (Verbosity.VERBOSE, {"DEBUG", "INFO", "WARNING", "ERROR", "SUCCESS", "STEP"}),
    ],
)
def test_verbosity_filters_levels(verbosity, shown):
    logger, buffer = make_logger(verbosity)

    logger.debug("a")
    logger.info("b")
    logger.warning("c")
    logger.error("d")
    logger.success("e")
    logger.step("f")

    output = buffer.getvalue()
    for level in ["DEBUG", "INFO", "WARNING", "ERROR", "SUCCESS", "STEP"]:
        assert (f"{level}:" in output) == (level in shown)


def test_message_reports_calling_module():
    logger, buffer = make_logger(Verbosity.NORMAL)

    logger.info("hello")

    line = buffer.getvalue().strip()
    assert "{test_logger.py}" in line
    assert line.endswith("INFO: hello")


def test_module_helpers_use_global_logger(captured_logger):
    logger_module.info("from helper")
    logger_module.debug("debug helper")

    output = captured_logger.getvalue()
    assert "INFO: from helper" in output
    assert "DEBUG: debug helper" in output


def test_configure_logger():
    assert configure_logger(quiet=True).verbosity == Verbosity.QUIET
    assert configure_logger(verbose=True).verbosity == Verbosity.VERBOSE
    assert configure_logger().verbosity == Verbosity.NORMAL
    assert logger_module.get_logger().verbosity == Verbosity.NORMAL
