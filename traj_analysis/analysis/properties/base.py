"""Base class for properties averaged over the frames of a trajectory."""

from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

from rich.progress import MofNCompleteColumn, Progress, SpinnerColumn, TextColumn

from ...utils.logger import Verbosity, get_logger
from ..parameters import AverageOptions
from ..trajectory import Frame, Trajectory

StateT = TypeVar("StateT")
ResultT = TypeVar("ResultT")


class AverageCommand(ABC, Generic[StateT, ResultT]):
    """
    Abstract base class for commands accumulating a property over frames.

    A command is a set of three steps driven by :func:`run_average`:
    ``configure`` builds the accumulation state once, ``accumulate`` updates
    it for every frame, and ``finalize`` turns it into a result exactly once.
    The state is owned by the run and passed explicitly to each step.
    """

    @abstractmethod
    def configure(self, parameters: Any) -> StateT:
        """
        Build the accumulation state from validated parameters.

        Configuration errors must be raised here, before any frame is read.
        """

    @abstractmethod
    def accumulate(self, frame: Frame, state: StateT) -> None:
        """Add the contribution of one frame to ``state``."""

    @abstractmethod
    def finalize(self, state: StateT) -> ResultT:
        """Compute the result from the accumulated state, once."""


def open_trajectory(options: AverageOptions) -> Trajectory:
    """
    Open the input trajectory with the custom cell and topology, if any.

    Args:
        options: Validated trajectory options
    """
    logger = get_logger()

    trajectory = Trajectory(options.trajectory, format=options.format)

    if options.custom_cell:
        logger.debug(f"Using custom unit cell {options.cell!r}")
        trajectory.set_cell(options.cell)

    if options.topology is not None:
        logger.debug(f"Using topology from {options.topology}")
        trajectory.set_topology(options.topology, options.topology_format)

    return trajectory


def run_average(
    command: AverageCommand[StateT, ResultT], parameters: Any, options: AverageOptions
) -> ResultT:
    """
    Run a command over every selected step of a trajectory.

    Frames are read and accumulated one after the other; errors raised
    while reading a frame propagate and abort the run.

    Args:
        command: Command to run
        parameters: Validated command parameters
        options: Validated trajectory options

    Returns:
        The command result
    """
    logger = get_logger()

    state = command.configure(parameters)
    trajectory = open_trajectory(options)

    logger.step(f"Reading frames from {trajectory.path.name}")

    nframes = 0
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        MofNCompleteColumn(),
        console=logger.console,
        transient=True,
        disable=logger.verbosity == Verbosity.QUIET,
    ) as progress:
        task = progress.add_task("[cyan]Accumulating frames...", total=None)

        for frame in trajectory.read(options.steps):
            command.accumulate(frame, state)
            nframes += 1
            progress.advance(task)

    logger.info(f"Processed {nframes} frame(s)")

    return command.finalize(state)
