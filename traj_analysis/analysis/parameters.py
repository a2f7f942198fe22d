"""Input parameters and validation for trajectory averaging commands."""

import os
from dataclasses import dataclass
from pathlib import Path

from .cell import UnitCell, parse_cell
from .errors import ConfigurationError, OutputError


@dataclass
class AverageOptions:
    """
    Options shared by every command averaging a property over a trajectory.

    Args:
        trajectory: Path to the input trajectory.

        format: ASE format of the trajectory. Guessed from the file
            extension when None.

        steps: Steps to use, as ``start:end[:stride]``. Each part is
            optional; the default uses every step.

        cell: Alternative unit cell, either a :class:`UnitCell` or a string
            ``a``, ``a:b:c`` or ``a:b:c:alpha:beta:gamma`` (Angstroms and
            degrees). Replaces the cell of every frame.

        topology: Alternative topology file providing atom names.

        topology_format: ASE format of the topology file. Only meaningful
            together with ``topology``.
    """

    trajectory: str | Path
    format: str | None = None
    steps: str | slice | None = None
    cell: UnitCell | str | None = None
    topology: str | Path | None = None
    topology_format: str | None = None

    @property
    def custom_cell(self) -> bool:
        return self.cell is not None


@dataclass
class RdfParameters:
    """
    Parameters of a radial distribution function run.

    Args:
        average: Trajectory options, see :class:`AverageOptions`.

        output: Output data file. Defaults to the trajectory path with a
            ``.rdf`` extension appended.

        selection: Selection of the atoms, either a single atom selection
            (``name O``) or a pair selection
            (``pairs: name($1) O and name($2) H``).

        rmax: Maximal distance of the histogram. Replaced by half the
            shortest cell length when a custom cell is given.

        npoints: Number of bins in the histogram.
    """

    average: AverageOptions
    output: str | Path | None = None
    selection: str = "all"
    rmax: float = 10.0
    npoints: int = 200


def parse_steps(value: str) -> slice:
    """
    Parse a ``start:end[:stride]`` steps range into a slice.

    Raises:
        ConfigurationError: If the range is malformed
    """
    parts = value.split(":")
    if len(parts) not in (2, 3):
        raise ConfigurationError(f"Steps must look like start:end[:stride], got '{value}'")

    try:
        numbers = [int(part) if part.strip() else None for part in parts]
    except ValueError:
        raise ConfigurationError(f"Invalid steps range '{value}'") from None

    if len(numbers) == 3 and numbers[2] is not None and numbers[2] <= 0:
        raise ConfigurationError(f"Steps stride must be positive, got '{value}'")

    return slice(*numbers)


def check_writable(path: Path) -> None:
    """
    Check that ``path`` can be opened for writing, without creating it.

    Raises:
        OutputError: If the file or its directory is not writable
    """
    if path.is_dir():
        raise OutputError(f"Could not open the '{path}' file: it is a directory")

    if path.exists():
        writable = os.access(path, os.W_OK)
    else:
        parent = path.parent if str(path.parent) else Path(".")
        writable = parent.is_dir() and os.access(parent, os.W_OK)

    if not writable:
        raise OutputError(f"Could not open the '{path}' file.")


def validate_options(options: AverageOptions) -> None:
    """
    Validate and normalize trajectory options in place.

    Raises:
        ConfigurationError: If any option is invalid
    """
    options.trajectory = Path(options.trajectory)

    if isinstance(options.steps, str):
        options.steps = parse_steps(options.steps)
    elif options.steps is None:
        options.steps = slice(None)

    if isinstance(options.cell, str):
        options.cell = parse_cell(options.cell)

    if options.topology_format is not None and options.topology is None:
        raise ConfigurationError("Useless topology format without a topology file")


def validate_parameters(parameters: RdfParameters) -> None:
    """
    Validate and normalize RDF parameters in place.

    The custom cell override of ``rmax`` is applied here.

    Raises:
        ConfigurationError: If any parameter is invalid
        OutputError: If the output file can not be written
    """
    validate_options(parameters.average)

    if parameters.output is None:
        parameters.output = Path(f"{parameters.average.trajectory}.rdf")
    parameters.output = Path(parameters.output)

    if not isinstance(parameters.npoints, int) or parameters.npoints <= 0:
        raise ConfigurationError(
            f"Number of points must be a positive integer, got {parameters.npoints}"
        )

    if parameters.average.custom_cell:
        parameters.rmax = float(min(parameters.average.cell.lengths)) / 2

    if parameters.rmax <= 0:
        raise ConfigurationError(f"Maximal distance must be positive, got {parameters.rmax}")

    if not parameters.selection.strip():
        raise ConfigurationError("Selection can not be empty")

    check_writable(parameters.output)
