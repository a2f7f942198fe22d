"""Radial Distribution Function (RDF) calculator."""

import csv
import json
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import numpy as np

from ...utils.logger import get_logger
from ..cell import pair_distances
from ..errors import ConfigurationError, OutputError
from ..histogram import Histogram
from ..parameters import RdfParameters, validate_parameters
from ..selection import Selection
from ..trajectory import Frame
from .base import AverageCommand, run_average


@dataclass
class RdfState:
    """Accumulation state of one RDF run."""

    histogram: Histogram
    selection: Selection
    rmax: float
    trajectory: str
    npairs: int = 0
    nframes: int = 0
    natoms: int = 0
    volume: float = 0.0


@dataclass
class RdfResult:
    """
    Normalized radial distribution function.

    ``r`` holds the lower edge of each bin, which is the coordinate written
    to the output file; the normalization itself used the bin midpoints.
    """

    r: np.ndarray
    gr: np.ndarray
    bin_width: float
    rmax: float
    npairs: int
    nframes: int
    natoms: int
    volume: float
    selection: str
    trajectory: str

    @property
    def nbins(self) -> int:
        return len(self.gr)

    def write(self, output_path: str | Path) -> None:
        """
        Write the RDF as a text file with two comment header lines.

        Raises:
            OutputError: If the file can not be opened
        """
        output_path = Path(output_path)
        try:
            f = open(output_path, "w")
        except OSError as e:
            raise OutputError(f"Could not open the '{output_path}' file.") from e

        with f:
            f.write(f"# Radial distribution function in trajectory {self.trajectory}\n")
            f.write(f"# Selection: {self.selection}\n")
            for r, gr in zip(self.r, self.gr, strict=True):
                f.write(f"{r:g}  {gr:g}\n")

    def save(self, output_path: str | Path, format: str = "csv") -> None:
        """
        Save the results in another format.

        Args:
            output_path: Output file path
            format: Output format ("csv", "json", "npz")
        """
        output_path = Path(output_path)

        if format == "csv":
            with open(output_path, "w", newline="") as f:
                writer = csv.writer(f)
                writer.writerow(["r (Angstrom)", "g(r)"])
                for r, gr in zip(self.r, self.gr, strict=True):
                    writer.writerow([r, gr])
        elif format == "json":
            with open(output_path, "w") as f:
                json.dump(self.to_dict(), f, indent=2)
        elif format == "npz":
            np.savez_compressed(output_path, r=self.r, gr=self.gr)
        else:
            raise ValueError(f"Unsupported format: {format}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "trajectory": self.trajectory,
            "selection": self.selection,
            "r": self.r.tolist(),
            "gr": self.gr.tolist(),
            "rmax": float(self.rmax),
            "nbins": int(self.nbins),
            "npairs": int(self.npairs),
            "n_frames": int(self.nframes),
        }

    def plot(self, output: str | Path | None = None, **kwargs: Any) -> Any:
        """Plot g(r) with matplotlib, see ``plot_rdf_matplotlib``."""
        from ..plotting.matplotlib_backend import plot_rdf_matplotlib

        return plot_rdf_matplotlib(self, output, **kwargs)

    def first_peak(self) -> tuple[float, float]:
        """Return position and height of the highest bin."""
        idx = int(np.argmax(self.gr))
        return float(self.r[idx]), float(self.gr[idx])


def candidate_pairs(
    selection: Selection, frame: Frame
) -> Iterator[tuple[np.ndarray, np.ndarray]]:
    """
    Enumerate the (i, j) atom pairs of a frame to use in the RDF.

    A single atom selection gives every ordered pair of distinct matched
    atoms, so each physical pair appears twice. A pair selection gives each
    match once. Pairs are produced in chunks of (first, second) index arrays.

    Raises:
        ConfigurationError: If the selection has more than two atoms
    """
    if selection.size == 1:
        matched = selection.list(frame)
        for i in matched:
            others = matched[matched != i]
            if len(others):
                yield np.full(len(others), i), others
    elif selection.size == 2:
        matches = selection.evaluate(frame)
        if len(matches):
            yield matches[:, 0], matches[:, 1]
    else:
        raise ConfigurationError("Can not use a selection with more than two atoms in RDF.")


class RDF(AverageCommand[RdfState, RdfResult]):
    """
    Radial distribution function g(r) averaged over a trajectory.

    Distances between selected pairs are histogrammed frame by frame; the
    histogram is normalized once at the end using the number of atoms and
    the cell volume of the last frame.
    """

    def configure(self, parameters: RdfParameters) -> RdfState:
        selection = Selection(parameters.selection)
        if selection.size > 2:
            raise ConfigurationError("Can not use a selection with more than two atoms in RDF.")

        if selection.size == 2:
            get_logger().debug(
                "Pair selections share the normalization of single atom selections, "
                "which counts every pair twice"
            )

        return RdfState(
            histogram=Histogram(parameters.npoints, 0.0, parameters.rmax),
            selection=selection,
            rmax=parameters.rmax,
            trajectory=str(parameters.average.trajectory),
        )

    def accumulate(self, frame: Frame, state: RdfState) -> None:
        for first, second in candidate_pairs(state.selection, frame):
            distances = pair_distances(frame.positions, frame.cell, first, second)
            in_range = distances[distances < state.rmax]
            state.histogram.insert_many(in_range)
            state.npairs += len(in_range)

        state.nframes += 1
        state.natoms = frame.natoms
        state.volume = frame.cell.volume()

    def finalize(self, state: RdfState) -> RdfResult:
        pi = np.pi
        histogram = state.histogram
        dr = histogram.bin_width

        volume = state.volume
        if not volume > 0:
            get_logger().debug("Unit cell has no volume, using 1 for the density")
            volume = 1.0

        rho = state.natoms / volume
        norm = 1e-6 * 2 * 4 * pi * rho * state.npairs * dr

        if state.npairs == 0:
            get_logger().warning(f"No pair closer than {state.rmax:g} found, g(r) is zero")
        else:
            histogram.normalize(lambda i, value: value / (norm * ((i + 0.5) * dr) ** 2))

        return RdfResult(
            r=histogram.lower_edges,
            gr=histogram.values,
            bin_width=dr,
            rmax=state.rmax,
            npairs=state.npairs,
            nframes=state.nframes,
            natoms=state.natoms,
            volume=state.volume,
            selection=state.selection.string,
            trajectory=state.trajectory,
        )

    def compute(self, parameters: RdfParameters) -> RdfResult:
        """
        Validate parameters and run the RDF over the trajectory.

        Args:
            parameters: RDF parameters, normalized in place

        Returns:
            The normalized RDF
        """
        validate_parameters(parameters)

        logger = get_logger()
        logger.info(f"Selection: {parameters.selection}")
        logger.info(f"Parameters: rmax={parameters.rmax:g} Å, npoints={parameters.npoints}")

        return run_average(self, parameters, parameters.average)
