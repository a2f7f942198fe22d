"""Trajectory reading through ASE, one frame at a time."""

from collections.abc import Iterator
from dataclasses import dataclass
from functools import cached_property
from pathlib import Path

import numpy as np
from ase import Atoms
from ase.io import iread, read

from .cell import UnitCell
from .errors import TrajectoryError


@dataclass(frozen=True)
class Topology:
    """Per-atom names and types, taken from a frame or a topology file."""

    names: np.ndarray
    types: np.ndarray

    @classmethod
    def from_atoms(cls, atoms: Atoms) -> "Topology":
        names = np.array(atoms.get_chemical_symbols(), dtype=str)
        if "type" in atoms.arrays:
            types = np.asarray(atoms.arrays["type"]).astype(str)
        else:
            types = names.copy()
        return cls(names=names, types=types)

    def __len__(self) -> int:
        return len(self.names)


@dataclass(frozen=True)
class Frame:
    """Read-only snapshot of one trajectory step."""

    positions: np.ndarray
    cell: UnitCell
    topology: Topology

    @property
    def natoms(self) -> int:
        return len(self.positions)

    @property
    def names(self) -> np.ndarray:
        return self.topology.names

    @property
    def types(self) -> np.ndarray:
        return self.topology.types

    @classmethod
    def from_atoms(
        cls,
        atoms: Atoms,
        cell: UnitCell | None = None,
        topology: Topology | None = None,
    ) -> "Frame":
        """
        Build a frame from an ASE ``Atoms`` object.

        Args:
            atoms: Structure read from the trajectory
            cell: Unit cell replacing the one stored in ``atoms``
            topology: Topology replacing the names and types in ``atoms``

        Raises:
            TrajectoryError: If the topology does not match the atom count
        """
        if topology is None:
            topology = Topology.from_atoms(atoms)
        elif len(topology) != len(atoms):
            raise TrajectoryError(
                f"Topology has {len(topology)} atoms but the frame has {len(atoms)}"
            )

        return cls(
            positions=np.array(atoms.get_positions(), dtype=np.float64),
            cell=cell if cell is not None else UnitCell.from_atoms(atoms),
            topology=topology,
        )


class Trajectory:
    """
    Trajectory file opened for reading.

    Frames are produced lazily with ``ase.io.iread`` so the whole file is
    never held in memory. An alternative unit cell or topology can be set
    before reading; they are then applied to every frame.
    """

    def __init__(self, path: str | Path, format: str | None = None):
        """
        Open a trajectory.

        Args:
            path: Path to the trajectory file
            format: ASE format name, guessed from the file when None

        Raises:
            TrajectoryError: If the file does not exist
        """
        self.path = Path(path)
        if not self.path.exists():
            raise TrajectoryError(f"Trajectory file not found: {path}")

        self.format = format
        self._cell: UnitCell | None = None
        self._topology: Topology | None = None

    def set_cell(self, cell: UnitCell) -> None:
        """Use ``cell`` for every frame instead of the cell in the file."""
        self._cell = cell

    def set_topology(self, path: str | Path, format: str | None = None) -> None:
        """Take atom names and types from the first frame of another file."""
        path = Path(path)
        if not path.exists():
            raise TrajectoryError(f"Topology file not found: {path}")

        self._topology = Topology.from_atoms(read(str(path), index=0, format=format))

    @cached_property
    def nsteps(self) -> int:
        """Number of steps in the file (reads the whole file once)."""
        return sum(1 for _ in iread(str(self.path), index=":", format=self.format))

    def read(self, steps: slice | str = ":") -> Iterator[Frame]:
        """
        Yield the frames of the trajectory in order.

        Args:
            steps: Steps to read, as a slice or an ASE index string
        """
        for atoms in iread(str(self.path), index=steps, format=self.format):
            yield Frame.from_atoms(atoms, cell=self._cell, topology=self._topology)
