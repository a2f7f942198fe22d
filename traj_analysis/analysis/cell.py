"""Unit cells and minimum image distances under periodic boundary conditions."""

from enum import Enum

import numpy as np
from ase.cell import Cell
from ase.geometry import find_mic

from .errors import ConfigurationError


class CellShape(str, Enum):
    """Shape of a unit cell, selecting the wrapping rule."""

    INFINITE = "infinite"
    ORTHORHOMBIC = "orthorhombic"
    TRICLINIC = "triclinic"


class UnitCell:
    """
    Periodic unit cell built on top of :class:`ase.cell.Cell`.

    Axes that are not periodic, or whose cell vector is zero, are never
    wrapped. A cell without any periodic axis is infinite: wrapping is the
    identity and the volume is zero.
    """

    def __init__(self, cell=None, pbc=True):
        """
        Initialize a unit cell.

        Args:
            cell: Anything accepted by ``ase.cell.Cell.new``: None, three
                lengths, six cell parameters or a (3, 3) matrix
            pbc: Periodicity flag, a single bool or one per axis
        """
        self._cell = Cell.new(cell)
        lengths = self._cell.lengths()
        self.pbc = np.logical_and(np.broadcast_to(np.asarray(pbc, dtype=bool), 3), lengths > 0)

    @classmethod
    def from_atoms(cls, atoms) -> "UnitCell":
        """Build the cell of an ``ase.Atoms`` object."""
        return cls(atoms.cell.array, atoms.pbc)

    @property
    def shape(self) -> CellShape:
        if not self.pbc.any():
            return CellShape.INFINITE
        if self._cell.orthorhombic:
            return CellShape.ORTHORHOMBIC
        return CellShape.TRICLINIC

    @property
    def matrix(self) -> np.ndarray:
        """Cell vectors as rows of a (3, 3) array."""
        return self._cell.array.copy()

    @property
    def lengths(self) -> np.ndarray:
        """Lengths a, b, c of the cell vectors."""
        return self._cell.lengths()

    @property
    def angles(self) -> np.ndarray:
        """Angles alpha, beta, gamma in degrees."""
        return self._cell.angles()

    def volume(self) -> float:
        """Return the cell volume, zero for an infinite cell."""
        if self.shape == CellShape.INFINITE:
            return 0.0
        return float(abs(self._cell.volume))

    def wrap(self, vectors: np.ndarray) -> np.ndarray:
        """
        Apply the minimum image convention to displacement vectors.

        Args:
            vectors: Displacement (3,) or displacements (N, 3)

        Returns:
            Wrapped displacements with the same shape as the input
        """
        vectors = np.array(vectors, dtype=np.float64)
        single = vectors.ndim == 1
        vectors = np.atleast_2d(vectors)

        shape = self.shape
        if shape == CellShape.ORTHORHOMBIC:
            lengths = np.diagonal(self.matrix)[self.pbc]
            vectors[:, self.pbc] -= lengths * np.round(vectors[:, self.pbc] / lengths)
        elif shape == CellShape.TRICLINIC:
            vectors, _ = find_mic(vectors, self._cell, pbc=self.pbc)

        return vectors[0] if single else vectors

    def __repr__(self) -> str:
        a, b, c = self.lengths
        return f"UnitCell({self.shape.value}, a={a:g}, b={b:g}, c={c:g})"


def pair_distances(
    positions: np.ndarray, cell: UnitCell, first: np.ndarray, second: np.ndarray
) -> np.ndarray:
    """
    Compute minimum image distances between pairs of atoms.

    Args:
        positions: Atomic positions (N, 3)
        cell: Unit cell used for wrapping
        first: Indices i of the pairs
        second: Indices j of the pairs

    Returns:
        Distances |wrap(r_j - r_i)|, one per pair
    """
    if len(first) == 0:
        return np.zeros(0)

    delta = positions[second] - positions[first]
    return np.linalg.norm(cell.wrap(delta), axis=-1)


def parse_cell(value: str) -> UnitCell:
    """
    Parse a unit cell given as ``a``, ``a:b:c`` or ``a:b:c:alpha:beta:gamma``.

    Lengths are in Angstroms and angles in degrees.

    Raises:
        ConfigurationError: If the string is not a valid cell
    """
    try:
        numbers = [float(part) for part in value.split(":")]
    except ValueError:
        raise ConfigurationError(f"Invalid unit cell specification: '{value}'") from None

    if len(numbers) == 1:
        cellpar = [numbers[0]] * 3 + [90.0] * 3
    elif len(numbers) == 3:
        cellpar = numbers + [90.0] * 3
    elif len(numbers) == 6:
        cellpar = numbers
    else:
        raise ConfigurationError(
            f"Unit cell must have 1, 3 or 6 values, got {len(numbers)} in '{value}'"
        )

    if any(length <= 0 for length in cellpar[:3]):
        raise ConfigurationError(f"Unit cell lengths must be positive in '{value}'")
    if any(not 0 < angle < 180 for angle in cellpar[3:]):
        raise ConfigurationError(f"Unit cell angles must be in (0, 180) degrees in '{value}'")

    return UnitCell(Cell.fromcellpar(cellpar).array, pbc=True)
