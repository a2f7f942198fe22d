# tests/conftest.py
import io

import numpy as np
import pytest
from ase import Atoms
from ase.io import write
from rich.console import Console

from traj_analysis.analysis.trajectory import Frame
from traj_analysis.utils.logger import AnalysisLogger, Verbosity, set_logger


@pytest.fixture(autouse=True)
def captured_logger():
    """
    Send every log line to an in-memory console, including debug messages.
    """
    buffer = io.StringIO()
    logger = AnalysisLogger(console=Console(file=buffer, width=200), verbosity=Verbosity.VERBOSE)
    set_logger(logger)
    yield buffer


@pytest.fixture
def make_atoms():
    """
    Factory for ASE structures. Without a cell the structure is not periodic.
    """
    def _make(symbols, positions, cell=None, **arrays) -> Atoms:
        pbc = cell is not None
        positions = np.asarray(positions, dtype=float)
        atoms = Atoms(symbols=symbols, positions=positions, cell=cell, pbc=pbc)
        for name, values in arrays.items():
            atoms.new_array(name, np.asarray(values))
        return atoms
    return _make


@pytest.fixture
def make_frame(make_atoms):
    def _make(symbols, positions, cell=None, **arrays) -> Frame:
        return Frame.from_atoms(make_atoms(symbols, positions, cell, **arrays))
    return _make


@pytest.fixture
def water_frame(make_frame):
    """
    Two water-like molecules in a 10 Å periodic box: O H H O H H.
    """
    positions = [
        [1.0, 1.0, 1.0],
        [1.9, 1.0, 1.0],
        [1.0, 1.9, 1.0],
        [5.0, 5.0, 5.0],
        [5.9, 5.0, 5.0],
        [5.0, 5.9, 5.0],
    ]
    return make_frame("OHHOHH", positions, cell=[10.0, 10.0, 10.0])


@pytest.fixture
def write_trajectory(tmp_path):
    """
    Write a list of ASE structures as an extended XYZ trajectory.
    """
    def _write(frames, name: str = "traj.xyz"):
        path = tmp_path / name
        write(str(path), frames, format="extxyz")
        return path
    return _write


@pytest.fixture
def dimer(make_atoms):
    """
    Two atoms 5 Å apart, without any unit cell.
    """
    return make_atoms("ArAr", [[0.0, 0.0, 0.0], [5.0, 0.0, 0.0]])
