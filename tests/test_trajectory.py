# tests/test_trajectory.py
import numpy as np
import pytest

from traj_analysis.analysis.cell import CellShape, UnitCell
from traj_analysis.analysis.errors import TrajectoryError
from traj_analysis.analysis.parameters import AverageOptions, validate_options
from traj_analysis.analysis.properties.base import open_trajectory
from traj_analysis.analysis.trajectory import Frame, Trajectory


def test_missing_trajectory(tmp_path):
    with pytest.raises(TrajectoryError):
        Trajectory(tmp_path / "missing.xyz")


def test_read_frames_in_order(make_atoms, write_trajectory):
    frames = [
        make_atoms("OH", [[0, 0, 0], [1, 0, 0]], cell=[10, 10, 10]),
        make_atoms("OHH", [[0, 0, 0], [2, 0, 0], [0, 2, 0]], cell=[12, 12, 12]),
    ]
    trajectory = Trajectory(write_trajectory(frames))

    read = list(trajectory.read())

    assert trajectory.nsteps == 2
    assert [frame.natoms for frame in read] == [2, 3]
    assert list(read[1].names) == ["O", "H", "H"]
    assert read[1].cell.shape == CellShape.ORTHORHOMBIC
    assert read[1].cell.volume() == pytest.approx(12**3)
    np.testing.assert_allclose(read[1].positions[1], [2, 0, 0])


def test_read_steps(make_atoms, write_trajectory):
    frames = [make_atoms("H" * n, np.zeros((n, 3))) for n in range(1, 6)]
    trajectory = Trajectory(write_trajectory(frames), format="extxyz")

    assert [f.natoms for f in trajectory.read(slice(1, 5, 2))] == [2, 4]
    assert [f.natoms for f in trajectory.read("3:")] == [4, 5]


def test_custom_cell_replaces_frame_cell(make_atoms, write_trajectory):
    path = write_trajectory([make_atoms("HH", [[0, 0, 0], [1, 0, 0]])])
    trajectory = Trajectory(path)
    trajectory.set_cell(UnitCell([20.0, 20.0, 20.0]))

    frame = next(trajectory.read())

    assert frame.cell.shape == CellShape.ORTHORHOMBIC
    assert frame.cell.volume() == pytest.approx(8000.0)


def test_topology_replaces_names(make_atoms, write_trajectory):
    path = write_trajectory([make_atoms("HHH", np.eye(3))])
    topology = write_trajectory([make_atoms("OHH", np.eye(3))], name="topology.xyz")

    trajectory = Trajectory(path)
    trajectory.set_topology(topology, "extxyz")

    assert list(next(trajectory.read()).names) == ["O", "H", "H"]


def test_topology_size_mismatch(make_atoms, write_trajectory):
    path = write_trajectory([make_atoms("HHH", np.eye(3))])
    topology = write_trajectory([make_atoms("OH", np.eye(3)[:2])], name="topology.xyz")

    trajectory = Trajectory(path)
    trajectory.set_topology(topology)

    with pytest.raises(TrajectoryError):
        list(trajectory.read())


def test_missing_topology(make_atoms, write_trajectory, tmp_path):
    trajectory = Trajectory(write_trajectory([make_atoms("H", [[0, 0, 0]])]))
    with pytest.raises(TrajectoryError):
        trajectory.set_topology(tmp_path / "nope.pdb")


def test_frame_from_atoms_keeps_type_array(make_atoms):
    frame = Frame.from_atoms(make_atoms("OH", [[0, 0, 0], [1, 0, 0]], type=[3, 1]))
    assert list(frame.types) == ["3", "1"]
    assert frame.cell.shape == CellShape.INFINITE


def test_open_trajectory_applies_options(make_atoms, write_trajectory):
    path = write_trajectory([make_atoms("HH", [[0, 0, 0], [1, 0, 0]])])
    options = AverageOptions(trajectory=path, cell="8:9:10")
    validate_options(options)

    frame = next(open_trajectory(options).read(options.steps))

    np.testing.assert_allclose(frame.cell.lengths, [8, 9, 10])
