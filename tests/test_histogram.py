# tests/test_histogram.py
import numpy as np
import pytest

from traj_analysis.analysis.errors import ConfigurationError
from traj_analysis.analysis.histogram import Histogram


def test_fresh_histogram_is_empty():
    hist = Histogram(200, 0.0, 10.0)
    assert len(hist) == 200
    assert hist.size == 200
    assert np.all(hist.values == 0)
    assert hist.bin_width == pytest.approx(0.05)


@pytest.mark.parametrize("value, index", [(0.0, 0), (0.49, 0), (0.5, 1), (5.0, 10), (9.99, 19)])
def test_insert_at_uses_floor_of_bin_width(value, index):
    hist = Histogram(20, 0.0, 10.0)
    hist.insert_at(value)

    assert hist.bin_index(value) == index
    assert hist[index] == 1
    assert hist.values.sum() == 1


def test_insert_many_matches_insert_at():
    rng = np.random.default_rng(7)
    values = rng.uniform(0.0, 10.0, size=500)

    one_by_one = Histogram(37, 0.0, 10.0)
    for value in values:
        one_by_one.insert_at(value)

    vectorized = Histogram(37, 0.0, 10.0)
    vectorized.insert_many(values)

    np.testing.assert_array_equal(one_by_one.values, vectorized.values)


def test_insert_many_counts_repeated_bins():
    hist = Histogram(4, 0.0, 4.0)
    hist.insert_many(np.array([1.5, 1.5, 1.2, 3.0]))
    np.testing.assert_array_equal(hist.values, [0, 3, 0, 1])


def test_value_just_below_upper_goes_to_last_bin():
    hist = Histogram(3, 0.0, 0.9)
    value = np.nextafter(0.9, 0.0)

    assert hist.bin_index(value) == 2
    hist.insert_at(value)
    hist.insert_many(np.array([value, value]))

    np.testing.assert_array_equal(hist.values, [0, 0, 3])


def test_non_zero_lower_bound():
    hist = Histogram(10, 2.0, 4.0)
    hist.insert_at(2.45)
    assert hist[2] == 1
    np.testing.assert_allclose(hist.lower_edges[:3], [2.0, 2.2, 2.4])
    np.testing.assert_allclose(hist.centers[:2], [2.1, 2.3])
    np.testing.assert_allclose(hist.edges[[0, -1]], [2.0, 4.0])
    assert len(hist.edges) == 11


def test_normalize_is_applied_in_place():
    hist = Histogram(4, 0.0, 4.0)
    hist.insert_many(np.array([0.5, 1.5, 1.5]))

    hist.normalize(lambda i, value: value * 10 + i)

    np.testing.assert_array_equal(hist.values, [10, 21, 2, 3])


def test_normalize_twice_transforms_twice():
    hist = Histogram(2, 0.0, 2.0)
    hist.insert_at(0.5)

    hist.normalize(lambda i, value: value * 2)
    hist.normalize(lambda i, value: value * 2)

    assert hist[0] == 4


def test_merge_partial_histograms():
    total = Histogram(5, 0.0, 5.0)
    partial = Histogram(5, 0.0, 5.0)
    total.insert_many(np.array([0.1, 2.2]))
    partial.insert_many(np.array([2.7, 4.9]))

    total.merge(partial)

    np.testing.assert_array_equal(total.values, [1, 0, 2, 0, 1])


def test_merge_rejects_other_geometry():
    with pytest.raises(ValueError):
        Histogram(5, 0.0, 5.0).merge(Histogram(6, 0.0, 5.0))


@pytest.mark.parametrize("nbins, lower, upper", [(0, 0.0, 1.0), (-3, 0.0, 1.0), (10, 1.0, 1.0)])
def test_invalid_geometry(nbins, lower, upper):
    with pytest.raises(ConfigurationError):
        Histogram(nbins, lower, upper)
