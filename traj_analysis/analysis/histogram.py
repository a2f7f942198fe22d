"""Fixed-width histogram accumulated over the frames of a trajectory."""

from collections.abc import Callable

import numpy as np

from .errors import ConfigurationError


class Histogram:
    """
    Histogram of ``nbins`` equal-width bins covering ``[lower, upper)``.

    The histogram is filled repeatedly while frames are streamed, then
    transformed in place exactly once with :meth:`normalize`. Values passed
    to :meth:`insert_at` must already lie in ``[lower, upper)``. Values
    that floating point rounding puts at index ``nbins`` go to the last
    bin; nothing else is clamped or rejected.
    """

    def __init__(self, nbins: int, lower: float, upper: float):
        """
        Initialize an empty histogram.

        Args:
            nbins: Number of bins, must be positive
            lower: Lower bound of the first bin
            upper: Upper bound of the last bin

        Raises:
            ConfigurationError: If the bin count or the range is invalid
        """
        if nbins <= 0:
            raise ConfigurationError(f"Number of bins must be positive, got {nbins}")
        if upper <= lower:
            raise ConfigurationError(
                f"Histogram range must be increasing, got [{lower}, {upper})"
            )

        self.nbins = int(nbins)
        self.lower = float(lower)
        self.upper = float(upper)
        self._data = np.zeros(self.nbins, dtype=np.float64)

    @property
    def bin_width(self) -> float:
        """Width of a single bin."""
        return (self.upper - self.lower) / self.nbins

    @property
    def size(self) -> int:
        """Number of bins."""
        return self.nbins

    def __len__(self) -> int:
        return self.nbins

    def __getitem__(self, index):
        return self._data[index]

    @property
    def values(self) -> np.ndarray:
        """Copy of the bin contents."""
        return self._data.copy()

    @property
    def edges(self) -> np.ndarray:
        return np.linspace(self.lower, self.upper, self.nbins + 1)

    @property
    def lower_edges(self) -> np.ndarray:
        """Lower edge of every bin."""
        return self.lower + np.arange(self.nbins) * self.bin_width

    @property
    def centers(self) -> np.ndarray:
        """Midpoint of every bin."""
        return self.lower + (np.arange(self.nbins) + 0.5) * self.bin_width

    def bin_index(self, value: float) -> int:
        """Return the index of the bin containing ``value``."""
        # values just below upper can round up to nbins
        return min(int(np.floor((value - self.lower) / self.bin_width)), self.nbins - 1)

    def insert_at(self, value: float) -> None:
        """Increment the bin containing ``value``."""
        self._data[self.bin_index(value)] += 1

    def insert_many(self, values: np.ndarray) -> None:
        """Increment the bins for every entry of ``values`` (same rule as insert_at)."""
        values = np.asarray(values, dtype=np.float64)
        if values.size == 0:
            return

        indices = np.floor((values - self.lower) / self.bin_width).astype(np.intp)
        indices = np.minimum(indices, self.nbins - 1)
        np.add.at(self._data, indices, 1)

    def merge(self, other: "Histogram") -> None:
        """
        Add the counts of another histogram with the same geometry.

        Args:
            other: Partial histogram, e.g. filled by a separate worker

        Raises:
            ValueError: If the two histograms do not share bins and range
        """
        if (other.nbins, other.lower, other.upper) != (self.nbins, self.lower, self.upper):
            raise ValueError("Can not merge histograms with different bins")

        self._data += other._data

    def normalize(self, fn: Callable[[int, float], float]) -> None:
        """
        Replace every bin value ``v`` at index ``i`` by ``fn(i, v)``.

        This must be called once per run: a second call transforms the
        already normalized values again.
        """
        for i in range(self.nbins):
            self._data[i] = fn(i, self._data[i])
