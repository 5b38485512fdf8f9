import logging
from typing import Iterable, Iterator, Tuple

import numpy as np

logger = logging.getLogger(__name__)


class BinLookupError(IndexError):
    """Raised when a sample cannot be attributed to any bin (max_bins == 0)."""


# synthetic values mapped per pass when rebuilding counts
RECONSTRUCT_CHUNK = 4096


def midpoint_search(sorted_values, target) -> int:
    """
    Index of an element equal to target, taking the first midpoint that hits it, so among
    repeated values it need not be the leftmost. When target is absent returns the
    insertion point, the index of the first element greater than target.
    """
    lo, hi = 0, len(sorted_values) - 1
    while lo <= hi:
        i = lo + ((hi - lo) >> 1)
        value = sorted_values[i]
        if value == target:
            return i
        if value < target:
            lo = i + 1
        else:
            hi = i - 1
    return lo


class HistogramEstimator:
    """
    Dynamic equi-depth histogram over a stream of samples, rebalanced on every addition.

    Memory stays proportional to ``max_bins``: only bin counts and bin boundaries are kept,
    never the raw samples. Once more samples than bins have been seen, every ``add`` recomputes
    the boundaries from the cumulative counts and refills the bins with a uniform spread of
    ``total_count`` synthetic values over the observed range.

    Samples must be finite. NaN and infinities are not checked and corrupt the boundaries.
    """

    def __init__(self, max_bins: int):
        if isinstance(max_bins, bool) or not isinstance(max_bins, (int, np.integer)):
            raise TypeError(f"max_bins must be an integer, got {type(max_bins).__name__}")
        if max_bins < 0:
            raise ValueError("Number of bins must be non-negative.")

        self._max_bins = int(max_bins)
        self._counts = np.zeros(self._max_bins, dtype=np.int64)
        self._boundaries = np.zeros(self._max_bins + 1, dtype=np.float64)
        self._total_count = 0

    @property
    def max_bins(self) -> int:
        return self._max_bins

    @property
    def total_count(self) -> int:
        return self._total_count

    @property
    def counts(self) -> np.ndarray:
        view = self._counts.view()
        view.flags.writeable = False
        return view

    @property
    def boundaries(self) -> np.ndarray:
        view = self._boundaries.view()
        view.flags.writeable = False
        return view

    def bins(self) -> Iterator[Tuple[float, float, int]]:
        for i in range(self._max_bins):
            yield float(self._boundaries[i]), float(self._boundaries[i + 1]), int(self._counts[i])

    def __repr__(self):
        return f"HistogramEstimator(max_bins={self._max_bins}, total_count={self._total_count})"

    def _find_bins(self, values) -> np.ndarray:
        """
        Index of the first bin whose closed interval [boundaries[i], boundaries[i + 1]] holds
        each value. Values matching no interval go to the last bin, which is -1 for an
        estimator without bins.
        """
        values = np.asarray(values, dtype=np.float64)
        fallback = self._max_bins - 1
        if self._max_bins == 0:
            return np.full(values.shape, fallback, dtype=np.intp)

        b = self._boundaries
        if np.all(b[:-1] <= b[1:]):
            # sorted edges: the first matching bin ends at the leftmost edge >= value
            idx = np.searchsorted(b, values, side="left") - 1
            idx = np.maximum(idx, 0)
            outside = ~((values >= b[0]) & (values <= b[-1]))
            idx[outside] = fallback
            return idx

        inside = (b[:-1] <= values[:, None]) & (values[:, None] <= b[1:])
        return np.where(inside.any(axis=1), inside.argmax(axis=1), fallback)

    def _find_bin(self, value: float) -> int:
        return int(self._find_bins(np.array([value]))[0])

    def add(self, sample: float) -> None:
        sample = float(sample)

        # the first sample only seeds the lower bound, it is never counted
        if self._total_count == 0:
            self._boundaries[0] = sample
            self._total_count = 1
            return

        if self._total_count == 1:
            self._boundaries[-1] = sample

        if sample < self._boundaries[0]:
            self._boundaries[0] = sample
        if sample > self._boundaries[-1]:
            self._boundaries[-1] = sample

        i = self._find_bin(sample)
        if not 0 <= i < self._max_bins:
            raise BinLookupError(f"no bin for sample {sample!r}: histogram has {self._max_bins} bins")
        self._counts[i] += 1
        self._total_count += 1

        self._rebalance_bins()

    def extend(self, samples: Iterable[float]) -> None:
        for s in samples:
            self.add(s)

    def _rebalance_bins(self):
        """
        Moves the interior boundaries so each bin holds about total_count / max_bins samples,
        interpolating inside the bin that straddles each target cumulative count. Counts are
        then rebuilt from total_count evenly spaced values over [min, max] mapped through the
        new boundaries; the old per-bin counts are discarded.
        """
        if self._total_count <= self._max_bins:
            return
        last = self._max_bins
        target_per_bin = self._total_count // last

        running_total = np.cumsum(self._counts)
        min_val = float(self._boundaries[0])
        max_val = float(self._boundaries[-1])

        new_boundaries = np.empty_like(self._boundaries)
        new_boundaries[0] = min_val
        new_boundaries[last] = max_val

        for k in range(last - 1):
            target = (k + 1) * target_per_bin
            idx = midpoint_search(running_total, target)

            lower = self._boundaries[idx] if idx > 0 else min_val
            upper = self._boundaries[idx + 1] if idx < last else max_val

            previous = int(running_total[idx - 1]) if idx > 0 else 0
            current = int(running_total[idx]) - previous if idx < last else 0

            fraction = (target - previous) / current if current > 0 else 0.0
            new_boundaries[k + 1] = lower + fraction * (upper - lower)

        self._boundaries[:] = new_boundaries
        self._counts[:] = 0

        step = (max_val - min_val) / (self._total_count - 1)
        for start in range(0, self._total_count, RECONSTRUCT_CHUNK):
            stop = min(start + RECONSTRUCT_CHUNK, self._total_count)
            synthetic = min_val + np.arange(start, stop) * step
            idx = self._find_bins(synthetic)
            idx = idx[(idx >= 0) & (idx < last)]
            self._counts += np.bincount(idx, minlength=last).astype(np.int64)

        logger.debug("rebalanced %d bins over [%g, %g] at total_count=%d",
                     last, min_val, max_val, self._total_count)
