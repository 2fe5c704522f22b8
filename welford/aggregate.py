"""
Welford's Online Variance Algorithm: single-pass mean/variance with O(1) memory.

The Aggregate holds only the sufficient statistics of a stream (count, mean
and M2, the running sum of squared deviations from the mean).  Every accessor
is total: an empty stream reports zeros instead of raising.
"""

import logging
import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

import numpy as np

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

SUMMARY_FORMAT = "Count: %d, Mean: %f, Variance: %f, Sample Variance: %f"

Results = Tuple[int, float, float, float]


def format_summary(results: Results) -> str:
    """Render a (count, mean, variance, sample_variance) tuple."""
    return SUMMARY_FORMAT % results


def as_floats(values: Iterable) -> List[float]:
    """Materialize *values* as a flat list of builtin floats.

    NumPy arrays of any shape (subclasses such as np.matrix included) are
    flattened in C order.  Conversion happens up front so a bad element
    fails before any state is touched.
    """
    if isinstance(values, np.ndarray):
        if np.iscomplexobj(values):
            raise TypeError(f"cannot fold complex array of dtype {values.dtype}")
        return np.asarray(values, dtype=np.float64).ravel().tolist()
    return [float(v) for v in values]


def _sqrt(variance: float) -> float:
    # m2 may drift slightly below zero; NaN falls through to math.sqrt
    if variance < 0.0:
        return 0.0
    return math.sqrt(variance)


def _rounded(value: float, precision: Optional[int]) -> float:
    if precision is None:
        return value
    return round(value, precision)


@dataclass
class Aggregate:
    """Running mean/variance of one observation stream.

    Not thread-safe; see ConcurrentAggregate for shared use.
    """
    count: int = 0
    mean: float = 0.0
    m2: float = 0.0

    def reset(self) -> "Aggregate":
        logger.debug("Resetting aggregate after %d observations", self.count)
        self.count = 0
        self.mean = 0.0
        self.m2 = 0.0
        return self

    def update(self, *values) -> "Aggregate":
        """Fold one or more observations, in the order given."""
        return self._fold(as_floats(values))

    def extend(self, values: Iterable) -> "Aggregate":
        """Fold every value of an iterable or NumPy array."""
        return self._fold(as_floats(values))

    def _fold(self, values: List[float]) -> "Aggregate":
        for value in values:
            self.count += 1
            delta = value - self.mean
            self.mean += delta / self.count
            # delta2 must use the updated mean
            delta2 = value - self.mean
            self.m2 += delta * delta2
        return self

    @property
    def variance(self) -> float:
        """Population variance, 0.0 for an empty stream."""
        if self.count == 0:
            return 0.0
        return self.m2 / self.count

    @property
    def sample_variance(self) -> float:
        """Bessel-corrected variance, 0.0 until two observations arrive."""
        if self.count <= 1:
            return 0.0
        return self.m2 / (self.count - 1)

    @property
    def std_dev(self) -> float:
        return _sqrt(self.variance)

    @property
    def sample_std_dev(self) -> float:
        return _sqrt(self.sample_variance)

    def results(self) -> Results:
        return self.count, self.mean, self.variance, self.sample_variance

    def to_dict(self, precision: Optional[int] = None) -> dict:
        return {
            "count": self.count,
            "mean": _rounded(self.mean, precision),
            "variance": _rounded(self.variance, precision),
            "sample_variance": _rounded(self.sample_variance, precision),
            "std_dev": _rounded(self.std_dev, precision),
            "sample_std_dev": _rounded(self.sample_std_dev, precision),
        }

    def __str__(self) -> str:
        return format_summary(self.results())
