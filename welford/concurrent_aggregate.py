"""
Thread-safe Aggregate for many producers and readers sharing one stream.

All numeric logic lives in Aggregate; this wrapper only decides which lock
mode each call runs under.  Mutations take the write lock, every read takes
the read lock (count and mean included), and each public call acquires the
lock exactly once so composite reads see one consistent state.
"""

import logging
from dataclasses import replace
from typing import Iterable, Optional

from welford.aggregate import Aggregate, Results, as_floats, format_summary
from welford.rwlock import ReadWriteLock

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


class ConcurrentAggregate:
    """Aggregate guarded by a readers-writer lock."""

    def __init__(self):
        self._aggregate = Aggregate()
        self._lock = ReadWriteLock()

    def reset(self) -> "ConcurrentAggregate":
        with self._lock.write_locked():
            self._aggregate.reset()
        return self

    def update(self, *values) -> "ConcurrentAggregate":
        """Fold one or more observations as a single atomic batch."""
        batch = as_floats(values)
        logger.debug("Folding batch of %d values", len(batch))
        with self._lock.write_locked():
            self._aggregate.extend(batch)
        return self

    def extend(self, values: Iterable) -> "ConcurrentAggregate":
        """Fold an iterable atomically.

        The iterable is drained before the write lock is taken, so a slow
        generator never blocks readers.
        """
        batch = as_floats(values)
        logger.debug("Folding batch of %d values", len(batch))
        with self._lock.write_locked():
            self._aggregate.extend(batch)
        return self

    @property
    def count(self) -> int:
        with self._lock.read_locked():
            return self._aggregate.count

    @property
    def mean(self) -> float:
        with self._lock.read_locked():
            return self._aggregate.mean

    @property
    def variance(self) -> float:
        with self._lock.read_locked():
            return self._aggregate.variance

    @property
    def sample_variance(self) -> float:
        with self._lock.read_locked():
            return self._aggregate.sample_variance

    @property
    def std_dev(self) -> float:
        with self._lock.read_locked():
            return self._aggregate.std_dev

    @property
    def sample_std_dev(self) -> float:
        with self._lock.read_locked():
            return self._aggregate.sample_std_dev

    def results(self) -> Results:
        with self._lock.read_locked():
            return self._aggregate.results()

    def snapshot(self) -> Aggregate:
        """Return an independent plain Aggregate copy of the current state."""
        with self._lock.read_locked():
            return replace(self._aggregate)

    def to_dict(self, precision: Optional[int] = None) -> dict:
        return self.snapshot().to_dict(precision)

    def __str__(self) -> str:
        return format_summary(self.results())

    def __repr__(self) -> str:
        return f"ConcurrentAggregate({self.snapshot()!r})"
