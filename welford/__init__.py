"""
Welford streaming statistics

Running count, mean, population variance and sample variance of a stream of
observations in O(1) memory, with a thread-safe variant for shared streams.
"""

__version__ = "0.1.0"

from welford.aggregate import Aggregate, format_summary
from welford.concurrent_aggregate import ConcurrentAggregate
from welford.rwlock import ReadWriteLock

__all__ = [
    "Aggregate",
    "ConcurrentAggregate",
    "ReadWriteLock",
    "format_summary",
]
