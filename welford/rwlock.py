"""
Readers-writer lock built on threading.Condition.

Any number of readers may hold the lock together; a writer holds it alone.
Once a writer is waiting, new readers queue behind it so a steady stream of
readers cannot starve writers.  The lock is not reentrant in either mode.
"""

import threading
from contextlib import contextmanager


class ReadWriteLock:

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    def acquire_read(self):
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1

    def release_read(self):
        with self._cond:
            if self._readers <= 0:
                raise RuntimeError("release_read() called without a read lock held")
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self):
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            except BaseException:
                # Readers parked behind this writer must be woken
                self._writers_waiting -= 1
                self._cond.notify_all()
                raise
            self._writers_waiting -= 1
            self._writer = True

    def release_write(self):
        with self._cond:
            if not self._writer:
                raise RuntimeError("release_write() called without the write lock held")
            self._writer = False
            self._cond.notify_all()

    @contextmanager
    def read_locked(self):
        """Hold the lock in shared mode for the duration of the block."""
        self.acquire_read()
        try:
            yield self
        finally:
            self.release_read()

    @contextmanager
    def write_locked(self):
        """Hold the lock in exclusive mode for the duration of the block."""
        self.acquire_write()
        try:
            yield self
        finally:
            self.release_write()

    @property
    def readers(self) -> int:
        """Number of threads currently holding the read lock."""
        with self._cond:
            return self._readers

    @property
    def write_held(self) -> bool:
        with self._cond:
            return self._writer
