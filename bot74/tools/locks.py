"""Locking primitives for state shared between threads."""
# Licensed under the Eiffel Forum License 2.
from __future__ import annotations

import contextlib
import threading
from typing import Iterator


class ReadWriteLock:
    """A lock allowing many concurrent readers or a single writer.

    Readers never wait for each other; a writer waits until every reader
    has left, and readers that arrive while a writer is waiting queue behind
    it so a steady stream of readers cannot starve the writer::

        >>> lock = ReadWriteLock()
        >>> with lock.read():
        ...     pass  # shared access
        >>> with lock.write():
        ...     pass  # exclusive access

    The lock is not reentrant: acquiring the write lock while holding the
    read lock (or the other way around) from the same thread deadlocks.
    """
    def __init__(self) -> None:
        self._condition = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._waiting_writers = 0

    def acquire_read(self) -> None:
        with self._condition:
            while self._writer or self._waiting_writers:
                self._condition.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._condition:
            if self._readers <= 0:
                raise RuntimeError('Cannot release an unacquired read lock.')
            self._readers -= 1
            if not self._readers:
                self._condition.notify_all()

    def acquire_write(self) -> None:
        with self._condition:
            self._waiting_writers += 1
            try:
                while self._writer or self._readers:
                    self._condition.wait()
            finally:
                self._waiting_writers -= 1
            self._writer = True

    def release_write(self) -> None:
        with self._condition:
            if not self._writer:
                raise RuntimeError('Cannot release an unacquired write lock.')
            self._writer = False
            self._condition.notify_all()

    @contextlib.contextmanager
    def read(self) -> Iterator[None]:
        """Hold the lock for shared (read) access."""
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextlib.contextmanager
    def write(self) -> Iterator[None]:
        """Hold the lock for exclusive (write) access."""
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()
