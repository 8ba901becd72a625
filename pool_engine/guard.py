"""Reentrancy guard and writer lock for the engine.

One guard is shared by every pool of an engine. It serializes operations
across threads and rejects nested calls from the thread that already holds
it, which is what a token callback re-entering the engine looks like.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager

import structlog

from pool_engine.errors import ReentrancyRejected

logger = structlog.get_logger()


class ReentrancyGuard:
    """Process-wide mutual exclusion with explicit re-entry detection.

    Attributes:
        operation: Name of the operation currently in flight, if any
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._owner: int | None = None
        self.operation: str | None = None

    @property
    def locked(self) -> bool:
        """True while any operation holds the guard."""
        return self._lock.locked()

    @contextmanager
    def hold(self, operation: str) -> Iterator[None]:
        """Hold the guard for the duration of an operation.

        Blocks while another thread holds it. The owner is cleared on every
        exit path, including exceptions.

        Raises:
            ReentrancyRejected: If the current thread already holds the guard
        """
        me = threading.get_ident()
        if self._owner == me:
            logger.warning(
                "reentrancy_rejected",
                operation=operation,
                in_flight=self.operation,
            )
            raise ReentrancyRejected(
                f"{operation} called while {self.operation} is in flight"
            )

        with self._lock:
            self._owner = me
            self.operation = operation
            try:
                yield
            finally:
                self._owner = None
                self.operation = None
