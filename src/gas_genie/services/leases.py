"""Named leases serializing quota checks per storage namespace."""

import threading
from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager
from typing import Protocol


class LeaseManager(Protocol):
    """Interface for acquiring a mutual-exclusion lease by name."""

    def acquire(self, namespace: str, timeout: float) -> AbstractContextManager[bool]:
        """Yield True if the lease was acquired within the timeout."""


class InMemoryLeaseManager(LeaseManager):
    """Process-local leases backed by one lock per namespace."""

    def __init__(self) -> None:
        self._locks: dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    @contextmanager
    def acquire(self, namespace: str, timeout: float) -> Iterator[bool]:
        """Hold the namespace lock for the duration of the block, if possible."""
        lock = self._lock_for(namespace)
        acquired = lock.acquire(timeout=max(timeout, 0.0))
        try:
            yield acquired
        finally:
            if acquired:
                lock.release()

    def _lock_for(self, namespace: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(namespace)
            if lock is None:
                lock = threading.Lock()
                self._locks[namespace] = lock
            return lock
