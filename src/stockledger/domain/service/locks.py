"""Per-triple exclusive locks.

The triple is the unit of contention: every read-modify-write on a stock
record happens while holding that triple's lock, and different triples
never wait on each other.  Operations that touch several triples (order
reservations, transfers) acquire their locks in ``StockKey.sort_key``
order so two such operations cannot deadlock.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager

from stockledger.domain.exceptions import LockTimeout
from stockledger.domain.model.value_objects import StockKey


class TripleLockRegistry:

    def __init__(self, timeout: float = 5.0) -> None:
        self._timeout = timeout
        self._guard = threading.Lock()
        self._locks: dict[StockKey, threading.Lock] = {}

    @contextmanager
    def hold(self, *keys: StockKey) -> Iterator[None]:
        ordered = sorted(set(keys), key=lambda k: k.sort_key)
        acquired: list[threading.Lock] = []
        try:
            for key in ordered:
                lock = self._lock_for(key)
                if not lock.acquire(timeout=self._timeout):
                    raise LockTimeout(
                        f"Timed out after {self._timeout}s waiting for the lock on {key}"
                    )
                acquired.append(lock)
            yield
        finally:
            for lock in reversed(acquired):
                lock.release()

    def _lock_for(self, key: StockKey) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock
