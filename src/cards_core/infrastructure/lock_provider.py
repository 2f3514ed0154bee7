from __future__ import annotations

from contextlib import contextmanager
from threading import Lock
from typing import TYPE_CHECKING

from cards_core.application.ports import LockProvider

if TYPE_CHECKING:
    from collections.abc import Iterator


class InMemoryLockProvider(LockProvider):
    """Per-card locks for a single process.

    A guard lock protects the lock table while a card's lock is looked up
    or created; the card lock itself is then held for the caller's block,
    so different cards never wait on each other.

    Locks are never evicted and do not span processes. Across service
    instances the Card.version token is what detects lost updates.
    """

    def __init__(self) -> None:
        self._locks: dict[str, Lock] = {}
        self._guard = Lock()

    @contextmanager
    def acquire(self, resource_id: str) -> Iterator[None]:
        with self._guard:
            lock = self._locks.setdefault(resource_id, Lock())

        with lock:
            yield


class NoOpLockProvider(LockProvider):
    """Lock provider that performs no locking, for single-threaded tests."""

    @contextmanager
    def acquire(self, resource_id: str) -> Iterator[None]:  # noqa: ARG002
        yield
