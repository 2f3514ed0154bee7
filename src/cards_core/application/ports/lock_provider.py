from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator


class LockProvider(ABC):
    """Port for per-card locking inside one process.

    Authorizing or cancelling a payment reads a card, checks its limits
    and writes it back. acquire() serializes those read-modify-write
    sequences for the same card.

    Contract:
    - acquire() MUST serialize access to the same resource_id
    - acquire() MUST release the lock when the context exits, normally or not
    - Different resource_ids MAY be held concurrently
    """

    @abstractmethod
    @contextmanager
    def acquire(self, resource_id: str) -> Iterator[None]:
        """Hold the lock for resource_id (e.g. card_id.value) for the block."""
        ...
