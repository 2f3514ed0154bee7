"""Infrastructure layer - Concrete implementations of ports.

This layer contains:
- In-memory card and payment repositories with audit metadata
- Time Provider: Clock abstraction for testability
- Locking: per-card locks for one process

Infrastructure adapters implement the ports defined in the application layer.
"""

from cards_core.infrastructure.audit import AuditMetadata
from cards_core.infrastructure.card_repository import InMemoryCardRepository
from cards_core.infrastructure.lock_provider import InMemoryLockProvider, NoOpLockProvider
from cards_core.infrastructure.payment_repository import InMemoryPaymentRepository
from cards_core.infrastructure.time_provider import FixedTimeProvider, SystemTimeProvider

__all__ = [
    "AuditMetadata",
    "FixedTimeProvider",
    "InMemoryCardRepository",
    "InMemoryLockProvider",
    "InMemoryPaymentRepository",
    "NoOpLockProvider",
    "SystemTimeProvider",
]
