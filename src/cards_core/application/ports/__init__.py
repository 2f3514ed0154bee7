"""Ports - Abstract interfaces for external dependencies.

Ports define the contracts that infrastructure adapters must implement.
This allows the application layer to remain decoupled from concrete implementations.
"""

from cards_core.application.ports.card_repository import CardRepository
from cards_core.application.ports.lock_provider import LockProvider
from cards_core.application.ports.payment_repository import PaymentRepository
from cards_core.application.ports.time_provider import TimeProvider

__all__ = [
    "CardRepository",
    "LockProvider",
    "PaymentRepository",
    "TimeProvider",
]
