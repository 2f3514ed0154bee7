from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cards_core.domain.entities import Payment
    from cards_core.domain.value_objects import IdempotencyKey, PaymentId


class PaymentRepository(ABC):
    """Port for payment persistence.

    Contract:
    - get() returns None if the payment does not exist (no exception)
    - get_by_idempotency_key() finds the payment created for a key
    - save() performs upsert; a second payment with an already-used
      idempotency key raises IdempotencyKeyReuseError
    - PaymentId is immutable after it is assigned

    Thread safety note:
    Repositories assume the caller has acquired appropriate locks via
    LockProvider before invoking methods. This matches database behavior
    where transaction isolation is external to the repository.
    """

    @abstractmethod
    def next_id(self) -> PaymentId:
        """Return a new identifier for a payment about to be saved."""

    @abstractmethod
    def get(self, payment_id: PaymentId) -> Payment | None:
        """Retrieve a payment by ID.

        Returns:
            The Payment if found, None otherwise.
            Returned entity is a copy; mutations do not affect stored state.
        """

    @abstractmethod
    def get_by_idempotency_key(self, idempotency_key: IdempotencyKey) -> Payment | None:
        """Retrieve the payment created for an idempotency key, if any."""

    @abstractmethod
    def save(self, payment: Payment, actor: str | None = None) -> None:
        """Persist a payment (upsert semantics).

        Raises:
            IdempotencyKeyReuseError: Another payment already uses the key.
        """
