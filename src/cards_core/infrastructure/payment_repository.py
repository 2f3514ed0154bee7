from __future__ import annotations

import copy
from typing import TYPE_CHECKING

from cards_core.application.ports import PaymentRepository
from cards_core.domain.exceptions import IdempotencyKeyReuseError
from cards_core.domain.value_objects import PaymentId
from cards_core.infrastructure.audit import AuditMetadata

if TYPE_CHECKING:
    from cards_core.application.ports import TimeProvider
    from cards_core.domain.entities import Payment
    from cards_core.domain.value_objects import IdempotencyKey


class InMemoryPaymentRepository(PaymentRepository):
    """In-memory payment repository for testing.

    Implementation notes:
    - Uses dict with PaymentId as key (requires frozen dataclass)
    - Returns deep copies from get() to mimic database detachment
    - Stores deep copies in save() to prevent external mutation
    - Secondary index on idempotency_key acts as the unique constraint
    - NOT thread-safe; relies on external LockProvider for serialization

    Copy-on-read rationale:
    Returning copies catches bugs where code changes an entity without
    calling save(). This mimics ORM behavior where fetched entities are
    detached from the session until explicitly merged/committed.
    """

    def __init__(self, time_provider: TimeProvider) -> None:
        self._time_provider = time_provider
        self._payments: dict[PaymentId, Payment] = {}
        self._by_idempotency_key: dict[IdempotencyKey, PaymentId] = {}
        self._audit: dict[PaymentId, AuditMetadata] = {}

    def next_id(self) -> PaymentId:
        payment_id = PaymentId.generate()
        while payment_id in self._payments:
            payment_id = PaymentId.generate()
        return payment_id

    def get(self, payment_id: PaymentId) -> Payment | None:
        payment = self._payments.get(payment_id)
        if payment is None:
            return None
        return copy.deepcopy(payment)

    def get_by_idempotency_key(self, idempotency_key: IdempotencyKey) -> Payment | None:
        payment_id = self._by_idempotency_key.get(idempotency_key)
        if payment_id is None:
            return None
        return self.get(payment_id)

    def save(self, payment: Payment, actor: str | None = None) -> None:
        if payment.payment_id is None:
            raise ValueError("Cannot save a payment without payment_id")

        owner = self._by_idempotency_key.get(payment.idempotency_key)
        if owner is not None and owner != payment.payment_id:
            raise IdempotencyKeyReuseError(
                f"Idempotency key '{payment.idempotency_key}' already used by {owner.value}"
            )

        now = self._time_provider.now()
        audit = self._audit.get(payment.payment_id)
        self._audit[payment.payment_id] = (
            AuditMetadata.created(now, actor) if audit is None else audit.touched(now, actor)
        )
        self._payments[payment.payment_id] = copy.deepcopy(payment)
        self._by_idempotency_key[payment.idempotency_key] = payment.payment_id

    def audit_metadata(self, payment_id: PaymentId) -> AuditMetadata | None:
        return self._audit.get(payment_id)
