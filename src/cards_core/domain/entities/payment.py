"""Payment aggregate root with state machine behavior."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from cards_core.domain.entities.payment_status import PaymentStatus
from cards_core.domain.exceptions import (
    InvalidAmountError,
    InvalidStatusTransitionError,
    PaymentAlreadyApprovedError,
    PaymentCannotCancelError,
)

if TYPE_CHECKING:
    from datetime import datetime

    from cards_core.domain.value_objects import CardId, IdempotencyKey, Money, PaymentId

INVALID_PAYMENT_TRANSITION_CODE = "PAY_030"


@dataclass(frozen=True, slots=True)
class Payment:
    """Payment aggregate root.

    This is a rich domain model where the entity encapsulates its own
    behavior and enforces state transitions internally. Invalid transitions
    raise InvalidStatusTransitionError.

    Payment is immutable (frozen dataclass). All state-changing methods
    return a new Payment instance.

    State machine:
        - pending → approved (approve)
        - pending → declined (decline)
        - approved → cancelled (cancel)
        - approved → refunded (refund)
        - declined, cancelled and refunded are terminal

    The card is referenced by id only. The idempotency key is stored for
    the caller; uniqueness is enforced by the repository, not here.
    """

    payment_id: PaymentId | None
    card_id: CardId
    merchant_name: str
    merchant_id: str
    amount: Money
    status: PaymentStatus
    approval_number: str | None
    fail_reason: str | None
    cancel_reason: str | None
    idempotency_key: IdempotencyKey
    requested_at: datetime
    approved_at: datetime | None
    cancelled_at: datetime | None

    @classmethod
    def create(
        cls,
        card_id: CardId,
        merchant_name: str,
        merchant_id: str,
        amount: Money,
        idempotency_key: IdempotencyKey,
        now: datetime,
    ) -> Payment:
        """Factory method to create a pending Payment with validation.

        Args:
            card_id: The card being charged.
            merchant_name: Display name of the merchant.
            merchant_id: Merchant identifier.
            amount: Amount to charge; must be positive.
            idempotency_key: Client-provided key for request de-duplication.
            now: Request timestamp.

        Returns:
            A new Payment in PENDING state without a payment_id.

        Raises:
            InvalidAmountError: If amount is missing or zero.
        """
        if amount is None or not amount.is_positive():
            raise InvalidAmountError(amount.amount if amount is not None else None)

        return cls(
            payment_id=None,
            card_id=card_id,
            merchant_name=merchant_name,
            merchant_id=merchant_id,
            amount=amount,
            status=PaymentStatus.PENDING,
            approval_number=None,
            fail_reason=None,
            cancel_reason=None,
            idempotency_key=idempotency_key,
            requested_at=now,
            approved_at=None,
            cancelled_at=None,
        )

    @classmethod
    def restore(
        cls,
        *,
        payment_id: PaymentId | None,
        card_id: CardId,
        merchant_name: str,
        merchant_id: str,
        amount: Money,
        status: PaymentStatus,
        idempotency_key: IdempotencyKey,
        requested_at: datetime,
        approval_number: str | None = None,
        fail_reason: str | None = None,
        cancel_reason: str | None = None,
        approved_at: datetime | None = None,
        cancelled_at: datetime | None = None,
    ) -> Payment:
        """Rebuild a payment from persisted values without re-validating them."""
        return cls(
            payment_id=payment_id,
            card_id=card_id,
            merchant_name=merchant_name,
            merchant_id=merchant_id,
            amount=amount,
            status=status,
            approval_number=approval_number,
            fail_reason=fail_reason,
            cancel_reason=cancel_reason,
            idempotency_key=idempotency_key,
            requested_at=requested_at,
            approved_at=approved_at,
            cancelled_at=cancelled_at,
        )

    def with_id(self, payment_id: PaymentId) -> Payment:
        """Return this payment with its persistent identity assigned."""
        if self.payment_id is not None:
            raise ValueError(f"Payment already has an id: {self.payment_id.value}")
        return replace(self, payment_id=payment_id)

    # =========================================================================
    # Queries
    # =========================================================================

    @property
    def is_new(self) -> bool:
        return self.payment_id is None

    @property
    def is_pending(self) -> bool:
        return self.status is PaymentStatus.PENDING

    @property
    def is_approved(self) -> bool:
        return self.status is PaymentStatus.APPROVED

    @property
    def is_declined(self) -> bool:
        return self.status is PaymentStatus.DECLINED

    @property
    def is_final(self) -> bool:
        return self.status.is_final

    def can_cancel(self) -> bool:
        """Cancel and refund are only possible while APPROVED."""
        return self.status.can_cancel

    # =========================================================================
    # Transitions
    # =========================================================================

    def approve(self, approval_number: str, now: datetime) -> Payment:
        """Approve a pending payment.

        Returns:
            New Payment in APPROVED state with approval number and time set.

        Raises:
            PaymentAlreadyApprovedError: Already APPROVED.
            PaymentCannotCancelError: In any other non-pending status.
        """
        self._validate_can_process()
        self._validate_transition(PaymentStatus.APPROVED)

        return replace(
            self,
            status=PaymentStatus.APPROVED,
            approval_number=approval_number,
            approved_at=now,
        )

    def decline(self, reason: str) -> Payment:
        """Decline a pending payment. No timestamp is recorded for declines."""
        self._validate_can_process()
        self._validate_transition(PaymentStatus.DECLINED)

        return replace(self, status=PaymentStatus.DECLINED, fail_reason=reason)

    def cancel(self, reason: str, now: datetime) -> Payment:
        """Cancel an approved payment (same day, before settlement).

        Raises:
            PaymentCannotCancelError: If not APPROVED.
        """
        return self._reverse(PaymentStatus.CANCELLED, reason, now)

    def refund(self, reason: str, now: datetime) -> Payment:
        """Refund an approved payment (after settlement).

        Choosing between cancel and refund is the caller's policy; both are
        available while the payment is APPROVED.

        Raises:
            PaymentCannotCancelError: If not APPROVED.
        """
        return self._reverse(PaymentStatus.REFUNDED, reason, now)

    # =========================================================================
    # Internals
    # =========================================================================

    @property
    def _id_label(self) -> str:
        return self.payment_id.value if self.payment_id is not None else "NEW"

    def _reverse(self, target: PaymentStatus, reason: str, now: datetime) -> Payment:
        if not self.can_cancel():
            raise PaymentCannotCancelError(self._id_label, self.status.name)
        self._validate_transition(target)

        return replace(self, status=target, cancel_reason=reason, cancelled_at=now)

    def _validate_can_process(self) -> None:
        if self.status is PaymentStatus.PENDING:
            return
        if self.status is PaymentStatus.APPROVED:
            raise PaymentAlreadyApprovedError(self._id_label)
        raise PaymentCannotCancelError(self._id_label, self.status.name)

    def _validate_transition(self, target: PaymentStatus) -> None:
        if not self.status.can_transition_to(target):
            raise InvalidStatusTransitionError(
                self.status.name, target.name, code=INVALID_PAYMENT_TRANSITION_CODE
            )
