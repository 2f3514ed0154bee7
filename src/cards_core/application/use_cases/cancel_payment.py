from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from cards_core.domain.exceptions import (
    CardNotFoundError,
    PaymentCannotCancelError,
    PaymentNotFoundError,
)
from cards_core.logging_config import get_logger

if TYPE_CHECKING:
    from datetime import datetime

    from cards_core.application.ports import (
        CardRepository,
        LockProvider,
        PaymentRepository,
        TimeProvider,
    )
    from cards_core.config import Settings
    from cards_core.domain.entities import Card, Payment
    from cards_core.domain.value_objects import PaymentId

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class CancelPaymentRequest:
    """Input DTO for cancel payment use case."""

    payment_id: PaymentId
    reason: str
    actor: str | None = None


@dataclass(frozen=True, slots=True)
class CancelPaymentResponse:
    """Output DTO for cancel payment use case."""

    payment: Payment
    card: Card
    is_refund: bool  # True if settled (approved on an earlier business day)


class CancelPaymentUseCase:
    """Reverses an approved payment and gives the usage back to the card.

    Policy:
    - Approved on the same business day: cancel (before settlement)
    - Approved on an earlier business day: refund (after settlement)

    The payment is read once to find its card, then re-read under that
    card's lock so the decision uses current state.
    """

    def __init__(
        self,
        settings: Settings,
        lock_provider: LockProvider,
        time_provider: TimeProvider,
        card_repository: CardRepository,
        payment_repository: PaymentRepository,
    ) -> None:
        self._settings = settings
        self._lock_provider = lock_provider
        self._time_provider = time_provider
        self._card_repo = card_repository
        self._payment_repo = payment_repository

    def execute(self, request: CancelPaymentRequest) -> CancelPaymentResponse:
        """Execute the cancellation workflow.

        Raises:
            PaymentNotFoundError: Payment does not exist.
            PaymentCannotCancelError: Payment is not APPROVED.
            CardNotFoundError: The payment's card no longer exists.
        """
        payment = self._get_payment(request.payment_id)

        with self._lock_provider.acquire(payment.card_id.value):
            return self._execute_within_lock(request)

    def _execute_within_lock(self, request: CancelPaymentRequest) -> CancelPaymentResponse:
        now = self._time_provider.now().astimezone(self._settings.tzinfo)
        payment = self._get_payment(request.payment_id)

        if not payment.can_cancel():
            raise PaymentCannotCancelError(request.payment_id.value, payment.status.name)

        card = self._card_repo.get(payment.card_id)
        if card is None:
            raise CardNotFoundError(payment.card_id.value)

        is_refund = not self._approved_same_day(payment, now)
        if is_refund:
            reversed_payment = payment.refund(request.reason, now)
        else:
            reversed_payment = payment.cancel(request.reason, now)

        approved_at = (
            payment.approved_at.astimezone(self._settings.tzinfo)
            if payment.approved_at is not None
            else None
        )
        card = card.record_cancellation(payment.amount, approved_at)

        self._card_repo.save(card, actor=request.actor)
        self._payment_repo.save(reversed_payment, actor=request.actor)

        logger.info(
            "Payment refunded" if is_refund else "Payment cancelled",
            extra={
                "payment_id": request.payment_id.value,
                "card_id": payment.card_id.value,
                "amount": payment.amount.amount,
                "reason": request.reason,
            },
        )
        return CancelPaymentResponse(payment=reversed_payment, card=card, is_refund=is_refund)

    def _get_payment(self, payment_id: PaymentId) -> Payment:
        payment = self._payment_repo.get(payment_id)
        if payment is None:
            raise PaymentNotFoundError(payment_id.value)
        return payment

    def _approved_same_day(self, payment: Payment, now: datetime) -> bool:
        if payment.approved_at is None:
            return False
        approved_on = payment.approved_at.astimezone(self._settings.tzinfo).date()
        return approved_on == now.date()
