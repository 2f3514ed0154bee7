from __future__ import annotations

import secrets
from dataclasses import dataclass
from typing import TYPE_CHECKING

from cards_core.domain.entities import Payment
from cards_core.domain.exceptions import (
    CardNotFoundError,
    IdempotencyKeyReuseError,
    LimitExceededError,
    StateConflictError,
)
from cards_core.logging_config import get_logger

if TYPE_CHECKING:
    from cards_core.application.ports import (
        CardRepository,
        LockProvider,
        PaymentRepository,
        TimeProvider,
    )
    from cards_core.config import Settings
    from cards_core.domain.value_objects import CardId, IdempotencyKey, Money

logger = get_logger(__name__)

APPROVAL_NUMBER_DIGITS = 8


@dataclass(frozen=True, slots=True)
class AuthorizePaymentRequest:
    """Input DTO for authorize payment use case."""

    card_id: CardId
    merchant_name: str
    merchant_id: str
    amount: Money
    idempotency_key: IdempotencyKey
    actor: str | None = None


@dataclass(frozen=True, slots=True)
class AuthorizePaymentResponse:
    """Output DTO for authorize payment use case.

    payment.status is APPROVED or DECLINED; a declined payment carries the
    rejecting error code in fail_reason.
    """

    payment: Payment
    is_replay: bool  # True if this was an idempotent replay


class AuthorizePaymentUseCase:
    """Orchestrates a card payment from request to approval or decline.

    Responsibilities:
    - Acquire the per-card lock
    - Fetch current time inside the lock
    - Check idempotency FIRST
    - Create the pending payment and check the card's limits
    - Approve and record usage, or decline with the reason code
    - Persist the card and the payment
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

    def execute(self, request: AuthorizePaymentRequest) -> AuthorizePaymentResponse:
        """Execute the authorization workflow.

        Returns:
            AuthorizePaymentResponse with the approved or declined payment.

        Raises:
            CardNotFoundError: Card does not exist.
            IdempotencyKeyReuseError: Key already used for a different request.
            InvalidAmountError: Amount is not positive.
        """
        with self._lock_provider.acquire(request.card_id.value):
            return self._execute_within_lock(request)

    def _execute_within_lock(self, request: AuthorizePaymentRequest) -> AuthorizePaymentResponse:
        now = self._time_provider.now().astimezone(self._settings.tzinfo)

        existing = self._payment_repo.get_by_idempotency_key(request.idempotency_key)
        if existing is not None:
            return self._handle_idempotent_replay(existing, request)

        card = self._card_repo.get(request.card_id)
        if card is None:
            raise CardNotFoundError(request.card_id.value)

        payment = Payment.create(
            card_id=request.card_id,
            merchant_name=request.merchant_name,
            merchant_id=request.merchant_id,
            amount=request.amount,
            idempotency_key=request.idempotency_key,
            now=now,
        ).with_id(self._payment_repo.next_id())

        try:
            card.validate_single_payment(request.amount)
            card = card.validate_payment(request.amount, now)
        except (LimitExceededError, StateConflictError) as e:
            declined = payment.decline(e.code)
            self._payment_repo.save(declined, actor=request.actor)
            logger.warning(
                "Payment declined",
                extra={
                    "payment_id": declined.payment_id.value,
                    "card_id": request.card_id.value,
                    "amount": request.amount.amount,
                    "reason": e.code,
                },
            )
            return AuthorizePaymentResponse(payment=declined, is_replay=False)

        approved = payment.approve(self._next_approval_number(), now)
        card = card.record_payment(request.amount, now)

        # Payment first: saving it claims the idempotency key, so a request
        # that lost the key to another card fails before usage is recorded
        self._payment_repo.save(approved, actor=request.actor)
        self._card_repo.save(card, actor=request.actor)

        logger.info(
            "Payment approved",
            extra={
                "payment_id": approved.payment_id.value,
                "card_id": request.card_id.value,
                "amount": request.amount.amount,
                "approval_number": approved.approval_number,
            },
        )
        return AuthorizePaymentResponse(payment=approved, is_replay=False)

    def _handle_idempotent_replay(
        self,
        existing: Payment,
        request: AuthorizePaymentRequest,
    ) -> AuthorizePaymentResponse:
        """Return the stored payment if the request matches it.

        - Exact match (same card and amount): return existing payment
        - Payload mismatch: raise IdempotencyKeyReuseError
        """
        if existing.card_id != request.card_id or existing.amount != request.amount:
            raise IdempotencyKeyReuseError(
                f"Idempotency key '{request.idempotency_key}' already used "
                f"for card={existing.card_id.value} amount={existing.amount}, "
                f"but request has card={request.card_id.value} amount={request.amount}"
            )

        return AuthorizePaymentResponse(payment=existing, is_replay=True)

    def _next_approval_number(self) -> str:
        number = secrets.randbelow(10**APPROVAL_NUMBER_DIGITS)
        return f"{self._settings.approval_number_prefix}{number:0{APPROVAL_NUMBER_DIGITS}d}"
