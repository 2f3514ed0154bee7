"""Domain exceptions for cards-core.

Exception hierarchy:
    DomainException (base)
    ├── Validation Errors
    │   ├── InvalidCardIdError
    │   ├── InvalidPaymentIdError
    │   ├── InvalidCardNumberError
    │   ├── InvalidAmountError
    │   └── InvalidIdempotencyKeyError
    ├── Not Found Errors
    │   ├── CardNotFoundError
    │   └── PaymentNotFoundError
    ├── Limit Errors
    │   ├── DailyLimitExceededError
    │   ├── MonthlyLimitExceededError
    │   └── SinglePaymentLimitExceededError
    ├── State Conflict Errors
    │   ├── CardNotActiveError
    │   ├── CardBlockedError
    │   ├── CardExpiredError
    │   ├── CardTerminatedError
    │   ├── CardAlreadyActiveError
    │   ├── PaymentAlreadyApprovedError
    │   └── PaymentCannotCancelError
    ├── InvalidStatusTransitionError
    ├── InsufficientBalanceError
    └── IdempotencyKeyReuseError

Every exception has a machine-readable ``code`` and keeps its structured
data as attributes, so callers catch by type and never parse messages.
Card codes use the CRD_xxx range, payment codes the PAY_xxx range.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from decimal import Decimal


class DomainException(Exception):
    """Base exception for all domain-level errors.

    All domain exceptions inherit from this class to enable
    catching domain errors distinctly from infrastructure errors.
    """

    code: str = "DOMAIN_ERROR"


# =============================================================================
# Validation Errors
# =============================================================================


class ValidationError(DomainException):
    """Malformed input at construction time."""


class InvalidCardIdError(ValidationError):
    """Raised when a card ID is not of the form CRD-xxxxxxxx."""

    code = "CRD_001"

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"Invalid card ID: {value!r}")


class InvalidPaymentIdError(ValidationError):
    """Raised when a payment ID is not of the form PAY-xxxxxxxx."""

    code = "PAY_001"

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"Invalid payment ID: {value!r}")


class InvalidCardNumberError(ValidationError):
    """Raised when a card number is not 16 digits or fails the Luhn check.

    Only the masked form of the rejected number is kept.
    """

    code = "CRD_003"

    def __init__(self, masked_number: str) -> None:
        self.masked_number = masked_number
        super().__init__(f"Invalid card number: {masked_number}")


class InvalidAmountError(ValidationError):
    """Raised when an amount is missing, negative, or not positive where required."""

    code = "PAY_002"

    def __init__(self, amount: object) -> None:
        self.amount = amount
        super().__init__(f"Invalid amount: {amount}")


class InvalidIdempotencyKeyError(ValidationError):
    """Raised when an idempotency key is empty, too long or has disallowed characters."""

    code = "PAY_004"

    def __init__(self, value: object, reason: str) -> None:
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid idempotency key {value!r}: {reason}")


# =============================================================================
# Not Found Errors
# =============================================================================


class NotFoundError(DomainException):
    """Raised by application lookups; the aggregates never raise it."""


class CardNotFoundError(NotFoundError):
    code = "CRD_010"

    def __init__(self, card_id: str) -> None:
        self.card_id = card_id
        super().__init__(f"Card not found: {card_id}")


class PaymentNotFoundError(NotFoundError):
    code = "PAY_010"

    def __init__(self, payment_id: str) -> None:
        self.payment_id = payment_id
        super().__init__(f"Payment not found: {payment_id}")


# =============================================================================
# Limit Errors
# =============================================================================


class LimitExceededError(DomainException):
    """A requested amount would breach a configured cap."""


class _UsageLimitExceededError(LimitExceededError):
    _period = ""

    def __init__(self, used: Decimal, limit: Decimal, requested: Decimal) -> None:
        self.used = used
        self.limit = limit
        self.requested = requested
        super().__init__(
            f"{self._period} limit exceeded: used={used}, limit={limit}, requested={requested}"
        )


class DailyLimitExceededError(_UsageLimitExceededError):
    code = "CRD_020"
    _period = "Daily"


class MonthlyLimitExceededError(_UsageLimitExceededError):
    code = "CRD_021"
    _period = "Monthly"


class SinglePaymentLimitExceededError(LimitExceededError):
    code = "CRD_022"

    def __init__(self, requested: Decimal, limit: Decimal) -> None:
        self.requested = requested
        self.limit = limit
        super().__init__(f"Single payment limit exceeded: requested={requested}, limit={limit}")


# =============================================================================
# State Conflict Errors
# =============================================================================


class StateConflictError(DomainException):
    """The aggregate's current status forbids the requested operation."""


class CardNotActiveError(StateConflictError):
    code = "CRD_030"

    def __init__(self, card_id: str, status: str) -> None:
        self.card_id = card_id
        self.status = status
        super().__init__(f"Card is not active: card_id={card_id}, status={status}")


class _CardStateError(StateConflictError):
    _reason = ""

    def __init__(self, card_id: str) -> None:
        self.card_id = card_id
        super().__init__(f"Card is {self._reason}: card_id={card_id}")


class CardBlockedError(_CardStateError):
    code = "CRD_031"
    _reason = "blocked"


class CardExpiredError(_CardStateError):
    code = "CRD_032"
    _reason = "expired"


class CardTerminatedError(_CardStateError):
    code = "CRD_033"
    _reason = "terminated"


class CardAlreadyActiveError(_CardStateError):
    code = "CRD_034"
    _reason = "already active"


class PaymentAlreadyApprovedError(StateConflictError):
    code = "PAY_020"

    def __init__(self, payment_id: str) -> None:
        self.payment_id = payment_id
        super().__init__(f"Payment already approved: payment_id={payment_id}")


class PaymentCannotCancelError(StateConflictError):
    """Raised when a payment is not in a status that allows the operation.

    Used both for cancel/refund outside APPROVED and for approve/decline
    on a payment that already reached a terminal status.
    """

    code = "PAY_022"

    def __init__(self, payment_id: str, status: str) -> None:
        self.payment_id = payment_id
        self.status = status
        super().__init__(
            f"Payment cannot be cancelled in its status: payment_id={payment_id}, status={status}"
        )


# =============================================================================
# Transition, Arithmetic & Idempotency Errors
# =============================================================================


class InvalidStatusTransitionError(DomainException):
    """Raised when the target status is not reachable from the current one.

    The transition tables live next to CardStatus and PaymentStatus; the
    code distinguishes the aggregate (CRD_035 for cards, PAY_030 for
    payments).
    """

    def __init__(self, current: str, target: str, code: str = "CRD_035") -> None:
        self.current = current
        self.target = target
        self.code = code
        super().__init__(f"Invalid status transition: from={current}, to={target}")


class InsufficientBalanceError(DomainException):
    """Raised when a Money subtraction would go below zero."""

    code = "PAY_023"

    def __init__(self, balance: Decimal, requested: Decimal) -> None:
        self.balance = balance
        self.requested = requested
        super().__init__(f"Insufficient balance: balance={balance}, requested={requested}")


class IdempotencyKeyReuseError(DomainException):
    """Raised when an idempotency key is reused with a different payload.

    This is a CLIENT ERROR: the existing payment is not mutated and the
    client should use a new key for a different request.
    """

    code = "PAY_025"
