"""Payment status state machine.

PENDING moves to APPROVED or DECLINED; APPROVED may move once more to
CANCELLED or REFUNDED. DECLINED, CANCELLED and REFUNDED are terminal.
"""

from __future__ import annotations

from enum import Enum


class PaymentStatus(Enum):
    """Payment lifecycle states."""

    PENDING = "pending"
    APPROVED = "approved"
    DECLINED = "declined"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"

    @property
    def is_final(self) -> bool:
        """True once the payment has left PENDING."""
        return self is not PaymentStatus.PENDING

    @property
    def is_terminal(self) -> bool:
        return not PAYMENT_STATUS_TRANSITIONS[self]

    @property
    def can_cancel(self) -> bool:
        return self is PaymentStatus.APPROVED

    @property
    def is_cancelled_or_refunded(self) -> bool:
        return self in (PaymentStatus.CANCELLED, PaymentStatus.REFUNDED)

    def allowed_transitions(self) -> frozenset[PaymentStatus]:
        return PAYMENT_STATUS_TRANSITIONS[self]

    def can_transition_to(self, target: PaymentStatus) -> bool:
        return can_transition(self, target)


PAYMENT_STATUS_TRANSITIONS: dict[PaymentStatus, frozenset[PaymentStatus]] = {
    PaymentStatus.PENDING: frozenset({PaymentStatus.APPROVED, PaymentStatus.DECLINED}),
    PaymentStatus.APPROVED: frozenset({PaymentStatus.CANCELLED, PaymentStatus.REFUNDED}),
    PaymentStatus.DECLINED: frozenset(),
    PaymentStatus.CANCELLED: frozenset(),
    PaymentStatus.REFUNDED: frozenset(),
}


def can_transition(current: PaymentStatus, target: PaymentStatus) -> bool:
    """Return True if the table allows current -> target (never to itself)."""
    if current is target:
        return False
    return target in PAYMENT_STATUS_TRANSITIONS[current]
