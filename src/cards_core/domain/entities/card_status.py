"""Card status state machine.

The transition table is static data; can_transition() is the single
authority consulted before any status change on a Card.
"""

from __future__ import annotations

from enum import Enum


class CardStatus(Enum):
    """Card lifecycle states. TERMINATED is terminal."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    BLOCKED = "blocked"
    EXPIRED = "expired"
    TERMINATED = "terminated"

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]

    @property
    def can_pay(self) -> bool:
        return self is CardStatus.ACTIVE

    @property
    def can_reactivate(self) -> bool:
        return self in (CardStatus.INACTIVE, CardStatus.BLOCKED)

    @property
    def can_terminate(self) -> bool:
        return self is not CardStatus.TERMINATED

    @property
    def is_terminal(self) -> bool:
        return not CARD_STATUS_TRANSITIONS[self]

    def allowed_transitions(self) -> frozenset[CardStatus]:
        return CARD_STATUS_TRANSITIONS[self]

    def can_transition_to(self, target: CardStatus) -> bool:
        return can_transition(self, target)


_DESCRIPTIONS: dict[CardStatus, str] = {
    CardStatus.ACTIVE: "Active",
    CardStatus.INACTIVE: "Inactive",
    CardStatus.BLOCKED: "Blocked (lost or stolen)",
    CardStatus.EXPIRED: "Expired",
    CardStatus.TERMINATED: "Terminated",
}

CARD_STATUS_TRANSITIONS: dict[CardStatus, frozenset[CardStatus]] = {
    CardStatus.ACTIVE: frozenset(
        {CardStatus.INACTIVE, CardStatus.BLOCKED, CardStatus.EXPIRED, CardStatus.TERMINATED}
    ),
    CardStatus.INACTIVE: frozenset({CardStatus.ACTIVE, CardStatus.BLOCKED, CardStatus.TERMINATED}),
    CardStatus.BLOCKED: frozenset({CardStatus.ACTIVE, CardStatus.INACTIVE, CardStatus.TERMINATED}),
    CardStatus.EXPIRED: frozenset({CardStatus.TERMINATED}),
    CardStatus.TERMINATED: frozenset(),
}


def can_transition(current: CardStatus, target: CardStatus) -> bool:
    """Return True if the table allows current -> target.

    A transition to the same status is never allowed.
    """
    if current is target:
        return False
    return target in CARD_STATUS_TRANSITIONS[current]
