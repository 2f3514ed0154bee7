"""Domain entities - Aggregates with identity and lifecycle."""

from cards_core.domain.entities.card import Card
from cards_core.domain.entities.card_status import CardStatus
from cards_core.domain.entities.card_type import CardType
from cards_core.domain.entities.payment import Payment
from cards_core.domain.entities.payment_status import PaymentStatus

__all__ = [
    "Card",
    "CardStatus",
    "CardType",
    "Payment",
    "PaymentStatus",
]
