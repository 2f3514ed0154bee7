"""Value objects - Immutable objects defined by their attributes."""

from cards_core.domain.value_objects.card_id import CardId
from cards_core.domain.value_objects.card_number import CardNumber
from cards_core.domain.value_objects.idempotency_key import IdempotencyKey
from cards_core.domain.value_objects.money import Money
from cards_core.domain.value_objects.payment_id import PaymentId
from cards_core.domain.value_objects.year_month import YearMonth

__all__ = [
    "CardId",
    "CardNumber",
    "IdempotencyKey",
    "Money",
    "PaymentId",
    "YearMonth",
]
