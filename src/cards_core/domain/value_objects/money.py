from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from functools import total_ordering
from typing import ClassVar

from cards_core.domain.exceptions import InsufficientBalanceError, InvalidAmountError

_QUANTUM = Decimal("1")


@total_ordering
@dataclass(frozen=True, slots=True, eq=False)
class Money:
    """Non-negative amount in whole currency units.

    Values are quantized to 0 fractional digits with ROUND_HALF_UP at
    construction. Equality, hashing and ordering use the numeric value
    only, so Money("1000") == Money("1000.0").

    Use Money.of() to construct; it validates and normalizes the input.
    """

    ZERO: ClassVar[Money]

    amount: Decimal

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal) or not self.amount.is_finite():
            raise InvalidAmountError(self.amount)
        if self.amount < 0:
            raise InvalidAmountError(self.amount)
        object.__setattr__(self, "amount", self.amount.quantize(_QUANTUM, rounding=ROUND_HALF_UP))

    @classmethod
    def of(cls, amount: int | Decimal | str) -> Money:
        """Create Money from an int, Decimal or decimal string.

        Raises:
            InvalidAmountError: If the input is negative or not a number.
        """
        if isinstance(amount, bool) or not isinstance(amount, (int, Decimal, str)):
            raise InvalidAmountError(amount)
        try:
            value = Decimal(amount)
        except InvalidOperation as e:
            raise InvalidAmountError(amount) from e
        if not value.is_finite():
            raise InvalidAmountError(amount)
        if value == 0:
            return cls.ZERO
        return cls(value)

    def is_zero(self) -> bool:
        return self.amount == 0

    def is_positive(self) -> bool:
        return self.amount > 0

    def is_greater_than(self, other: Money) -> bool:
        return self.amount > other.amount

    def is_greater_than_or_equal(self, other: Money) -> bool:
        return self.amount >= other.amount

    def is_less_than_or_equal(self, other: Money) -> bool:
        return self.amount <= other.amount

    def add(self, other: Money) -> Money:
        return Money(self.amount + other.amount)

    def subtract(self, other: Money) -> Money:
        """Return self - other.

        Raises:
            InsufficientBalanceError: If the result would be negative.
        """
        result = self.amount - other.amount
        if result < 0:
            raise InsufficientBalanceError(self.amount, other.amount)
        return Money(result)

    def is_within_limit(self, request_amount: Money, limit: Money) -> bool:
        """Check that self (already used) plus request_amount stays within limit."""
        return self.add(request_amount).is_less_than_or_equal(limit)

    def formatted(self) -> str:
        return f"{self.amount:,}원"

    def to_int(self) -> int:
        return int(self.amount)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return self.amount == other.amount

    def __lt__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return self.amount < other.amount

    def __hash__(self) -> int:
        return hash(self.amount)

    def __str__(self) -> str:
        return f"{self.amount:f}"


Money.ZERO = Money(Decimal(0))
