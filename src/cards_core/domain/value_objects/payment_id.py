from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from cards_core.domain.exceptions import InvalidPaymentIdError
from cards_core.domain.value_objects.domain_id import generate_domain_id, is_valid_domain_id


@dataclass(frozen=True, slots=True)
class PaymentId:
    """Value object for payment identifiers (PAY-xxxxxxxx)."""

    PREFIX: ClassVar[str] = "PAY"

    value: str

    def __post_init__(self) -> None:
        if not is_valid_domain_id(self.value, self.PREFIX):
            raise InvalidPaymentIdError(self.value)

    @classmethod
    def of(cls, value: str) -> PaymentId:
        """Parse a PaymentId.

        Raises:
            InvalidPaymentIdError: If value is not PAY- followed by 8 hex characters.
        """
        return cls(value=value)

    @classmethod
    def generate(cls) -> PaymentId:
        """Generate a new unique PaymentId."""
        return cls(value=generate_domain_id(cls.PREFIX))

    def __str__(self) -> str:
        return self.value
