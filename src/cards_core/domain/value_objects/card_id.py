from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from cards_core.domain.exceptions import InvalidCardIdError
from cards_core.domain.value_objects.domain_id import generate_domain_id, is_valid_domain_id


@dataclass(frozen=True, slots=True)
class CardId:
    """Value object for card identifiers (CRD-xxxxxxxx)."""

    PREFIX: ClassVar[str] = "CRD"

    value: str

    def __post_init__(self) -> None:
        if not is_valid_domain_id(self.value, self.PREFIX):
            raise InvalidCardIdError(self.value)

    @classmethod
    def of(cls, value: str) -> CardId:
        """Parse a CardId.

        Raises:
            InvalidCardIdError: If value is not CRD- followed by 8 hex characters.
        """
        return cls(value=value)

    @classmethod
    def generate(cls) -> CardId:
        """Generate a new unique CardId."""
        return cls(value=generate_domain_id(cls.PREFIX))

    def __str__(self) -> str:
        return self.value
