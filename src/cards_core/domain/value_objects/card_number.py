from __future__ import annotations

import re
import secrets
from dataclasses import dataclass

from cards_core.domain.exceptions import InvalidCardNumberError

DEFAULT_BIN = "9410"
CARD_NUMBER_LENGTH = 16

_CARD_NUMBER_PATTERN = re.compile(r"[0-9]{16}")


def _luhn_sum(digits: str, double_rightmost: bool) -> int:
    total = 0
    double = double_rightmost
    for ch in reversed(digits):
        digit = int(ch)
        if double:
            digit *= 2
            if digit > 9:
                digit -= 9
        total += digit
        double = not double
    return total


def is_luhn_valid(digits: str) -> bool:
    """Check a digit string against the Luhn checksum."""
    return _luhn_sum(digits, double_rightmost=False) % 10 == 0


def luhn_check_digit(base: str) -> int:
    """Compute the digit that makes base + digit Luhn-valid.

    The rightmost base digit sits next to the check digit, so it is the
    first one doubled.
    """
    return (10 - _luhn_sum(base, double_rightmost=True) % 10) % 10


def _mask(value: str) -> str:
    if len(value) < 8:
        return "****"
    return f"{value[:4]}-****-****-{value[-4:]}"


@dataclass(frozen=True, slots=True)
class CardNumber:
    """Value object for 16-digit, Luhn-valid card numbers.

    Hyphens are stripped before validation, so "9410-1234-5678-1235"
    and "9410123456781235" are the same number.

    str() returns the masked form so the full number never lands in logs.
    """

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise InvalidCardNumberError("****")

        normalized = self.value.replace("-", "")
        if normalized != self.value:
            object.__setattr__(self, "value", normalized)

        if not _CARD_NUMBER_PATTERN.fullmatch(normalized):
            raise InvalidCardNumberError(_mask(normalized))

        if not is_luhn_valid(normalized):
            raise InvalidCardNumberError(_mask(normalized))

    @classmethod
    def of(cls, value: str) -> CardNumber:
        return cls(value=value)

    @classmethod
    def generate(cls, bin_prefix: str = DEFAULT_BIN) -> CardNumber:
        """Generate a new card number under the given issuer prefix.

        Layout: 4-digit prefix + 11 random digits + 1 Luhn check digit.
        """
        if len(bin_prefix) != 4 or not bin_prefix.isdigit():
            raise ValueError(f"Issuer prefix must be 4 digits, got {bin_prefix!r}")

        random_part = "".join(str(secrets.randbelow(10)) for _ in range(11))
        base = bin_prefix + random_part
        return cls(value=base + str(luhn_check_digit(base)))

    def masked(self) -> str:
        return _mask(self.value)

    def formatted(self) -> str:
        v = self.value
        return f"{v[0:4]}-{v[4:8]}-{v[8:12]}-{v[12:16]}"

    @property
    def prefix(self) -> str:
        """Issuer identification: the first 6 digits."""
        return self.value[:6]

    @property
    def last_four(self) -> str:
        return self.value[12:]

    def __str__(self) -> str:
        return self.masked()

    def __repr__(self) -> str:
        return f"CardNumber({self.masked()!r})"
