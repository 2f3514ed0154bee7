from __future__ import annotations

from dataclasses import dataclass

from cards_core.domain.exceptions import InvalidIdempotencyKeyError

MAX_LENGTH = 64
ALLOWED_CHARS = frozenset(
    "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789-_:./"
)


@dataclass(frozen=True, slots=True)
class IdempotencyKey:
    """Client-chosen key that de-duplicates payment authorizations.

    Surrounding whitespace is trimmed; the result must be 1 to 64 ASCII
    characters from [A-Za-z0-9-_:./].
    """

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise InvalidIdempotencyKeyError(self.value, "must be a string")

        normalized = self.value.strip()
        if not normalized:
            raise InvalidIdempotencyKeyError(self.value, "cannot be empty")
        if len(normalized) > MAX_LENGTH:
            raise InvalidIdempotencyKeyError(
                self.value, f"cannot exceed {MAX_LENGTH} characters"
            )
        if not ALLOWED_CHARS.issuperset(normalized):
            raise InvalidIdempotencyKeyError(
                self.value, "allowed characters are [A-Za-z0-9-_:./]"
            )

        object.__setattr__(self, "value", normalized)

    @classmethod
    def of(cls, value: str) -> IdempotencyKey:
        return cls(value)

    def __str__(self) -> str:
        return self.value
