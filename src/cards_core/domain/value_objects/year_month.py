from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import date


@dataclass(frozen=True, slots=True, order=True)
class YearMonth:
    """A calendar month, used for card expiry and monthly usage resets.

    Ordering is chronological (year first, then month).
    """

    year: int
    month: int

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise ValueError(f"month must be in 1..12, got {self.month}")

    @classmethod
    def from_date(cls, d: date) -> YearMonth:
        """Month containing d (a date or datetime)."""
        return cls(year=d.year, month=d.month)

    def plus_months(self, months: int) -> YearMonth:
        index = self.year * 12 + (self.month - 1) + months
        return YearMonth(year=index // 12, month=index % 12 + 1)

    def plus_years(self, years: int) -> YearMonth:
        return YearMonth(year=self.year + years, month=self.month)

    def is_after(self, other: YearMonth) -> bool:
        return self > other

    def expiry_label(self) -> str:
        """Format as printed on a card: MM/YY."""
        return f"{self.month:02d}/{self.year % 100:02d}"

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"
