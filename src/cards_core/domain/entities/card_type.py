from __future__ import annotations

from decimal import Decimal
from enum import Enum


class CardType(Enum):
    """Card product with its default limit policy.

    Each member carries (code, daily, monthly, single-payment limit,
    requires linked account, has credit line).
    """

    DEBIT = ("DEB", Decimal("5000000"), Decimal("50000000"), Decimal("3000000"), True, False)
    CREDIT = ("CRD", Decimal("10000000"), Decimal("100000000"), Decimal("5000000"), False, True)
    PREPAID = ("PRE", Decimal("1000000"), Decimal("5000000"), Decimal("500000"), False, False)

    def __init__(
        self,
        code: str,
        default_daily_limit: Decimal,
        default_monthly_limit: Decimal,
        default_single_limit: Decimal,
        requires_account: bool,
        has_credit: bool,
    ) -> None:
        self.code = code
        self.default_daily_limit = default_daily_limit
        self.default_monthly_limit = default_monthly_limit
        self.default_single_limit = default_single_limit
        self.requires_account = requires_account
        self.has_credit = has_credit

    @classmethod
    def from_code(cls, code: str) -> CardType:
        for card_type in cls:
            if card_type.code == code:
                return card_type
        raise ValueError(f"Unknown card type code: {code!r}")

    @property
    def requires_immediate_debit(self) -> bool:
        """Debit and prepaid cards draw funds at payment time."""
        return self in (CardType.DEBIT, CardType.PREPAID)
