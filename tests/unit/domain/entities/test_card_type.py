from decimal import Decimal

import pytest

from cards_core.domain.entities import CardType


class TestCardType:
    def test_debit_defaults(self) -> None:
        assert CardType.DEBIT.code == "DEB"
        assert CardType.DEBIT.default_daily_limit == Decimal("5000000")
        assert CardType.DEBIT.default_monthly_limit == Decimal("50000000")
        assert CardType.DEBIT.default_single_limit == Decimal("3000000")
        assert CardType.DEBIT.requires_account is True

    def test_credit_has_credit_line(self) -> None:
        assert CardType.CREDIT.has_credit is True
        assert CardType.DEBIT.has_credit is False

    @pytest.mark.parametrize("card_type", list(CardType))
    def test_from_code_round_trips(self, card_type: CardType) -> None:
        assert CardType.from_code(card_type.code) is card_type

    def test_from_unknown_code_raises(self) -> None:
        with pytest.raises(ValueError):
            CardType.from_code("XYZ")

    def test_requires_immediate_debit(self) -> None:
        assert CardType.DEBIT.requires_immediate_debit
        assert CardType.PREPAID.requires_immediate_debit
        assert not CardType.CREDIT.requires_immediate_debit
