"""Tests for ChangeCardStatusUseCase."""

from dataclasses import replace
from datetime import datetime

import pytest

from cards_core.application.use_cases.change_card_status import (
    CardAction,
    ChangeCardStatusRequest,
    ChangeCardStatusUseCase,
)
from cards_core.config import Settings
from cards_core.domain.entities import Card, CardStatus
from cards_core.domain.exceptions import (
    CardAlreadyActiveError,
    CardExpiredError,
    CardNotFoundError,
    InvalidStatusTransitionError,
)
from cards_core.domain.value_objects import CardId, Money, YearMonth
from cards_core.infrastructure.card_repository import InMemoryCardRepository
from cards_core.infrastructure.lock_provider import InMemoryLockProvider
from cards_core.infrastructure.time_provider import FixedTimeProvider

# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def use_case(
    settings: Settings,
    lock_provider: InMemoryLockProvider,
    time_provider: FixedTimeProvider,
    card_repository: InMemoryCardRepository,
) -> ChangeCardStatusUseCase:
    return ChangeCardStatusUseCase(
        settings=settings,
        lock_provider=lock_provider,
        time_provider=time_provider,
        card_repository=card_repository,
    )


@pytest.fixture
def card(
    card_repository: InMemoryCardRepository, settings: Settings, fixed_time: datetime
) -> Card:
    card = Card.create(
        user_id="user-1",
        account_id="acc-1",
        now=fixed_time.astimezone(settings.tzinfo),
    ).with_id(card_repository.next_id())
    card_repository.save(card)
    return card


def run(
    use_case: ChangeCardStatusUseCase, card: Card, action: CardAction, **kwargs: object
) -> Card:
    return use_case.execute(
        ChangeCardStatusRequest(card_id=card.card_id, action=action, **kwargs)
    ).card


# =============================================================================
# Status Change Tests
# =============================================================================


class TestChangeCardStatus:
    @pytest.mark.parametrize(
        ("action", "expected"),
        [
            (CardAction.DEACTIVATE, CardStatus.INACTIVE),
            (CardAction.BLOCK, CardStatus.BLOCKED),
            (CardAction.TERMINATE, CardStatus.TERMINATED),
            (CardAction.EXPIRE, CardStatus.EXPIRED),
        ],
    )
    def test_action_from_active(
        self,
        use_case: ChangeCardStatusUseCase,
        card: Card,
        card_repository: InMemoryCardRepository,
        action: CardAction,
        expected: CardStatus,
    ) -> None:
        updated = run(use_case, card, action)

        assert updated.status is expected
        assert card_repository.get(card.card_id).status is expected

    def test_block_then_unblock(self, use_case: ChangeCardStatusUseCase, card: Card) -> None:
        run(use_case, card, CardAction.BLOCK)

        assert run(use_case, card, CardAction.UNBLOCK).status is CardStatus.ACTIVE

    def test_deactivate_then_activate(
        self, use_case: ChangeCardStatusUseCase, card: Card
    ) -> None:
        run(use_case, card, CardAction.DEACTIVATE)

        assert run(use_case, card, CardAction.ACTIVATE).status is CardStatus.ACTIVE

    def test_activate_active_card_raises(
        self, use_case: ChangeCardStatusUseCase, card: Card
    ) -> None:
        with pytest.raises(CardAlreadyActiveError):
            run(use_case, card, CardAction.ACTIVATE)

    def test_terminated_card_cannot_be_reactivated(
        self,
        use_case: ChangeCardStatusUseCase,
        card: Card,
        card_repository: InMemoryCardRepository,
    ) -> None:
        run(use_case, card, CardAction.TERMINATE)

        with pytest.raises(InvalidStatusTransitionError) as exc_info:
            run(use_case, card, CardAction.ACTIVATE)

        assert exc_info.value.current == "TERMINATED"
        assert exc_info.value.target == "ACTIVE"
        assert card_repository.get(card.card_id).status is CardStatus.TERMINATED

    def test_unblock_active_card_raises(
        self, use_case: ChangeCardStatusUseCase, card: Card
    ) -> None:
        with pytest.raises(InvalidStatusTransitionError):
            run(use_case, card, CardAction.UNBLOCK)

    def test_activate_past_expiry_raises(
        self,
        use_case: ChangeCardStatusUseCase,
        card_repository: InMemoryCardRepository,
        card: Card,
    ) -> None:
        lapsed = replace(
            card, status=CardStatus.INACTIVE, expiry_date=YearMonth(2023, 12)
        )
        card_repository.save(lapsed)

        with pytest.raises(CardExpiredError):
            run(use_case, card, CardAction.ACTIVATE)

    def test_records_actor(
        self,
        use_case: ChangeCardStatusUseCase,
        card: Card,
        card_repository: InMemoryCardRepository,
    ) -> None:
        run(use_case, card, CardAction.BLOCK, actor="fraud-team")

        assert card_repository.audit_metadata(card.card_id).updated_by == "fraud-team"


# =============================================================================
# Limit Change Tests
# =============================================================================


class TestChangeLimits:
    def test_change_both_limits(self, use_case: ChangeCardStatusUseCase, card: Card) -> None:
        updated = run(
            use_case,
            card,
            CardAction.CHANGE_LIMITS,
            daily_limit=Money.of(2_000_000),
            monthly_limit=Money.of(20_000_000),
        )

        assert updated.daily_limit == Money.of(2_000_000)
        assert updated.monthly_limit == Money.of(20_000_000)
        assert updated.status is CardStatus.ACTIVE

    def test_missing_limit_keeps_current(
        self, use_case: ChangeCardStatusUseCase, card: Card
    ) -> None:
        updated = run(use_case, card, CardAction.CHANGE_LIMITS, daily_limit=Money.of(2_000_000))

        assert updated.daily_limit == Money.of(2_000_000)
        assert updated.monthly_limit == card.monthly_limit


class TestChangeCardStatusErrors:
    def test_unknown_card_raises(self, use_case: ChangeCardStatusUseCase) -> None:
        with pytest.raises(CardNotFoundError):
            use_case.execute(
                ChangeCardStatusRequest(card_id=CardId.of("CRD-deadbeef"), action=CardAction.BLOCK)
            )
