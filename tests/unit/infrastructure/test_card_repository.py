"""Tests for InMemoryCardRepository.

Tests cover:
- CardRepository interface implementation
- Copy-on-read behavior
- Soft delete hides cards but keeps their audit trail
"""

from datetime import datetime, timedelta

import pytest

from cards_core.application.ports import CardRepository
from cards_core.domain.entities import Card
from cards_core.domain.exceptions import CardNotFoundError
from cards_core.domain.value_objects import CardId, Money
from cards_core.infrastructure.card_repository import InMemoryCardRepository
from cards_core.infrastructure.time_provider import FixedTimeProvider

# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def repository(time_provider: FixedTimeProvider) -> InMemoryCardRepository:
    return InMemoryCardRepository(time_provider)


@pytest.fixture
def card(repository: InMemoryCardRepository, fixed_time: datetime) -> Card:
    return Card.create(user_id="user-1", account_id="acc-1", now=fixed_time).with_id(
        repository.next_id()
    )


# =============================================================================
# Get / Save Tests
# =============================================================================


class TestInMemoryCardRepository:
    def test_implements_card_repository_interface(
        self, repository: InMemoryCardRepository
    ) -> None:
        assert isinstance(repository, CardRepository)

    def test_next_id_has_card_prefix(self, repository: InMemoryCardRepository) -> None:
        assert repository.next_id().value.startswith("CRD-")

    def test_get_missing_returns_none(self, repository: InMemoryCardRepository) -> None:
        assert repository.get(CardId.generate()) is None

    def test_save_then_get_returns_equal_copy(
        self, repository: InMemoryCardRepository, card: Card
    ) -> None:
        repository.save(card)

        stored = repository.get(card.card_id)
        assert stored == card
        assert stored is not card

    def test_save_upserts(
        self, repository: InMemoryCardRepository, card: Card, fixed_time: datetime
    ) -> None:
        repository.save(card)
        repository.save(card.record_payment(Money.of(10_000), fixed_time))

        assert repository.get(card.card_id).daily_used == Money.of(10_000)

    def test_save_without_id_raises(
        self, repository: InMemoryCardRepository, fixed_time: datetime
    ) -> None:
        card = Card.create(user_id="user-1", account_id="acc-1", now=fixed_time)

        with pytest.raises(ValueError, match="card_id"):
            repository.save(card)


# =============================================================================
# Soft Delete Tests
# =============================================================================


class TestInMemoryCardRepositorySoftDelete:
    def test_soft_deleted_card_is_hidden(
        self, repository: InMemoryCardRepository, card: Card
    ) -> None:
        repository.save(card)

        repository.soft_delete(card.card_id, actor="ops")

        assert repository.get(card.card_id) is None

    def test_soft_delete_keeps_audit_trail(
        self,
        repository: InMemoryCardRepository,
        card: Card,
        time_provider: FixedTimeProvider,
        fixed_time: datetime,
    ) -> None:
        repository.save(card, actor="issuer")
        deleted_at = time_provider.advance(timedelta(days=3))

        repository.soft_delete(card.card_id, actor="ops")

        audit = repository.audit_metadata(card.card_id)
        assert audit.is_deleted
        assert audit.deleted_at == deleted_at
        assert audit.deleted_by == "ops"
        assert audit.created_at == fixed_time
        assert audit.created_by == "issuer"

    def test_soft_delete_unknown_card_raises(self, repository: InMemoryCardRepository) -> None:
        with pytest.raises(CardNotFoundError):
            repository.soft_delete(CardId.generate())

    def test_soft_delete_twice_raises(
        self, repository: InMemoryCardRepository, card: Card
    ) -> None:
        repository.save(card)
        repository.soft_delete(card.card_id)

        with pytest.raises(CardNotFoundError):
            repository.soft_delete(card.card_id)
