"""Tests for InMemoryPaymentRepository.

Tests cover:
- PaymentRepository interface implementation
- Copy-on-read and copy-on-write behavior
- Upsert semantics and the idempotency-key unique index
- Audit metadata maintained on save
"""

from datetime import datetime, timedelta

import pytest

from cards_core.application.ports import PaymentRepository
from cards_core.domain.entities import Payment, PaymentStatus
from cards_core.domain.exceptions import IdempotencyKeyReuseError
from cards_core.domain.value_objects import CardId, IdempotencyKey, Money, PaymentId
from cards_core.infrastructure.payment_repository import InMemoryPaymentRepository
from cards_core.infrastructure.time_provider import FixedTimeProvider

# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def repository(time_provider: FixedTimeProvider) -> InMemoryPaymentRepository:
    return InMemoryPaymentRepository(time_provider)


def new_payment(
    repository: InMemoryPaymentRepository, now: datetime, idempotency_key: str = "idem-001"
) -> Payment:
    return Payment.create(
        card_id=CardId.of("CRD-0a1b2c3d"),
        merchant_name="Coffee Shop",
        merchant_id="MER-001",
        amount=Money.of(50_000),
        idempotency_key=IdempotencyKey(idempotency_key),
        now=now,
    ).with_id(repository.next_id())


@pytest.fixture
def pending_payment(repository: InMemoryPaymentRepository, fixed_time: datetime) -> Payment:
    return new_payment(repository, fixed_time)


# =============================================================================
# Interface Tests
# =============================================================================


class TestInMemoryPaymentRepositoryInterface:
    def test_implements_payment_repository_interface(
        self, repository: InMemoryPaymentRepository
    ) -> None:
        assert isinstance(repository, PaymentRepository)

    def test_next_id_has_payment_prefix(self, repository: InMemoryPaymentRepository) -> None:
        assert repository.next_id().value.startswith("PAY-")


# =============================================================================
# Get / Save Tests
# =============================================================================


class TestInMemoryPaymentRepositoryGetSave:
    def test_get_missing_returns_none(self, repository: InMemoryPaymentRepository) -> None:
        assert repository.get(PaymentId.generate()) is None

    def test_save_then_get(
        self, repository: InMemoryPaymentRepository, pending_payment: Payment
    ) -> None:
        repository.save(pending_payment)

        assert repository.get(pending_payment.payment_id) == pending_payment

    def test_get_returns_copy(
        self, repository: InMemoryPaymentRepository, pending_payment: Payment
    ) -> None:
        repository.save(pending_payment)

        first = repository.get(pending_payment.payment_id)
        second = repository.get(pending_payment.payment_id)

        assert first == second
        assert first is not second
        assert first is not pending_payment

    def test_save_upserts(
        self,
        repository: InMemoryPaymentRepository,
        pending_payment: Payment,
        fixed_time: datetime,
    ) -> None:
        repository.save(pending_payment)
        repository.save(pending_payment.approve("AP00000001", fixed_time))

        stored = repository.get(pending_payment.payment_id)
        assert stored.status is PaymentStatus.APPROVED

    def test_save_without_id_raises(
        self, repository: InMemoryPaymentRepository, fixed_time: datetime
    ) -> None:
        payment = Payment.create(
            card_id=CardId.of("CRD-0a1b2c3d"),
            merchant_name="Coffee Shop",
            merchant_id="MER-001",
            amount=Money.of(50_000),
            idempotency_key=IdempotencyKey("idem-001"),
            now=fixed_time,
        )

        with pytest.raises(ValueError, match="payment_id"):
            repository.save(payment)


# =============================================================================
# Idempotency Index Tests
# =============================================================================


class TestInMemoryPaymentRepositoryIdempotencyIndex:
    def test_lookup_by_key(
        self, repository: InMemoryPaymentRepository, pending_payment: Payment
    ) -> None:
        repository.save(pending_payment)

        assert repository.get_by_idempotency_key(IdempotencyKey("idem-001")) == pending_payment

    def test_unknown_key_returns_none(self, repository: InMemoryPaymentRepository) -> None:
        assert repository.get_by_idempotency_key(IdempotencyKey("never-used")) is None

    def test_same_payment_may_be_saved_again(
        self,
        repository: InMemoryPaymentRepository,
        pending_payment: Payment,
    ) -> None:
        repository.save(pending_payment)
        repository.save(pending_payment.decline("CRD_020"))

        assert repository.get_by_idempotency_key(IdempotencyKey("idem-001")).is_declined

    def test_other_payment_with_same_key_raises(
        self,
        repository: InMemoryPaymentRepository,
        pending_payment: Payment,
        fixed_time: datetime,
    ) -> None:
        repository.save(pending_payment)
        duplicate = new_payment(repository, fixed_time, idempotency_key="idem-001")

        with pytest.raises(IdempotencyKeyReuseError):
            repository.save(duplicate)

        assert repository.get(duplicate.payment_id) is None


# =============================================================================
# Audit Metadata Tests
# =============================================================================


class TestInMemoryPaymentRepositoryAudit:
    def test_first_save_sets_created_fields(
        self,
        repository: InMemoryPaymentRepository,
        pending_payment: Payment,
        fixed_time: datetime,
    ) -> None:
        repository.save(pending_payment, actor="api")

        audit = repository.audit_metadata(pending_payment.payment_id)
        assert audit.created_at == fixed_time
        assert audit.created_by == "api"
        assert audit.updated_at == fixed_time

    def test_later_save_only_touches_updated_fields(
        self,
        repository: InMemoryPaymentRepository,
        pending_payment: Payment,
        time_provider: FixedTimeProvider,
        fixed_time: datetime,
    ) -> None:
        repository.save(pending_payment, actor="api")
        later = time_provider.advance(timedelta(minutes=5))
        repository.save(pending_payment.approve("AP00000001", later), actor="batch")

        audit = repository.audit_metadata(pending_payment.payment_id)
        assert audit.created_at == fixed_time
        assert audit.created_by == "api"
        assert audit.updated_at == later
        assert audit.updated_by == "batch"

    def test_unsaved_payment_has_no_audit(self, repository: InMemoryPaymentRepository) -> None:
        assert repository.audit_metadata(PaymentId.generate()) is None
