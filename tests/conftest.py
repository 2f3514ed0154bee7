"""Shared pytest fixtures for the test suite."""

from datetime import datetime, timezone

import pytest

from cards_core.config import Settings
from cards_core.infrastructure.card_repository import InMemoryCardRepository
from cards_core.infrastructure.lock_provider import InMemoryLockProvider
from cards_core.infrastructure.payment_repository import InMemoryPaymentRepository
from cards_core.infrastructure.time_provider import FixedTimeProvider


@pytest.fixture
def fixed_time() -> datetime:
    """A fixed timestamp for deterministic testing (2024-01-15 12:00 KST)."""
    return datetime(2024, 1, 15, 3, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def time_provider(fixed_time: datetime) -> FixedTimeProvider:
    """A time provider with a fixed timestamp."""
    return FixedTimeProvider(fixed_time)


@pytest.fixture
def lock_provider() -> InMemoryLockProvider:
    """An in-memory lock provider for testing."""
    return InMemoryLockProvider()


@pytest.fixture
def settings() -> Settings:
    """Default settings: BIN 9410, Asia/Seoul business calendar."""
    return Settings()


@pytest.fixture
def card_repository(time_provider: FixedTimeProvider) -> InMemoryCardRepository:
    return InMemoryCardRepository(time_provider)


@pytest.fixture
def payment_repository(time_provider: FixedTimeProvider) -> InMemoryPaymentRepository:
    return InMemoryPaymentRepository(time_provider)
