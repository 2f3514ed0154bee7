from __future__ import annotations

import copy
from typing import TYPE_CHECKING

from cards_core.application.ports import CardRepository
from cards_core.domain.exceptions import CardNotFoundError
from cards_core.domain.value_objects import CardId
from cards_core.infrastructure.audit import AuditMetadata

if TYPE_CHECKING:
    from cards_core.application.ports import TimeProvider
    from cards_core.domain.entities import Card


class InMemoryCardRepository(CardRepository):
    """In-memory card repository for testing.

    Implementation notes:
    - Uses dict with CardId as key (requires frozen dataclass)
    - Returns deep copies from get() to mimic database detachment
    - Stores deep copies in save() to prevent external mutation
    - Keeps an AuditMetadata per card; soft-deleted cards are hidden from get()
    - NOT thread-safe; relies on external LockProvider for serialization
    """

    def __init__(self, time_provider: TimeProvider) -> None:
        self._time_provider = time_provider
        self._cards: dict[CardId, Card] = {}
        self._audit: dict[CardId, AuditMetadata] = {}

    def next_id(self) -> CardId:
        card_id = CardId.generate()
        while card_id in self._cards:
            card_id = CardId.generate()
        return card_id

    def get(self, card_id: CardId) -> Card | None:
        card = self._cards.get(card_id)
        if card is None or self._audit[card_id].is_deleted:
            return None
        return copy.deepcopy(card)

    def save(self, card: Card, actor: str | None = None) -> None:
        if card.card_id is None:
            raise ValueError("Cannot save a card without card_id")

        now = self._time_provider.now()
        audit = self._audit.get(card.card_id)
        self._audit[card.card_id] = (
            AuditMetadata.created(now, actor) if audit is None else audit.touched(now, actor)
        )
        self._cards[card.card_id] = copy.deepcopy(card)

    def audit_metadata(self, card_id: CardId) -> AuditMetadata | None:
        return self._audit.get(card_id)

    def soft_delete(self, card_id: CardId, actor: str | None = None) -> None:
        """Hide a card from get() while keeping its record and audit trail.

        Raises:
            CardNotFoundError: No live card with this id.
        """
        audit = self._audit.get(card_id)
        if audit is None or audit.is_deleted:
            raise CardNotFoundError(card_id.value)
        self._audit[card_id] = audit.soft_deleted(self._time_provider.now(), actor)
