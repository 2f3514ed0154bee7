from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cards_core.domain.entities import Card
    from cards_core.domain.value_objects import CardId


class CardRepository(ABC):
    """Port for card persistence.

    Contract:
    - get() returns None if the card does not exist or was soft-deleted
    - save() performs upsert keyed by card_id; the card must have an id
    - next_id() hands out a fresh, unused CardId for a new card
    - Implementations own the audit metadata (created/updated/deleted);
      it is never part of the Card aggregate

    Concurrency note:
    The version token on Card is checked by real database adapters. The
    caller serializes access to one card through LockProvider.
    """

    @abstractmethod
    def next_id(self) -> CardId:
        """Return a new identifier for a card about to be saved."""

    @abstractmethod
    def get(self, card_id: CardId) -> Card | None:
        """Retrieve a card by ID.

        Returned entity is a copy; mutations do not affect stored state.
        """

    @abstractmethod
    def save(self, card: Card, actor: str | None = None) -> None:
        """Persist a card (upsert semantics).

        Args:
            card: The card to save. card.card_id must be set.
            actor: Who made the change, recorded in the audit metadata.
        """
