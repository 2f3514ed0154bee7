from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from cards_core.domain.entities import Card, CardType
from cards_core.logging_config import get_logger

if TYPE_CHECKING:
    from cards_core.application.ports import CardRepository, TimeProvider
    from cards_core.config import Settings
    from cards_core.domain.value_objects import Money

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class IssueCardRequest:
    """Input DTO for issue card use case.

    Limits left as None fall back to the card type's defaults.
    """

    user_id: str
    account_id: str | None
    card_type: CardType = CardType.DEBIT
    daily_limit: Money | None = None
    monthly_limit: Money | None = None
    actor: str | None = None


@dataclass(frozen=True, slots=True)
class IssueCardResponse:
    """Output DTO for issue card use case."""

    card: Card


class IssueCardUseCase:
    """Issues a new card and persists it with a fresh CardId."""

    def __init__(
        self,
        settings: Settings,
        time_provider: TimeProvider,
        card_repository: CardRepository,
    ) -> None:
        self._settings = settings
        self._time_provider = time_provider
        self._card_repo = card_repository

    def execute(self, request: IssueCardRequest) -> IssueCardResponse:
        now = self._time_provider.now().astimezone(self._settings.tzinfo)

        card = Card.create(
            user_id=request.user_id,
            account_id=request.account_id,
            now=now,
            card_type=request.card_type,
            daily_limit=request.daily_limit,
            monthly_limit=request.monthly_limit,
            bin_prefix=self._settings.issuer_bin,
            validity_years=self._settings.card_validity_years,
        ).with_id(self._card_repo.next_id())

        self._card_repo.save(card, actor=request.actor)

        logger.info(
            "Card issued",
            extra={
                "card_id": card.card_id.value,
                "card_type": card.card_type.name,
                "card_number": card.card_number.masked(),
                "user_id": card.user_id,
            },
        )
        return IssueCardResponse(card=card)
