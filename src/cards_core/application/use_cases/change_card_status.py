from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from cards_core.domain.exceptions import CardNotFoundError
from cards_core.logging_config import get_logger

if TYPE_CHECKING:
    from datetime import datetime

    from cards_core.application.ports import CardRepository, LockProvider, TimeProvider
    from cards_core.config import Settings
    from cards_core.domain.entities import Card
    from cards_core.domain.value_objects import CardId, Money

logger = get_logger(__name__)


class CardAction(Enum):
    ACTIVATE = "activate"
    DEACTIVATE = "deactivate"
    BLOCK = "block"
    UNBLOCK = "unblock"
    TERMINATE = "terminate"
    EXPIRE = "expire"
    CHANGE_LIMITS = "change_limits"


@dataclass(frozen=True, slots=True)
class ChangeCardStatusRequest:
    """Input DTO for card management.

    daily_limit and monthly_limit are only read for CHANGE_LIMITS.
    """

    card_id: CardId
    action: CardAction
    daily_limit: Money | None = None
    monthly_limit: Money | None = None
    actor: str | None = None


@dataclass(frozen=True, slots=True)
class ChangeCardStatusResponse:
    card: Card


class ChangeCardStatusUseCase:
    """Applies one status or limit change to a stored card.

    The domain errors of the chosen operation (InvalidStatusTransitionError,
    CardAlreadyActiveError, CardExpiredError) propagate unchanged; nothing
    is saved when one is raised.
    """

    def __init__(
        self,
        settings: Settings,
        lock_provider: LockProvider,
        time_provider: TimeProvider,
        card_repository: CardRepository,
    ) -> None:
        self._settings = settings
        self._lock_provider = lock_provider
        self._time_provider = time_provider
        self._card_repo = card_repository

    def execute(self, request: ChangeCardStatusRequest) -> ChangeCardStatusResponse:
        with self._lock_provider.acquire(request.card_id.value):
            now = self._time_provider.now().astimezone(self._settings.tzinfo)

            card = self._card_repo.get(request.card_id)
            if card is None:
                raise CardNotFoundError(request.card_id.value)

            previous_status = card.status
            card = self._apply(card, request, now)
            self._card_repo.save(card, actor=request.actor)

        logger.info(
            "Card updated",
            extra={
                "card_id": request.card_id.value,
                "action": request.action.value,
                "from_status": previous_status.name,
                "to_status": card.status.name,
            },
        )
        return ChangeCardStatusResponse(card=card)

    def _apply(self, card: Card, request: ChangeCardStatusRequest, now: datetime) -> Card:
        action = request.action
        if action is CardAction.ACTIVATE:
            return card.activate(now)
        if action is CardAction.DEACTIVATE:
            return card.deactivate()
        if action is CardAction.BLOCK:
            return card.block()
        if action is CardAction.UNBLOCK:
            return card.unblock()
        if action is CardAction.TERMINATE:
            return card.terminate()
        if action is CardAction.EXPIRE:
            return card.expire()
        return card.change_limits(request.daily_limit, request.monthly_limit)
