"""Use cases - Orchestration of the Card and Payment aggregates."""

from cards_core.application.use_cases.authorize_payment import (
    AuthorizePaymentRequest,
    AuthorizePaymentResponse,
    AuthorizePaymentUseCase,
)
from cards_core.application.use_cases.cancel_payment import (
    CancelPaymentRequest,
    CancelPaymentResponse,
    CancelPaymentUseCase,
)
from cards_core.application.use_cases.change_card_status import (
    CardAction,
    ChangeCardStatusRequest,
    ChangeCardStatusResponse,
    ChangeCardStatusUseCase,
)
from cards_core.application.use_cases.issue_card import (
    IssueCardRequest,
    IssueCardResponse,
    IssueCardUseCase,
)

__all__ = [
    "AuthorizePaymentRequest",
    "AuthorizePaymentResponse",
    "AuthorizePaymentUseCase",
    "CancelPaymentRequest",
    "CancelPaymentResponse",
    "CancelPaymentUseCase",
    "CardAction",
    "ChangeCardStatusRequest",
    "ChangeCardStatusResponse",
    "ChangeCardStatusUseCase",
    "IssueCardRequest",
    "IssueCardResponse",
    "IssueCardUseCase",
]
