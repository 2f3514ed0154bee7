"""Card aggregate root with status and usage-limit behavior."""

from __future__ import annotations

import secrets
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from cards_core.domain.entities.card_status import CardStatus
from cards_core.domain.entities.card_type import CardType
from cards_core.domain.exceptions import (
    CardAlreadyActiveError,
    CardBlockedError,
    CardExpiredError,
    CardNotActiveError,
    CardTerminatedError,
    DailyLimitExceededError,
    InvalidStatusTransitionError,
    MonthlyLimitExceededError,
    SinglePaymentLimitExceededError,
)
from cards_core.domain.value_objects import CardNumber, Money, YearMonth
from cards_core.domain.value_objects.card_number import DEFAULT_BIN

if TYPE_CHECKING:
    from datetime import date, datetime

    from cards_core.domain.value_objects import CardId

DEFAULT_VALIDITY_YEARS = 5


@dataclass(frozen=True, slots=True)
class Card:
    """Card aggregate root.

    Card is immutable (frozen dataclass). Every operation that changes
    state returns a new Card, and validation always runs before the new
    instance is built, so a failed operation leaves the caller's Card
    untouched.

    Usage limits:
        daily_used and monthly_used accumulate on record_payment(). They
        are reset lazily: any usage-affecting call compares the stored
        anchors (last_used_date, last_used_month) against ``now`` and
        zeroes the counter whose period has rolled over.

    Time:
        The aggregate never reads the clock. Callers pass ``now`` (already
        converted to the business timezone); its date and month are the
        reference for expiry and resets.

    version is the persistence layer's optimistic-concurrency token. It is
    carried as-is and never compared or incremented here.
    """

    card_id: CardId | None
    card_number: CardNumber
    user_id: str
    account_id: str | None
    card_type: CardType
    status: CardStatus
    expiry_date: YearMonth
    cvc: str = field(repr=False)
    daily_limit: Money
    monthly_limit: Money
    daily_used: Money
    monthly_used: Money
    last_used_date: date | None
    last_used_month: YearMonth | None
    version: int | None = None

    # =========================================================================
    # Construction
    # =========================================================================

    @classmethod
    def create(
        cls,
        user_id: str,
        account_id: str | None,
        now: datetime,
        card_type: CardType = CardType.DEBIT,
        daily_limit: Money | None = None,
        monthly_limit: Money | None = None,
        bin_prefix: str = DEFAULT_BIN,
        validity_years: int = DEFAULT_VALIDITY_YEARS,
    ) -> Card:
        """Issue a new card with policy defaults applied.

        A fresh card number and CVC are generated, the status is ACTIVE,
        the card expires validity_years after the issue month, and limits
        fall back to the card type's defaults when not given.

        The returned card has no card_id until it is persisted.
        """
        issue_month = YearMonth.from_date(now)
        return cls(
            card_id=None,
            card_number=CardNumber.generate(bin_prefix),
            user_id=user_id,
            account_id=account_id,
            card_type=card_type,
            status=CardStatus.ACTIVE,
            expiry_date=issue_month.plus_years(validity_years),
            cvc=f"{secrets.randbelow(1000):03d}",
            daily_limit=(
                daily_limit
                if daily_limit is not None
                else Money.of(card_type.default_daily_limit)
            ),
            monthly_limit=(
                monthly_limit
                if monthly_limit is not None
                else Money.of(card_type.default_monthly_limit)
            ),
            daily_used=Money.ZERO,
            monthly_used=Money.ZERO,
            last_used_date=now.date(),
            last_used_month=issue_month,
        )

    @classmethod
    def restore(
        cls,
        *,
        card_id: CardId | None,
        card_number: CardNumber,
        user_id: str,
        account_id: str | None,
        card_type: CardType,
        status: CardStatus,
        expiry_date: YearMonth,
        cvc: str,
        daily_limit: Money,
        monthly_limit: Money,
        daily_used: Money,
        monthly_used: Money,
        last_used_date: date | None,
        last_used_month: YearMonth | None,
        version: int | None = None,
    ) -> Card:
        """Rebuild a card from persisted values.

        No defaults are derived and no invariants are re-checked; the
        values are trusted to have been valid when stored.
        """
        return cls(
            card_id=card_id,
            card_number=card_number,
            user_id=user_id,
            account_id=account_id,
            card_type=card_type,
            status=status,
            expiry_date=expiry_date,
            cvc=cvc,
            daily_limit=daily_limit,
            monthly_limit=monthly_limit,
            daily_used=daily_used,
            monthly_used=monthly_used,
            last_used_date=last_used_date,
            last_used_month=last_used_month,
            version=version,
        )

    def with_id(self, card_id: CardId) -> Card:
        """Return this card with its persistent identity assigned."""
        if self.card_id is not None:
            raise ValueError(f"Card already has an id: {self.card_id.value}")
        return replace(self, card_id=card_id)

    # =========================================================================
    # Queries
    # =========================================================================

    @property
    def is_new(self) -> bool:
        return self.card_id is None

    @property
    def is_active(self) -> bool:
        return self.status is CardStatus.ACTIVE

    @property
    def is_debit_card(self) -> bool:
        return self.card_type is CardType.DEBIT

    @property
    def is_credit_card(self) -> bool:
        return self.card_type is CardType.CREDIT

    def is_expired(self, now: datetime) -> bool:
        """A card expires after the last day of its expiry month."""
        return YearMonth.from_date(now).is_after(self.expiry_date)

    def can_pay(self, now: datetime) -> bool:
        return self.status.can_pay and not self.is_expired(now)

    # =========================================================================
    # Usage limits
    # =========================================================================

    def validate_payment(self, amount: Money, now: datetime) -> Card:
        """Check that the card may pay amount right now.

        Checks run in order: card status and expiry, then the daily limit,
        then the monthly limit. Usage counters whose period has rolled
        over are reset first.

        Args:
            amount: Requested payment amount.
            now: Current time in the business timezone.

        Returns:
            The card with any lazy reset applied. Usage is NOT recorded;
            call record_payment() once the payment is approved.

        Raises:
            CardExpiredError, CardBlockedError, CardTerminatedError,
            CardNotActiveError: The card cannot pay in its current state.
            DailyLimitExceededError: daily_used + amount > daily_limit.
            MonthlyLimitExceededError: monthly_used + amount > monthly_limit.
        """
        self._validate_can_pay(now)

        card = self._reset_usage_if_needed(now)

        if not card.daily_used.is_within_limit(amount, card.daily_limit):
            raise DailyLimitExceededError(
                card.daily_used.amount, card.daily_limit.amount, amount.amount
            )

        if not card.monthly_used.is_within_limit(amount, card.monthly_limit):
            raise MonthlyLimitExceededError(
                card.monthly_used.amount, card.monthly_limit.amount, amount.amount
            )

        return card

    def validate_single_payment(self, amount: Money) -> None:
        """Check amount against the card type's per-transaction cap.

        Raises:
            SinglePaymentLimitExceededError: amount is above the cap.
        """
        single_limit = Money.of(self.card_type.default_single_limit)
        if amount.is_greater_than(single_limit):
            raise SinglePaymentLimitExceededError(amount.amount, single_limit.amount)

    def record_payment(self, amount: Money, now: datetime) -> Card:
        """Add an approved payment to daily and monthly usage.

        Must follow a successful validate_payment(); the two calls are not
        atomic and the caller runs them as a unit.
        """
        card = self._reset_usage_if_needed(now)
        return replace(
            card,
            daily_used=card.daily_used.add(amount),
            monthly_used=card.monthly_used.add(amount),
            last_used_date=now.date(),
            last_used_month=YearMonth.from_date(now),
        )

    def record_cancellation(self, amount: Money, approved_at: datetime | None = None) -> Card:
        """Give back usage for a cancelled or refunded payment.

        Each counter is floored at zero on its own. A cancellation larger
        than the recorded usage (for example after a reset boundary) zeroes
        that counter instead of failing.

        With approved_at (in the business timezone) only the counters whose
        period still contains the approval are reduced: a refund of an
        earlier day's payment leaves today's daily usage alone, and one from
        an earlier month leaves the monthly usage alone too.
        """
        release_daily = approved_at is None or approved_at.date() == self.last_used_date
        release_monthly = (
            approved_at is None or YearMonth.from_date(approved_at) == self.last_used_month
        )
        return replace(
            self,
            daily_used=_subtract_floored(self.daily_used, amount)
            if release_daily
            else self.daily_used,
            monthly_used=_subtract_floored(self.monthly_used, amount)
            if release_monthly
            else self.monthly_used,
        )

    def change_limits(self, daily_limit: Money | None, monthly_limit: Money | None) -> Card:
        """Replace the limits; a None or zero limit keeps the current value."""
        return replace(
            self,
            daily_limit=daily_limit
            if daily_limit is not None and daily_limit.is_positive()
            else self.daily_limit,
            monthly_limit=monthly_limit
            if monthly_limit is not None and monthly_limit.is_positive()
            else self.monthly_limit,
        )

    # =========================================================================
    # Status changes
    # =========================================================================

    def activate(self, now: datetime) -> Card:
        """Reactivate an INACTIVE or BLOCKED card.

        Raises:
            CardAlreadyActiveError: The card is already ACTIVE.
            InvalidStatusTransitionError: ACTIVE is not reachable.
            CardExpiredError: The card's expiry month has passed.
        """
        if self.status is CardStatus.ACTIVE:
            raise CardAlreadyActiveError(self._id_label)
        self._validate_transition(CardStatus.ACTIVE)
        if self.is_expired(now):
            raise CardExpiredError(self._id_label)
        return replace(self, status=CardStatus.ACTIVE)

    def deactivate(self) -> Card:
        self._validate_transition(CardStatus.INACTIVE)
        return replace(self, status=CardStatus.INACTIVE)

    def block(self) -> Card:
        """Block the card after a lost or stolen report."""
        self._validate_transition(CardStatus.BLOCKED)
        return replace(self, status=CardStatus.BLOCKED)

    def unblock(self) -> Card:
        """Lift a block; only a BLOCKED card can be unblocked, always to ACTIVE."""
        if self.status is not CardStatus.BLOCKED:
            raise InvalidStatusTransitionError(self.status.name, CardStatus.ACTIVE.name)
        return replace(self, status=CardStatus.ACTIVE)

    def terminate(self) -> Card:
        self._validate_transition(CardStatus.TERMINATED)
        return replace(self, status=CardStatus.TERMINATED)

    def expire(self) -> Card:
        """Mark the card EXPIRED.

        No transition check is made: callers invoke this only once the
        expiry month has passed.
        """
        return replace(self, status=CardStatus.EXPIRED)

    # =========================================================================
    # Internals
    # =========================================================================

    @property
    def _id_label(self) -> str:
        return self.card_id.value if self.card_id is not None else "NEW"

    def _validate_can_pay(self, now: datetime) -> None:
        if self.can_pay(now):
            return
        if self.is_expired(now):
            raise CardExpiredError(self._id_label)
        if self.status is CardStatus.BLOCKED:
            raise CardBlockedError(self._id_label)
        if self.status is CardStatus.TERMINATED:
            raise CardTerminatedError(self._id_label)
        raise CardNotActiveError(self._id_label, self.status.name)

    def _validate_transition(self, target: CardStatus) -> None:
        if not self.status.can_transition_to(target):
            raise InvalidStatusTransitionError(self.status.name, target.name)

    def _reset_usage_if_needed(self, now: datetime) -> Card:
        today = now.date()
        this_month = YearMonth.from_date(now)
        changes: dict[str, object] = {}

        if self.last_used_date != today:
            changes["daily_used"] = Money.ZERO
            changes["last_used_date"] = today

        if self.last_used_month != this_month:
            changes["monthly_used"] = Money.ZERO
            changes["last_used_month"] = this_month

        if not changes:
            return self
        return replace(self, **changes)


def _subtract_floored(used: Money, amount: Money) -> Money:
    if used.is_greater_than_or_equal(amount):
        return used.subtract(amount)
    return Money.ZERO
