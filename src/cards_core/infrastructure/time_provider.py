from datetime import UTC, datetime, timedelta

from cards_core.application.ports import TimeProvider


def _require_utc(dt: datetime) -> datetime:
    if dt.tzinfo is not UTC:
        raise ValueError(f"datetime must have tzinfo=UTC, got tzinfo={dt.tzinfo}")
    return dt


class SystemTimeProvider(TimeProvider):
    """Wall clock in UTC."""

    def now(self) -> datetime:
        return datetime.now(UTC)


class FixedTimeProvider(TimeProvider):
    """Manually driven clock for tests.

    set_time() jumps to any UTC instant; advance() steps forward, which is
    how tests cross business-day and month boundaries. Not thread-safe.
    """

    def __init__(self, fixed_time: datetime) -> None:
        self._current = _require_utc(fixed_time)

    def now(self) -> datetime:
        return self._current

    def set_time(self, new_time: datetime) -> None:
        self._current = _require_utc(new_time)

    def advance(self, delta: timedelta) -> datetime:
        """Step the clock forward by delta and return the new time.

        Raises:
            ValueError: If delta is negative.
        """
        if delta < timedelta(0):
            raise ValueError(f"advance() only moves forward, got {delta}")
        self._current += delta
        return self._current
