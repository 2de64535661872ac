"""Clocks supplying the current time to the honeypot guard.

Production code uses SystemClock; tests inject a FixedClock so elapsed-time
checks are deterministic.
"""

from datetime import datetime, timedelta, timezone
from typing import Union


class SystemClock:
    """Wall-clock time in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """A clock that only moves when told to.

    Examples:
        >>> clock = FixedClock(datetime(2024, 1, 1, tzinfo=timezone.utc))
        >>> clock.advance(5)
        >>> clock.now().second
        5
    """

    def __init__(self, at: datetime):
        if at.tzinfo is None:
            at = at.replace(tzinfo=timezone.utc)
        self._now = at

    def now(self) -> datetime:
        return self._now

    def advance(self, seconds: Union[int, float, timedelta]) -> None:
        if not isinstance(seconds, timedelta):
            seconds = timedelta(seconds=seconds)
        self._now = self._now + seconds


__all__ = [
    "SystemClock",
    "FixedClock",
]
