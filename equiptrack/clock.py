"""
clock.py - Calendar-day keys and the day-change collaborator

Days are keyed by ISO strings ("YYYY-MM-DD"). The format is fixed-width
and zero-padded, so string order is calendar order.

DayClock polls a time source and moves the engine to the new day when the
calendar day changes. It never rolls the previous day's items over.
"""

from __future__ import annotations
import calendar
from datetime import date, datetime
from typing import Callable, Iterator, List, Optional, Protocol, Union


def day_key(value: Union[date, datetime]) -> str:
    """Return the ledger key for a calendar day."""
    if isinstance(value, datetime):
        value = value.date()
    return value.isoformat()


def parse_day_key(key: str) -> date:
    """
    Parse a ledger day key back into a date.

    Raises:
        ValueError: If key is not a valid "YYYY-MM-DD" string
    """
    return date.fromisoformat(key)


def month_to_date_keys(reference: date) -> Iterator[str]:
    """Yield the keys from the 1st of reference's month through reference, in order."""
    for day in range(1, reference.day + 1):
        yield day_key(reference.replace(day=day))


def month_keys(reference: date) -> List[str]:
    """All day keys of reference's month."""
    _, days_in_month = calendar.monthrange(reference.year, reference.month)
    return [day_key(reference.replace(day=d)) for d in range(1, days_in_month + 1)]


class DayTarget(Protocol):
    """Anything that can be moved to a new current day (EquipmentLedger does)."""

    def set_current_day(self, day: Union[date, str]) -> None:
        ...


class DayClock:
    """
    Day-change detector.

    Call tick() periodically (the application polls once a
    minute). The target is notified only when the day key changes.

    Example:
        clock = DayClock(engine)
        clock.tick()   # no-op until midnight passes
    """

    def __init__(self, target: DayTarget, now: Callable[[], datetime] = datetime.now):
        self.target = target
        self._now = now
        self._last_key: Optional[str] = day_key(now())

    @property
    def current_key(self) -> Optional[str]:
        return self._last_key

    def tick(self) -> bool:
        """
        Read the clock once.

        Returns:
            True if the day changed and the target was moved to it
        """
        today = self._now().date()
        key = day_key(today)
        if key == self._last_key:
            return False
        self._last_key = key
        self.target.set_current_day(today)
        return True
