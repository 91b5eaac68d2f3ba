"""
aggregation.py - Report views over a date range

Pure functions that derive a read-only DailyData from the ledger for the
export and share collaborators, plus the totals shown in the summary bar.

Scopes:
    DAY      - the reference day
    SPECIFIC - an arbitrary day chosen by the caller
    MONTH    - every day from the 1st of the reference month through the
               reference day (inclusive), active items only

An aggregated view may have empty categories. It is a report, not a
ledger state, and the non-empty category invariant does not apply.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Dict, List, Mapping, Optional, Union

from .core import (
    CATEGORIES, DailyData, LedgerView,
    empty_report, snapshot_of,
)
from .clock import day_key, parse_day_key, month_to_date_keys, month_keys


class Scope(Enum):
    DAY = "day"
    MONTH = "month"
    SPECIFIC = "specific"


@dataclass(frozen=True, slots=True)
class AggregateResult:
    """
    A report view and its human-readable label.

    Attributes:
        data: Items per category (categories may be empty)
        label: Day key for single-day scopes, "month M/Y (through day D)" for MONTH
    """
    data: DailyData
    label: str

    @property
    def total(self) -> int:
        return sum(len(items) for items in self.data.values())


@dataclass(frozen=True, slots=True)
class Summary:
    """Active-item counts for one day and its whole month."""
    day: str
    by_category: Dict[str, int] = field(default_factory=dict)
    day_total: int = 0
    month_total: int = 0


def _as_date(value: Union[date, str]) -> date:
    return parse_day_key(value) if isinstance(value, str) else value


def _active_view(day: Mapping) -> DailyData:
    return {
        category: tuple(item for item in day.get(category, ()) if item.is_active)
        for category in CATEGORIES
    }


def _single_day(ledger: Mapping, target: date, active_only: bool) -> AggregateResult:
    key = day_key(target)
    day = ledger.get(key)
    if day is None:
        return AggregateResult(data=empty_report(), label=key)
    if active_only:
        return AggregateResult(data=_active_view(day), label=key)
    data = {category: tuple(day.get(category, ())) for category in CATEGORIES}
    return AggregateResult(data=data, label=key)


def _month_to_date(ledger: Mapping, reference: date) -> AggregateResult:
    collected: Dict[str, List] = {category: [] for category in CATEGORIES}
    for key in month_to_date_keys(reference):
        day = ledger.get(key)
        if day is None:
            continue
        for category in CATEGORIES:
            collected[category].extend(item for item in day.get(category, ()) if item.is_active)

    label = f"month {reference.month}/{reference.year} (through day {reference.day})"
    return AggregateResult(
        data={category: tuple(items) for category, items in collected.items()},
        label=label,
    )


def aggregate(
    ledger: Union[LedgerView, Mapping[str, DailyData]],
    reference_date: Union[date, str],
    scope: Union[Scope, str] = Scope.DAY,
    specific_date: Optional[Union[date, str]] = None,
    active_only: bool = True,
) -> AggregateResult:
    """
    Build the report view for a scope.

    Args:
        ledger: LedgerView or LedgerState to read
        reference_date: "Today" for DAY and MONTH scopes
        scope: Scope member or its string value ("day", "month", "specific")
        specific_date: Day to report for SPECIFIC; falls back to reference_date if None
        active_only: For DAY/SPECIFIC, drop placeholder items (True) or return
                     the day verbatim (False). MONTH always drops them.

    Returns:
        AggregateResult with items in ledger order; for MONTH, earlier days
        come before later days within each category.

    Raises:
        ValueError: If scope is not a known scope name
    """
    scope = Scope(scope)
    snapshot = snapshot_of(ledger)
    reference = _as_date(reference_date)

    if scope is Scope.MONTH:
        return _month_to_date(snapshot, reference)

    target = reference
    if scope is Scope.SPECIFIC and specific_date is not None:
        target = _as_date(specific_date)
    return _single_day(snapshot, target, active_only)


def count_active(day: Optional[Mapping]) -> int:
    """Number of active items in a day (0 for a missing day)."""
    if not day:
        return 0
    return sum(1 for items in day.values() for item in items if item.is_active)


def summarize(
    ledger: Union[LedgerView, Mapping[str, DailyData]],
    day: Union[date, str],
) -> Summary:
    """
    Compute the summary bar figures for a day.

    month_total covers every day of the month, not only the days up to
    ``day``, so it can include entries made on later dates.
    """
    snapshot = snapshot_of(ledger)
    target = _as_date(day)
    key = day_key(target)
    current = snapshot.get(key) or {}

    by_category = {
        category: sum(1 for item in current.get(category, ()) if item.is_active)
        for category in CATEGORIES
    }
    month_total = sum(count_active(snapshot.get(k)) for k in month_keys(target))

    return Summary(
        day=key,
        by_category=by_category,
        day_total=count_active(current),
        month_total=month_total,
    )
