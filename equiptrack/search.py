"""
search.py - Substring search across the whole ledger

A pure function over a ledger snapshot, independent of aggregation: it
looks at every day, not only the current month.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import List, Mapping, Union

from .core import (
    DailyData, EquipmentItem, LedgerView,
    MIN_SEARCH_LENGTH, iter_items, snapshot_of,
)


@dataclass(frozen=True, slots=True)
class SearchResult:
    date: str
    category: str
    item: EquipmentItem


def matches(item: EquipmentItem, query: str) -> bool:
    """Literal, case-sensitive substring match on serial or contract of an active item."""
    if not item.is_active:
        return False
    return query in item.serial or query in item.contract


def search(
    ledger: Union[LedgerView, Mapping[str, DailyData]],
    query: str,
) -> List[SearchResult]:
    """
    Find active items whose serial or contract contains query.

    Queries shorter than MIN_SEARCH_LENGTH return nothing. Results are
    ordered by day, newest first; within a day they keep category order
    and then ledger order.
    """
    if len(query) < MIN_SEARCH_LENGTH:
        return []

    snapshot = snapshot_of(ledger)
    results = [
        SearchResult(date=date, category=category, item=item)
        for date, day in snapshot.items()
        for category, item in iter_items(day)
        if matches(item, query)
    ]
    # sort() is stable, so ties keep scan order
    results.sort(key=lambda r: r.date, reverse=True)
    return results
