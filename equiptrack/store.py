"""
store.py - Pure transition functions for the equipment ledger.

Every function takes the current LedgerState and returns the next one.
Nothing is mutated in place: a transition copies only the path it touches
(day -> category -> sequence) and shares all other days and categories
with the input, so the input stays valid as an undo snapshot.

Reference misses (a day, category or item that does not exist) and edits
that change nothing are not errors: the input state is returned unchanged,
and callers can detect the no-op with an identity check (``new is old``).

Invariant maintained here: after any transition, every category of every
existing day holds at least one item. DeleteItems restores it by appending
a fresh placeholder when a category would become empty.
"""

from __future__ import annotations
from typing import Iterable, Mapping

from .core import (
    # Types
    DailyData, LedgerState, EquipmentItem,
    Operation, Load, EnsureDay, AddItem, UpdateItem, DeleteItems, ClearAll,
    # Factories
    placeholder_item, empty_daily_data,
)


def load(state: Mapping[str, DailyData]) -> LedgerState:
    """
    Replace the ledger with state.

    The outer and per-day mappings are copied so later transitions on the
    result never reach back into the caller's objects. Items and their
    tuples are immutable and are shared.
    """
    return {date: dict(day) for date, day in state.items()}


def ensure_day(state: LedgerState, date: str) -> LedgerState:
    """Insert a day with one placeholder per category unless it already exists."""
    if date in state:
        return state
    return {**state, date: empty_daily_data()}


def add_item(state: LedgerState, date: str, category: str) -> LedgerState:
    """
    Append a fresh placeholder to date/category.

    A missing day is synthesized first (with its own placeholders), so the
    category ends up with two items. Unknown categories are a no-op.
    """
    day = state.get(date)
    if day is None:
        day = empty_daily_data()
    if category not in day:
        return state
    new_day = {**day, category: day[category] + (placeholder_item(),)}
    return {**state, date: new_day}


def update_item(state: LedgerState, date: str, category: str, item: EquipmentItem) -> LedgerState:
    """
    Replace the item with item.id in date/category, preserving its position.

    If no item has that id it is appended. A missing day or category, or an
    item identical to the stored one, is a no-op.
    """
    day = state.get(date)
    if day is None or category not in day:
        return state

    items = day[category]
    for index, existing in enumerate(items):
        if existing.id == item.id:
            new_items = items[:index] + (item,) + items[index + 1:]
            break
    else:
        new_items = items + (item,)

    if new_items == items:
        return state
    return {**state, date: {**day, category: new_items}}


def delete_items(state: LedgerState, date: str, category: str, item_ids: Iterable[str]) -> LedgerState:
    """
    Remove every item of date/category whose id is in item_ids.

    If nothing is left, a single placeholder is appended so the category
    is never empty. A missing day or category, or ids that match nothing,
    is a no-op.
    """
    day = state.get(date)
    if day is None or category not in day:
        return state

    doomed = frozenset(item_ids)
    remaining = tuple(item for item in day[category] if item.id not in doomed)
    if remaining == day[category]:
        return state
    if not remaining:
        remaining = (placeholder_item(),)

    return {**state, date: {**day, category: remaining}}


def clear_all(state: LedgerState) -> LedgerState:
    """Return an empty ledger."""
    return {}


def apply_operation(state: LedgerState, operation: Operation) -> LedgerState:
    """
    Apply one operation record to state and return the next state.

    This is the single dispatch point used by EquipmentLedger.execute().

    Raises:
        TypeError: If operation is not one of the known operation records
    """
    if isinstance(operation, Load):
        return load(operation.state)
    if isinstance(operation, EnsureDay):
        return ensure_day(state, operation.date)
    if isinstance(operation, AddItem):
        return add_item(state, operation.date, operation.category)
    if isinstance(operation, UpdateItem):
        return update_item(state, operation.date, operation.category, operation.item)
    if isinstance(operation, DeleteItems):
        return delete_items(state, operation.date, operation.category, operation.item_ids)
    if isinstance(operation, ClearAll):
        return clear_all(state)
    raise TypeError(f"Unknown operation: {operation!r}")
