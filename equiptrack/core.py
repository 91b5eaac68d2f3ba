"""
Core types and pure functions for the equipment ledger.

This module provides the foundational data structures and protocols for the ledger:
1. Constants: equipment categories, field limits, history and search bounds
2. Immutable data structures: EquipmentItem and the operation records
3. Exceptions: LedgerError and its subclasses
4. Type aliases: DailyData, LedgerState
5. Identifier generation
6. Factories for placeholder items and empty days

Ledger state is never mutated in place. Every transition builds a new
mapping for the path it touches and shares everything else with the
previous state, so a reference to an old state is a valid snapshot.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum
import secrets
import time
from typing import (
    Dict, Tuple, FrozenSet, Iterable, Mapping, Optional, Protocol, Union,
    runtime_checkable,
)


# ============================================================================
# CONSTANTS
# ============================================================================

# Equipment categories (strings, not enum per design decision).
CATEGORY_BOX = "BOX"
CATEGORY_BOX_SOUND = "BOX SOUND"
CATEGORY_REMOTE_CONTROL = "CONTROLE REMOTO"
CATEGORY_CAMERA = "CAMERA"
CATEGORY_CHIP = "CHIP"

# Display and iteration order of the categories.
CATEGORIES: Tuple[str, ...] = (
    CATEGORY_BOX,
    CATEGORY_BOX_SOUND,
    CATEGORY_REMOTE_CONTROL,
    CATEGORY_CAMERA,
    CATEGORY_CHIP,
)

# Field limits applied whenever an item is written.
CONTRACT_MAX_LENGTH = 10
SERIAL_MAX_LENGTH = 20

# Number of snapshots kept for undo.
HISTORY_LIMIT = 10

# Queries shorter than this return no search results.
MIN_SEARCH_LENGTH = 2

# Key under which the serialized ledger is stored.
STORAGE_KEY = "equipmentData"


# ============================================================================
# EXCEPTIONS
# ============================================================================

class LedgerError(Exception):
    """Base exception for all ledger-related errors."""
    pass


class PersistenceError(LedgerError):
    """Raised when a persisted blob cannot be decoded into a ledger."""
    pass


class UnknownCategory(LedgerError):
    """Raised by require_category() for a name outside CATEGORIES."""
    pass


def require_category(category: str) -> str:
    """
    Validate a category name.

    Ledger operations treat unknown categories as reference misses; callers
    that take a category from user input use this to reject it up front.

    Raises:
        UnknownCategory: If category is not one of CATEGORIES
    """
    if category not in CATEGORIES:
        raise UnknownCategory(f"Unknown equipment category: {category!r}")
    return category


# ============================================================================
# IDENTIFIERS
# ============================================================================

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def generate_id() -> str:
    """
    Generate a unique item identifier.

    Format: {epoch_micros:base36}{64 random bits:hex}
    The time prefix keeps ids roughly ordered by creation; the random
    suffix makes collisions within a process vanishingly unlikely.
    """
    micros = time.time_ns() // 1_000
    return f"{_to_base36(micros)}{secrets.token_hex(8)}"


# ============================================================================
# CORE DATA STRUCTURES
# ============================================================================

@dataclass(frozen=True, slots=True)
class EquipmentItem:
    """
    One tracked unit-of-work row.

    Attributes:
        id: Opaque unique identifier, assigned at creation and never reused.
        contract: Contract number (truncated to CONTRACT_MAX_LENGTH).
        serial: Serial number (truncated to SERIAL_MAX_LENGTH).
        photos: Encoded image payloads in insertion order.
        qt: Legacy quantity field, kept for storage compatibility only.

    This class is immutable (frozen=True) and memory-optimized (slots=True).
    Use the with_* helpers to derive updated copies.
    """
    id: str
    contract: str = ""
    serial: str = ""
    photos: Tuple[str, ...] = ()
    qt: str = ""

    def __post_init__(self):
        if not isinstance(self.id, str) or not self.id:
            raise ValueError("EquipmentItem id must be a non-empty string")
        if not isinstance(self.contract, str):
            raise ValueError(f"EquipmentItem contract must be str, got {type(self.contract)}")
        if not isinstance(self.serial, str):
            raise ValueError(f"EquipmentItem serial must be str, got {type(self.serial)}")
        if len(self.contract) > CONTRACT_MAX_LENGTH:
            object.__setattr__(self, 'contract', self.contract[:CONTRACT_MAX_LENGTH])
        if len(self.serial) > SERIAL_MAX_LENGTH:
            object.__setattr__(self, 'serial', self.serial[:SERIAL_MAX_LENGTH])
        if not isinstance(self.photos, tuple):
            object.__setattr__(self, 'photos', tuple(self.photos))

    @property
    def is_active(self) -> bool:
        """True if the item carries a contract, a serial, or at least one photo."""
        return bool(self.contract.strip() or self.serial.strip() or self.photos)

    def with_contract(self, contract: str) -> EquipmentItem:
        return replace(self, contract=contract)

    def with_serial(self, serial: str) -> EquipmentItem:
        return replace(self, serial=serial)

    def with_photo(self, photo: str) -> EquipmentItem:
        """Return a copy with photo appended after the existing ones."""
        return replace(self, photos=self.photos + (photo,))

    def without_photo(self, index: int) -> EquipmentItem:
        """Return a copy with the photo at index removed (no-op if out of range)."""
        if not 0 <= index < len(self.photos):
            return self
        return replace(self, photos=self.photos[:index] + self.photos[index + 1:])

    def __repr__(self) -> str:
        return (f"EquipmentItem({self.id}: contract={self.contract!r}, "
                f"serial={self.serial!r}, photos={len(self.photos)})")


def is_active(item: EquipmentItem) -> bool:
    """Active predicate as a plain function, for filter() and key= use."""
    return item.is_active


# ============================================================================
# TYPE ALIASES
# ============================================================================

# Mapping from category to its ordered item sequence for one day.
DailyData = Dict[str, Tuple[EquipmentItem, ...]]

# Mapping from day key ("YYYY-MM-DD") to that day's data.
LedgerState = Dict[str, DailyData]


# ============================================================================
# FACTORIES
# ============================================================================

def placeholder_item() -> EquipmentItem:
    """Create a blank item with a fresh id."""
    return EquipmentItem(id=generate_id())


def empty_daily_data() -> DailyData:
    """Create a day with one placeholder item per category."""
    return {category: (placeholder_item(),) for category in CATEGORIES}


def empty_report() -> DailyData:
    """Create a day skeleton with every category empty (report views only)."""
    return {category: () for category in CATEGORIES}


# ============================================================================
# OPERATIONS
# ============================================================================

@dataclass(frozen=True, slots=True)
class Load:
    """Replace the entire ledger. Used once at start-up."""
    state: Mapping[str, DailyData]


@dataclass(frozen=True, slots=True)
class EnsureDay:
    """Create the day with placeholders if it does not exist yet."""
    date: str


@dataclass(frozen=True, slots=True)
class AddItem:
    """Append a new placeholder to date/category."""
    date: str
    category: str


@dataclass(frozen=True, slots=True)
class UpdateItem:
    """Replace the item with the same id in date/category, or append it."""
    date: str
    category: str
    item: EquipmentItem


@dataclass(frozen=True, slots=True)
class DeleteItems:
    """Remove the given ids from date/category."""
    date: str
    category: str
    item_ids: FrozenSet[str] = field(default_factory=frozenset)

    def __post_init__(self):
        if not isinstance(self.item_ids, frozenset):
            object.__setattr__(self, 'item_ids', frozenset(self.item_ids))


@dataclass(frozen=True, slots=True)
class ClearAll:
    """Wipe every day from the ledger."""
    pass


Operation = Union[Load, EnsureDay, AddItem, UpdateItem, DeleteItems, ClearAll]

# Operations that are user actions and therefore recorded for undo.
UNDOABLE_OPERATIONS = (AddItem, UpdateItem, DeleteItems, ClearAll)


def is_undoable(operation: Operation) -> bool:
    return isinstance(operation, UNDOABLE_OPERATIONS)


class ExecuteResult(Enum):
    """
    Outcome of executing an operation.

    APPLIED: The ledger state changed.
    NO_OP: The operation referenced a missing day/category/item, changed
           nothing, or the day already existed (EnsureDay). The state is
           unchanged.
    """
    APPLIED = "applied"
    NO_OP = "no_op"


# ============================================================================
# PROTOCOLS
# ============================================================================

@runtime_checkable
class LedgerView(Protocol):
    """
    Read-only interface to ledger state.

    Aggregation, search and summaries accept a LedgerView (or a plain
    LedgerState mapping) and never modify what they are given.
    """

    @property
    def state(self) -> Mapping[str, DailyData]:
        """Return the current ledger snapshot (read-only)."""
        ...

    def get_day(self, date: str) -> Optional[DailyData]:
        """Return the data for a day, or None if the day does not exist."""
        ...

    def get_items(self, date: str, category: str) -> Tuple[EquipmentItem, ...]:
        """Return the items of a day/category (empty tuple on a miss)."""
        ...


def snapshot_of(source: Union[LedgerView, Mapping[str, DailyData]]) -> Mapping[str, DailyData]:
    """Return the state mapping behind a LedgerView, or the mapping itself."""
    if isinstance(source, LedgerView):
        return source.state
    return source


def iter_items(day: Mapping[str, Iterable[EquipmentItem]]) -> Iterable[Tuple[str, EquipmentItem]]:
    """Yield (category, item) for a day in category order, then sequence order."""
    for category in CATEGORIES:
        for item in day.get(category, ()):
            yield category, item
