"""
conftest.py - Shared pytest fixtures for equiptrack tests

Provides common fixtures used across unit, functional and conformance tests:
- Ledger states (empty, one ensured day)
- Engines wired to a recording store
- Item builders
"""

import pytest
from datetime import date

from equiptrack import (
    EquipmentLedger, EquipmentItem, LedgerState,
    ensure_day, generate_id,
)

from tests.fake_store import RecordingStore


DAY = "2024-05-01"


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def make_item(contract: str = "", serial: str = "", photos=(), item_id: str = None) -> EquipmentItem:
    """Create an item with a fresh id unless one is given."""
    return EquipmentItem(id=item_id or generate_id(), contract=contract, serial=serial, photos=tuple(photos))


def day_with(state: LedgerState, date_key: str, category: str, *items: EquipmentItem) -> LedgerState:
    """Return state with date_key ensured and category replaced by items."""
    state = ensure_day(state, date_key)
    return {**state, date_key: {**state[date_key], category: tuple(items)}}


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def day() -> str:
    return DAY


@pytest.fixture
def empty_state() -> LedgerState:
    return {}


@pytest.fixture
def day_state() -> LedgerState:
    """Ledger with DAY ensured: one placeholder per category."""
    return ensure_day({}, DAY)


@pytest.fixture
def store() -> RecordingStore:
    return RecordingStore()


@pytest.fixture
def engine(store) -> EquipmentLedger:
    """Started engine on DAY, backed by a recording store."""
    engine = EquipmentLedger(store=store, current_day=date(2024, 5, 1))
    engine.start()
    return engine
