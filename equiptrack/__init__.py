"""
equiptrack - Equipment Handling Ledger

Tracks equipment handling events (contract numbers, serial numbers, photos)
by calendar day and equipment category, with undo, date-range reports and
substring search.

Usage:
    from equiptrack import EquipmentLedger, InMemoryBlobStore, CATEGORY_BOX

    engine = EquipmentLedger(store=InMemoryBlobStore(), current_day="2024-05-01")
    engine.start()

    engine.add_item(CATEGORY_BOX)
    first = engine.get_items("2024-05-01", CATEGORY_BOX)[0]
    engine.update_item(CATEGORY_BOX, first.with_serial("X1"))

    report = engine.aggregate("month")
    hits = engine.search("X1")
    engine.undo()
"""

# Core types
from .core import (
    EquipmentItem,
    DailyData,
    LedgerState,
    LedgerView,
    Operation,
    Load,
    EnsureDay,
    AddItem,
    UpdateItem,
    DeleteItems,
    ClearAll,
    ExecuteResult,
    LedgerError,
    PersistenceError,
    UnknownCategory,
    require_category,
    generate_id,
    is_active,
    is_undoable,
    placeholder_item,
    empty_daily_data,
    empty_report,
    CATEGORIES,
    CATEGORY_BOX,
    CATEGORY_BOX_SOUND,
    CATEGORY_REMOTE_CONTROL,
    CATEGORY_CAMERA,
    CATEGORY_CHIP,
    CONTRACT_MAX_LENGTH,
    SERIAL_MAX_LENGTH,
    HISTORY_LIMIT,
    MIN_SEARCH_LENGTH,
    STORAGE_KEY,
)

# Pure transitions
from .store import (
    load,
    ensure_day,
    add_item,
    update_item,
    delete_items,
    clear_all,
    apply_operation,
)

# Engine
from .ledger import EquipmentLedger
from .history import HistoryManager, RestoreState
from .selection import SelectionSet

# Reports and search
from .aggregation import Scope, AggregateResult, Summary, aggregate, summarize, count_active
from .search import SearchResult, search, matches

# Collaborators
from .persistence import (
    BlobStore,
    InMemoryBlobStore,
    FileBlobStore,
    dump_ledger,
    load_ledger,
)
from .clock import DayClock, day_key, parse_day_key, month_to_date_keys, month_keys

__all__ = [
    # Core
    'EquipmentItem', 'DailyData', 'LedgerState', 'LedgerView',
    'Operation', 'Load', 'EnsureDay', 'AddItem', 'UpdateItem', 'DeleteItems', 'ClearAll',
    'ExecuteResult', 'LedgerError', 'PersistenceError', 'UnknownCategory',
    'require_category', 'generate_id', 'is_active', 'is_undoable',
    'placeholder_item', 'empty_daily_data', 'empty_report',
    'CATEGORIES', 'CATEGORY_BOX', 'CATEGORY_BOX_SOUND', 'CATEGORY_REMOTE_CONTROL',
    'CATEGORY_CAMERA', 'CATEGORY_CHIP',
    'CONTRACT_MAX_LENGTH', 'SERIAL_MAX_LENGTH', 'HISTORY_LIMIT', 'MIN_SEARCH_LENGTH', 'STORAGE_KEY',
    # Transitions
    'load', 'ensure_day', 'add_item', 'update_item', 'delete_items', 'clear_all', 'apply_operation',
    # Engine
    'EquipmentLedger', 'HistoryManager', 'RestoreState', 'SelectionSet',
    # Reports and search
    'Scope', 'AggregateResult', 'Summary', 'aggregate', 'summarize', 'count_active',
    'SearchResult', 'search', 'matches',
    # Collaborators
    'BlobStore', 'InMemoryBlobStore', 'FileBlobStore', 'dump_ledger', 'load_ledger',
    'DayClock', 'day_key', 'parse_day_key', 'month_to_date_keys', 'month_keys',
]

__version__ = '1.0.0'
