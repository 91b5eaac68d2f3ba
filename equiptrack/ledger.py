"""
ledger.py - Stateful owner of the equipment ledger

The EquipmentLedger class is the central state manager. It is the only
object that swaps in new ledger states, and it does so exclusively through
the pure transitions in store.py.

Key responsibilities:
    - Implements the LedgerView protocol for read-only consumers
    - Records a snapshot before every user action and restores it on undo
    - Hands each settled state to the persistence collaborator, except
      while an undo is being restored
    - Owns the current day and the delete-mode selection
"""

from __future__ import annotations
from dataclasses import replace
from datetime import date
import logging
from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from .core import (
    # Types
    EquipmentItem, DailyData, LedgerState,
    Operation, Load, EnsureDay, AddItem, UpdateItem, DeleteItems, ClearAll,
    ExecuteResult,
    # Constants
    CATEGORIES, HISTORY_LIMIT, STORAGE_KEY,
    # Exceptions
    PersistenceError,
    # Helpers
    is_undoable,
)
from .store import apply_operation, delete_items as _delete_items
from .history import HistoryManager
from .selection import SelectionSet
from .persistence import BlobStore, dump_ledger, load_ledger
from .clock import day_key
from .aggregation import AggregateResult, Scope, Summary, aggregate, summarize
from .search import SearchResult, search

logger = logging.getLogger(__name__)

DayLike = Union[date, str]


def _key(day: DayLike) -> str:
    return day if isinstance(day, str) else day_key(day)


class EquipmentLedger:
    """
    Equipment ledger with undo, persistence write-back and delete mode.

    Implements the LedgerView protocol, so it can be passed directly to
    aggregate(), search() and summarize().

    Thread Safety:
        Not thread-safe. All operations are expected to run on one thread.

    Example:
        engine = EquipmentLedger(store=FileBlobStore("~/.equiptrack"))
        engine.start(date.today())

        engine.add_item("BOX")
        item = engine.get_items(engine.current_day, "BOX")[0]
        engine.update_item("BOX", item.with_serial("SN-001"))
        engine.undo()
    """

    def __init__(
        self,
        store: Optional[BlobStore] = None,
        current_day: Optional[DayLike] = None,
        history_limit: int = HISTORY_LIMIT,
        storage_key: str = STORAGE_KEY,
        verbose: bool = False,
    ):
        """
        Create an engine with an empty ledger.

        Args:
            store: Persistence collaborator (None disables write-back)
            current_day: Day the convenience methods act on (default: today)
            history_limit: Number of undo snapshots kept
            storage_key: Key of the ledger blob in the store
            verbose: Print a line for every executed operation
        """
        self.store = store
        self.storage_key = storage_key
        self.verbose = verbose
        self.history = HistoryManager(history_limit)
        self.selection = SelectionSet()
        self._state: LedgerState = {}
        self._view: Mapping[str, Mapping[str, Tuple[EquipmentItem, ...]]] = MappingProxyType({})
        # set while an unreadable stored blob must not be overwritten
        self._hold_writes = False
        self._current_day: str = _key(current_day or date.today())

    # ========================================================================
    # LedgerView PROTOCOL IMPLEMENTATION (read-only methods)
    # ========================================================================

    @property
    def state(self) -> Mapping[str, Mapping[str, Tuple[EquipmentItem, ...]]]:
        """
        Read-only view of the current ledger.

        Days are shared with the undo snapshots, so both levels are
        wrapped in MappingProxyType. The view is rebuilt only when the
        state changes.
        """
        return self._view

    def get_day(self, date: DayLike) -> Optional[DailyData]:
        return self._state.get(_key(date))

    def get_items(self, date: DayLike, category: str) -> Tuple[EquipmentItem, ...]:
        day = self._state.get(_key(date))
        if day is None:
            return ()
        return day.get(category, ())

    def list_days(self) -> List[str]:
        """All day keys, oldest first."""
        return sorted(self._state)

    @property
    def current_day(self) -> str:
        return self._current_day

    @property
    def can_undo(self) -> bool:
        return self.history.can_undo

    @property
    def history_depth(self) -> int:
        return self.history.depth

    # ========================================================================
    # EXECUTION (Mutating)
    # ========================================================================

    def execute(self, operation: Operation) -> ExecuteResult:
        """
        Apply one operation.

        User actions (AddItem, UpdateItem, DeleteItems, ClearAll) record the
        current state for undo before they are applied, including when they
        turn out to be reference misses. Load and EnsureDay are not recorded.

        Returns:
            ExecuteResult.APPLIED if the state changed, ExecuteResult.NO_OP otherwise
        """
        if is_undoable(operation):
            self._hold_writes = False
            self.history.record(self._state)
        return self._transition(operation)

    def _transition(self, operation: Operation) -> ExecuteResult:
        new_state = apply_operation(self._state, operation)
        if new_state is self._state:
            logger.debug("No-op: %r", operation)
            return ExecuteResult.NO_OP

        self._set_state(new_state)
        logger.debug("Applied: %r", operation)
        if self.verbose:
            print(f"✓ {type(operation).__name__}: {self._describe(operation)}")
        self._persist()
        return ExecuteResult.APPLIED

    @staticmethod
    def _describe(operation: Operation) -> str:
        date = getattr(operation, "date", None)
        category = getattr(operation, "category", None)
        if date and category:
            return f"{date} / {category}"
        if date:
            return date
        if isinstance(operation, Load):
            return f"{len(operation.state)} day(s)"
        return "all days"

    def _set_state(self, new_state: LedgerState) -> None:
        self._state = new_state
        self._view = MappingProxyType({date: MappingProxyType(day) for date, day in new_state.items()})

    def _persist(self) -> None:
        """Write the current state to the store unless an undo is settling."""
        if self.store is None or self.history.is_restoring or self._hold_writes:
            return
        try:
            self.store.write(self.storage_key, dump_ledger(self._state))
        except Exception:
            # The in-memory change stands even if storage is unavailable.
            logger.warning("Failed to persist ledger under %r", self.storage_key, exc_info=True)

    # ========================================================================
    # LIFECYCLE
    # ========================================================================

    def start(self, today: Optional[DayLike] = None) -> None:
        """
        Hydrate from the store and open the current day.

        An unreadable blob is logged and copied to ``<storage_key>.corrupt``,
        and the engine starts with an empty ledger. The stored blob is left
        in place until the first user action writes over it.
        """
        if today is not None:
            self._current_day = _key(today)

        blob = self.store.read(self.storage_key) if self.store is not None else None
        if blob is not None:
            try:
                self.load(load_ledger(blob))
            except PersistenceError:
                logger.warning("Ignoring unreadable ledger blob under %r", self.storage_key, exc_info=True)
                self._hold_writes = True
                self._back_up(blob)

        self.ensure_day(self._current_day)

    @property
    def backup_key(self) -> str:
        """Key under which an unreadable stored blob is preserved."""
        return f"{self.storage_key}.corrupt"

    def _back_up(self, blob: str) -> None:
        try:
            self.store.write(self.backup_key, blob)
        except Exception:
            logger.warning("Failed to back up unreadable ledger blob to %r", self.backup_key, exc_info=True)

    def load(self, state: LedgerState) -> ExecuteResult:
        """Replace the whole ledger (not undoable)."""
        return self._transition(Load(state))

    def ensure_day(self, date: DayLike) -> ExecuteResult:
        """Create the day with placeholders if missing (not undoable)."""
        return self._transition(EnsureDay(_key(date)))

    def set_current_day(self, day: DayLike) -> None:
        """Move to another day (calendar navigation or day rollover) and make sure it exists."""
        self._current_day = _key(day)
        self.ensure_day(self._current_day)

    # ========================================================================
    # USER ACTIONS (undoable, on the current day)
    # ========================================================================

    def add_item(self, category: str) -> ExecuteResult:
        return self.execute(AddItem(self._current_day, category))

    def update_item(self, category: str, item: EquipmentItem) -> ExecuteResult:
        return self.execute(UpdateItem(self._current_day, category, item))

    def delete_items(self, category: str, item_ids: Iterable[str]) -> ExecuteResult:
        return self.execute(DeleteItems(self._current_day, category, frozenset(item_ids)))

    def clear_all(self) -> ExecuteResult:
        return self.execute(ClearAll())

    def undo(self) -> bool:
        """
        Restore the state from before the most recent user action.

        The restored snapshot is loaded and the current day re-ensured while
        persistence is suppressed; the settled result is then written once.

        Returns:
            True if a snapshot was restored, False if there was nothing to undo
        """
        snapshot = self.history.begin_restore()
        if snapshot is None:
            return False
        try:
            self._transition(Load(snapshot))
            self._transition(EnsureDay(self._current_day))
        finally:
            self.history.finish_restore()
        logger.debug("Undo restored %d day(s); %d snapshot(s) left", len(snapshot), self.history.depth)
        self._persist()
        return True

    # ========================================================================
    # ITEM EDITS BY ID (capture and gallery collaborators)
    # ========================================================================

    def find_item(self, item_id: str) -> Optional[Tuple[str, EquipmentItem]]:
        """Locate an item of the current day; returns (category, item) or None."""
        day = self._state.get(self._current_day) or {}
        for category in CATEGORIES:
            for item in day.get(category, ()):
                if item.id == item_id:
                    return category, item
        return None

    def find_category(self, item_id: str) -> Optional[str]:
        found = self.find_item(item_id)
        return found[0] if found else None

    def attach_capture(
        self,
        item_id: str,
        photo: Optional[str] = None,
        code: Optional[str] = None,
    ) -> ExecuteResult:
        """
        Feed a captured photo and/or a decoded code back into an item.

        The photo is appended to the item's photos and the code replaces its
        serial. Unknown ids and empty captures are no-ops.
        """
        found = self.find_item(item_id)
        if found is None or not (photo or code):
            return ExecuteResult.NO_OP
        category, item = found
        if photo:
            item = item.with_photo(photo)
        if code:
            item = item.with_serial(code)
        return self.update_item(category, item)

    def set_photos(self, item_id: str, photos: Sequence[str]) -> ExecuteResult:
        """Replace an item's photo list (gallery edit)."""
        found = self.find_item(item_id)
        if found is None:
            return ExecuteResult.NO_OP
        category, item = found
        return self.update_item(category, replace(item, photos=tuple(photos)))

    def remove_photo(self, item_id: str, index: int) -> ExecuteResult:
        found = self.find_item(item_id)
        if found is None or not 0 <= index < len(found[1].photos):
            return ExecuteResult.NO_OP
        category, item = found
        return self.update_item(category, item.without_photo(index))

    # ========================================================================
    # DELETE MODE
    # ========================================================================

    @property
    def delete_mode(self) -> bool:
        return self.selection.delete_mode

    def toggle_delete_mode(self) -> bool:
        """Enter or leave delete mode; the selection is cleared either way."""
        return self.selection.toggle_mode()

    def toggle_selected(self, category: str, item_id: str) -> bool:
        return self.selection.toggle(category, item_id)

    def confirm_delete(self) -> int:
        """
        Delete every selected item of the current day as one undoable step.

        Leaves delete mode afterwards. Does nothing (and stays in delete
        mode) when no item is selected.

        Returns:
            Number of ids that were selected
        """
        selected = self.selection.by_category()
        total = self.selection.total
        if total == 0:
            return 0

        self._hold_writes = False
        self.history.record(self._state)
        new_state = self._state
        for category, ids in selected.items():
            new_state = _delete_items(new_state, self._current_day, category, ids)
        self.selection.toggle_mode()

        if new_state is not self._state:
            self._set_state(new_state)
            logger.debug("Deleted %d selected item(s) on %s", total, self._current_day)
            if self.verbose:
                print(f"✓ DeleteItems: {self._current_day} ({total} selected)")
            self._persist()
        return total

    # ========================================================================
    # READ-ONLY DERIVED VIEWS
    # ========================================================================

    def aggregate(
        self,
        scope: Union[Scope, str] = Scope.DAY,
        specific_date: Optional[DayLike] = None,
        active_only: bool = True,
    ) -> AggregateResult:
        """Report view relative to the current day (see aggregation.aggregate)."""
        return aggregate(self, self._current_day, scope, specific_date, active_only)

    def search(self, query: str) -> List[SearchResult]:
        return search(self, query)

    def open_result(self, result: SearchResult) -> None:
        """Navigate to the day of a search result."""
        self.set_current_day(result.date)

    def summary(self) -> Summary:
        return summarize(self, self._current_day)
