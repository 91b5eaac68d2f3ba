"""
selection.py - Items marked for batch deletion

The selection is UI-scoped: it is never persisted and is cleared every
time delete mode is switched on or off.
"""

from __future__ import annotations
from typing import Dict, FrozenSet, List


class SelectionSet:
    """
    Per-category sets of item ids marked for deletion, plus the delete-mode flag.

    Ids keep the order in which they were selected.
    """

    def __init__(self):
        self.delete_mode: bool = False
        self._selected: Dict[str, List[str]] = {}

    def toggle_mode(self) -> bool:
        """Flip delete mode, clear the selection, and return the new mode."""
        self.delete_mode = not self.delete_mode
        self.clear()
        return self.delete_mode

    def toggle(self, category: str, item_id: str) -> bool:
        """
        Select item_id if it is not selected, deselect it otherwise.

        Returns:
            True if the item is selected after the call
        """
        ids = self._selected.setdefault(category, [])
        if item_id in ids:
            ids.remove(item_id)
            return False
        ids.append(item_id)
        return True

    def is_selected(self, category: str, item_id: str) -> bool:
        return item_id in self._selected.get(category, ())

    def selected(self, category: str) -> FrozenSet[str]:
        return frozenset(self._selected.get(category, ()))

    def by_category(self) -> Dict[str, List[str]]:
        """Non-empty selections, keyed by category."""
        return {cat: list(ids) for cat, ids in self._selected.items() if ids}

    @property
    def total(self) -> int:
        return sum(len(ids) for ids in self._selected.values())

    def clear(self) -> None:
        self._selected = {}
