"""
persistence.py - Storage boundary for the equipment ledger

The engine treats storage as a key-value blob store: it reads one blob at
start-up and writes the whole ledger back after every settled change.

Classes:
- BlobStore: Protocol defining the storage interface
- InMemoryBlobStore: Dictionary-backed store
- FileBlobStore: One JSON file per key in a directory

Functions:
- dump_ledger / load_ledger: JSON codec for LedgerState

Stored layout (compatible with the browser application's localStorage blob):
    {"2024-05-01": {"BOX": [{"id": ..., "qt": "", "contract": ..., "serial": ..., "photos": [...]}]}}
"""

from __future__ import annotations
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Protocol, Union, runtime_checkable

from .core import (
    CATEGORIES, DailyData, EquipmentItem, LedgerState, PersistenceError,
    placeholder_item,
)

logger = logging.getLogger(__name__)


@runtime_checkable
class BlobStore(Protocol):
    """
    Protocol for ledger storage.

    read() returns None when nothing has been stored under key.
    """

    def read(self, key: str) -> Optional[str]:
        ...

    def write(self, key: str, blob: str) -> None:
        ...


class InMemoryBlobStore:
    """Blob store kept in a dictionary. Contents are lost with the process."""

    def __init__(self, blobs: Optional[Dict[str, str]] = None):
        self.blobs: Dict[str, str] = dict(blobs or {})

    def read(self, key: str) -> Optional[str]:
        return self.blobs.get(key)

    def write(self, key: str, blob: str) -> None:
        self.blobs[key] = blob


class FileBlobStore:
    """
    Blob store writing ``<directory>/<key>.json``.

    Writes go to a temporary file in the same directory which then replaces
    the target, so a crash mid-write leaves the previous blob intact.
    """

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def read(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def write(self, key: str, blob: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(blob)
            os.replace(tmp_name, self.path_for(key))
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
        logger.debug("Wrote %d bytes to %s", len(blob), self.path_for(key))


# ============================================================================
# CODEC
# ============================================================================

def item_to_dict(item: EquipmentItem) -> Dict[str, Any]:
    return {
        "id": item.id,
        "qt": item.qt,
        "contract": item.contract,
        "serial": item.serial,
        "photos": list(item.photos),
    }


def _text(raw: Mapping[str, Any], field: str) -> str:
    """Read a text field, accepting scalars written by older or foreign clients."""
    value = raw.get(field)
    if value is None:
        return ""
    if isinstance(value, (str, int, float, bool)):
        return str(value)
    raise PersistenceError(f"Item {raw.get('id')!r}: {field} must be text, got {type(value).__name__}")


def item_from_dict(raw: Mapping[str, Any]) -> EquipmentItem:
    """
    Build an item from its stored form.

    Numeric and boolean fields are read as their text form.

    Raises:
        PersistenceError: If the record is not a mapping, has no usable id,
                          or holds a field that cannot be read as text
    """
    if not isinstance(raw, Mapping):
        raise PersistenceError(f"Item record must be an object, got {type(raw).__name__}")
    photos = raw.get("photos") or []
    if not isinstance(photos, list) or not all(isinstance(p, str) for p in photos):
        raise PersistenceError(f"Item {raw.get('id')!r}: photos must be a list of strings")
    try:
        return EquipmentItem(
            id=_text(raw, "id"),
            contract=_text(raw, "contract"),
            serial=_text(raw, "serial"),
            photos=tuple(photos),
            qt=_text(raw, "qt"),
        )
    except ValueError as e:
        raise PersistenceError(f"Invalid item record: {e}") from e


def dump_ledger(state: Mapping[str, DailyData]) -> str:
    """Serialize a ledger to JSON, days in key order."""
    payload = {
        date: {category: [item_to_dict(item) for item in items] for category, items in day.items()}
        for date, day in sorted(state.items())
    }
    return json.dumps(payload, ensure_ascii=False)


def load_ledger(blob: str) -> LedgerState:
    """
    Deserialize a ledger produced by dump_ledger (or the browser application).

    Categories missing from a stored day are restored with a placeholder so
    every category of every day is non-empty.

    Raises:
        PersistenceError: If blob is not valid JSON or not shaped like a ledger
    """
    try:
        payload = json.loads(blob)
    except json.JSONDecodeError as e:
        raise PersistenceError(f"Stored ledger is not valid JSON: {e}") from e
    if not isinstance(payload, dict):
        raise PersistenceError("Stored ledger must be a JSON object")

    state: LedgerState = {}
    for date, raw_day in payload.items():
        if not isinstance(raw_day, dict):
            raise PersistenceError(f"Day {date!r} must be a JSON object")
        day: DailyData = {}
        for category, raw_items in raw_day.items():
            if not isinstance(raw_items, list):
                raise PersistenceError(f"{date} {category}: items must be a list")
            day[category] = tuple(item_from_dict(raw) for raw in raw_items)
        for category in CATEGORIES:
            if not day.get(category):
                day[category] = (placeholder_item(),)
        state[date] = day
    return state
