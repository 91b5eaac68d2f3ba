"""
fake_store.py - Test Helper for BlobStore

Provides a BlobStore that records every write and can be told to fail,
for checking when (and whether) the engine persists.
"""

from __future__ import annotations
from typing import Dict, List, Optional, Tuple


class RecordingStore:
    """
    In-memory BlobStore that keeps a log of writes.

    Example:
        store = RecordingStore()
        engine = EquipmentLedger(store=store)
        engine.start("2024-05-01")
        assert len(store.writes) == 1
    """

    def __init__(self, blobs: Optional[Dict[str, str]] = None, fail_writes: bool = False):
        self.blobs: Dict[str, str] = dict(blobs or {})
        self.writes: List[Tuple[str, str]] = []
        self.reads: List[str] = []
        self.fail_writes = fail_writes

    def read(self, key: str) -> Optional[str]:
        self.reads.append(key)
        return self.blobs.get(key)

    def write(self, key: str, blob: str) -> None:
        if self.fail_writes:
            raise OSError("storage unavailable")
        self.writes.append((key, blob))
        self.blobs[key] = blob

    @property
    def last_blob(self) -> Optional[str]:
        return self.writes[-1][1] if self.writes else None
