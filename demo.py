#!/usr/bin/env python3
"""
demo.py - Walkthrough: the equipment ledger step by step

Each step builds on the previous one. Press Enter to advance.

WHAT YOU'LL SEE:
  1-3: Foundation - start-up, placeholder items, adding and filling rows
  4-5: Corrections - undo and batch deletion
  6-8: Reading     - month-to-date report, summary totals, search

Run:
    python demo.py           # Interactive mode (press Enter for each step)
    python demo.py --quick   # Run all steps without pausing
"""

from dataclasses import dataclass
from datetime import date
import logging
import sys

from equiptrack import (
    EquipmentLedger, InMemoryBlobStore,
    CATEGORIES, CATEGORY_BOX, CATEGORY_CHIP,
    STORAGE_KEY,
)


# ============================================================================
# CONFIGURATION
# ============================================================================

@dataclass
class DemoConfig:
    """Configuration for the walkthrough. Modify these to experiment."""
    first_day: date = date(2024, 5, 1)
    second_day: date = date(2024, 5, 2)
    serials: tuple = ("CAB123", "CAB456", "ZX900")


CONFIG = DemoConfig()

QUICK_MODE = "--quick" in sys.argv


def wait_for_enter():
    """Pause for user input unless in quick mode."""
    if not QUICK_MODE:
        input("\n[Press Enter to continue...]")


def step_header(number: int, title: str, objective: str):
    print(f"\n{'='*70}")
    print(f"STEP {number}: {title}")
    print(f"{'='*70}")
    print(f"\nObjective: {objective}\n")


def show_day(engine: EquipmentLedger):
    print(f"Day {engine.current_day}:")
    for category in CATEGORIES:
        items = engine.get_items(engine.current_day, category)
        rows = ", ".join(f"[{i.contract or '-'} | {i.serial or '-'}]" for i in items)
        print(f"  {category:<16} {rows}")


# ============================================================================
# STEPS
# ============================================================================

def step_01_start(store: InMemoryBlobStore) -> EquipmentLedger:
    step_header(1, "Start-up", "An empty store yields one placeholder row per category.")
    engine = EquipmentLedger(store=store, current_day=CONFIG.first_day, verbose=True)
    engine.start()
    show_day(engine)
    print(f"\nStored blob size: {len(store.read(STORAGE_KEY))} bytes")
    return engine


def step_02_add_rows(engine: EquipmentLedger):
    step_header(2, "Adding rows", "add_item() opens a new row; earlier rows are kept as history.")
    engine.add_item(CATEGORY_BOX)
    engine.add_item(CATEGORY_BOX)
    show_day(engine)


def step_03_fill_rows(engine: EquipmentLedger):
    step_header(3, "Filling rows", "Rows are updated by id; long values are truncated.")
    rows = engine.get_items(engine.current_day, CATEGORY_BOX)
    for row, serial in zip(rows, CONFIG.serials):
        engine.update_item(CATEGORY_BOX, row.with_contract("CT-2024-000001").with_serial(serial))
    chip = engine.get_items(engine.current_day, CATEGORY_CHIP)[0]
    engine.attach_capture(chip.id, photo="data:image/jpeg;base64,AAAA", code="CHIP-77")
    show_day(engine)


def step_04_undo(engine: EquipmentLedger):
    step_header(4, "Undo", f"Up to {engine.history.limit} user actions can be reverted.")
    print(f"Snapshots available: {engine.history_depth}")
    engine.undo()
    show_day(engine)
    print(f"Snapshots available: {engine.history_depth}")


def step_05_batch_delete(engine: EquipmentLedger):
    step_header(5, "Batch delete", "Selected rows go in one undoable step; a category is never left empty.")
    engine.toggle_delete_mode()
    for row in engine.get_items(engine.current_day, CATEGORY_BOX):
        engine.toggle_selected(CATEGORY_BOX, row.id)
    removed = engine.confirm_delete()
    print(f"Removed {removed} row(s)")
    show_day(engine)
    engine.undo()


def step_06_report(engine: EquipmentLedger):
    step_header(6, "Month-to-date report", "Only active rows up to the reference day are reported.")
    engine.set_current_day(CONFIG.second_day)
    row = engine.get_items(engine.current_day, CATEGORY_BOX)[0]
    engine.update_item(CATEGORY_BOX, row.with_serial("NEXTDAY1"))
    report = engine.aggregate("month")
    print(report.label)
    for category, items in report.data.items():
        if items:
            print(f"  {category} ({len(items)})")
            for item in items:
                print(f"    - SN: {item.serial} | CT: {item.contract}")


def step_07_summary(engine: EquipmentLedger):
    step_header(7, "Summary totals", "Active rows per category, for the day and the month.")
    summary = engine.summary()
    for category, count in summary.by_category.items():
        print(f"  {category:<16} {count}")
    print(f"  {'DAY TOTAL':<16} {summary.day_total}")
    print(f"  {'MONTH TOTAL':<16} {summary.month_total}")


def step_08_search(engine: EquipmentLedger):
    step_header(8, "Search", "Literal substring match on serial or contract, newest day first.")
    for result in engine.search("CAB"):
        print(f"  {result.date}  {result.category:<10} {result.item.serial}")


# ============================================================================
# MAIN
# ============================================================================

def main():
    logging.basicConfig(level=logging.WARNING)
    print("=" * 70)
    print("       EQUIPTRACK - LEDGER WALKTHROUGH")
    print("=" * 70)

    store = InMemoryBlobStore()
    engine = step_01_start(store)
    wait_for_enter()
    step_02_add_rows(engine)
    wait_for_enter()
    step_03_fill_rows(engine)
    wait_for_enter()
    step_04_undo(engine)
    wait_for_enter()
    step_05_batch_delete(engine)
    wait_for_enter()
    step_06_report(engine)
    wait_for_enter()
    step_07_summary(engine)
    wait_for_enter()
    step_08_search(engine)


if __name__ == "__main__":
    main()
