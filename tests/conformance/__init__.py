"""
Conformance Test Suite

This suite defines the NORMATIVE behavior of the equipment ledger.

The tests are organized by invariant:
1. test_non_empty.py - Every category of every day holds at least one item
2. test_update_idempotency.py - Re-applying an update changes nothing
3. test_undo.py - Undo restores exact prior state; bounded history
4. test_report_ordering.py - Month reports follow calendar order and bounds
5. test_active_filtering.py - Placeholders never reach reports or search

These tests use hypothesis for property-based testing.
"""
