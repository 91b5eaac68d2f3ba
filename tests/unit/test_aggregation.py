"""
test_aggregation.py - Unit tests for aggregate() and summarize()

Tests:
- DAY and SPECIFIC scopes (active filtering, verbatim mode, missing days)
- MONTH scope: range bounds, day ordering, active filtering, label
- Summary totals
"""

import pytest
from datetime import date

from equiptrack import (
    aggregate, summarize, count_active, Scope, CATEGORIES,
    ensure_day, empty_daily_data,
)

from tests.conftest import make_item, day_with


@pytest.fixture
def may_ledger():
    """Active items on May 1, May 3 and May 20, plus placeholders."""
    state = day_with({}, "2024-05-01", "BOX",
                     make_item(item_id="b1", serial="B1"), make_item(item_id="blank1"))
    state = day_with(state, "2024-05-03", "BOX", make_item(item_id="b3", contract="C3"))
    state = day_with(state, "2024-05-03", "CHIP", make_item(item_id="c3", photos=["p"]))
    state = day_with(state, "2024-05-20", "BOX", make_item(item_id="b20", serial="B20"))
    state = day_with(state, "2024-04-30", "BOX", make_item(item_id="apr", serial="APR"))
    return state


class TestDayScope:

    def test_returns_active_items_of_the_day(self, may_ledger):
        result = aggregate(may_ledger, date(2024, 5, 1), Scope.DAY)
        assert result.label == "2024-05-01"
        assert [i.id for i in result.data["BOX"]] == ["b1"]
        assert result.data["CHIP"] == ()

    def test_verbatim_mode_keeps_placeholders(self, may_ledger):
        result = aggregate(may_ledger, "2024-05-01", "day", active_only=False)
        assert [i.id for i in result.data["BOX"]] == ["b1", "blank1"]
        assert len(result.data["CHIP"]) == 1

    def test_missing_day_gives_empty_skeleton(self, may_ledger):
        result = aggregate(may_ledger, date(2024, 6, 1), Scope.DAY)
        assert set(result.data) == set(CATEGORIES)
        assert result.total == 0
        assert result.label == "2024-06-01"

    def test_specific_scope_uses_specific_date(self, may_ledger):
        result = aggregate(may_ledger, date(2024, 5, 1), Scope.SPECIFIC, specific_date=date(2024, 4, 30))
        assert result.label == "2024-04-30"
        assert [i.id for i in result.data["BOX"]] == ["apr"]

    def test_specific_scope_without_date_falls_back(self, may_ledger):
        result = aggregate(may_ledger, date(2024, 5, 3), "specific")
        assert result.label == "2024-05-03"

    def test_unknown_scope_raises(self, may_ledger):
        with pytest.raises(ValueError):
            aggregate(may_ledger, date(2024, 5, 3), "year")


class TestMonthScope:

    def test_collects_through_reference_day_in_order(self, may_ledger):
        result = aggregate(may_ledger, date(2024, 5, 3), Scope.MONTH)
        assert [i.id for i in result.data["BOX"]] == ["b1", "b3"]
        assert [i.id for i in result.data["CHIP"]] == ["c3"]

    def test_excludes_days_after_reference(self, may_ledger):
        result = aggregate(may_ledger, date(2024, 5, 19), Scope.MONTH)
        assert "b20" not in [i.id for i in result.data["BOX"]]

    def test_excludes_other_months(self, may_ledger):
        result = aggregate(may_ledger, date(2024, 5, 31), Scope.MONTH)
        ids = [i.id for i in result.data["BOX"]]
        assert ids == ["b1", "b3", "b20"]
        assert "apr" not in ids

    def test_excludes_inactive_items(self, may_ledger):
        result = aggregate(may_ledger, date(2024, 5, 31), Scope.MONTH)
        for items in result.data.values():
            assert all(i.is_active for i in items)

    def test_label(self, may_ledger):
        result = aggregate(may_ledger, date(2024, 5, 3), Scope.MONTH)
        assert result.label == "month 5/2024 (through day 3)"

    def test_empty_categories_allowed(self, may_ledger):
        result = aggregate(may_ledger, date(2024, 5, 3), Scope.MONTH)
        assert result.data["CAMERA"] == ()

    def test_accepts_ledger_view(self, engine, day):
        engine.update_item("BOX", engine.get_items(day, "BOX")[0].with_serial("S1"))
        result = aggregate(engine, date(2024, 5, 1), Scope.MONTH)
        assert [i.serial for i in result.data["BOX"]] == ["S1"]

    def test_input_not_modified(self, may_ledger):
        snapshot = {k: dict(v) for k, v in may_ledger.items()}
        aggregate(may_ledger, date(2024, 5, 31), Scope.MONTH)
        assert may_ledger == snapshot


class TestSummary:

    def test_counts(self, may_ledger):
        summary = summarize(may_ledger, date(2024, 5, 3))
        assert summary.day == "2024-05-03"
        assert summary.by_category["BOX"] == 1
        assert summary.by_category["CHIP"] == 1
        assert summary.day_total == 2
        # whole month, including May 20
        assert summary.month_total == 4

    def test_missing_day(self, may_ledger):
        summary = summarize(may_ledger, "2024-06-15")
        assert summary.day_total == 0
        assert summary.month_total == 0
        assert set(summary.by_category) == set(CATEGORIES)

    def test_count_active(self):
        assert count_active(None) == 0
        assert count_active(empty_daily_data()) == 0
