"""
Active Filtering Conformance Tests

INVARIANT: An item with blank contract, blank serial and no photos never
appears in an aggregated report or a search result.

    ∀ item i with ¬active(i), query q, scope s:
        i ∉ search(L, q)  ∧  i ∉ aggregate(L, R, s)
"""

from datetime import date

from hypothesis import given, settings
from hypothesis import strategies as st

from equiptrack import (
    aggregate, search, Scope, EquipmentItem, CATEGORIES,
)

from tests.conftest import day_with

blank = st.sampled_from(("", " ", "  ", "\t"))
serial_text = st.text(alphabet="ABC123", min_size=1, max_size=8)


class TestActiveFilteringProperties:

    @given(
        contract=blank,
        serial=blank,
        query=st.text(alphabet="ABC123 \t", min_size=2, max_size=3),
        category=st.sampled_from(CATEGORIES),
        scope=st.sampled_from(list(Scope)),
    )
    @settings(max_examples=100)
    def test_inactive_items_never_reported(self, contract, serial, query, category, scope):
        inactive = EquipmentItem(id="ghost", contract=contract, serial=serial)
        state = day_with({}, "2024-05-01", category, inactive)

        report = aggregate(state, date(2024, 5, 1), scope)
        assert all(i.id != "ghost" for items in report.data.values() for i in items)
        assert all(r.item.id != "ghost" for r in search(state, query))

    @given(serial=serial_text)
    @settings(max_examples=50)
    def test_serial_alone_makes_item_findable(self, serial):
        item = EquipmentItem(id="found", serial=f"X{serial}Y")
        state = day_with({}, "2024-05-01", "BOX", item)
        assert [r.item.id for r in search(state, serial + "Y")] == ["found"]


class TestActiveFilteringExamples:

    def test_serial_only_item_matches_substring(self):
        item = EquipmentItem(id="a", contract="", serial="CAB123", photos=())
        state = day_with({}, "2024-05-01", "BOX", item)
        assert [r.item for r in search(state, "AB")] == [item]

    def test_photo_only_item_reported_but_not_found(self):
        item = EquipmentItem(id="p", photos=("data",))
        state = day_with({}, "2024-05-01", "CHIP", item)
        assert aggregate(state, date(2024, 5, 1), Scope.MONTH).data["CHIP"] == (item,)
        assert search(state, "da") == []
