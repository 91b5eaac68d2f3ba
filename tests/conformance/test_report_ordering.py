"""
Report Ordering Conformance Tests

INVARIANT: A month-to-date report lists active items day by day in
calendar order and never includes days after the reference day.

    ∀ days D1 < D2 ≤ R in the same month:
        items(D1) precede items(D2) in aggregate(R, MONTH)
    ∀ day D > R:
        items(D) ∉ aggregate(R, MONTH)
"""

from datetime import date

from hypothesis import given, settings
from hypothesis import strategies as st

from equiptrack import aggregate, Scope, day_key

from tests.conftest import make_item, day_with


class TestReportOrderingProperties:

    @given(
        days=st.sets(st.integers(min_value=1, max_value=31), min_size=1, max_size=10),
        reference_day=st.integers(min_value=1, max_value=31),
    )
    @settings(max_examples=100)
    def test_month_report_calendar_order_and_bound(self, days, reference_day):
        state = {}
        # insert in descending order so dict order differs from calendar order
        for d in sorted(days, reverse=True):
            key = day_key(date(2024, 1, d))
            state = day_with(state, key, "BOX", make_item(item_id=f"d{d:02d}", serial=f"S{d}"))

        result = aggregate(state, date(2024, 1, reference_day), Scope.MONTH)
        ids = [i.id for i in result.data["BOX"]]

        expected = [f"d{d:02d}" for d in sorted(days) if d <= reference_day]
        assert ids == expected

    @given(st.integers(min_value=2, max_value=6))
    @settings(max_examples=20)
    def test_items_within_a_day_keep_ledger_order(self, count):
        items = [make_item(item_id=f"i{n}", contract=f"C{n}") for n in range(count)]
        state = day_with({}, "2024-03-04", "CAMERA", *items)
        result = aggregate(state, date(2024, 3, 4), Scope.MONTH)
        assert [i.id for i in result.data["CAMERA"]] == [f"i{n}" for n in range(count)]
