"""Tests for the snapshot analytics."""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from expense_core import analytics
from expense_core.models import Expense
from expense_core.store import FALLBACK_EXPENSES
from expense_core.theme import DARK, LIGHT

BASE = datetime(2024, 1, 1, tzinfo=timezone.utc)


def make(amount, category="Food", day="2024-01-15", minutes=0, expense_id=None, notes=""):
    return Expense(
        id=expense_id or f"{category}-{amount}-{minutes}",
        amount=Decimal(amount),
        category=category,
        date=day,
        created_at=BASE + timedelta(minutes=minutes),
        notes=notes,
    )


@pytest.fixture
def fixture_records():
    return [Expense.from_dict(item) for item in FALLBACK_EXPENSES]


@pytest.fixture
def food_and_transport():
    return [
        make("25.50", "Food", "2024-01-15", minutes=1),
        make("45.00", "Transport", "2024-01-14", minutes=2),
    ]


class TestTotals:
    def test_empty_collection_totals_zero(self):
        assert analytics.total_amount([]) == 0
        assert analytics.category_totals([]) == {}

    def test_two_record_scenario(self, food_and_transport):
        assert analytics.total_amount(food_and_transport) == Decimal("70.50")
        assert analytics.category_totals(food_and_transport) == {
            "Food": Decimal("25.50"),
            "Transport": Decimal("45.00"),
        }
        assert analytics.category_percentage(food_and_transport, "Food") == Decimal("36.2")
        assert analytics.category_percentage(food_and_transport, "Transport") == Decimal("63.8")

    def test_category_totals_sum_to_total(self, fixture_records):
        extra = fixture_records + [make("3.33", "Food", minutes=9), make("1.01", "Mystery", minutes=10)]

        totals = analytics.category_totals(extra)

        assert sum(totals.values()) == analytics.total_amount(extra)
        assert totals["Food"] == Decimal("28.83")

    def test_absent_categories_are_omitted(self, food_and_transport):
        assert "Shopping" not in analytics.category_totals(food_and_transport)

    def test_percentages_sum_to_hundred(self, fixture_records):
        shares = [
            analytics.category_percentage(fixture_records, category)
            for category in analytics.category_totals(fixture_records)
        ]

        assert abs(sum(shares) - Decimal("100")) <= Decimal("0.1")

    def test_percentage_is_zero_without_spending(self):
        records = [make("0", "Food"), make("0", "Transport", minutes=1)]

        assert analytics.category_percentage(records, "Food") == 0
        assert analytics.category_percentage([], "Food") == 0

    def test_percentage_of_missing_category_is_zero(self, food_and_transport):
        assert analytics.category_percentage(food_and_transport, "Shopping") == 0


class TestMonthToDate:
    def test_fallback_fixture_in_january_2024_counts_everything(self, fixture_records):
        total = analytics.month_to_date_total(fixture_records, datetime(2024, 1, 20))

        assert total == analytics.total_amount(fixture_records)
        assert total == Decimal("207.24")

    def test_other_month_or_year_excluded(self, fixture_records):
        assert analytics.month_to_date_total(fixture_records, date(2024, 2, 1)) == 0
        assert analytics.month_to_date_total(fixture_records, date(2023, 1, 1)) == 0

    def test_dates_are_compared_as_written(self):
        records = [make("10", day="2024-03-01"), make("5", day="2024-02-29", minutes=1)]

        assert analytics.month_to_date_total(records, date(2024, 3, 15)) == Decimal("10")

    def test_unparseable_dates_are_skipped(self):
        records = [make("10", day="yesterday"), make("4", day="2024-13-01", minutes=1), make("2", minutes=2)]

        assert analytics.month_records(records, date(2024, 1, 2)) == [records[2]]

    def test_defaults_to_current_month(self):
        today = date.today()
        records = [make("7", day=today.isoformat()), make("3", day="1999-01-01", minutes=1)]

        assert analytics.month_to_date_total(records) == Decimal("7")


class TestOrdering:
    def test_newest_first(self, fixture_records):
        ordered = analytics.sorted_by_recency(list(reversed(fixture_records)))

        assert [r.id for r in ordered] == ["1", "2", "3", "4"]

    def test_stable_for_equal_timestamps(self):
        first = make("1", expense_id="a", minutes=5)
        second = make("2", expense_id="b", minutes=5)
        older = make("3", expense_id="c", minutes=1)

        ordered = analytics.sorted_by_recency([older, first, second])

        assert [r.id for r in ordered] == ["a", "b", "c"]

    def test_sorting_is_idempotent(self, fixture_records):
        once = analytics.sorted_by_recency(fixture_records)

        assert analytics.sorted_by_recency(once) == once

    def test_input_snapshot_is_not_mutated(self, fixture_records):
        snapshot = list(reversed(fixture_records))
        before = list(snapshot)

        analytics.sorted_by_recency(snapshot)
        analytics.chart_series(snapshot)

        assert snapshot == before

    def test_recent_n(self, fixture_records):
        assert [r.id for r in analytics.recent_n(fixture_records, 3)] == ["1", "2", "3"]
        assert len(analytics.recent_n(fixture_records, 10)) == 4
        assert analytics.recent_n(fixture_records, 0) == []


class TestChartsAndBreakdown:
    def test_chart_series_has_one_point_per_category(self, fixture_records):
        series = analytics.chart_series(fixture_records)

        assert [(p.label, p.value, p.color) for p in series] == [
            ("Food", Decimal("25.5"), "#ef4444"),
            ("Transport", Decimal("45.0"), "#3b82f6"),
            ("Shopping", Decimal("120.99"), "#8b5cf6"),
            ("Others", Decimal("15.75"), "#6b7280"),
        ]

    def test_unknown_category_gets_fallback_color(self):
        series = analytics.chart_series([make("9", "Gifts")], DARK)

        assert series[0].color == DARK.fallback

    def test_dark_palette_colors(self):
        assert analytics.category_color("Food", DARK) == "#f87171"
        assert analytics.category_color("Food") == "#ef4444"
        assert analytics.category_color(" Shopping ", LIGHT) == "#8b5cf6"

    def test_breakdown_is_ordered_by_total_descending(self, fixture_records):
        breakdown = analytics.category_breakdown(fixture_records)

        assert [share.category for share in breakdown] == ["Shopping", "Transport", "Food", "Others"]
        assert breakdown[0].to_dict() == {
            "category": "Shopping",
            "total": "120.99",
            "percentage": "58.4",
            "color": "#8b5cf6",
        }

    def test_chart_point_serialises_value_as_number(self):
        point = analytics.chart_series([make("12.5")])[0]

        assert point.to_dict() == {"label": "Food", "value": 12.5, "color": "#ef4444"}
