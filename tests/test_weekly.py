from datetime import date
from decimal import Decimal

from forecaster.dates import week_start
from forecaster.domain import EventKind, TimelineEntry
from forecaster.weekly import aggregate_by_week


def entry(day, amount, kind, description="x"):
    return TimelineEntry(day, description, Decimal(amount), kind, Decimal("0"))


INCOME = EventKind.INCOME
EXPENSE = EventKind.EXPENSE


def test_weeks_start_on_sunday():
    assert week_start(date(2025, 6, 14)) == date(2025, 6, 8)   # Saturday
    assert week_start(date(2025, 6, 15)) == date(2025, 6, 15)  # Sunday
    assert week_start(date(2025, 6, 16)) == date(2025, 6, 15)  # Monday


def test_saturday_and_sunday_fall_in_different_buckets():
    buckets = aggregate_by_week([
        entry(date(2025, 6, 14), "10", EXPENSE),
        entry(date(2025, 6, 15), "20", EXPENSE),
    ])
    assert [b.week_start for b in buckets] == [date(2025, 6, 8), date(2025, 6, 15)]
    assert [b.week_label for b in buckets] == ["Week of 2025-06-08", "Week of 2025-06-15"]


def test_sums_income_and_expense_per_week():
    buckets = aggregate_by_week([
        entry(date(2025, 6, 10), "40", EXPENSE, "Gym"),
        entry(date(2025, 6, 13), "2000", INCOME, "Paycheck"),
        entry(date(2025, 6, 15), "350", EXPENSE, "Car Loan"),
        entry(date(2025, 6, 20), "80", EXPENSE, "Internet"),
    ])

    first, second = buckets
    assert (first.total_income, first.total_expense) == (Decimal("2000"), Decimal("40"))
    assert first.net == Decimal("1960")
    # no income that week still reports zero
    assert (second.total_income, second.total_expense) == (Decimal("0"), Decimal("430"))


def test_buckets_follow_first_appearance():
    buckets = aggregate_by_week([
        entry(date(2025, 7, 1), "1", INCOME),
        entry(date(2025, 7, 9), "1", INCOME),
        entry(date(2025, 7, 2), "1", EXPENSE),
    ])
    assert [b.week_start for b in buckets] == [date(2025, 6, 29), date(2025, 7, 6)]
    assert buckets[0].total_income == Decimal("1")
    assert buckets[0].total_expense == Decimal("1")


def test_empty_entries_give_no_buckets():
    assert aggregate_by_week([]) == ()
