from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable

from forecaster.dates import week_label, week_start
from forecaster.domain import EventKind, TimelineEntry, WeekBucket


def aggregate_by_week(entries: Iterable[TimelineEntry]) -> tuple[WeekBucket, ...]:
    """Sum income and expense per Sunday-starting week.

    Buckets come out in order of first appearance, which is chronological for
    a date-sorted timeline.
    """
    totals_by_week: Dict[date, Dict[EventKind, Decimal]] = defaultdict(
        lambda: {EventKind.INCOME: Decimal("0"), EventKind.EXPENSE: Decimal("0")}
    )

    for e in entries:
        totals_by_week[week_start(e.date)][e.kind] += e.amount

    return tuple(
        WeekBucket(
            week_start=start,
            week_label=week_label(start),
            total_income=totals[EventKind.INCOME],
            total_expense=totals[EventKind.EXPENSE],
        )
        for start, totals in totals_by_week.items()
    )
