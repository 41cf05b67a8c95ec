"""Recurrence arithmetic shared by enumeration, amortization and the timeline.

The k-th occurrence of an item is always computed from its anchor
(``start_date + k * period``) rather than by stepping from the previous
occurrence. Monthly and annual periods use ``relativedelta``, which clamps to
the last day of a shorter month: a Jan 31 anchor gives Feb 28 (29), Mar 31,
Apr 30, ... and a Feb 29 annual anchor gives Feb 28 in common years.
"""
from datetime import date, timedelta

from dateutil.relativedelta import relativedelta

from forecaster.dates import normalize_date
from forecaster.domain import Frequency, Item

DAY_PERIODS = {Frequency.WEEKLY: 7, Frequency.BI_WEEKLY: 14}
MONTH_PERIODS = {Frequency.MONTHLY: 1, Frequency.ANNUALLY: 12}


def occurrence_at(start: date, frequency, index: int) -> date:
    frequency = Frequency.parse(frequency)
    if index < 0:
        raise ValueError("occurrence index must be >= 0")
    if frequency is Frequency.ONE_TIME:
        if index:
            raise ValueError("one-time items occur once")
        return start
    if frequency in DAY_PERIODS:
        return start + timedelta(days=index * DAY_PERIODS[frequency])
    return start + relativedelta(months=index * MONTH_PERIODS[frequency])


def first_index_on_or_after(start: date, frequency, reference: date) -> int:
    """Index of the earliest occurrence that falls on or after ``reference``.

    Whole periods are skipped analytically: ceiling division of the day gap
    for weekly/bi-weekly, the calendar month/year difference for
    monthly/annually followed by at most one corrective step.
    """
    frequency = Frequency.parse(frequency)
    if frequency is Frequency.ONE_TIME or start >= reference:
        return 0

    if frequency in DAY_PERIODS:
        gap = (reference - start).days
        return -(-gap // DAY_PERIODS[frequency])

    months = (reference.year - start.year) * 12 + reference.month - start.month
    index = months // MONTH_PERIODS[frequency]
    if occurrence_at(start, frequency, index) < reference:
        index += 1
    return index


def count_on_or_before(start: date, frequency, as_of: date) -> int:
    """Number of occurrences dated on or before ``as_of``."""
    frequency = Frequency.parse(frequency)
    if as_of < start:
        return 0
    if frequency is Frequency.ONE_TIME:
        return 1
    return first_index_on_or_after(start, frequency, as_of + timedelta(days=1))


def resolve_first_occurrence(start_date, frequency, reference_date) -> date:
    start = normalize_date(start_date)
    reference = normalize_date(reference_date)
    frequency = Frequency.parse(frequency)

    if frequency is Frequency.ONE_TIME or start >= reference:
        return start
    return occurrence_at(start, frequency, first_index_on_or_after(start, frequency, reference))


def next_occurrence(item: Item, reference_date) -> date:
    return resolve_first_occurrence(item.start_date, item.frequency, reference_date)


def already_occurred(item: Item, reference_date) -> bool:
    # only one-time items can lie entirely in the past
    return (
        item.frequency is Frequency.ONE_TIME
        and item.start_date < normalize_date(reference_date)
    )


def by_frequency(frequency):
    frequency = Frequency.parse(frequency)

    def _filter(item: Item) -> bool:
        return item.frequency is frequency

    return _filter
