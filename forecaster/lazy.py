from datetime import date
from decimal import Decimal
from typing import Iterable, Iterator, Tuple

from forecaster.dates import normalize_date
from forecaster.domain import Debt, Event, EventKind, Frequency, Item
from forecaster.recurrence import already_occurred, first_index_on_or_after, occurrence_at


def item_amount(item: Item) -> Decimal:
    return item.payment_amount if isinstance(item, Debt) else item.amount


def iter_occurrences(item: Item, reference_date, horizon_date) -> Iterator[Tuple[date, Decimal]]:
    """Yield ``(date, amount)`` for every occurrence in ``[reference, horizon]``.

    The first value is the resolved first occurrence of the item. A one-time
    item dated before the reference date yields nothing: it has already
    happened and is expected to be part of the starting balance.
    """
    reference = normalize_date(reference_date)
    horizon = normalize_date(horizon_date)
    if already_occurred(item, reference):
        return

    amount = item_amount(item)
    index = first_index_on_or_after(item.start_date, item.frequency, reference)
    while True:
        when = occurrence_at(item.start_date, item.frequency, index)
        if when > horizon:
            return
        yield when, amount
        if item.frequency is Frequency.ONE_TIME:
            return
        index += 1


def enumerate_occurrences(item: Item, reference_date, horizon_date) -> tuple[Tuple[date, Decimal], ...]:
    return tuple(iter_occurrences(item, reference_date, horizon_date))


def iter_item_events(
    items: Iterable[Item], kind: EventKind, reference_date, horizon_date
) -> Iterator[Event]:
    for item in items:
        for when, amount in iter_occurrences(item, reference_date, horizon_date):
            yield Event(date=when, description=item.name, amount=amount, kind=kind)
