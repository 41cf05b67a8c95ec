import logging
from datetime import timedelta
from decimal import Decimal
from itertools import accumulate, chain
from typing import Iterable, Iterator, Optional

from forecaster.amortization import iter_payments
from forecaster.dates import normalize_date
from forecaster.domain import Debt, Event, EventKind, RecurringItem, TimelineEntry
from forecaster.lazy import iter_item_events
from forecaster.money import parse_money

logger = logging.getLogger(__name__)

DEFAULT_HORIZON_DAYS = 90


def iter_debt_events(debts: Iterable[Debt], reference_date, horizon_date) -> Iterator[Event]:
    for debt in debts:
        for payment in iter_payments(debt, reference_date, horizon_date):
            yield Event(
                date=payment.date,
                description=debt.name,
                amount=payment.amount,
                kind=EventKind.EXPENSE,
            )


def _apply(balance: Decimal, event: Event) -> Decimal:
    return balance + event.amount if event.kind is EventKind.INCOME else balance - event.amount


def build_timeline(
    incomes: Iterable[RecurringItem],
    bills: Iterable[RecurringItem],
    debts: Iterable[Debt],
    starting_balance,
    reference_date,
    horizon_days: int = DEFAULT_HORIZON_DAYS,
) -> tuple[TimelineEntry, ...]:
    """Merge every occurrence in the horizon and fold a running balance over it.

    Same-day events keep collection order (incomes, bills, debts) and input
    order within each collection, since the sort on date is stable. Balances
    are carried at full precision; ``TimelineEntry.display_balance`` rounds.
    """
    reference = normalize_date(reference_date)
    horizon = reference + timedelta(days=horizon_days)

    events = sorted(
        chain(
            iter_item_events(incomes, EventKind.INCOME, reference, horizon),
            iter_item_events(bills, EventKind.EXPENSE, reference, horizon),
            iter_debt_events(debts, reference, horizon),
        ),
        key=lambda e: e.date,
    )
    logger.debug("Timeline %s..%s has %d events", reference, horizon, len(events))

    balances = accumulate(events, _apply, initial=parse_money(starting_balance))
    next(balances)  # drop the starting balance itself

    return tuple(
        TimelineEntry(
            date=e.date,
            description=e.description,
            amount=e.amount,
            kind=e.kind,
            running_balance=balance,
        )
        for e, balance in zip(events, balances)
    )


def lowest_point(entries: Iterable[TimelineEntry]) -> Optional[TimelineEntry]:
    # earliest entry wins a tie
    return min(entries, key=lambda e: e.running_balance, default=None)


def totals(entries: Iterable[TimelineEntry]) -> tuple[Decimal, Decimal]:
    income = expense = Decimal("0")
    for e in entries:
        if e.kind is EventKind.INCOME:
            income += e.amount
        else:
            expense += e.amount
    return income, expense
