import logging
from datetime import date, timedelta
from decimal import Decimal, ROUND_CEILING
from typing import Iterator, Optional

from forecaster.dates import normalize_date
from forecaster.domain import Debt, Frequency, Payment
from forecaster.lazy import iter_occurrences
from forecaster.money import ZERO
from forecaster.recurrence import count_on_or_before, occurrence_at

logger = logging.getLogger(__name__)


def payments_made(debt: Debt, as_of_date) -> Decimal:
    """Total paid on or before ``as_of_date``, capped at ``total_owed``.

    Payment dates follow the same recurrence rule the timeline uses, so the
    count of payments is taken from ``count_on_or_before`` instead of walking
    the schedule.
    """
    as_of = normalize_date(as_of_date)
    count = count_on_or_before(debt.start_date, debt.frequency, as_of)
    return min(debt.payment_amount * count, debt.total_owed)


def remaining_balance(debt: Debt, as_of_date) -> Decimal:
    return max(ZERO, debt.total_owed - payments_made(debt, as_of_date))


def iter_payments(debt: Debt, reference_date, horizon_date) -> Iterator[Payment]:
    """Lazy payment schedule between ``reference_date`` and ``horizon_date``.

    Each payment is clipped to what is still owed and the schedule stops once
    the debt is paid off.
    """
    reference = normalize_date(reference_date)
    remaining = remaining_balance(debt, reference - timedelta(days=1))
    for when, amount in iter_occurrences(debt, reference, horizon_date):
        if remaining <= 0:
            logger.debug("Debt %s paid off before %s", debt.id, when)
            return
        paid = min(amount, remaining)
        remaining -= paid
        yield Payment(date=when, amount=paid, remaining=remaining)


def payment_schedule(debt: Debt, until) -> tuple[Payment, ...]:
    return tuple(iter_payments(debt, debt.start_date, until))


def payoff_date(debt: Debt, limit_date) -> Optional[date]:
    """Date of the payment that clears the debt, if it lands by ``limit_date``."""
    limit = normalize_date(limit_date)
    if debt.total_owed <= 0 or debt.payment_amount <= 0:
        return None
    if debt.frequency is Frequency.ONE_TIME:
        if debt.payment_amount < debt.total_owed:
            return None
        when = debt.start_date
    else:
        count = int((debt.total_owed / debt.payment_amount).to_integral_value(rounding=ROUND_CEILING))
        when = occurrence_at(debt.start_date, debt.frequency, count - 1)
    return when if when <= limit else None
