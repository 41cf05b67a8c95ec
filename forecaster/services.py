import logging
from datetime import date, timedelta
from typing import Any, Callable, Dict, List, Sequence

from dateutil.relativedelta import relativedelta

from forecaster.amortization import payoff_date, remaining_balance
from forecaster.domain import Debt, ForecastInput
from forecaster.memo import forecast
from forecaster.money import round_money
from forecaster.recurrence import already_occurred, next_occurrence
from forecaster.timeline import lowest_point, totals

logger = logging.getLogger(__name__)

Validator = Callable[[ForecastInput], Sequence[str]]

# how far ahead payoff dates are searched
PAYOFF_SEARCH_YEARS = 30


def check_past_one_time(snapshot: ForecastInput) -> List[str]:
    items = snapshot.incomes + snapshot.bills + snapshot.debts
    return [
        f"{item.name or item.id} already occurred on {item.start_date.isoformat()}"
        for item in items
        if already_occurred(item, snapshot.reference_date)
    ]


def check_paid_off_debts(snapshot: ForecastInput) -> List[str]:
    return [
        f"{d.name or d.id} is paid off"
        for d in snapshot.debts
        if d.total_owed > 0 and remaining_balance(d, snapshot.reference_date) == 0
    ]


def check_zero_amounts(snapshot: ForecastInput) -> List[str]:
    msgs = [
        f"{item.name or item.id} has a zero amount"
        for item in snapshot.incomes + snapshot.bills
        if item.amount == 0
    ]
    msgs += [
        f"{d.name or d.id} has a zero payment amount"
        for d in snapshot.debts
        if d.payment_amount == 0 and remaining_balance(d, snapshot.reference_date) > 0
    ]
    return msgs


DEFAULT_VALIDATORS: Sequence[Validator] = (
    check_past_one_time,
    check_paid_off_debts,
    check_zero_amounts,
)


class ForecastService:
    """Facade the dashboard calls with an immutable snapshot.

    validators: sequence of functions taking a ``ForecastInput`` and returning
    warning messages. They never block the forecast.
    """

    def __init__(self, validators: Sequence[Validator] = DEFAULT_VALIDATORS):
        self.validators = validators

    def report(self, snapshot: ForecastInput) -> Dict[str, Any]:
        report: Dict[str, Any] = {
            "reference_date": snapshot.reference_date,
            "horizon_date": snapshot.reference_date + timedelta(days=snapshot.horizon_days),
            "validation": [],
        }

        for v in self.validators:
            try:
                msgs = v(snapshot)
            except Exception as e:
                logger.warning("Validator %s failed: %s", getattr(v, "__name__", v), e)
                msgs = [f"validator_error: {e}"]
            report["validation"].append({"validator": getattr(v, "__name__", str(v)), "messages": list(msgs)})

        timeline, weeks = forecast(snapshot)
        report["timeline"] = timeline
        report["weeks"] = weeks

        report["debts"] = [self._debt_row(d, snapshot.reference_date) for d in snapshot.debts]

        income, expense = totals(timeline)
        low = lowest_point(timeline)
        report["summary"] = {
            "total_income": round_money(income),
            "total_expense": round_money(expense),
            "ending_balance": timeline[-1].display_balance if timeline else round_money(snapshot.starting_balance),
            "lowest_balance": low.display_balance if low else None,
            "lowest_date": low.date if low else None,
        }
        logger.debug("Report for %s: %d entries, %d weeks", snapshot.reference_date, len(timeline), len(weeks))
        return report

    @staticmethod
    def _debt_row(debt: Debt, reference: date) -> Dict[str, Any]:
        remaining = remaining_balance(debt, reference)
        settled = remaining == 0 or already_occurred(debt, reference)
        return {
            "id": debt.id,
            "name": debt.name,
            "remaining": remaining,
            "next_date": None if settled else next_occurrence(debt, reference),
            "payoff_date": payoff_date(debt, reference + relativedelta(years=PAYOFF_SEARCH_YEARS)),
        }
