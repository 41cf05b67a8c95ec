from dataclasses import dataclass
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Union

CENT = Decimal("0.01")


class UnknownFrequencyError(ValueError):
    pass


class Frequency(str, Enum):
    WEEKLY = "weekly"
    BI_WEEKLY = "bi-weekly"
    MONTHLY = "monthly"
    ANNUALLY = "annually"
    ONE_TIME = "one-time"

    @classmethod
    def parse(cls, value) -> "Frequency":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise UnknownFrequencyError(f"Unknown frequency: {value!r}") from None


class EventKind(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


@dataclass(frozen=True)
class RecurringItem:
    id: str
    name: str
    amount: Decimal          # >= 0, sign comes from the collection it lives in
    frequency: Frequency
    start_date: date


@dataclass(frozen=True)
class Debt:
    id: str
    name: str
    total_owed: Decimal      # original principal
    payment_amount: Decimal
    frequency: Frequency
    start_date: date


Item = Union[RecurringItem, Debt]


@dataclass(frozen=True)
class Event:
    date: date
    description: str
    amount: Decimal
    kind: EventKind


@dataclass(frozen=True)
class TimelineEntry:
    date: date
    description: str
    amount: Decimal
    kind: EventKind
    running_balance: Decimal  # full precision

    @property
    def display_balance(self) -> Decimal:
        return self.running_balance.quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class WeekBucket:
    week_start: date         # Sunday
    week_label: str
    total_income: Decimal = Decimal("0")
    total_expense: Decimal = Decimal("0")

    @property
    def net(self) -> Decimal:
        return self.total_income - self.total_expense


@dataclass(frozen=True)
class Payment:
    date: date
    amount: Decimal          # clipped to what was still owed
    remaining: Decimal       # balance after this payment


@dataclass(frozen=True)
class ForecastInput:
    incomes: tuple[RecurringItem, ...]
    bills: tuple[RecurringItem, ...]
    debts: tuple[Debt, ...]
    starting_balance: Decimal
    reference_date: date
    horizon_days: int = 90
