from abc import ABC, abstractmethod
from typing import Callable, Generic, Iterable, Mapping, TypeVar
from uuid import uuid4

from forecaster.dates import normalize_date
from forecaster.domain import Debt, Frequency, Item, RecurringItem, UnknownFrequencyError
from forecaster.money import coerce_amount

T = TypeVar('T')
U = TypeVar('U')
E = TypeVar('E')

ITEM_KINDS = ("income", "bill", "debt")


class Maybe(Generic[T], ABC):

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def is_some(self) -> bool:
        pass


class Some(Maybe[T]):

    def __init__(self, value: T):
        self._value = value

    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        return Some(f(self._value))

    def get_or_else(self, default: T) -> T:
        return self._value

    def is_some(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"Some({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Some) and self._value == other._value


class Nothing(Maybe[T]):

    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        return self

    def get_or_else(self, default: T) -> T:
        return default

    def is_some(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "Nothing()"

    def __eq__(self, other) -> bool:
        return isinstance(other, Nothing)


class Either(Generic[E, T], ABC):

    @abstractmethod
    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def is_right(self) -> bool:
        pass

    @abstractmethod
    def get_error(self) -> E:
        pass


class Right(Either[E, T]):

    def __init__(self, value: T):
        self._value = value

    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return f(self._value)

    def get_or_else(self, default: T) -> T:
        return self._value

    def is_right(self) -> bool:
        return True

    def get_error(self) -> E:
        raise ValueError("Cannot get error from Right")

    def __repr__(self) -> str:
        return f"Right({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Right) and self._value == other._value


class Left(Either[E, T]):

    def __init__(self, error: E):
        self._error = error

    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return self

    def get_or_else(self, default: T) -> T:
        return default

    def is_right(self) -> bool:
        return False

    def get_error(self) -> E:
        return self._error

    def __repr__(self) -> str:
        return f"Left({self._error!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Left) and self._error == other._error


def safe_item(items: Iterable[Item], item_id: str) -> Maybe[Item]:
    for item in items:
        if item.id == item_id:
            return Some(item)
    return Nothing()


def _field(record: Mapping, *names, default=None):
    # records may come from JSON (camelCase) or from forms (snake_case)
    for name in names:
        if name in record and record[name] is not None:
            return record[name]
    return default


def _parse_frequency(record: Mapping) -> Either[dict, dict]:
    raw = _field(record, "frequency")
    try:
        frequency = Frequency.parse(raw)
    except UnknownFrequencyError:
        return Left({
            "error": "invalid_frequency",
            "message": f"Frequency must be one of {[f.value for f in Frequency]}",
            "frequency": raw,
        })
    return Right({**record, "frequency": frequency})


def _parse_start_date(record: Mapping) -> Either[dict, dict]:
    raw = _field(record, "start_date", "startDate")
    try:
        start = normalize_date(raw)
    except (TypeError, ValueError):
        return Left({
            "error": "invalid_start_date",
            "message": "Start date is required (YYYY-MM-DD)",
            "start_date": raw,
        })
    return Right({**record, "start_date": start})


def _build(kind: str) -> Callable[[dict], Either[dict, Item]]:
    def _make(record: dict) -> Either[dict, Item]:
        item_id = str(_field(record, "id", default="") or uuid4().hex)
        name = str(_field(record, "name", default="")).strip()
        if kind == "debt":
            return Right(Debt(
                id=item_id,
                name=name,
                total_owed=coerce_amount(_field(record, "total_owed", "totalOwed")),
                payment_amount=coerce_amount(_field(record, "payment_amount", "paymentAmount")),
                frequency=record["frequency"],
                start_date=record["start_date"],
            ))
        return Right(RecurringItem(
            id=item_id,
            name=name,
            amount=coerce_amount(_field(record, "amount")),
            frequency=record["frequency"],
            start_date=record["start_date"],
        ))

    return _make


def validate_item(record: Mapping, kind: str) -> Either[dict, Item]:
    """Turn a raw income/bill/debt record into a domain item.

    Unknown frequencies and missing or malformed start dates are rejected;
    negative or non-numeric amounts are coerced to zero.
    """
    if kind not in ITEM_KINDS:
        return Left({
            "error": "invalid_kind",
            "message": f"Item kind must be one of {list(ITEM_KINDS)}",
            "kind": kind,
        })
    return (
        _parse_frequency(record)
        .bind(_parse_start_date)
        .bind(_build(kind))
    )


def validate_income(record: Mapping) -> Either[dict, RecurringItem]:
    return validate_item(record, "income")


def validate_bill(record: Mapping) -> Either[dict, RecurringItem]:
    return validate_item(record, "bill")


def validate_debt(record: Mapping) -> Either[dict, Debt]:
    return validate_item(record, "debt")
