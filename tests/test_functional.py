from datetime import date
from decimal import Decimal

from forecaster.amortization import remaining_balance
from forecaster.domain import Debt, Frequency, RecurringItem
from forecaster.functional import (
    Left,
    Nothing,
    Right,
    Some,
    safe_item,
    validate_bill,
    validate_debt,
    validate_income,
    validate_item,
)


def test_valid_income_from_camel_case_record():
    result = validate_income(
        {"id": 1, "name": "Paycheck", "amount": 2000, "frequency": "bi-weekly", "startDate": "2025-06-13"}
    )
    assert result.is_right()
    assert result.get_or_else(None) == RecurringItem(
        "1", "Paycheck", Decimal("2000"), Frequency.BI_WEEKLY, date(2025, 6, 13)
    )


def test_valid_debt_from_snake_case_record():
    result = validate_debt({
        "name": "Car Loan",
        "total_owed": "15000",
        "payment_amount": "350",
        "frequency": "monthly",
        "start_date": date(2025, 6, 15),
    })
    debt = result.get_or_else(None)
    assert isinstance(debt, Debt)
    assert debt.total_owed == Decimal("15000")
    assert debt.payment_amount == Decimal("350")
    assert debt.id


def test_generated_ids_are_unique():
    record = {"name": "Gym", "amount": 40, "frequency": "monthly", "startDate": "2025-06-10"}
    first = validate_bill(record).get_or_else(None)
    second = validate_bill(record).get_or_else(None)
    assert first.id != second.id


def test_unknown_frequency_is_rejected():
    result = validate_bill({"name": "Rent", "amount": 1200, "frequency": "daily", "startDate": "2025-06-01"})
    assert not result.is_right()
    assert result.get_error()["error"] == "invalid_frequency"


def test_missing_frequency_is_rejected():
    result = validate_bill({"name": "Rent", "amount": 1200, "startDate": "2025-06-01"})
    assert result.get_error()["error"] == "invalid_frequency"


def test_missing_or_bad_start_date_is_rejected():
    missing = validate_income({"name": "Pay", "amount": 1, "frequency": "weekly", "startDate": ""})
    bad = validate_income({"name": "Pay", "amount": 1, "frequency": "weekly", "startDate": "2025-13-01"})
    assert missing.get_error()["error"] == "invalid_start_date"
    assert bad.get_error()["error"] == "invalid_start_date"


def test_negative_and_non_numeric_amounts_become_zero():
    negative = validate_bill({"name": "A", "amount": -50, "frequency": "monthly", "startDate": "2025-06-01"})
    garbage = validate_debt({
        "name": "B", "totalOwed": "lots", "paymentAmount": "-3",
        "frequency": "monthly", "startDate": "2025-06-01",
    })
    assert negative.get_or_else(None).amount == Decimal("0")
    assert garbage.get_or_else(None).total_owed == Decimal("0")
    assert garbage.get_or_else(None).payment_amount == Decimal("0")


def test_unknown_kind_is_rejected():
    result = validate_item({"frequency": "weekly", "startDate": "2025-06-01"}, "savings")
    assert result.get_error()["error"] == "invalid_kind"


def test_either_bind_short_circuits():
    assert Right(2).bind(lambda x: Right(x * 5)) == Right(10)
    assert Left("boom").bind(lambda x: Right(x * 5)) == Left("boom")
    assert Left("boom").get_or_else(0) == 0


def test_safe_item():
    items = (
        RecurringItem("a", "Rent", Decimal("1"), Frequency.MONTHLY, date(2025, 1, 1)),
        RecurringItem("b", "Gym", Decimal("1"), Frequency.MONTHLY, date(2025, 1, 1)),
    )
    found = safe_item(items, "b")
    assert found.is_some()
    assert found.map(lambda i: i.name) == Some("Gym")
    assert safe_item(items, "zzz") == Nothing()
    assert safe_item(items, "zzz").get_or_else("none") == "none"


def test_start_date_with_trailing_junk_is_rejected():
    for raw in ("2025-06-0612", "2025-06-06garbage"):
        result = validate_bill({"name": "Rent", "amount": 1200, "frequency": "monthly", "startDate": raw})
        assert result.get_error()["error"] == "invalid_start_date"


def test_non_finite_debt_amounts_become_zero():
    result = validate_debt({
        "name": "Card", "totalOwed": float("nan"), "paymentAmount": float("inf"),
        "frequency": "monthly", "startDate": "2025-06-01",
    })
    debt = result.get_or_else(None)
    assert debt.total_owed == Decimal("0")
    assert debt.payment_amount == Decimal("0")
    assert remaining_balance(debt, date(2025, 6, 6)) == Decimal("0")
