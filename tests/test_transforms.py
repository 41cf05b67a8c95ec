import json
from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest

from forecaster.domain import Debt, Frequency, RecurringItem
from forecaster.transforms import (
    add_item,
    dump_seed,
    filter_by_frequencies,
    item_choices,
    item_to_record,
    load_seed,
    parse_seed,
    remove_item,
    update_item,
)

SEED_PATH = Path(__file__).resolve().parent.parent / "data" / "seed.json"


def make_item(id, name, amount="10"):
    return RecurringItem(id, name, Decimal(amount), Frequency.MONTHLY, date(2025, 6, 1))


def test_load_seed():
    balance, incomes, bills, debts = load_seed(str(SEED_PATH))

    assert balance == Decimal("5000")
    assert len(incomes) == 1
    assert len(bills) == 3
    assert len(debts) == 2
    assert debts[0].name == "Car Loan"
    assert debts[0].total_owed == Decimal("15000")


def test_parse_seed_reports_every_invalid_record():
    data = {
        "starting_balance": 100,
        "incomes": [{"name": "Pay", "amount": 1, "frequency": "hourly", "startDate": "2025-06-01"}],
        "bills": [{"name": "Rent", "amount": 1, "frequency": "monthly"}],
    }
    with pytest.raises(ValueError) as exc:
        parse_seed(data)
    assert "invalid_frequency" in str(exc.value)
    assert "invalid_start_date" in str(exc.value)


def test_parse_seed_defaults():
    balance, incomes, bills, debts = parse_seed({})
    assert balance == Decimal("0")
    assert incomes == bills == debts == ()


def test_add_item_returns_new_tuple():
    items = (make_item("a", "Rent"),)
    new_items = add_item(items, make_item("b", "Gym"))
    assert [i.id for i in new_items] == ["a", "b"]
    assert len(items) == 1


def test_update_item_keeps_position():
    items = (make_item("a", "Rent"), make_item("b", "Gym"), make_item("c", "Phone"))
    updated = update_item(items, make_item("b", "Gym", amount="55"))
    assert [i.id for i in updated] == ["a", "b", "c"]
    assert updated[1].amount == Decimal("55")
    assert items[1].amount == Decimal("10")


def test_remove_item():
    items = (make_item("a", "Rent"), make_item("b", "Gym"))
    assert [i.id for i in remove_item(items, "a")] == ["b"]
    assert remove_item(items, "missing") == items


def test_item_to_record_uses_camel_case():
    record = item_to_record(make_item("a", "Rent", "1200"))
    assert record == {
        "id": "a",
        "name": "Rent",
        "frequency": "monthly",
        "startDate": "2025-06-01",
        "amount": "1200",
    }


def test_dump_seed_can_be_loaded_back():
    seed = load_seed(str(SEED_PATH))
    assert parse_seed(json.loads(dump_seed(seed))) == seed


def test_parse_seed_coerces_non_finite_amounts(tmp_path):
    path = tmp_path / "seed.json"
    path.write_text(
        '{"startingBalance": Infinity, "bills": [{"name": "Rent", "amount": NaN,'
        ' "frequency": "monthly", "startDate": "2025-06-01"}]}',
        encoding="utf-8",
    )
    balance, _, bills, _ = load_seed(str(path))
    assert balance == Decimal("0")
    assert bills[0].amount == Decimal("0")


def test_filter_by_frequencies():
    weekly = RecurringItem("w", "Groceries", Decimal("80"), Frequency.WEEKLY, date(2025, 6, 1))
    items = (make_item("a", "Rent"), weekly)

    assert filter_by_frequencies(items, ["weekly"]) == (weekly,)
    assert filter_by_frequencies(items, ["weekly", "monthly"]) == items
    assert filter_by_frequencies(items, []) == ()


def test_item_choices_keep_items_with_the_same_name():
    debts = (
        Debt("aaaaaaaa1", "Loan", Decimal("100"), Decimal("10"), Frequency.MONTHLY, date(2025, 6, 1)),
        Debt("bbbbbbbb2", "Loan", Decimal("200"), Decimal("20"), Frequency.MONTHLY, date(2025, 6, 1)),
    )
    choices = item_choices(debts)

    assert list(choices) == ["aaaaaaaa1", "bbbbbbbb2"]
    assert choices["aaaaaaaa1"] != choices["bbbbbbbb2"]
    assert choices["bbbbbbbb2"] == "Loan · bbbbbbbb"
