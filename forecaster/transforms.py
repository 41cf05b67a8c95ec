import json
import logging
from decimal import Decimal
from typing import Dict, Tuple

from forecaster.domain import Debt, Item, RecurringItem
from forecaster.functional import validate_item
from forecaster.money import coerce_amount
from forecaster.recurrence import by_frequency

logger = logging.getLogger(__name__)

Seed = Tuple[
    Decimal,
    Tuple[RecurringItem, ...],
    Tuple[RecurringItem, ...],
    Tuple[Debt, ...],
]


def parse_seed(data: dict) -> Seed:
    errors = []

    def _collect(key: str, kind: str) -> tuple:
        items = []
        for idx, record in enumerate(data.get(key, [])):
            result = validate_item(record, kind)
            if result.is_right():
                items.append(result.get_or_else(None))
            else:
                errors.append({**result.get_error(), "collection": key, "index": idx})
        return tuple(items)

    incomes = _collect("incomes", "income")
    bills = _collect("bills", "bill")
    debts = _collect("debts", "debt")

    if errors:
        raise ValueError(f"Invalid seed records: {errors}")

    starting_balance = coerce_amount(data.get("starting_balance", data.get("startingBalance", 0)))
    return starting_balance, incomes, bills, debts


def load_seed(path: str) -> Seed:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    seed = parse_seed(data)
    logger.info(
        "Loaded seed %s: %d incomes, %d bills, %d debts",
        path, len(seed[1]), len(seed[2]), len(seed[3]),
    )
    return seed


def add_item(items: Tuple[Item, ...], item: Item) -> Tuple[Item, ...]:
    return items + (item,)


def update_item(items: Tuple[Item, ...], item: Item) -> Tuple[Item, ...]:
    # edit in place: keeps the position, and so the same-day ordering
    return tuple(item if existing.id == item.id else existing for existing in items)


def remove_item(items: Tuple[Item, ...], item_id: str) -> Tuple[Item, ...]:
    return tuple(filter(lambda i: i.id != item_id, items))


def item_to_record(item: Item) -> dict:
    record = {
        "id": item.id,
        "name": item.name,
        "frequency": item.frequency.value,
        "startDate": item.start_date.isoformat(),
    }
    if isinstance(item, Debt):
        record["totalOwed"] = str(item.total_owed)
        record["paymentAmount"] = str(item.payment_amount)
    else:
        record["amount"] = str(item.amount)
    return record


def dump_seed(seed: Seed) -> str:
    starting_balance, incomes, bills, debts = seed
    return json.dumps(
        {
            "starting_balance": str(starting_balance),
            "incomes": [item_to_record(i) for i in incomes],
            "bills": [item_to_record(b) for b in bills],
            "debts": [item_to_record(d) for d in debts],
        },
        indent=2,
    )


def filter_by_frequencies(items: Tuple[Item, ...], frequencies) -> Tuple[Item, ...]:
    filters = [by_frequency(f) for f in frequencies]
    return tuple(i for i in items if any(f(i) for f in filters))


def item_choices(items: Tuple[Item, ...]) -> Dict[str, str]:
    """Picker labels keyed by item id, so items sharing a name stay distinct."""
    return {i.id: f"{i.name or '(unnamed)'} · {i.id[:8]}" for i in items}
