import logging
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from forecaster.domain import CENT

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def _finite(amount: Decimal) -> Decimal:
    if not amount.is_finite():
        raise ValueError("invalid money value")
    return amount


def parse_money(value) -> Decimal:
    """Parse a user-entered amount such as ``"$1,200.50"`` or ``"(35)"``.

    Raises ``ValueError`` for empty or non-numeric input.
    """
    if value is None:
        raise ValueError("missing money value")
    # bool is an int subclass; true/false are not amounts
    if isinstance(value, bool):
        raise ValueError("invalid money value")
    if isinstance(value, (Decimal, int, float)):
        return _finite(Decimal(str(value)))

    normalized = str(value).strip()
    if not normalized:
        raise ValueError("empty money value")

    is_negative = normalized.startswith("(") and normalized.endswith(")")
    normalized = normalized.replace("$", "").replace(",", "")

    if is_negative:
        normalized = normalized[1:-1]

    try:
        amount = _finite(Decimal(normalized))
    except InvalidOperation as exc:
        raise ValueError("invalid money value") from exc

    return -amount if is_negative else amount


def coerce_amount(value) -> Decimal:
    """Lenient boundary policy: negative or unparseable amounts become zero."""
    try:
        amount = parse_money(value)
    except ValueError:
        logger.debug("Coercing unparseable amount %r to 0", value)
        return ZERO
    if amount < 0:
        logger.debug("Coercing negative amount %s to 0", amount)
        return ZERO
    return amount


def round_money(amount: Decimal) -> Decimal:
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def format_money(amount: Decimal) -> str:
    return f"${round_money(amount):,.2f}"
