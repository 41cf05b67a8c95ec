from datetime import date, datetime, timedelta

from dateutil.parser import isoparse


def normalize_date(raw) -> date:
    """Return a ``date`` for a date, datetime or ISO ``YYYY-MM-DD`` string.

    A full ISO datetime (``2025-06-06T12:00:00Z``) is accepted too; anything
    else trailing the date raises ``ValueError``.
    """
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    if raw is None:
        raise ValueError("missing date")
    text = str(raw).strip()
    if not text:
        raise ValueError("empty date")
    if len(text) == 10:
        return datetime.strptime(text, "%Y-%m-%d").date()
    if len(text) > 10 and text[10] in "T ":
        datetime.strptime(text[:10], "%Y-%m-%d")
        return isoparse(text).date()
    raise ValueError(f"invalid date {text!r}")


def week_start(d: date) -> date:
    # weeks start on Sunday; date.weekday() has Monday == 0
    return d - timedelta(days=(d.weekday() + 1) % 7)


def week_label(start: date) -> str:
    return f"Week of {start.isoformat()}"
