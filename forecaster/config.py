"""Configuration for the forecaster dashboard.

Values come from environment variables with defaults suitable for running
from a checkout. The engine itself never reads this module; the dashboard
resolves these values and passes them in explicitly.
"""

import logging
import os
from datetime import date
from pathlib import Path
from typing import Optional

from forecaster.dates import normalize_date
from forecaster.timeline import DEFAULT_HORIZON_DAYS

_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

DATA_DIR = Path(os.getenv("FORECASTER_DATA_DIR", _PROJECT_ROOT / "data"))
SEED_PATH = Path(os.getenv("FORECASTER_SEED_PATH", DATA_DIR / "seed.json"))

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def get_horizon_days() -> int:
    raw = os.getenv("FORECASTER_HORIZON_DAYS")
    if not raw:
        return DEFAULT_HORIZON_DAYS
    try:
        days = int(raw)
    except ValueError:
        raise ValueError(f"FORECASTER_HORIZON_DAYS must be an integer, got {raw!r}") from None
    if days < 0:
        raise ValueError("FORECASTER_HORIZON_DAYS must be >= 0")
    return days


def get_reference_date(today: Optional[date] = None) -> date:
    """Pinned reference date if ``FORECASTER_REFERENCE_DATE`` is set, else today.

    This is the only place the wall clock is consulted.
    """
    raw = os.getenv("FORECASTER_REFERENCE_DATE")
    if raw:
        return normalize_date(raw)
    return today or date.today()


def get_log_level() -> str:
    return os.getenv("FORECASTER_LOG_LEVEL", "INFO").upper()


def configure_logging(level: Optional[str] = None) -> None:
    logging.basicConfig(level=level or get_log_level(), format=LOG_FORMAT)
