from functools import lru_cache

from forecaster.domain import ForecastInput, TimelineEntry, WeekBucket
from forecaster.timeline import build_timeline
from forecaster.weekly import aggregate_by_week


@lru_cache(maxsize=64)
def forecast(snapshot: ForecastInput) -> tuple[tuple[TimelineEntry, ...], tuple[WeekBucket, ...]]:
    timeline = build_timeline(
        snapshot.incomes,
        snapshot.bills,
        snapshot.debts,
        snapshot.starting_balance,
        snapshot.reference_date,
        snapshot.horizon_days,
    )
    return timeline, aggregate_by_week(timeline)
