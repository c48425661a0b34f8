"""
Day-bucketed series for trend charts and week-over-week deltas.

Entries are any objects carrying a `date` attribute (SQLModel rows or the
pydantic read models used by the stores).
"""
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional, Tuple, TypeVar

from healthtrack.analysis.sleep import sleep_duration_minutes

T = TypeVar("T")


def _newest_first(entries: Iterable) -> list:
    # created_at breaks ties between entries logged on the same day
    return sorted(
        entries,
        key=lambda e: (e.date, getattr(e, "created_at", None) or datetime.min),
        reverse=True,
    )


def latest_weight(entries: Iterable):
    """Most recent weight entry, or None."""
    ordered = _newest_first(entries)
    return ordered[0] if ordered else None


def weight_change(entries: Iterable) -> Optional[float]:
    """
    Difference between the two most recent weight entries (kg).

    Returns:
        latest - previous rounded to one decimal; None with fewer than two entries.
    """
    ordered = _newest_first(entries)
    if len(ordered) < 2:
        return None
    return round(ordered[0].weight - ordered[1].weight, 1)


def weight_by_day(entries: Iterable) -> Dict[date, float]:
    """Last-logged weight for each day."""
    result: Dict[date, float] = {}
    for e in reversed(_newest_first(entries)):
        result[e.date] = e.weight
    return result


def latest_sleep(entries: Iterable):
    ordered = _newest_first(entries)
    return ordered[0] if ordered else None


def sleep_minutes_by_day(entries: Iterable) -> Dict[date, int]:
    """Total sleep minutes keyed by the date each session started."""
    totals: Dict[date, int] = {}
    for e in entries:
        minutes = sleep_duration_minutes(e.bedtime, e.wakeup_time)
        totals[e.date] = totals.get(e.date, 0) + minutes
    return totals


def last_n_days(
    by_date: Dict[date, T],
    days: int,
    today: date,
    default: T,
) -> List[Tuple[date, T]]:
    """
    Dense series of the `days` calendar days ending at `today` (inclusive),
    oldest first. Days with no value get `default`.
    """
    start = today - timedelta(days=days - 1)
    return [
        (start + timedelta(days=i), by_date.get(start + timedelta(days=i), default))
        for i in range(days)
    ]
