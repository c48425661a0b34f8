"""Daily water intake totals and goal progress."""
from collections import defaultdict
from datetime import date
from typing import Dict, Iterable

from healthtrack.analysis.units import InvalidMeasurementError, round_half_up


def water_goal_percentage(current_ml: int, goal_liters: float) -> int:
    """
    Percentage of the daily water goal reached.

    Drinking past the goal still reports 100.

    Raises:
        InvalidMeasurementError: if the goal is zero or negative.
    """
    if goal_liters <= 0:
        raise InvalidMeasurementError(f"Water goal must be positive, got {goal_liters}")
    return min(round_half_up(current_ml / (goal_liters * 1000) * 100), 100)


def daily_water_total(entries: Iterable, on_date: date) -> int:
    """Sum of water amounts (mL) logged on one calendar date."""
    return sum(e.amount for e in entries if e.date == on_date)


def water_by_day(entries: Iterable) -> Dict[date, int]:
    totals: Dict[date, int] = defaultdict(int)
    for e in entries:
        totals[e.date] += e.amount
    return dict(totals)
