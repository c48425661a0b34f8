"""
DailySummary: the derived metrics shown on the dashboard for one day.

Built from already-loaded entries and settings, so the API, the bot and the
client-side store all share the same arithmetic.
"""
from datetime import date as Date
from typing import Iterable, Optional

from pydantic import BaseModel

from healthtrack.analysis.bmi import BMICategory, classify_bmi, compute_bmi
from healthtrack.analysis.hydration import daily_water_total, water_goal_percentage
from healthtrack.analysis.sleep import (
    format_duration,
    sleep_duration_minutes,
    sleep_goal_percentage,
)
from healthtrack.analysis.trends import latest_sleep, latest_weight, weight_change
from healthtrack.analysis.units import WeightUnit, convert_weight


class DailySummary(BaseModel):
    date: Date
    weight_unit: WeightUnit = WeightUnit.KG

    latest_weight_kg: Optional[float] = None
    latest_weight: Optional[float] = None  # in weight_unit
    weight_change: Optional[float] = None  # in weight_unit
    bmi: Optional[float] = None
    bmi_category: Optional[BMICategory] = None

    water_total_ml: int = 0
    water_goal_ml: int = 0
    water_goal_percentage: int = 0

    sleep_minutes: Optional[int] = None
    sleep_duration: Optional[str] = None
    sleep_goal_percentage: Optional[int] = None


def build_daily_summary(
    weights: Iterable,
    water: Iterable,
    sleep: Iterable,
    settings,
    on_date: Date,
) -> DailySummary:
    """
    Compute the dashboard metrics for `on_date`.

    Args:
        weights: weight entries (kg).
        water: water entries.
        sleep: sleep entries.
        settings: object exposing height, height_unit, weight_unit,
            water_goal and sleep_goal.
        on_date: the day whose water intake is totalled.

    Raises:
        InvalidMeasurementError: if the stored height or goals are not positive.
    """
    weights = list(weights)
    unit = WeightUnit(settings.weight_unit)
    summary = DailySummary(date=on_date, weight_unit=unit)

    latest = latest_weight(weights)
    if latest is not None:
        summary.latest_weight_kg = latest.weight
        summary.latest_weight = convert_weight(latest.weight, WeightUnit.KG, unit)
        summary.bmi = compute_bmi(
            latest.weight, settings.height, settings.height_unit, WeightUnit.KG
        )
        summary.bmi_category = classify_bmi(summary.bmi)
        change = weight_change(weights)
        if change is not None:
            summary.weight_change = convert_weight(change, WeightUnit.KG, unit)

    total = daily_water_total(water, on_date)
    summary.water_total_ml = total
    summary.water_goal_ml = int(round(settings.water_goal * 1000))
    summary.water_goal_percentage = water_goal_percentage(total, settings.water_goal)

    last_night = latest_sleep(sleep)
    if last_night is not None:
        minutes = sleep_duration_minutes(last_night.bedtime, last_night.wakeup_time)
        summary.sleep_minutes = minutes
        summary.sleep_duration = format_duration(minutes)
        summary.sleep_goal_percentage = sleep_goal_percentage(minutes, settings.sleep_goal)

    return summary
