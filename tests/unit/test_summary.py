"""Tests for build_daily_summary."""
import uuid
from datetime import date, datetime

import pytest

from healthtrack.analysis.bmi import BMICategory
from healthtrack.analysis.summary import build_daily_summary
from healthtrack.analysis.units import InvalidMeasurementError
from healthtrack.models.entries import SleepEntryRead, WaterEntryRead, WeightEntryRead
from healthtrack.models.settings import UserSettingsRead

DAY = date(2025, 3, 12)


def _weights():
    return [
        WeightEntryRead(id=uuid.uuid4(), user_id=1, weight=kg, date=date(2025, 3, d),
                        created_at=datetime(2025, 3, d, 7))
        for d, kg in [(10, 72.4), (11, 72.0), (12, 71.6)]
    ]


def _water():
    return [
        WaterEntryRead(id=uuid.uuid4(), user_id=1, amount=ml, date=DAY, time=t)
        for t, ml in [("08:00", 500), ("12:30", 750), ("18:00", 750)]
    ] + [WaterEntryRead(id=uuid.uuid4(), user_id=1, amount=1000, date=date(2025, 3, 11), time="09:00")]


def _sleep():
    return [SleepEntryRead(id=uuid.uuid4(), user_id=1, bedtime="23:30", wakeup_time="06:30",
                           date=date(2025, 3, 11))]


class TestBuildDailySummary:
    def test_metric_defaults(self):
        s = build_daily_summary(_weights(), _water(), _sleep(), UserSettingsRead(user_id=1), DAY)
        assert s.latest_weight == 71.6
        assert s.weight_change == -0.4
        assert s.bmi == 23.4
        assert s.bmi_category is BMICategory.NORMAL
        assert s.water_total_ml == 2000
        assert s.water_goal_ml == 2500
        assert s.water_goal_percentage == 80
        assert s.sleep_minutes == 420
        assert s.sleep_duration == "7h 0m"
        assert s.sleep_goal_percentage == 88

    def test_pounds_display(self):
        settings = UserSettingsRead(user_id=1, weight_unit="lb")
        s = build_daily_summary(_weights(), [], [], settings, DAY)
        assert s.latest_weight_kg == 71.6
        assert s.latest_weight == 157.9
        assert s.weight_change == -0.9
        # BMI is unit-independent
        assert s.bmi == 23.4

    def test_height_in_inches(self):
        settings = UserSettingsRead(user_id=1, height=68.9, height_unit="in")
        s = build_daily_summary(_weights(), [], [], settings, DAY)
        assert s.bmi == 23.4

    def test_water_totals_only_the_requested_day(self):
        s = build_daily_summary([], _water(), [], UserSettingsRead(user_id=1), date(2025, 3, 11))
        assert s.water_total_ml == 1000
        assert s.water_goal_percentage == 40

    def test_empty_data(self):
        s = build_daily_summary([], [], [], UserSettingsRead(user_id=1), DAY)
        assert s.latest_weight is None
        assert s.bmi is None
        assert s.water_total_ml == 0
        assert s.sleep_minutes is None

    def test_bad_height_raises(self):
        settings = UserSettingsRead.model_construct(
            user_id=1, height=0, height_unit="cm", weight_unit="kg", water_goal=2.5, sleep_goal=8,
        )
        with pytest.raises(InvalidMeasurementError):
            build_daily_summary(_weights(), [], [], settings, DAY)
