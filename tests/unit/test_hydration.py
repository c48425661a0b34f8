"""Tests for water intake totals and goal progress."""
from datetime import date
from types import SimpleNamespace

import pytest

from healthtrack.analysis.hydration import daily_water_total, water_by_day, water_goal_percentage
from healthtrack.analysis.units import InvalidMeasurementError


def drink(ml, day):
    return SimpleNamespace(amount=ml, date=day)


class TestWaterGoalPercentage:
    def test_partial(self):
        assert water_goal_percentage(2000, 2.5) == 80

    def test_capped_at_100(self):
        assert water_goal_percentage(3000, 2.5) == 100

    def test_nothing_logged(self):
        assert water_goal_percentage(0, 2.5) == 0

    def test_rounds_to_integer(self):

    def test_half_rounds_up(self):
        # 2.5% must not round to the even 2
        assert water_goal_percentage(50, 2) == 3

    @pytest.mark.parametrize("goal", [0, -1.5])
    def test_goal_must_be_positive(self, goal):
        with pytest.raises(InvalidMeasurementError):
            water_goal_percentage(1000, goal)


class TestTotals:
    def test_daily_total_only_counts_that_day(self):
        entries = [drink(500, date(2025, 3, 1)), drink(250, date(2025, 3, 1)), drink(900, date(2025, 3, 2))]
        assert daily_water_total(entries, date(2025, 3, 1)) == 750

    def test_daily_total_empty(self):
        assert daily_water_total([], date(2025, 3, 1)) == 0

    def test_water_by_day(self):
        entries = [drink(500, date(2025, 3, 1)), drink(250, date(2025, 3, 1)), drink(900, date(2025, 3, 2))]
        assert water_by_day(entries) == {date(2025, 3, 1): 750, date(2025, 3, 2): 900}
