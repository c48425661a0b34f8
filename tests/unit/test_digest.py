"""Tests for the plain-text daily digest."""
from datetime import date

from healthtrack.analysis.summary import DailySummary
from healthtrack.reports.digest import format_daily_digest


def test_full_digest():
    summary = DailySummary(
        date=date(2025, 3, 12),
        latest_weight_kg=71.6, latest_weight=71.6, weight_change=-0.4,
        bmi=23.4, bmi_category="Normal weight",
        water_total_ml=2000, water_goal_ml=2500, water_goal_percentage=80,
        sleep_minutes=420, sleep_duration="7h 0m", sleep_goal_percentage=88,
    )
    assert format_daily_digest(summary).splitlines() == [
        "Summary for Mar 12 2025",
        "",
        "Weight: 71.6 kg (▼ 0.4 kg)",
        "BMI: 23.4 · Normal weight",
        "Water: 2000 / 2500 mL (80%)",
        "Sleep: 7h 0m (88% of goal)",
    ]


def test_weight_gain_in_pounds():
    summary = DailySummary(
        date=date(2025, 3, 12), weight_unit="lb",
        latest_weight_kg=72.0, latest_weight=158.7, weight_change=0.9,
        bmi=23.5, bmi_category="Normal weight",
    )
    assert "Weight: 158.7 lb (▲ 0.9 lb)" in format_daily_digest(summary)


def test_nothing_logged():
    text = format_daily_digest(DailySummary(date=date(2025, 3, 12), water_goal_ml=2500))
    assert "Weight: no entries yet" in text
    assert "Sleep: no entries yet" in text
    assert "BMI" not in text
    assert "Water: 0 / 2500 mL (0%)" in text
