"""
Local chart preview using generated demo data.

Builds two weeks of weigh-ins, drinks and sleep sessions in memory (no DB or
API needed) and renders the three trend charts to /tmp/preview_*.png.

Usage:
    source .venv/bin/activate && python scripts/preview_chart.py [days]
"""
import random
import sys
import uuid
from datetime import date, timedelta
from pathlib import Path

# Allow running directly from repo root
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from healthtrack.analysis.summary import build_daily_summary
from healthtrack.models.entries import SleepEntryRead, WaterEntryRead, WeightEntryRead
from healthtrack.models.settings import UserSettingsRead
from healthtrack.reports.charts import make_sleep_chart, make_water_chart, make_weight_chart
from healthtrack.reports.digest import format_daily_digest


def demo_entries(days: int, today: date):
    """Slowly falling weight, uneven water, a few short nights."""
    rng = random.Random(42)
    weights, water, sleep = [], [], []
    for i in range(days):
        d = today - timedelta(days=days - 1 - i)
        if rng.random() > 0.2:
            weights.append(WeightEntryRead(
                id=uuid.uuid4(), user_id=1, date=d, weight=round(82 - 0.1 * i + rng.uniform(-0.4, 0.4), 1),
            ))
        for hour in ("08:30", "12:15", "16:00", "20:45"):
            if rng.random() > 0.25:
                water.append(WaterEntryRead(
                    id=uuid.uuid4(), user_id=1, date=d, time=hour, amount=rng.choice([250, 500, 750]),
                ))
        bed = rng.choice(["22:45", "23:15", "23:50", "00:30"])
        sleep.append(SleepEntryRead(
            id=uuid.uuid4(), user_id=1, date=d, bedtime=bed, wakeup_time=rng.choice(["06:30", "07:00", "07:45"]),
        ))
    return weights, water, sleep


def main():
    days = int(sys.argv[1]) if len(sys.argv) > 1 else 14
    today = date.today()
    settings = UserSettingsRead(user_id=1)
    weights, water, sleep = demo_entries(days, today)
    print(f"Generated {len(weights)} weigh-ins, {len(water)} drinks, {len(sleep)} nights")

    charts = {
        "weight": make_weight_chart(weights, unit=settings.weight_unit, days=days, today=today),
        "water": make_water_chart(water, goal_liters=settings.water_goal, days=days, today=today),
        "sleep": make_sleep_chart(sleep, goal_hours=settings.sleep_goal, days=days, today=today),
    }
    for name, (png_bytes, caption) in charts.items():
        out = Path(f"/tmp/preview_{name}.png")
        out.write_bytes(png_bytes)
        print(f"  Saved to {out}  ({len(png_bytes)//1024}KB)")
        print(f"  Caption: {caption}")

    print()
    print(format_daily_digest(build_daily_summary(weights, water, sleep, settings, today)))


if __name__ == "__main__":
    main()
