"""
Sleep session arithmetic on "HH:MM" clock strings.

A session is recorded as two wall-clock times with no date attached. When the
wake time is numerically earlier than the bedtime the session is assumed to
cross midnight.
"""
from typing import Tuple

from healthtrack.analysis.units import InvalidMeasurementError, round_half_up

MINUTES_PER_DAY = 24 * 60


def parse_clock(value: str) -> Tuple[int, int]:
    """
    Parse an "HH:MM" clock string.

    Returns:
        (hour, minute) with 0 <= hour <= 23 and 0 <= minute <= 59.

    Raises:
        InvalidMeasurementError: if the value is not two colon-separated
            integer fields in range.
    """
    if not isinstance(value, str):
        raise InvalidMeasurementError(f"Clock value must be a string, got {value!r}")
    parts = value.strip().split(":")
    if len(parts) != 2 or not all(p.isascii() and p.isdigit() for p in parts):
        raise InvalidMeasurementError(f"Expected HH:MM, got {value!r}")
    hour, minute = int(parts[0]), int(parts[1])
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        raise InvalidMeasurementError(f"Clock value out of range: {value!r}")
    return hour, minute


def normalize_clock(value: str) -> str:
    """Return the zero-padded "HH:MM" form of a clock string ("7:5" -> "07:05")."""
    hour, minute = parse_clock(value)
    return f"{hour:02d}:{minute:02d}"


def clock_to_minutes(value: str) -> int:
    hour, minute = parse_clock(value)
    return hour * 60 + minute


def sleep_duration_minutes(bedtime: str, wake_time: str) -> int:
    """
    Minutes asleep between bedtime and wake time.

    Identical times are a zero-length session, not an error. No upper bound
    is enforced: "06:00" -> "05:00" is 23 hours.
    """
    duration = clock_to_minutes(wake_time) - clock_to_minutes(bedtime)
    if duration < 0:
        duration += MINUTES_PER_DAY
    return duration


def format_duration(minutes: int) -> str:
    """Format whole minutes as "7h 30m"."""
    hours, mins = divmod(int(minutes), 60)
    return f"{hours}h {mins}m"


def sleep_goal_percentage(minutes: int, goal_hours: float) -> int:
    """Share of the nightly sleep goal reached, capped at 100."""
    if goal_hours <= 0:
        raise InvalidMeasurementError(f"Sleep goal must be positive, got {goal_hours}")
    return min(round_half_up(minutes / (goal_hours * 60) * 100), 100)
