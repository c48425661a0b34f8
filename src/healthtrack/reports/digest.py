"""Plain-text rendering of a DailySummary for chat messages."""
from healthtrack.analysis.summary import DailySummary


def format_daily_digest(summary: DailySummary) -> str:
    """
    Build a short multi-line summary of one day.

    Args:
        summary: metrics from build_daily_summary.

    Returns:
        Text suitable for a Telegram message.
    """
    unit = summary.weight_unit.value
    lines = [f"Summary for {summary.date.strftime('%b %d %Y')}", ""]

    if summary.latest_weight is not None:
        line = f"Weight: {summary.latest_weight:.1f} {unit}"
        if summary.weight_change is not None:
            arrow = "▼" if summary.weight_change <= 0 else "▲"
            line += f" ({arrow} {abs(summary.weight_change):.1f} {unit})"
        lines.append(line)
        lines.append(f"BMI: {summary.bmi:.1f} · {summary.bmi_category.value}")
    else:
        lines.append("Weight: no entries yet")

    lines.append(
        f"Water: {summary.water_total_ml} / {summary.water_goal_ml} mL "
        f"({summary.water_goal_percentage}%)"
    )

    if summary.sleep_minutes is not None:
        lines.append(
            f"Sleep: {summary.sleep_duration} ({summary.sleep_goal_percentage}% of goal)"
        )
    else:
        lines.append("Sleep: no entries yet")

    return "\n".join(lines)
