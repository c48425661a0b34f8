"""
Trend charts for weight, water intake and sleep.

Produces matplotlib figures as PNG bytes (served by the API and sent as
Telegram photo messages). Each chart function returns (png_bytes, caption).

Chart design:
  - X-axis: the last N calendar days ending today, one tick per day
  - Weight: daily weigh-ins as dots + line, rolling mean as a dashed line;
    days without a weigh-in are gaps, not zeros
  - Water / sleep: one bar per day, dashed gold line at the daily goal,
    bars that reach the goal drawn in teal, the rest in grey
"""
import io
from datetime import date
from typing import Iterable, List, Tuple

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np

from healthtrack.analysis.hydration import water_by_day
from healthtrack.analysis.trends import last_n_days, sleep_minutes_by_day, weight_by_day
from healthtrack.analysis.units import WeightUnit, convert_weight

# ─── Constants ────────────────────────────────────────────────────────────────

BACKGROUND = "#1a1a2e"
PANEL = "#2d2d4e"
LINE = "#4ecdc4"
GOAL = "#ffd700"
MISSED = "#888888"

# Window (in logged days) of the rolling mean on the weight chart
ROLLING_WINDOW = 7

DEFAULT_DAYS = 7


# ─── Public API ───────────────────────────────────────────────────────────────

def make_weight_chart(
    weights: Iterable,
    unit=WeightUnit.KG,
    days: int = DEFAULT_DAYS,
    today: date = None,
) -> Tuple[bytes, str]:
    """
    Weight trend over the last `days` days in the user's display unit.

    Returns (png_bytes, caption).
    """
    today = today or date.today()
    unit = WeightUnit(unit)
    series = last_n_days(weight_by_day(weights), days, today, None)
    labels = [_day_label(d) for d, _ in series]
    values = np.array(
        [np.nan if w is None else convert_weight(w, WeightUnit.KG, unit) for _, w in series],
        dtype=float,
    )

    fig, ax = plt.subplots(figsize=(10, 4))
    fig.patch.set_facecolor(BACKGROUND)
    _style_ax(ax)

    x = np.arange(len(series))
    logged = ~np.isnan(values)
    if logged.any():
        ax.plot(x[logged], values[logged], color=LINE, linewidth=1.8,
                marker="o", markersize=4, zorder=3)
        mean = _rolling_mean(values[logged], ROLLING_WINDOW)
        ax.plot(x[logged], mean, color=GOAL, linewidth=1.0, linestyle="--",
                alpha=0.8, zorder=2)
        lo, hi = float(np.nanmin(values)), float(np.nanmax(values))
        margin = (hi - lo) * 0.2 + 0.5
        ax.set_ylim(lo - margin, hi + margin)

    ax.set_xticks(x)
    ax.set_xticklabels(labels)
    ax.set_ylabel(f"Weight ({unit.value})", color="#aaaaaa", fontsize=9)

    caption = f"Weight · last {days} days"
    if logged.sum() >= 2:
        first, last = values[logged][0], values[logged][-1]
        caption += f" · {last - first:+.1f} {unit.value}"
    return _render(fig, caption), caption


def make_water_chart(
    water: Iterable,
    goal_liters: float,
    days: int = DEFAULT_DAYS,
    today: date = None,
) -> Tuple[bytes, str]:
    """Daily water intake bars against the daily goal. Returns (png_bytes, caption)."""
    today = today or date.today()
    series = last_n_days(water_by_day(water), days, today, 0)
    goal_ml = goal_liters * 1000
    amounts = [ml for _, ml in series]

    fig, ax = _goal_bar_chart(
        labels=[_day_label(d) for d, _ in series],
        values=amounts,
        goal=goal_ml,
        ylabel="Water (mL)",
    )
    days_met = sum(1 for ml in amounts if ml >= goal_ml)
    caption = f"Water · last {days} days · goal met {days_met}/{days}"
    return _render(fig, caption), caption


def make_sleep_chart(
    sleep: Iterable,
    goal_hours: float,
    days: int = DEFAULT_DAYS,
    today: date = None,
) -> Tuple[bytes, str]:
    """Nightly sleep duration bars (hours) against the sleep goal."""
    today = today or date.today()
    series = last_n_days(sleep_minutes_by_day(sleep), days, today, 0)
    hours = [minutes / 60 for _, minutes in series]

    fig, ax = _goal_bar_chart(
        labels=[_day_label(d) for d, _ in series],
        values=hours,
        goal=goal_hours,
        ylabel="Sleep (h)",
    )
    nights = [h for h in hours if h > 0]
    avg = sum(nights) / len(nights) if nights else 0.0
    caption = f"Sleep · last {days} days · avg {avg:.1f} h"
    return _render(fig, caption), caption


# ─── Internal helpers ─────────────────────────────────────────────────────────

def _goal_bar_chart(labels: List[str], values: List[float], goal: float, ylabel: str):
    fig, ax = plt.subplots(figsize=(10, 4))
    fig.patch.set_facecolor(BACKGROUND)
    _style_ax(ax)

    x = np.arange(len(values))
    colors = [LINE if v >= goal else MISSED for v in values]
    ax.bar(x, values, color=colors, width=0.6, zorder=3)
    ax.axhline(goal, color=GOAL, linestyle="--", linewidth=1.0, zorder=2)
    ax.set_xticks(x)
    ax.set_xticklabels(labels)
    ax.set_ylabel(ylabel, color="#aaaaaa", fontsize=9)
    ax.set_ylim(0, max([goal] + list(values)) * 1.15)
    return fig, ax


def _render(fig, title: str) -> bytes:
    fig.suptitle(title, color="white", fontsize=11, fontweight="bold")
    buf = io.BytesIO()
    plt.savefig(buf, format="png", dpi=100, bbox_inches="tight",
                facecolor=fig.get_facecolor())
    plt.close(fig)
    buf.seek(0)
    return buf.read()


def _day_label(d: date) -> str:
    return d.strftime("%b %d")


def _style_ax(ax) -> None:
    ax.set_facecolor(PANEL)
    ax.tick_params(colors="white", labelsize=8)
    ax.spines["bottom"].set_color("#555577")
    ax.spines["left"].set_color("#555577")
    ax.spines["top"].set_visible(False)
    ax.spines["right"].set_visible(False)


def _rolling_mean(arr: np.ndarray, window: int) -> np.ndarray:
    result = np.empty(len(arr))
    for i in range(len(arr)):
        lo = max(0, i - window + 1)
        result[i] = np.mean(arr[lo:i + 1])
    return result
