"""
Telegram bot command handlers.

All handlers receive (update, context) from python-telegram-bot.
Bot data keys (set in build_bot_app):
  context.bot_data["engine"]        : SQLAlchemy engine
  context.bot_data["user_id"]       : HealthTrack user the chat logs for
  context.bot_data["reminders"]     : ReminderScheduler (None if reminders are off)
  context.bot_data["owner_chat_id"] : chat that receives reminders and errors
"""
import html
import io
import logging
import math
import traceback
from datetime import date, datetime, timedelta
from typing import List, Optional

from sqlmodel import Session
from telegram import Update
from telegram.constants import ChatAction
from telegram.ext import ContextTypes

from healthtrack.analysis.bmi import classify_bmi, compute_bmi
from healthtrack.analysis.hydration import daily_water_total, water_goal_percentage
from healthtrack.analysis.sleep import (
    format_duration,
    normalize_clock,
    parse_clock,
    sleep_duration_minutes,
)
from healthtrack.analysis.summary import build_daily_summary
from healthtrack.analysis.trends import latest_weight
from healthtrack.analysis.units import InvalidMeasurementError, WeightUnit, weight_to_kg
from healthtrack.db.crud import create_row, get_user_settings, list_for_user
from healthtrack.models.entries import (
    SleepEntry,
    SleepEntryCreate,
    SleepQuality,
    WaterEntry,
    WaterEntryCreate,
    WeightEntry,
    WeightEntryCreate,
)
from healthtrack.models.settings import UserSettings, UserSettingsRead
from healthtrack.reports.charts import make_sleep_chart, make_water_chart, make_weight_chart
from healthtrack.reports.digest import format_daily_digest

logger = logging.getLogger(__name__)

_QUALITIES = ", ".join(q.value for q in SleepQuality)


def _args(update: Update) -> List[str]:
    """Command arguments: '/weight 72.5 after run' -> ['72.5', 'after', 'run']."""
    return (update.message.text or "").strip().split()[1:]


def _load_settings(session: Session, user_id: int) -> UserSettingsRead:
    """Detached copy of the user's settings (defaults if never saved)."""
    row = get_user_settings(session, user_id)
    if row is None:
        return UserSettingsRead(user_id=user_id)
    return UserSettingsRead.model_validate(row)


async def handle_weight(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    /weight <value> [note]: log a weigh-in in the user's weight unit.
    """
    engine = context.bot_data["engine"]
    user_id = context.bot_data["user_id"]
    args = _args(update)
    try:
        value = float(args[0])
    except (IndexError, ValueError):
        await update.message.reply_text("Usage: /weight <value> [note]")
        return
    if not math.isfinite(value) or value <= 0:
        await update.message.reply_text("Weight must be a positive number.")
        return

    with Session(engine) as s:
        settings = _load_settings(s, user_id)
        unit = WeightUnit(settings.weight_unit)
        entry = create_row(s, WeightEntry, WeightEntryCreate(
            user_id=user_id,
            weight=round(weight_to_kg(value, unit), 2),
            date=date.today(),
            notes=" ".join(args[1:]) or None,
        ))
        bmi = compute_bmi(entry.weight, settings.height, settings.height_unit, WeightUnit.KG)

    await update.message.reply_text(
        f"Logged {value:.1f} {unit.value}. BMI {bmi:.1f} ({classify_bmi(bmi).value})."
    )


async def handle_water(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    /water <ml>: log a drink and report progress toward today's goal.
    """
    engine = context.bot_data["engine"]
    user_id = context.bot_data["user_id"]
    args = _args(update)
    try:
        amount = int(args[0])
    except (IndexError, ValueError):
        await update.message.reply_text("Usage: /water <milliliters>")
        return
    if amount <= 0:
        await update.message.reply_text("Amount must be a positive number of mL.")
        return

    now = datetime.now()
    with Session(engine) as s:
        settings = _load_settings(s, user_id)
        create_row(s, WaterEntry, WaterEntryCreate(
            user_id=user_id, amount=amount, date=now.date(), time=now.strftime("%H:%M"),
        ))
        total = daily_water_total(list_for_user(s, WaterEntry, user_id), now.date())

    pct = water_goal_percentage(total, settings.water_goal)
    await update.message.reply_text(
        f"Logged {amount} mL. Today: {total} mL ({pct}% of {settings.water_goal:g} L)."
    )


async def handle_sleep(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    /sleep <bedtime> <wake time> [quality]: log last night's sleep.

    A session crossing midnight is dated yesterday (the evening it started).
    """
    engine = context.bot_data["engine"]
    user_id = context.bot_data["user_id"]
    args = _args(update)
    if len(args) < 2:
        await update.message.reply_text(
            f"Usage: /sleep <HH:MM> <HH:MM> [{_QUALITIES}]"
        )
        return
    try:
        bedtime, wake = normalize_clock(args[0]), normalize_clock(args[1])
        quality = SleepQuality(args[2].lower()) if len(args) > 2 else None
    except InvalidMeasurementError as exc:
        await update.message.reply_text(f"Couldn't read that time: {exc}")
        return
    except ValueError:
        await update.message.reply_text(f"Quality must be one of: {_QUALITIES}")
        return

    started = date.today()
    if parse_clock(wake) < parse_clock(bedtime):
        started -= timedelta(days=1)

    with Session(engine) as s:
        create_row(s, SleepEntry, SleepEntryCreate(
            user_id=user_id, bedtime=bedtime, wakeup_time=wake, date=started, quality=quality,
        ))

    minutes = sleep_duration_minutes(bedtime, wake)
    await update.message.reply_text(f"Logged {format_duration(minutes)} of sleep.")


async def handle_bmi(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    /bmi: BMI from the latest weigh-in and the saved height.
    """
    engine = context.bot_data["engine"]
    user_id = context.bot_data["user_id"]

    with Session(engine) as s:
        settings = _load_settings(s, user_id)
        latest = latest_weight(list_for_user(s, WeightEntry, user_id))

    if latest is None:
        await update.message.reply_text("No weigh-ins yet. Log one with /weight <value>.")
        return
    try:
        bmi = compute_bmi(latest.weight, settings.height, settings.height_unit, WeightUnit.KG)
    except InvalidMeasurementError as exc:
        await update.message.reply_text(f"Can't compute BMI: {exc}")
        return
    await update.message.reply_text(f"BMI {bmi:.1f} · {classify_bmi(bmi).value}")


async def handle_today(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    /today: summary of today's numbers.
    """
    engine = context.bot_data["engine"]
    user_id = context.bot_data["user_id"]

    with Session(engine) as s:
        summary = build_daily_summary(
            weights=list_for_user(s, WeightEntry, user_id),
            water=list_for_user(s, WaterEntry, user_id),
            sleep=list_for_user(s, SleepEntry, user_id),
            settings=_load_settings(s, user_id),
            on_date=date.today(),
        )
    await update.message.reply_text(format_daily_digest(summary))


async def handle_trends(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    /trends [days]: weight, water and sleep charts for the last N days (default 7).
    """
    engine = context.bot_data["engine"]
    user_id = context.bot_data["user_id"]
    args = _args(update)
    try:
        days = int(args[0]) if args else 7
    except ValueError:
        await update.message.reply_text("Usage: /trends [days]")
        return
    days = max(2, min(days, 90))

    await update.message.reply_chat_action(ChatAction.UPLOAD_PHOTO)

    with Session(engine) as s:
        settings = _load_settings(s, user_id)
        charts = [
            make_weight_chart(list_for_user(s, WeightEntry, user_id),
                              unit=settings.weight_unit, days=days),
            make_water_chart(list_for_user(s, WaterEntry, user_id),
                             goal_liters=settings.water_goal, days=days),
            make_sleep_chart(list_for_user(s, SleepEntry, user_id),
                             goal_hours=settings.sleep_goal, days=days),
        ]

    for png_bytes, caption in charts:
        await update.message.reply_photo(photo=io.BytesIO(png_bytes), caption=caption[:1024])


async def handle_reminder(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    /reminder on|off|HH:MM: toggle the daily reminder or move it.
    """
    engine = context.bot_data["engine"]
    user_id = context.bot_data["user_id"]
    reminders = context.bot_data.get("reminders")
    args = _args(update)
    if not args:
        await update.message.reply_text("Usage: /reminder on|off|HH:MM")
        return

    arg = args[0].lower()
    changes = {}
    if arg in ("on", "off"):
        changes["reminder_enabled"] = arg == "on"
    else:
        try:
            changes["reminder_time"] = normalize_clock(arg)
        except InvalidMeasurementError:
            await update.message.reply_text("Usage: /reminder on|off|HH:MM")
            return
        changes["reminder_enabled"] = True

    with Session(engine) as s:
        settings = get_user_settings(s, user_id) or UserSettings(user_id=user_id)
        settings.sqlmodel_update(changes)
        settings.updated_at = datetime.utcnow()
        s.add(settings)
        s.commit()
        s.refresh(settings)
        scheduled = reminders.apply(settings) if reminders else False

    if settings.reminder_enabled:
        reply = f"Daily reminder set for {settings.reminder_time}."
        if not scheduled:
            reply += " (Reminders aren't running in this process.)"
    else:
        reply = "Daily reminder turned off."
    await update.message.reply_text(reply)


async def error_handler(update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Global PTB error handler. Logs the exception and notifies the owner."""
    logger.exception("Unhandled exception", exc_info=context.error)

    chat_id: Optional[int] = context.bot_data.get("owner_chat_id")
    if not chat_id:
        return

    tb = "".join(traceback.format_exception(type(context.error), context.error, context.error.__traceback__))
    # Telegram message limit is 4096 chars
    short_tb = tb[-3000:] if len(tb) > 3000 else tb
    await context.bot.send_message(
        chat_id=chat_id,
        text=f"⚠️ Unhandled error:\n<pre>{html.escape(short_tb)}</pre>",
        parse_mode="HTML",
    )
