"""Tests for Telegram bot command handlers."""
from datetime import date, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlmodel import Session, select

from healthtrack.bot.handlers import (
    error_handler,
    handle_bmi,
    handle_reminder,
    handle_sleep,
    handle_today,
    handle_trends,
    handle_water,
    handle_weight,
)
from healthtrack.analysis.units import WeightUnit
from healthtrack.models.entries import SleepEntry, WaterEntry, WeightEntry
from healthtrack.models.settings import UserSettings


# ─── PTB Update mock helper ───────────────────────────────────────────────────

def make_update(text: str = "") -> MagicMock:
    """Build a minimal python-telegram-bot Update mock."""
    update = MagicMock()
    update.effective_user.id = 1
    update.message.text = text
    update.message.reply_text = AsyncMock()
    update.message.reply_photo = AsyncMock()
    update.message.reply_chat_action = AsyncMock()
    return update


def make_context(engine=None, reminders=None, owner_chat_id=None) -> MagicMock:
    """Build a minimal PTB context mock with our custom bot_data."""
    ctx = MagicMock()
    ctx.bot_data = {
        "engine": engine,
        "user_id": 1,
        "reminders": reminders,
        "owner_chat_id": owner_chat_id,
    }
    ctx.bot.send_message = AsyncMock()
    return ctx


def replied(update) -> str:
    return update.message.reply_text.call_args.args[0]


@pytest.fixture(name="db")
def db_fixture(engine, user):
    return engine


def _save_settings(engine, **values):
    with Session(engine) as s:
        s.add(UserSettings(user_id=1, **values))
        s.commit()


# ─── /weight ──────────────────────────────────────────────────────────────────

class TestWeight:
    @pytest.mark.asyncio
    async def test_logs_kg_and_reports_bmi(self, db):
        update = make_update("/weight 72.5 after run")
        await handle_weight(update, make_context(db))
        assert replied(update) == "Logged 72.5 kg. BMI 23.7 (Normal weight)."
        with Session(db) as s:
            entry = s.exec(select(WeightEntry)).one()
        assert entry.weight == 72.5
        assert entry.notes == "after run"
        assert entry.date == date.today()

    @pytest.mark.asyncio
    async def test_pounds_stored_as_kg(self, db):
        _save_settings(db, weight_unit=WeightUnit.LB)
        update = make_update("/weight 160")
        await handle_weight(update, make_context(db))
        assert replied(update) == "Logged 160.0 lb. BMI 23.7 (Normal weight)."
        with Session(db) as s:
            assert s.exec(select(WeightEntry)).one().weight == 72.57

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["/weight", "/weight heavy"])
    async def test_usage(self, db, text):
        update = make_update(text)
        await handle_weight(update, make_context(db))
        assert replied(update) == "Usage: /weight <value> [note]"

    @pytest.mark.asyncio
    async def test_non_positive(self, db):

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["/weight inf", "/weight nan"])
    async def test_not_finite(self, db, text):
        update = make_update(text)
        await handle_weight(update, make_context(db))
        assert replied(update) == "Weight must be a positive number."
        with Session(db) as s:
            assert s.exec(select(WeightEntry)).all() == []


# ─── /water ───────────────────────────────────────────────────────────────────

class TestWater:
    @pytest.mark.asyncio
    async def test_reports_daily_progress(self, db):
        ctx = make_context(db)
        await handle_water(make_update("/water 500"), ctx)
        update = make_update("/water 1500")
        await handle_water(update, ctx)
        assert replied(update) == "Logged 1500 mL. Today: 2000 mL (80% of 2.5 L)."
        with Session(db) as s:
            assert len(s.exec(select(WaterEntry)).all()) == 2

    @pytest.mark.asyncio
    async def test_custom_goal(self, db):
        _save_settings(db, water_goal=2.0)
        update = make_update("/water 3000")
        await handle_water(update, make_context(db))
        assert replied(update) == "Logged 3000 mL. Today: 3000 mL (100% of 2 L)."

    @pytest.mark.asyncio
    async def test_usage(self, db):
        update = make_update("/water lots")
        await handle_water(update, make_context(db))
        assert replied(update) == "Usage: /water <milliliters>"


# ─── /sleep ───────────────────────────────────────────────────────────────────

class TestSleep:
    @pytest.mark.asyncio
    async def test_overnight_dated_yesterday(self, db):
        update = make_update("/sleep 23:30 6:30 good")
        await handle_sleep(update, make_context(db))
        assert replied(update) == "Logged 7h 0m of sleep."
        with Session(db) as s:
            entry = s.exec(select(SleepEntry)).one()
        assert entry.date == date.today() - timedelta(days=1)
        assert entry.wakeup_time == "06:30"
        assert entry.quality == "good"

    @pytest.mark.asyncio
    async def test_nap_dated_today(self, db):
        await handle_sleep(make_update("/sleep 13:00 13:45"), make_context(db))
        with Session(db) as s:
            assert s.exec(select(SleepEntry)).one().date == date.today()

    @pytest.mark.asyncio
    async def test_bad_time(self, db):
        update = make_update("/sleep 25:00 07:00")
        await handle_sleep(update, make_context(db))
        assert replied(update).startswith("Couldn't read that time")

    @pytest.mark.asyncio
    async def test_bad_quality(self, db):
        update = make_update("/sleep 23:00 07:00 amazing")
        await handle_sleep(update, make_context(db))
        assert replied(update).startswith("Quality must be one of: excellent, good")

    @pytest.mark.asyncio
    async def test_usage(self, db):
        update = make_update("/sleep 23:00")
        await handle_sleep(update, make_context(db))
        assert replied(update).startswith("Usage: /sleep")


# ─── /bmi, /today, /trends ────────────────────────────────────────────────────

class TestReports:
    @pytest.mark.asyncio
    async def test_bmi_without_weigh_ins(self, db):
        update = make_update("/bmi")
        await handle_bmi(update, make_context(db))
        assert replied(update).startswith("No weigh-ins yet")

    @pytest.mark.asyncio
    async def test_bmi_from_latest(self, seeded_engine):
        update = make_update("/bmi")
        await handle_bmi(update, make_context(seeded_engine))
        assert replied(update) == "BMI 23.4 · Normal weight"

    @pytest.mark.asyncio
    async def test_today(self, seeded_engine):
        update = make_update("/today")
        await handle_today(update, make_context(seeded_engine))
        text = replied(update)
        assert text.startswith("Summary for")
        assert "Weight: 71.6 kg" in text

    @pytest.mark.asyncio
    async def test_trends_sends_three_charts(self, seeded_engine):
        update = make_update("/trends 3")
        await handle_trends(update, make_context(seeded_engine))
        assert update.message.reply_photo.await_count == 3
        captions = [c.kwargs["caption"] for c in update.message.reply_photo.call_args_list]
        assert captions[0].startswith("Weight · last 3 days")
        assert captions[1].startswith("Water · last 3 days")
        assert captions[2].startswith("Sleep · last 3 days")

    @pytest.mark.asyncio
    async def test_trends_days_clamped(self, db):
        update = make_update("/trends 500")
        await handle_trends(update, make_context(db))
        assert update.message.reply_photo.call_args.kwargs["caption"].startswith("Sleep · last 90 days")

    @pytest.mark.asyncio
    async def test_trends_usage(self, db):
        update = make_update("/trends week")
        await handle_trends(update, make_context(db))
        assert replied(update) == "Usage: /trends [days]"
        update.message.reply_photo.assert_not_awaited()


# ─── /reminder ────────────────────────────────────────────────────────────────

class TestReminder:
    @pytest.mark.asyncio
    async def test_set_time_schedules(self, db):
        reminders = MagicMock()
        reminders.apply.return_value = True
        update = make_update("/reminder 21:30")
        await handle_reminder(update, make_context(db, reminders=reminders))
        assert replied(update) == "Daily reminder set for 21:30."
        reminders.apply.assert_called_once()
        with Session(db) as s:
            row = s.exec(select(UserSettings)).one()
        assert (row.reminder_time, row.reminder_enabled) == ("21:30", True)

    @pytest.mark.asyncio
    async def test_off(self, db):
        _save_settings(db, water_goal=3.0)
        reminders = MagicMock()
        reminders.apply.return_value = False
        update = make_update("/reminder off")
        await handle_reminder(update, make_context(db, reminders=reminders))
        assert replied(update) == "Daily reminder turned off."
        with Session(db) as s:
            row = s.exec(select(UserSettings)).one()
        assert row.reminder_enabled is False
        assert row.water_goal == 3.0

    @pytest.mark.asyncio
    async def test_without_scheduler(self, db):
        update = make_update("/reminder on")
        await handle_reminder(update, make_context(db))
        assert replied(update) == "Daily reminder set for 07:00. (Reminders aren't running in this process.)"

    @pytest.mark.asyncio
    async def test_usage(self, db):
        update = make_update("/reminder later")
        await handle_reminder(update, make_context(db))
        assert replied(update) == "Usage: /reminder on|off|HH:MM"


# ─── error handler ────────────────────────────────────────────────────────────

class TestErrorHandler:
    @pytest.mark.asyncio
    async def test_notifies_owner(self):
        ctx = make_context(owner_chat_id=42)
        ctx.error = RuntimeError("boom")
        await error_handler(None, ctx)
        ctx.bot.send_message.assert_awaited_once()
        assert ctx.bot.send_message.call_args.kwargs["chat_id"] == 42

    @pytest.mark.asyncio
    async def test_traceback_is_html_escaped(self):
        ctx = make_context(owner_chat_id=42)
        ctx.error = ValueError("bad tag <module> & more")
        await error_handler(None, ctx)
        text = ctx.bot.send_message.call_args.kwargs["text"]
        assert "&lt;module&gt; &amp; more" in text
        assert "<module>" not in text

    @pytest.mark.asyncio
    async def test_no_owner_configured(self):
        ctx = make_context()
        ctx.error = RuntimeError("boom")
        await error_handler(None, ctx)
        ctx.bot.send_message.assert_not_awaited()
