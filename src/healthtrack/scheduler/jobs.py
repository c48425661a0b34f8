"""
APScheduler jobs for the daily logging reminder.

Each user with reminders enabled gets one cron job firing at their
reminder_time. The job handle is owned by ReminderScheduler: applying new
settings replaces the job, disabling reminders removes it, and shutdown()
tears everything down.

The scheduler runs inside the same process as the bot (wired in __main__.py).
"""
import logging
from typing import Awaitable, Callable, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from sqlmodel import Session, select

from healthtrack.analysis.sleep import parse_clock
from healthtrack.config import get_settings

logger = logging.getLogger(__name__)

REMINDER_TEXT = "Remember to log your health data for today!"

Notifier = Callable[[int, str], Awaitable[None]]


def reminder_job_id(user_id: int) -> str:
    return f"daily_reminder_{user_id}"


class ReminderScheduler:
    """Owns the reminder jobs of every user on one AsyncIOScheduler."""

    def __init__(self, notifier: Notifier, scheduler: Optional[AsyncIOScheduler] = None):
        """
        Args:
            notifier: async callable (user_id, text) that delivers the reminder.
            scheduler: existing scheduler to attach to. Defaults to a new
                AsyncIOScheduler in Settings.reminder_timezone (not yet started).
        """
        self._notifier = notifier
        self._scheduler = scheduler or AsyncIOScheduler(
            timezone=get_settings().reminder_timezone
        )

    @property
    def scheduler(self) -> AsyncIOScheduler:
        return self._scheduler

    def start(self) -> None:
        if not self._scheduler.running:
            self._scheduler.start()

    def shutdown(self) -> None:
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)

    def apply(self, settings) -> bool:
        """
        Bring the user's reminder job in line with their settings.

        Args:
            settings: UserSettings (or Read model) with user_id,
                reminder_enabled and reminder_time.

        Returns:
            True if a reminder is now scheduled.
        """
        job_id = reminder_job_id(settings.user_id)
        if self._scheduler.get_job(job_id):
            self._scheduler.remove_job(job_id)
        if not settings.reminder_enabled:
            logger.info("Reminder disabled for user %d", settings.user_id)
            return False

        hour, minute = parse_clock(settings.reminder_time)
        self._scheduler.add_job(
            _send_reminder,
            trigger="cron",
            hour=hour,
            minute=minute,
            id=job_id,
            replace_existing=True,
            kwargs={"notifier": self._notifier, "user_id": settings.user_id},
        )
        logger.info(
            "Reminder for user %d scheduled daily at %02d:%02d", settings.user_id, hour, minute
        )
        return True

    def load_all(self, engine) -> int:
        """Schedule reminders for every user with settings in the DB. Returns the count."""
        from healthtrack.models.settings import UserSettings

        with Session(engine) as session:
            rows = session.exec(select(UserSettings)).all()
        return sum(1 for row in rows if self.apply(row))


async def _send_reminder(notifier: Notifier, user_id: int) -> None:
    """
    Job body: deliver one reminder.

    Never raises, so the scheduler keeps the job for tomorrow.
    """
    try:
        await notifier(user_id, REMINDER_TEXT)
        logger.info("Sent reminder to user %d", user_id)
    except Exception as exc:
        logger.error("Reminder for user %d failed: %s", user_id, exc)
