"""
Main entrypoint: starts Telegram bot + reminder scheduler in one process.

FastAPI runs separately under uvicorn.

Usage:
    python -m healthtrack                      # starts bot + reminders
    python -m healthtrack export DIR           # CSV export
    python -m healthtrack import FILE [FILE]   # CSV import
    python -m healthtrack summary [--on DATE]  # today's numbers
    uvicorn healthtrack.api.main:app --host 0.0.0.0 --port 8000  # starts API
"""
import asyncio
import logging
import sys

from healthtrack.config import get_settings

logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
)
logger = logging.getLogger(__name__)

_TRANSFER_COMMANDS = ("export", "import", "summary")


async def _run_bot() -> None:
    from healthtrack.bot.app import build_bot_app, make_telegram_notifier
    from healthtrack.db.engine import ensure_user, get_engine
    from healthtrack.scheduler.jobs import ReminderScheduler

    settings = get_settings()
    if not settings.telegram_bot_token:
        logger.error("HEALTHTRACK_TELEGRAM_BOT_TOKEN is not set.")
        sys.exit(1)

    engine = get_engine()
    ensure_user(engine, settings.user_id, settings.default_username)

    app = build_bot_app(
        token=settings.telegram_bot_token,
        engine=engine,
        user_id=settings.user_id,
        owner_chat_id=settings.telegram_allowed_user_id,
    )

    # Reminders need somewhere to go
    reminders = None
    if settings.telegram_allowed_user_id:
        reminders = ReminderScheduler(
            make_telegram_notifier(app, settings.telegram_allowed_user_id)
        )
        app.bot_data["reminders"] = reminders
    else:
        logger.info("HEALTHTRACK_TELEGRAM_ALLOWED_USER_ID not set: reminders disabled.")

    logger.info("Starting Telegram bot...")
    async with app:
        if reminders:
            reminders.start()
            logger.info("Scheduler started (%d reminders)", reminders.load_all(engine))
        await app.start()
        await app.updater.start_polling(drop_pending_updates=True)
        logger.info("Bot is running. Press Ctrl+C to stop.")

        try:
            await asyncio.Event().wait()
        except (KeyboardInterrupt, SystemExit):
            logger.info("Shutting down...")
        finally:
            await app.updater.stop()
            await app.stop()
            if reminders:
                reminders.shutdown()
            logger.info("Goodbye.")


if __name__ == "__main__":
    # Dispatch on first argument: `python -m healthtrack export ...` or just `python -m healthtrack`
    if len(sys.argv) > 1 and sys.argv[1] in _TRANSFER_COMMANDS:
        from healthtrack.scripts.transfer import run

        sys.exit(run(sys.argv[1:]))
    else:
        asyncio.run(_run_bot())
