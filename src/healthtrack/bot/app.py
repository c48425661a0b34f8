"""
Telegram bot application factory.

Builds and configures the python-telegram-bot Application with all
handlers registered.
"""
from telegram.ext import Application, CommandHandler

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


def build_bot_app(
    token: str,
    engine,
    user_id: int = 1,
    reminders=None,
    owner_chat_id: int = None,
) -> Application:
    """
    Build and return the PTB Application.

    Args:
        token: Telegram bot token.
        engine: SQLAlchemy engine (SQLModel).
        user_id: HealthTrack user the chat logs entries for.
        reminders: ReminderScheduler instance (optional; /reminder only
            persists the setting if None).
        owner_chat_id: Telegram chat ID for reminders and error notifications.

    Returns:
        Configured Application (not yet started).
    """
    app = Application.builder().token(token).build()

    # Store shared resources in bot_data so handlers can access them
    app.bot_data["engine"] = engine
    app.bot_data["user_id"] = user_id
    app.bot_data["reminders"] = reminders
    app.bot_data["owner_chat_id"] = owner_chat_id

    app.add_handler(CommandHandler("weight", handle_weight))
    app.add_handler(CommandHandler("water", handle_water))
    app.add_handler(CommandHandler("sleep", handle_sleep))
    app.add_handler(CommandHandler("bmi", handle_bmi))
    app.add_handler(CommandHandler(["today", "start"], handle_today))
    app.add_handler(CommandHandler("trends", handle_trends))
    app.add_handler(CommandHandler("reminder", handle_reminder))

    # Global error handler sends tracebacks to owner via Telegram
    app.add_error_handler(error_handler)

    return app


def make_telegram_notifier(app: Application, chat_id: int):
    """Notifier for ReminderScheduler that messages one Telegram chat."""

    async def notify(user_id: int, text: str) -> None:
        await app.bot.send_message(chat_id=chat_id, text=text)

    return notify
