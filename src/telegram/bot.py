"""Telegram bot setup — async, python-telegram-bot v20+."""

from __future__ import annotations

import logging

from telegram.ext import (
    Application,
    CallbackQueryHandler,
    CommandHandler,
    MessageHandler,
    filters,
)

from src.config.settings import get_settings
from src.services.trip_service import TripService
from src.telegram.handlers import (
    error_handler,
    handle_callback,
    handle_text,
    help_command,
    my_lists,
    new_list,
    start,
)

logger = logging.getLogger(__name__)


def create_bot(service: TripService, token: str | None = None) -> Application:
    """Build and configure the Telegram bot application.

    Args:
        service: TripService instance shared by all handlers.
        token: Bot token; defaults to TELEGRAM_BOT_TOKEN from settings.
    """
    app = Application.builder().token(token or get_settings().TELEGRAM_BOT_TOKEN).build()

    # Handlers read the service from bot_data
    app.bot_data["service"] = service

    commands = {
        "start": start,
        "help": help_command,
        "newlist": new_list,
        "mylists": my_lists,
    }
    for name, callback in commands.items():
        app.add_handler(CommandHandler(name, callback))

    app.add_handler(CallbackQueryHandler(handle_callback))
    app.add_handler(MessageHandler(filters.TEXT & ~filters.COMMAND, handle_text))
    app.add_error_handler(error_handler)

    logger.info("Telegram bot configured with %d command handlers.", len(commands))
    return app
