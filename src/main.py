"""Entry point — load catalog, initialise DB, start Telegram bot."""

from __future__ import annotations

import asyncio
import logging
import logging.handlers
import os
import signal
import sys

from dotenv import load_dotenv

from src.catalog.loader import Catalog, load_catalog
from src.config.settings import Settings, get_settings
from src.errors import CatalogError

LOG_DIR = "data/logs"
LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"

logger = logging.getLogger(__name__)


def setup_logging(level: str) -> None:
    """Log to the console and to a rotating file under data/logs."""
    os.makedirs(LOG_DIR, exist_ok=True)
    formatter = logging.Formatter(LOG_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    root_logger.addHandler(console)

    file_handler = logging.handlers.RotatingFileHandler(
        os.path.join(LOG_DIR, "bot.log"), maxBytes=5_000_000, backupCount=3
    )
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)


async def run_bot(settings: Settings, catalog: Catalog) -> None:
    """Open the trip store and poll Telegram until SIGINT/SIGTERM."""
    from src.db.migrations import init_db
    from src.services.trip_service import TripService
    from src.telegram.bot import create_bot

    repo = await init_db(settings.DATABASE_URL)
    logger.info("Database ready.")

    service = TripService(
        repo,
        catalog,
        max_people=settings.MAX_PEOPLE,
        max_days=settings.MAX_DAYS,
        max_trips=settings.MAX_TRIPS_PER_USER,
    )
    app = create_bot(service, settings.TELEGRAM_BOT_TOKEN)

    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop_event.set)
        except NotImplementedError:
            pass  # Windows event loops

    try:
        async with app:
            await app.start()
            await app.updater.start_polling(drop_pending_updates=True)
            logger.info("Bot is running with %d dishes. Press Ctrl+C to stop.", len(catalog.dishes))

            await stop_event.wait()

            logger.info("Shutting down...")
            await app.updater.stop()
            await app.stop()
    finally:
        await repo.close()


def main() -> None:
    load_dotenv()
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)

    # Bad catalog data is fatal
    try:
        catalog = load_catalog(settings.CATALOG_PATH or None)
    except CatalogError:
        logger.exception("Catalog validation failed, refusing to start.")
        sys.exit(1)

    try:
        asyncio.run(run_bot(settings, catalog))
    except KeyboardInterrupt:
        logger.info("Bot stopped.")


if __name__ == "__main__":
    main()
