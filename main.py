#!/usr/bin/env python3
"""
Ticketeer - Entry Point
=======================

Support ticket bot for Discord.

Startup:
    1. Load .env
    2. Validate configuration (fails fast on missing/invalid values)
    3. Open the ticket database
    4. Start the bot
"""

import asyncio
import sys

from dotenv import load_dotenv

from ticketeer.core.config import ConfigValidationError, validate_and_log_config
from ticketeer.core.database import DatabaseManager
from ticketeer.core.logger import logger
from ticketeer.bot import TicketeerBot


async def main() -> None:
    """Load configuration, build the bot and run it until it stops."""
    load_dotenv()

    logger.tree("TICKETEER STARTING", [
        ("Commands", "/ticket"),
    ], emoji="🎫")

    try:
        config = validate_and_log_config()
    except ConfigValidationError as e:
        logger.critical(f"Configuration invalid: {e}")
        sys.exit(1)

    logger.set_webhook(config.error_webhook_url)

    db = DatabaseManager(config.database_path)
    bot = TicketeerBot(config, db)

    async with bot:
        await bot.start(config.discord_token)


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("🛑 Bot stopped by user (Ctrl+C)")
