"""
Main entry point for the Discord bot.

Loads configuration from environment and starts the bot.
"""
from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from discord.errors import PrivilegedIntentsRequired

# Load environment variables from .env file
env_path = Path(__file__).parent / ".env"
load_dotenv(env_path)

# Import bot after .env is loaded so modules can read env vars at import time.
from bot import ReactBot
from core.config import ConfigError, bot_token, load_config

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("reactbot")

# Suppress verbose third-party library logs unless LOG_LEVEL is DEBUG
if LOG_LEVEL.upper() != "DEBUG":
    logging.getLogger("discord").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)

if not env_path.exists():
    logger.warning(".env file not found at %s", env_path)


async def main() -> None:
    token = bot_token()
    if not token:
        logger.error("Missing bot token. Set DISCORD_BOT_TOKEN in .env or environment.")
        return

    try:
        config = load_config()
    except ConfigError as e:
        logger.error("Invalid configuration: %s", e)
        return
    logging.getLogger().setLevel(getattr(logging, config.log_level, logging.INFO))

    bot = ReactBot(config)
    try:
        await bot.start(token)
    except PrivilegedIntentsRequired:
        logger.error(
            "Privileged intents required. Enable the MESSAGE CONTENT intent "
            "in the Discord developer portal."
        )
        await bot.close()
    except Exception as e:
        logger.error("Failed to start bot: %s", e)
        await bot.close()
        raise
    finally:
        if not bot.is_closed():
            await bot.close()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
