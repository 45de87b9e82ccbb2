"""
Discord bot client - lean event handling.

Commands addressed to the bot go to the react module; every other message
is offered to the reaction engine. The brain is flushed periodically and on
shutdown.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Optional

import discord

from core.brain import Brain, StoreUnavailableError
from core.config import ReactConfig
from modules.react import (
    handle_passive_reaction,
    handle_react_command,
    strip_bot_mention_prefix,
)
from responders import ReactionEngine

logger = logging.getLogger("reactbot")


class ReactBot(discord.Client):
    """
    Main Discord bot client.

    Handles:
    - Discord events (on_ready, on_message)
    - Routing between commands and passive reactions
    - Brain persistence
    """

    def __init__(self, config: ReactConfig, brain: Optional[Brain] = None) -> None:
        intents = discord.Intents.default()
        intents.message_content = True
        intents.guilds = True
        super().__init__(intents=intents)

        self.config = config
        self.brain = brain or Brain(config.brain_path)
        self.engine = ReactionEngine(self.brain, config)
        self.ready_once = False
        self._flush_task: Optional[asyncio.Task] = None

    # ─── Lifecycle ────────────────────────────────────────────────────────────

    async def setup_hook(self) -> None:
        """Called when the bot is starting up."""
        await self.brain.load()
        await self.engine.initialize()
        self._flush_task = asyncio.create_task(self._flush_loop())

    async def on_ready(self) -> None:
        if not self.ready_once:
            logger.info("Bot ready as %s", self.user)
            self.ready_once = True

    async def close(self) -> None:
        """Cleanup when shutting down."""
        if self._flush_task:
            self._flush_task.cancel()
        try:
            await self.brain.close()
        except StoreUnavailableError as e:
            logger.error("Failed to save brain on shutdown: %s", e)
        await super().close()

    # ─── Message Events ───────────────────────────────────────────────────────

    async def on_message(self, message: discord.Message) -> None:
        """Handle incoming messages."""
        if message.author.bot:
            return

        bot_id = self.user.id if self.user else None
        content, addressed = strip_bot_mention_prefix(message.content or "", bot_id)

        if addressed:
            try:
                await handle_react_command(message, self.engine, content)
            except discord.HTTPException as e:
                logger.warning("Failed to reply to command in message %s: %s", message.id, e)
            return

        # Run passive reaction with error handling
        async def _safe_reaction():
            try:
                await handle_passive_reaction(message, self.engine)
            except Exception as e:
                logger.error("Reaction error for message %s: %s", message.id, e)

        asyncio.create_task(_safe_reaction())

    # ─── Persistence ──────────────────────────────────────────────────────────

    async def _flush_loop(self) -> None:
        """Periodically write the brain to disk."""
        while True:
            await asyncio.sleep(self.config.brain_flush_interval)
            try:
                await self.brain.flush()
            except StoreUnavailableError as e:
                logger.error("Failed to save brain: %s", e)
