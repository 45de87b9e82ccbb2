"""
React module.

Chat commands for training reactions, plus the passive handler that lets the
reaction engine answer ordinary messages.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional

import discord

from core.help_system import help_system
from core.utils import sanitize_text
from responders import ReactionEngine, StoreUnavailableError
from responders import messages

logger = logging.getLogger("reactbot.commands")

MODULE_NAME = "React"

# Register help immediately on module import
help_system.register_module(
    name=MODULE_NAME,
    description="Train the bot to react to certain terms.",
    help_command="react help",
    commands=[
        ("react term response", "React with `response` when someone says `term` (single word)"),
        ('react "some term" response', "React with `response` when someone says `some term` (multiple words)"),
        ("what was that", "Show the term behind the last reaction"),
        ("ignore that", "Forget the last term/response pair that was used"),
        ("react help", "Show this help message"),
    ],
)

# Command patterns (matched after the bot mention is stripped)
HELP_PATTERN = re.compile(r"^react\s+help\s*$", re.IGNORECASE)
REACT_PATTERN = re.compile(
    r'^react\s+(?:"([^"]*)"|(\S+))\s+(.+)$',
    re.IGNORECASE | re.DOTALL,
)
WHAT_PATTERN = re.compile(r"^what\s+was\s+that\b", re.IGNORECASE)
IGNORE_PATTERN = re.compile(r"^ignore\s+that\b", re.IGNORECASE)


@dataclass
class ParsedCommand:
    name: str
    term: str = ""
    response: str = ""


def parse_command(content: str) -> Optional[ParsedCommand]:
    text = (content or "").strip()
    if HELP_PATTERN.match(text):
        return ParsedCommand("help")
    match = REACT_PATTERN.match(text)
    if match:
        term = match.group(1) if match.group(1) is not None else match.group(2)
        return ParsedCommand("react", term=term, response=match.group(3).strip())
    if WHAT_PATTERN.match(text):
        return ParsedCommand("what")
    if IGNORE_PATTERN.match(text):
        return ParsedCommand("ignore")
    return None


def strip_bot_mention_prefix(content: str, bot_id: Optional[int]) -> tuple[str, bool]:
    """
    Strip a leading bot mention from content.

    Returns (stripped_content, was_stripped).
    """
    if bot_id is None:
        return content, False

    stripped = content.lstrip()
    for token in (f"<@{bot_id}>", f"<@!{bot_id}>"):
        if stripped.startswith(token):
            return stripped[len(token):].lstrip(" ,:"), True

    return content, False


async def execute_command(engine: ReactionEngine, command: ParsedCommand) -> str:
    """Run a parsed command and return the reply text."""
    try:
        if command.name == "react":
            result = await engine.train(command.term, command.response)
        elif command.name == "what":
            result = engine.what_was_that()
        elif command.name == "ignore":
            result = await engine.undo_last()
        else:
            raise ValueError(f"Unknown command: {command.name}")
    except StoreUnavailableError as exc:
        logger.error("Command %s failed, store unavailable: %s", command.name, exc)
        return messages.STORE_UNAVAILABLE_MESSAGE
    return result.text


async def handle_react_command(
    message: discord.Message,
    engine: ReactionEngine,
    content: str,
) -> bool:
    """
    Handle a command addressed to the bot.

    Returns True if the content was a command.
    """
    command = parse_command(content)
    if command is None:
        return False

    if command.name == "help":
        embed = help_system.get_module_embed(MODULE_NAME)
        await message.reply(embed=embed, mention_author=False)
        return True

    text = await execute_command(engine, command)
    await message.reply(
        sanitize_text(text),
        mention_author=False,
        allowed_mentions=discord.AllowedMentions.none(),
    )
    return True


async def handle_passive_reaction(message: discord.Message, engine: ReactionEngine) -> bool:
    """React to an ordinary message. Returns True if something was sent."""
    # Blank messages still go through so the message counter sees them
    response = await engine.react(message.content or "")
    if not response:
        return False

    try:
        await message.channel.send(
            sanitize_text(response),
            allowed_mentions=discord.AllowedMentions.none(),
        )
    except discord.HTTPException as e:
        logger.warning("Failed to send reaction: %s", e)
        return False
    return True
