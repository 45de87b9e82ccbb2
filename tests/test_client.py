"""Tests for message routing in the Discord client."""
import asyncio
from unittest.mock import AsyncMock, MagicMock, PropertyMock, patch

import pytest

from bot.client import ReactBot
from core.config import ReactConfig

BOT_ID = 42


@pytest.fixture
def bot(brain, engine):
    client = ReactBot(ReactConfig(), brain=brain)
    client.engine = engine
    with patch.object(ReactBot, "user", new_callable=PropertyMock, return_value=MagicMock(id=BOT_ID)):
        yield client


def make_message(content, from_bot=False):
    message = MagicMock()
    message.id = 1
    message.content = content
    message.author.bot = from_bot
    message.reply = AsyncMock()
    message.channel.send = AsyncMock()
    return message


def deliver(bot, message):
    async def scenario():
        await bot.on_message(message)
        # wait for the scheduled passive reaction
        pending = asyncio.all_tasks() - {asyncio.current_task()}
        await asyncio.gather(*pending)

    asyncio.run(scenario())


class TestRouting:
    def test_bot_authors_ignored(self, bot):
        with patch("bot.client.handle_react_command", new=AsyncMock()) as command, \
                patch("bot.client.handle_passive_reaction", new=AsyncMock()) as passive:
            deliver(bot, make_message(f"<@{BOT_ID}> what was that", from_bot=True))
            deliver(bot, make_message("hello", from_bot=True))
        command.assert_not_awaited()
        passive.assert_not_awaited()

    def test_addressed_message_goes_to_commands_only(self, bot):
        message = make_message(f"<@!{BOT_ID}> what was that")
        with patch("bot.client.handle_react_command", new=AsyncMock()) as command, \
                patch("bot.client.handle_passive_reaction", new=AsyncMock()) as passive:
            deliver(bot, message)
        command.assert_awaited_once_with(message, bot.engine, "what was that")
        passive.assert_not_awaited()

    def test_addressed_non_command_gets_no_reaction(self, bot):
        message = make_message(f"<@{BOT_ID}> hello")
        with patch("bot.client.handle_passive_reaction", new=AsyncMock()) as passive:
            deliver(bot, message)
        passive.assert_not_awaited()
        message.reply.assert_not_awaited()

    def test_ordinary_message_goes_to_passive_reaction(self, bot):
        message = make_message("well hello there")
        with patch("bot.client.handle_react_command", new=AsyncMock()) as command, \
                patch("bot.client.handle_passive_reaction", new=AsyncMock()) as passive:
            deliver(bot, message)
        command.assert_not_awaited()
        passive.assert_awaited_once_with(message, bot.engine)

    def test_mention_of_someone_else_is_ordinary(self, bot):
        message = make_message("<@7> hello")
        with patch("bot.client.handle_react_command", new=AsyncMock()) as command, \
                patch("bot.client.handle_passive_reaction", new=AsyncMock()) as passive:
            deliver(bot, message)
        command.assert_not_awaited()
        passive.assert_awaited_once()


class TestEndToEnd:
    def test_trained_term_answered_in_channel(self, bot, engine):
        asyncio.run(engine.train("hello", "hi"))
        message = make_message("well hello there")
        deliver(bot, message)
        message.channel.send.assert_awaited_once()
        assert message.channel.send.await_args.args[0] == "hi"
        message.reply.assert_not_awaited()

    def test_train_command_replies(self, bot, engine):
        message = make_message(f"<@{BOT_ID}> react hello hi")
        deliver(bot, message)
        assert message.reply.await_args.args[0] == "Reacting to hello with hi"
        message.channel.send.assert_not_awaited()

    def test_passive_failure_is_logged_not_raised(self, bot, caplog):
        message = make_message("hello")
        failing = AsyncMock(side_effect=RuntimeError("boom"))
        with patch("bot.client.handle_passive_reaction", new=failing):
            deliver(bot, message)
        failing.assert_awaited_once()
        message.reply.assert_not_awaited()
        assert "boom" in caplog.text
