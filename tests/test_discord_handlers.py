import asyncio
import inspect
import time
import unittest
from types import SimpleNamespace
from unittest import mock

import discord
from discord.ext import commands

from application.authenticator import Authenticator
from doubles import FakeClock, FakeCrypto, InMemoryAccountStore
from interfaces.discord.handlers import create_discord_bot, report_command_error


class SlowCrypto(FakeCrypto):
    """Blocks like a real bcrypt check would."""

    def verify(self, plaintext, hashed):
        time.sleep(0.3)
        return super().verify(plaintext, hashed)


def _ctx():
    return SimpleNamespace(
        send=mock.AsyncMock(),
        message=SimpleNamespace(delete=mock.AsyncMock()),
        channel="general",
        command=SimpleNamespace(name="signin"),
    )


async def _worst_stall(stop: asyncio.Event) -> float:
    loop = asyncio.get_running_loop()
    worst = 0.0
    last = loop.time()
    while not stop.is_set():
        await asyncio.sleep(0.005)
        now = loop.time()
        worst = max(worst, now - last)
        last = now
    return worst


class DiscordCommandTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self.store = InMemoryAccountStore()
        self.crypto = SlowCrypto()
        self.auth = Authenticator(self.store, self.crypto, clock=FakeClock())
        self.auth.signup("alice", "password1")
        self.bot = create_discord_bot(self.auth)

    async def test_signin_does_not_block_the_event_loop(self):
        stop = asyncio.Event()
        ticker = asyncio.create_task(_worst_stall(stop))
        ctx = _ctx()

        await self.bot.get_command("signin").callback(ctx, "alice", password="wrong-pass")
        stop.set()
        worst = await ticker

        self.assertEqual(self.crypto.verify_calls, 1)
        self.assertLess(worst, 0.15)
        ctx.send.assert_awaited_once_with(
            "Invalid username or password [INVALID_CREDENTIALS]"
        )

    async def test_signup_replies_with_result(self):
        ctx = _ctx()

        await self.bot.get_command("signup").callback(ctx, "bob", password="pass word 2")

        reply = ctx.send.await_args[0][0]
        self.assertTrue(reply.startswith("User created successfully"))
        self.assertIsNotNone(self.store.find_by_name("bob"))

    def test_registered_commands(self):
        self.assertEqual(
            {c.name for c in self.bot.commands}, {"start", "help", "signup", "signin"}
        )


class DiscordCommandErrorTests(unittest.IsolatedAsyncioTestCase):
    async def test_guild_credentials_are_deleted_and_refused(self):
        ctx = _ctx()

        await report_command_error(ctx, commands.PrivateMessageOnly())

        ctx.message.delete.assert_awaited_once()
        ctx.send.assert_awaited_once_with("Please send credentials to me in a direct message.")

    async def test_refusal_sent_when_delete_is_forbidden(self):
        ctx = _ctx()
        ctx.message.delete.side_effect = discord.Forbidden(
            mock.Mock(status=403, reason="Forbidden"), "Missing Permissions"
        )

        with self.assertLogs("interfaces.discord.handlers", level="WARNING"):
            await report_command_error(ctx, commands.PrivateMessageOnly())

        ctx.send.assert_awaited_once_with("Please send credentials to me in a direct message.")

    async def test_missing_argument_replies_with_usage(self):
        ctx = _ctx()
        param = commands.Parameter("password", inspect.Parameter.KEYWORD_ONLY)

        await report_command_error(ctx, commands.MissingRequiredArgument(param))

        ctx.send.assert_awaited_once_with("Usage: !signin <name> <password>")

    async def test_unknown_command_is_ignored(self):
        ctx = _ctx()

        await report_command_error(ctx, commands.CommandNotFound())

        ctx.send.assert_not_awaited()

    async def test_other_errors_are_logged(self):
        ctx = _ctx()

        with self.assertLogs("interfaces.discord.handlers", level="ERROR"):
            await report_command_error(ctx, commands.CommandError("boom"))

        ctx.send.assert_not_awaited()


if __name__ == "__main__":
    unittest.main()
