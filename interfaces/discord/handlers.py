from __future__ import annotations

import asyncio
import logging
from typing import Callable

import discord
from discord.ext import commands

from application.authenticator import Authenticator
from application.results import AuthResult
from application.services import request_signin, request_signup
from interfaces.replies import format_auth_reply

logger = logging.getLogger(__name__)

AuthRequest = Callable[[str, str, Authenticator], AuthResult]


async def run_credential_command(
    ctx: commands.Context,
    request: AuthRequest,
    name: str,
    password: str,
    authenticator: Authenticator,
) -> None:
    """
    Run a signup/signin request and reply with the result.

    Password hashing is slow on purpose, so the request runs in a worker
    thread and the gateway heartbeat keeps going meanwhile.
    """

    result = await asyncio.to_thread(request, name, password, authenticator)
    await ctx.send(format_auth_reply(result))


async def report_command_error(ctx: commands.Context, error: commands.CommandError) -> None:
    if isinstance(error, commands.PrivateMessageOnly):
        # The message carries a password; do not leave it in the channel.
        try:
            await ctx.message.delete()
        except discord.HTTPException as exc:
            logger.warning("Could not delete credential message in %s: %s", ctx.channel, exc)
        await ctx.send("Please send credentials to me in a direct message.")
    elif isinstance(error, commands.MissingRequiredArgument):
        await ctx.send(f"Usage: !{ctx.command.name} <name> <password>")
    elif isinstance(error, commands.CommandNotFound):
        return
    else:
        logger.error("Discord command %s failed", ctx.command, exc_info=error)


def create_discord_bot(authenticator: Authenticator) -> commands.Bot:
    """
    Configure and return a Discord bot with behaviour analogous to
    the Telegram interface: !start, !help, !signup and !signin.

    Credential commands only work in direct messages.
    """

    intents = discord.Intents.default()
    intents.message_content = True
    intents.dm_messages = True

    # Disable the default help command so we can provide our own `!help`.
    bot = commands.Bot(command_prefix="!", intents=intents, help_command=None)

    @bot.event
    async def on_ready():
        logger.info("Discord bot logged in as %s (id=%s)", bot.user, bot.user.id)

    @bot.event
    async def on_command_error(ctx: commands.Context, error: commands.CommandError):
        await report_command_error(ctx, error)

    @bot.command(name="start")
    async def start_cmd(ctx: commands.Context):
        await ctx.send(
            "Welcome to the account bot (Discord)!\n"
            "Use !signup to create an account and !signin to get a token.\n"
            "Type !help to see available commands."
        )

    @bot.command(name="help")
    async def help_cmd(ctx: commands.Context):
        await ctx.send(
            "!signup <name> <password>  - create an account (DM only)\n"
            "!signin <name> <password>  - sign in and receive a token (DM only)\n"
        )

    @bot.command(name="signup")
    @commands.dm_only()
    async def signup_cmd(ctx: commands.Context, name: str, *, password: str):
        await run_credential_command(ctx, request_signup, name, password, authenticator)

    @bot.command(name="signin")
    @commands.dm_only()
    async def signin_cmd(ctx: commands.Context, name: str, *, password: str):
        """
        !signin <name> <password>

        The password is the rest of the message and may contain spaces.
        """

        await run_credential_command(ctx, request_signin, name, password, authenticator)

    return bot
