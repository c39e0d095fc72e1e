from __future__ import annotations

import logging

import telebot
from telebot.apihelper import ApiTelegramException

from application.authenticator import Authenticator
from application.services import request_signin, request_signup
from interfaces.replies import format_auth_reply
from interfaces.telegram.command_args import command_name, parse_credentials

logger = logging.getLogger(__name__)


def handle_credentials_message(
    bot: telebot.TeleBot,
    message,
    authenticator: Authenticator,
) -> None:
    """
    Handle /signup and /signin.

    Outside private chats the message is deleted (it carries a password)
    and the user is asked to retry privately.
    """

    op = command_name(message.text)

    if message.chat.type != "private":
        try:
            bot.delete_message(message.chat.id, message.message_id)
        except ApiTelegramException as exc:
            logger.warning(
                "Could not delete credential message in chat %s: %s",
                message.chat.id,
                exc.description,
            )
        bot.send_message(
            message.chat.id,
            "Please send credentials to me in a private chat.",
        )
        return

    try:
        name, password = parse_credentials(message.text)
    except ValueError:
        bot.send_message(message.chat.id, f"Usage: /{op} <name> <password>")
        return

    if op == "signup":
        result = request_signup(name, password, authenticator)
    else:
        result = request_signin(name, password, authenticator)

    logger.debug("Telegram %s for chat %s: success=%s", op, message.chat.id, result.success)
    bot.send_message(message.chat.id, format_auth_reply(result))


def create_telegram_bot(
    bot_token: str,
    authenticator: Authenticator,
) -> telebot.TeleBot:
    """
    Configure and return a TeleBot instance wired to the application layer.

    This module contains only Telegram-specific concerns: parsing Telegram
    messages and mapping them to/from application services.
    """

    bot = telebot.TeleBot(bot_token)

    @bot.message_handler(commands=["start"])
    def handle_start(message):
        bot.send_message(
            message.chat.id,
            "Welcome to the account bot!\n"
            "Use /signup to create an account and /signin to get a token.\n"
            "Type /help to see available commands.",
        )

    @bot.message_handler(commands=["help"])
    def handle_help(message):
        bot.send_message(
            message.chat.id,
            "/signup <name> <password>  - create an account\n"
            "/signin <name> <password>  - sign in and receive a token\n",
        )

    @bot.message_handler(commands=["signup", "signin"])
    def handle_credentials(message):
        handle_credentials_message(bot, message, authenticator)

    return bot
