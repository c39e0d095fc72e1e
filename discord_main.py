import logging

from application.authenticator import Authenticator
from config import load_settings
from infrastructure.crypto.bcrypt_jwt import BcryptJwtCrypto
from infrastructure.db.factory import open_account_store
from interfaces.discord.handlers import create_discord_bot


def main() -> None:
    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not settings.discord_token:
        raise RuntimeError("DISCORD_TOKEN environment variable is not set.")

    crypto = BcryptJwtCrypto(
        settings.jwt_secret,
        rounds=settings.bcrypt_rounds,
        expires_minutes=settings.jwt_expires_minutes,
    )

    with open_account_store(settings) as store:
        authenticator = Authenticator(store, crypto, policy=settings.throttle_policy())
        bot = create_discord_bot(authenticator)
        # Logging is already configured above.
        bot.run(settings.discord_token, log_handler=None)


if __name__ == "__main__":
    main()
