import logging

from application.authenticator import Authenticator
from config import load_settings
from infrastructure.crypto.bcrypt_jwt import BcryptJwtCrypto
from infrastructure.db.factory import open_account_store
from interfaces.telegram.handlers import create_telegram_bot


def main() -> None:
    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not settings.telegram_token:
        raise RuntimeError("TELEGRAM_TOKEN environment variable is not set.")

    crypto = BcryptJwtCrypto(
        settings.jwt_secret,
        rounds=settings.bcrypt_rounds,
        expires_minutes=settings.jwt_expires_minutes,
    )

    with open_account_store(settings) as store:
        authenticator = Authenticator(store, crypto, policy=settings.throttle_policy())
        bot = create_telegram_bot(settings.telegram_token, authenticator)
        logging.getLogger(__name__).info("Telegram bot polling")
        bot.infinity_polling()


if __name__ == "__main__":
    main()
