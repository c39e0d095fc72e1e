from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import timedelta
from typing import Mapping, Optional

from dotenv import load_dotenv

from domain.throttle import ThrottlePolicy

DEFAULT_JWT_SECRET = "default-secret-change-me"


@dataclass(frozen=True)
class Settings:
    """Process configuration, read once at startup by the entry points."""

    discord_token: Optional[str] = None
    telegram_token: Optional[str] = None
    db_path: str = "auth.db"
    database_url: Optional[str] = None
    jwt_secret: str = DEFAULT_JWT_SECRET
    jwt_expires_minutes: int = 24 * 60
    max_attempts: int = 3
    window_minutes: int = 5
    bcrypt_rounds: int = 10
    log_level: str = "INFO"
    environment: str = "development"

    def throttle_policy(self) -> ThrottlePolicy:
        return ThrottlePolicy(
            max_attempts=self.max_attempts,
            window=timedelta(minutes=self.window_minutes),
        )


def _get_int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{key} must be an integer, got {raw!r}") from None


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build `Settings` from environment variables.

    When `env` is omitted, a local `.env` file is loaded into `os.environ`
    first. Refuses the default JWT secret outside development.
    """

    if env is None:
        load_dotenv()
        env = os.environ

    settings = Settings(
        discord_token=env.get("DISCORD_TOKEN") or None,
        telegram_token=env.get("TELEGRAM_TOKEN") or None,
        db_path=env.get("DB_PATH", "auth.db"),
        database_url=env.get("DATABASE_URL") or None,
        jwt_secret=env.get("JWT_SECRET", DEFAULT_JWT_SECRET),
        jwt_expires_minutes=_get_int(env, "JWT_EXPIRES_MINUTES", 24 * 60),
        max_attempts=_get_int(env, "AUTH_MAX_ATTEMPTS", 3),
        window_minutes=_get_int(env, "AUTH_WINDOW_MINUTES", 5),
        bcrypt_rounds=_get_int(env, "BCRYPT_ROUNDS", 10),
        log_level=env.get("LOG_LEVEL", "INFO").upper(),
        environment=env.get("ENVIRONMENT", "development"),
    )

    if settings.environment != "development" and settings.jwt_secret == DEFAULT_JWT_SECRET:
        raise RuntimeError(
            "JWT_SECRET must be changed from the default outside development."
        )

    return settings
