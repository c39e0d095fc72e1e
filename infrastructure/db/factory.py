from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from config import Settings
from domain.repositories import AccountStore
from infrastructure.db.account_store_postgres import PostgresAccountStore
from infrastructure.db.account_store_sqlite import SqliteAccountStore

logger = logging.getLogger(__name__)


@contextmanager
def open_account_store(settings: Settings) -> Iterator[AccountStore]:
    """
    Open the configured account store and close it on exit.

    Postgres is used when `DATABASE_URL` is set, SQLite at `DB_PATH`
    otherwise.
    """

    if settings.database_url:
        store = PostgresAccountStore(settings.database_url)
        logger.info("Using Postgres account store")
    else:
        store = SqliteAccountStore(settings.db_path)
        logger.info("Using SQLite account store at %s", settings.db_path)

    with store:
        yield store
