from __future__ import annotations

import sqlite3
import threading
import uuid
from datetime import datetime
from typing import Any, Optional

from domain.models import Account
from domain.repositories import AccountNotFoundError, AccountStore, UsernameTakenError

_COLUMNS = "id, name, credential_hash, failed_attempts, last_failed_at, locked_until"
_MUTABLE_FIELDS = ("failed_attempts", "last_failed_at", "locked_until")


class SqliteAccountStore(AccountStore):
    """
    SQLite-backed implementation of `AccountStore`.

    Manages the `accounts` table. One connection is held between `open()`
    and `close()` and shared across threads behind a lock; use the store
    as a context manager so the connection is always released.
    """

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path
        self._conn: Optional[sqlite3.Connection] = None
        self._lock = threading.Lock()

    def __enter__(self) -> "SqliteAccountStore":
        self.open()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def open(self) -> None:
        if self._conn is not None:
            return
        self._conn = sqlite3.connect(self._db_path, check_same_thread=False)
        self._ensure_table()

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def _get_connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise RuntimeError("SqliteAccountStore is not open.")
        return self._conn

    def _ensure_table(self) -> None:
        conn = self._get_connection()
        with conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS accounts (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL UNIQUE,
                    credential_hash TEXT NOT NULL,
                    failed_attempts INTEGER NOT NULL DEFAULT 0,
                    last_failed_at TEXT,
                    locked_until TEXT
                )
                """
            )

    @staticmethod
    def _to_domain(row: tuple) -> Account:
        return Account(
            id=str(row[0]),
            name=row[1],
            credential_hash=row[2],
            failed_attempts=int(row[3]),
            last_failed_at=_parse_timestamp(row[4]),
            locked_until=_parse_timestamp(row[5]),
        )

    def _fetch_one(self, where: str, value: str) -> Optional[Account]:
        with self._lock:
            cur = self._get_connection().execute(
                f"SELECT {_COLUMNS} FROM accounts WHERE {where} = ?",
                (value,),
            )
            row = cur.fetchone()
        if not row:
            return None
        return self._to_domain(row)

    def find_by_name(self, name: str) -> Optional[Account]:
        return self._fetch_one("name", name)

    def get_by_id(self, account_id: str) -> Optional[Account]:
        return self._fetch_one("id", account_id)

    def insert(self, name: str, credential_hash: str) -> Account:
        account = Account(id=str(uuid.uuid4()), name=name, credential_hash=credential_hash)
        conn = self._get_connection()
        with self._lock:
            try:
                with conn:
                    conn.execute(
                        """
                        INSERT INTO accounts (id, name, credential_hash, failed_attempts)
                        VALUES (?, ?, ?, 0)
                        """,
                        (account.id, account.name, account.credential_hash),
                    )
            except sqlite3.IntegrityError as exc:
                raise UsernameTakenError(name) from exc
        return account

    def update_by_id(self, account_id: str, **fields: Any) -> Account:
        unknown = set(fields) - set(_MUTABLE_FIELDS)
        if unknown:
            raise ValueError(f"Cannot update account fields: {sorted(unknown)}")

        if fields:
            assignments = ", ".join(f"{column} = ?" for column in fields)
            values = [_to_column(value) for value in fields.values()]
            conn = self._get_connection()
            with self._lock, conn:
                cur = conn.execute(
                    f"UPDATE accounts SET {assignments} WHERE id = ?",
                    (*values, account_id),
                )
                updated = cur.rowcount

            if not updated:
                raise AccountNotFoundError(account_id)

        account = self.get_by_id(account_id)
        if account is None:
            raise AccountNotFoundError(account_id)
        return account


def _to_column(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if value is None:
        return None
    return datetime.fromisoformat(value)
