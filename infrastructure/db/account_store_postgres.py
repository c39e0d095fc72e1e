from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, Optional

from psycopg2 import sql
from psycopg2.pool import ThreadedConnectionPool

from domain.models import Account
from domain.repositories import AccountNotFoundError, AccountStore, UsernameTakenError

_COLUMNS = "id, name, credential_hash, failed_attempts, last_failed_at, locked_until"
_MUTABLE_FIELDS = ("failed_attempts", "last_failed_at", "locked_until")


class PostgresAccountStore(AccountStore):
    """
    Postgres-backed implementation of `AccountStore`.

    IDs are generated by the database (`gen_random_uuid()`), timestamps are
    stored as TIMESTAMPTZ so psycopg2 hands back aware datetimes.

    `open()` creates a thread-safe connection pool and `close()` closes it.
    Each operation borrows its own connection and runs in its own
    transaction; connections found closed are dropped from the pool so a
    lost server connection is replaced on the next request.
    """

    def __init__(self, dsn: str, max_connections: int = 10) -> None:
        self._dsn = dsn
        self._max_connections = max_connections
        self._pool: Optional[ThreadedConnectionPool] = None

    def __enter__(self) -> "PostgresAccountStore":
        self.open()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def open(self) -> None:
        if self._pool is not None:
            return
        self._pool = ThreadedConnectionPool(1, self._max_connections, self._dsn)
        self._ensure_table()

    def close(self) -> None:
        if self._pool is not None:
            self._pool.closeall()
            self._pool = None

    @contextmanager
    def _connection(self) -> Iterator[Any]:
        if self._pool is None:
            raise RuntimeError("PostgresAccountStore is not open.")
        pool = self._pool
        conn = pool.getconn()
        try:
            with conn:
                yield conn
        finally:
            pool.putconn(conn, close=bool(conn.closed))

    def _ensure_table(self) -> None:
        """
        Ensure that the `accounts` table exists.

        `gen_random_uuid()` is built in from Postgres 13 onwards.
        """

        with self._connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    CREATE TABLE IF NOT EXISTS accounts (
                        id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
                        name TEXT NOT NULL UNIQUE,
                        credential_hash TEXT NOT NULL,
                        failed_attempts INTEGER NOT NULL DEFAULT 0,
                        last_failed_at TIMESTAMPTZ,
                        locked_until TIMESTAMPTZ
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
            last_failed_at=row[4],
            locked_until=row[5],
        )

    def _fetch_one(self, query: Any, params: tuple) -> Optional[tuple]:
        with self._connection() as conn:
            with conn.cursor() as cur:
                cur.execute(query, params)
                return cur.fetchone()

    def find_by_name(self, name: str) -> Optional[Account]:
        row = self._fetch_one(f"SELECT {_COLUMNS} FROM accounts WHERE name = %s", (name,))
        if not row:
            return None
        return self._to_domain(row)

    def get_by_id(self, account_id: str) -> Optional[Account]:
        row = self._fetch_one(f"SELECT {_COLUMNS} FROM accounts WHERE id = %s", (account_id,))
        if not row:
            return None
        return self._to_domain(row)

    def insert(self, name: str, credential_hash: str) -> Account:
        row = self._fetch_one(
            f"""
            INSERT INTO accounts (name, credential_hash)
            VALUES (%s, %s)
            ON CONFLICT (name) DO NOTHING
            RETURNING {_COLUMNS}
            """,
            (name, credential_hash),
        )
        if not row:
            raise UsernameTakenError(name)
        return self._to_domain(row)

    def update_by_id(self, account_id: str, **fields: Any) -> Account:
        unknown = set(fields) - set(_MUTABLE_FIELDS)
        if unknown:
            raise ValueError(f"Cannot update account fields: {sorted(unknown)}")
        if not fields:
            account = self.get_by_id(account_id)
            if account is None:
                raise AccountNotFoundError(account_id)
            return account

        query = sql.SQL("UPDATE accounts SET {} WHERE id = %s RETURNING {}").format(
            sql.SQL(", ").join(
                sql.SQL("{} = %s").format(sql.Identifier(column)) for column in fields
            ),
            sql.SQL(_COLUMNS),
        )
        row = self._fetch_one(query, (*fields.values(), account_id))
        if not row:
            raise AccountNotFoundError(account_id)
        return self._to_domain(row)
