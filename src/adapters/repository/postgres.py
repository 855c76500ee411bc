"""
PostgreSQL repository adapter - Implements AccountRepository protocol.

This module provides the PostgreSQL implementation of the domain's
repository port using psycopg3 with raw SQL.

Atomicity Design:
-----------------
1. **Registration**: ``INSERT ... ON CONFLICT (email) DO NOTHING RETURNING``.
   The unique index on email picks exactly one winner among concurrent
   inserts; losers get no row back. There is no SELECT-then-INSERT window.

2. **Bulk operations**: block/unblock/delete use ``WHERE id = ANY(%s)`` and
   the purge uses ``WHERE status = %s``. Each is a single statement in a
   single transaction, so a mid-operation fault rolls back every row.

3. **Verification**: the activating UPDATE is conditional on
   ``status = 'unverified'``, so it cannot overwrite a block that landed
   between the lookup and the update.

Driver and pool errors are translated to StoreUnavailable; the original
exception is logged and chained but never surfaced to API clients.
"""

import logging
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path

import psycopg
from psycopg import Cursor
from psycopg_pool import ConnectionPool

from src.domain.exceptions import StoreUnavailable
from src.domain.ports import Account, AccountStatus

logger = logging.getLogger(__name__)

_COLUMNS = "id, name, email, password_hash, status, created_at, last_login, verification_token"


def _row_to_account(row: tuple) -> Account:
    return Account(
        id=row[0],
        name=row[1],
        email=row[2],
        password_hash=row[3],
        status=AccountStatus(row[4]),
        created_at=row[5],
        last_login=row[6],
        verification_token=row[7],
    )


class PostgresAccountRepository:
    """
    Implements AccountRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize repository with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    @contextmanager
    def _cursor(self) -> Iterator[Cursor]:
        """Yield a cursor in its own transaction, committing on success."""
        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                yield cursor
                conn.commit()
        except psycopg.Error as e:
            logger.error("Account store error: %s", e)
            raise StoreUnavailable("Account store unavailable") from e

    def insert(
        self, name: str, email: str, password_hash: str, verification_token: str
    ) -> Account | None:
        """
        Atomically insert a new UNVERIFIED account.

        Args:
            name: Display name
            email: Normalized email address
            password_hash: bcrypt hashed password
            verification_token: Single-use verification token

        Returns:
            The created account, or None if the email is already taken
        """
        sql = f"""
            INSERT INTO accounts (name, email, password_hash, status, verification_token, created_at)
            VALUES (%s, %s, %s, %s, %s, NOW())
            ON CONFLICT (email) DO NOTHING
            RETURNING {_COLUMNS}
        """

        with self._cursor() as cursor:
            cursor.execute(
                sql,
                (name, email, password_hash, AccountStatus.UNVERIFIED.value, verification_token),
            )
            row = cursor.fetchone()
        return _row_to_account(row) if row is not None else None

    def find_by_id(self, account_id: int) -> Account | None:
        with self._cursor() as cursor:
            cursor.execute(f"SELECT {_COLUMNS} FROM accounts WHERE id = %s", (account_id,))
            row = cursor.fetchone()
        return _row_to_account(row) if row is not None else None

    def find_by_email(self, email: str) -> Account | None:
        with self._cursor() as cursor:
            cursor.execute(f"SELECT {_COLUMNS} FROM accounts WHERE email = %s", (email,))
            row = cursor.fetchone()
        return _row_to_account(row) if row is not None else None

    def find_by_verification_token(self, token: str) -> Account | None:
        with self._cursor() as cursor:
            cursor.execute(
                f"SELECT {_COLUMNS} FROM accounts WHERE verification_token = %s", (token,)
            )
            row = cursor.fetchone()
        return _row_to_account(row) if row is not None else None

    def activate(self, account_id: int) -> bool:
        """Transition UNVERIFIED -> ACTIVE and clear the token. Returns True if applied."""
        sql = """
            UPDATE accounts
            SET status = %s, verification_token = NULL
            WHERE id = %s AND status = %s
        """

        with self._cursor() as cursor:
            cursor.execute(
                sql,
                (AccountStatus.ACTIVE.value, account_id, AccountStatus.UNVERIFIED.value),
            )
            return cursor.rowcount == 1

    def update_status(self, account_ids: Iterable[int], status: AccountStatus) -> int:
        with self._cursor() as cursor:
            cursor.execute(
                "UPDATE accounts SET status = %s WHERE id = ANY(%s)",
                (status.value, list(account_ids)),
            )
            return cursor.rowcount

    def touch_last_login(self, account_id: int, at: datetime) -> None:
        with self._cursor() as cursor:
            cursor.execute("UPDATE accounts SET last_login = %s WHERE id = %s", (at, account_id))

    def delete_by_ids(self, account_ids: Iterable[int]) -> int:
        with self._cursor() as cursor:
            cursor.execute("DELETE FROM accounts WHERE id = ANY(%s)", (list(account_ids),))
            return cursor.rowcount

    def delete_by_status(self, status: AccountStatus) -> int:
        with self._cursor() as cursor:
            cursor.execute("DELETE FROM accounts WHERE status = %s", (status.value,))
            return cursor.rowcount

    def list_by_last_login(self) -> list[Account]:
        with self._cursor() as cursor:
            cursor.execute(
                f"SELECT {_COLUMNS} FROM accounts ORDER BY last_login DESC NULLS LAST, id"
            )
            rows = cursor.fetchall()
        return [_row_to_account(row) for row in rows]


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # Structure: src/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning(f"Migrations directory not found: {migrations_dir}")
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info(f"Running {len(sql_files)} migration(s)")

    for sql_file in sql_files:
        logger.info(f"Executing migration: {sql_file.name}")
        try:
            sql_content = sql_file.read_text()

            with pool.connection() as conn:
                conn.execute(sql_content)

            logger.info(f"Migration complete: {sql_file.name}")
        except Exception as e:
            logger.error(f"Migration failed: {sql_file.name} - {e}")
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
