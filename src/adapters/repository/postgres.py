"""
PostgreSQL repository adapter - Implements the UserStore and SessionChallenge protocols.

This module provides the PostgreSQL implementation of the domain's
storage ports using psycopg3 with raw SQL.

Uniqueness Design:
------------------
The accounts table carries UNIQUE constraints on user_name and email. The
domain's pre-check (exists_by_username / exists_by_email) only exists to
give a precise error message; two concurrent registrations can both pass
it. The constraint decides the race: insert_account translates a
UniqueViolation into the same DuplicateAccount error the pre-check raises.

Memberships are written after the account row has been committed, one
statement per group. A failed membership insert leaves the account in
place.
"""

import logging
from pathlib import Path

import psycopg
from psycopg import errors
from psycopg_pool import ConnectionPool

from src.domain.exceptions import DuplicateAccount, StorageFailure
from src.domain.models import NewAccount

logger = logging.getLogger(__name__)

# Constraint name -> domain field reported in DuplicateAccount
_UNIQUE_FIELDS = {
    "accounts_user_name_key": "user_name",
    "accounts_email_key": "email",
}


class PostgresUserStore:
    """
    Implements UserStore and SessionChallenge protocols via psycopg3.

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

    def exists_by_username(self, user_name: str) -> bool:
        return self._exists("SELECT 1 FROM accounts WHERE user_name = %s", (user_name,))

    def exists_by_email(self, email: str) -> bool:
        return self._exists("SELECT 1 FROM accounts WHERE email = %s", (email,))

    def account_exists(self, account_id: int) -> bool:
        return self._exists("SELECT 1 FROM accounts WHERE id = %s", (account_id,))

    def insert_account(self, account: NewAccount) -> int:
        """
        Insert the account row and return its generated id.

        The INSERT runs in its own transaction; either the full row is
        committed or nothing is.

        Raises:
            DuplicateAccount: UNIQUE constraint on user_name or email violated
            StorageFailure: Any other database error
        """
        sql = """
            INSERT INTO accounts
                (user_name, display_name, email, title, password_hash, active, activation_token)
            VALUES (%s, %s, %s, %s, %s, %s, %s)
            RETURNING id
        """
        params = (
            account.user_name,
            account.display_name,
            account.email,
            account.title,
            account.password_hash,
            account.active,
            account.activation_token,
        )

        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, params)
                row = cursor.fetchone()
                conn.commit()
        except errors.UniqueViolation as e:
            field = _UNIQUE_FIELDS.get(e.diag.constraint_name or "", "user_name")
            value = account.email if field == "email" else account.user_name
            logger.info("Unique constraint %s rejected account %s", e.diag.constraint_name, account.user_name)
            raise DuplicateAccount(field, value) from e
        except psycopg.Error as e:
            logger.error("Account insert failed for %s - %s", account.user_name, e)
            raise StorageFailure("Account could not be stored") from e

        return row[0]

    def insert_membership(self, account_id: int, group_id: int) -> None:
        """
        Add the account to a group. Re-adding an existing membership is a no-op.

        Raises:
            StorageFailure: Unknown group or any other database error
        """
        sql = """
            INSERT INTO account_groups (account_id, group_id)
            VALUES (%s, %s)
            ON CONFLICT (account_id, group_id) DO NOTHING
        """
        try:
            with self._pool.connection() as conn:
                conn.execute(sql, (account_id, group_id))
                conn.commit()
        except psycopg.Error as e:
            raise StorageFailure(f"Membership of account {account_id} in group {group_id} failed") from e

    def default_group_ids(self) -> frozenset[int]:
        """
        Raises:
            StorageFailure: Any database error
        """
        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute("SELECT id FROM groups WHERE is_default")
                return frozenset(row[0] for row in cursor.fetchall())
        except psycopg.Error as e:
            raise StorageFailure("Default groups could not be read") from e

    def is_authenticated(self, session_id: str | None) -> bool:
        if not session_id:
            return False
        return self._exists(
            "SELECT 1 FROM sessions WHERE id = %s AND account_id IS NOT NULL",
            (session_id,),
        )

    def current_challenge_digest(self, session_id: str | None) -> str | None:
        return self._session_value("captcha_digest", session_id)

    def csrf_token(self, session_id: str | None) -> str | None:
        return self._session_value("csrf_token", session_id)

    def _session_value(self, column: str, session_id: str | None) -> str | None:
        if not session_id:
            return None
        # column is one of two fixed names, never user input
        sql = f"SELECT {column} FROM sessions WHERE id = %s"
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (session_id,))
            row = cursor.fetchone()
        return row[0] if row is not None else None

    def _exists(self, sql: str, params: tuple) -> bool:
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, params)
            return cursor.fetchone() is not None


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
