"""
Shared fixtures for integration tests.

Requires PostgreSQL to be running and reachable at DATABASE_URL.
Every test starts from an empty database holding only the master account.
"""

from collections.abc import Callable, Generator

import bcrypt
import pytest
from psycopg_pool import ConnectionPool

from src.adapters.repository.postgres import PostgresUserStore, run_migrations
from src.config.settings import get_settings


@pytest.fixture(scope="session")
def pool() -> Generator[ConnectionPool, None, None]:
    """Create connection pool and apply migrations once per test run."""
    settings = get_settings()
    pool = ConnectionPool(
        conninfo=settings.database_url,
        min_size=1,
        max_size=10,
        open=True,
    )
    run_migrations(pool)
    yield pool
    pool.close()


@pytest.fixture
def store(pool: ConnectionPool) -> PostgresUserStore:
    """Create user store instance for each test."""
    return PostgresUserStore(pool)


@pytest.fixture(autouse=True)
def clean_database(pool: ConnectionPool) -> Generator[None, None, None]:
    """Reset accounts and sessions, then seed the master account (id 1)."""
    password_hash = bcrypt.hashpw(b"master-password", bcrypt.gensalt(10)).decode()
    with pool.connection() as conn:
        conn.execute("TRUNCATE sessions, account_groups, accounts RESTART IDENTITY CASCADE")
        conn.execute(
            """
            INSERT INTO accounts (user_name, display_name, email, title, password_hash, active)
            VALUES ('root', 'Root', 'root@example.com', 'Master Account', %s, TRUE)
            """,
            (password_hash,),
        )
        conn.commit()
    yield


@pytest.fixture
def make_session(pool: ConnectionPool) -> Callable[..., str]:
    """Factory storing a session row and returning its id."""

    def _make_session(
        session_id: str,
        account_id: int | None = None,
        csrf_token: str | None = None,
        captcha_digest: str | None = None,
    ) -> str:
        with pool.connection() as conn:
            conn.execute(
                "INSERT INTO sessions (id, account_id, csrf_token, captcha_digest) VALUES (%s, %s, %s, %s)",
                (session_id, account_id, csrf_token, captcha_digest),
            )
            conn.commit()
        return session_id

    return _make_session


@pytest.fixture
def group_ids_of(pool: ConnectionPool) -> Callable[[int], set[int]]:
    """Lookup of the groups an account belongs to."""

    def _group_ids_of(account_id: int) -> set[int]:
        with pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute("SELECT group_id FROM account_groups WHERE account_id = %s", (account_id,))
            return {row[0] for row in cursor.fetchall()}

    return _group_ids_of
