"""
Shared fixtures for adversarial tests.

Provides common test infrastructure for concurrent registration attacks.
"""

from collections.abc import Generator

import bcrypt
import pytest
from psycopg_pool import ConnectionPool

from src.adapters.repository.postgres import PostgresUserStore, run_migrations
from src.adapters.security.bcrypt_hasher import BcryptPasswordHasher
from src.adapters.smtp.console import ConsoleActivationSender
from src.config.settings import get_settings
from src.domain.models import RegistrationPolicy
from src.domain.transaction import AccountTransaction

# Module-level marker for all adversarial tests
pytestmark = pytest.mark.adversarial


@pytest.fixture(scope="module")
def pool() -> Generator[ConnectionPool, None, None]:
    """Create connection pool for adversarial tests."""
    settings = get_settings()
    pool = ConnectionPool(
        conninfo=settings.database_url,
        min_size=1,
        max_size=20,
        open=True,
    )
    run_migrations(pool)
    yield pool
    pool.close()


@pytest.fixture
def store(pool: ConnectionPool) -> PostgresUserStore:
    """Create user store instance for each test."""
    return PostgresUserStore(pool)


@pytest.fixture
def transaction(store: PostgresUserStore) -> AccountTransaction:
    """Account transaction wired to the real store and the minimum bcrypt cost."""
    return AccountTransaction(
        store=store,
        hasher=BcryptPasswordHasher(10),
        policy=RegistrationPolicy(),
        activation_sender=ConsoleActivationSender(),
    )


@pytest.fixture(autouse=True)
def clean_database(pool: ConnectionPool) -> Generator[None, None, None]:
    """Empty accounts and sessions, keeping only the master account."""
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
