"""
Shared test fixtures and configuration.

Unit tests run without a database. Integration and adversarial tests
need PostgreSQL reachable at DATABASE_URL and carry their own fixtures.
"""

from unittest.mock import Mock

import pytest

from src.domain.captcha import challenge_digest
from src.domain.models import RegistrationPolicy, SessionContext


@pytest.fixture
def policy() -> RegistrationPolicy:
    """Default policy: registration open, no activation."""
    return RegistrationPolicy()


@pytest.fixture
def store() -> Mock:
    """User store mock with an empty database and an existing master account."""
    store = Mock()
    store.exists_by_username.return_value = False
    store.exists_by_email.return_value = False
    store.account_exists.return_value = True
    store.insert_account.return_value = 42
    store.default_group_ids.return_value = frozenset({1})
    store.is_authenticated.return_value = False
    return store


@pytest.fixture
def anonymous_session() -> SessionContext:
    """Logged-out visitor who was shown the captcha 'blue42'."""
    return SessionContext(session_id="anon", captcha_digest=challenge_digest("blue42"))


@pytest.fixture
def admin_session() -> SessionContext:
    """Logged-in administrator with CSRF token 'csrf-abc'."""
    return SessionContext(session_id="admin", is_authenticated=True, csrf_token="csrf-abc")
