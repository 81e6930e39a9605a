"""
Adversarial tests for race condition attack prevention.

Verifies that concurrent registrations for the same user name or email
are decided by the database, preventing attackers from exploiting the
gap between the uniqueness pre-check and the insert to:
- Create duplicate accounts
- Attach memberships to an account they do not own
- Corrupt data through concurrent inserts

The pre-check is advisory. The UNIQUE constraints on accounts.user_name
and accounts.email are the only arbiter.
"""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest
from psycopg_pool import ConnectionPool

from src.domain.exceptions import DuplicateAccount
from src.domain.models import Created, RegistrationRequest
from src.domain.transaction import AccountTransaction

# Apply adversarial marker to all tests in this module
pytestmark = pytest.mark.adversarial


def request_for(user_name: str, email: str) -> RegistrationRequest:
    return RegistrationRequest(
        user_name=user_name,
        display_name="Attacker",
        email=email,
        title="New Member",
        password="attack-password",
        password_confirm="attack-password",
    )


def run_concurrently(
    transaction: AccountTransaction, requests: list[RegistrationRequest]
) -> tuple[list[Created], list[DuplicateAccount]]:
    """Release every request at once and sort outcomes into created/duplicate."""
    created: list[Created] = []
    duplicates: list[DuplicateAccount] = []
    results_lock = threading.Lock()
    barrier = threading.Barrier(len(requests))

    def attack(request: RegistrationRequest) -> None:
        barrier.wait()
        try:
            result = transaction.execute(request)
        except DuplicateAccount as e:
            with results_lock:
                duplicates.append(e)
        else:
            with results_lock:
                created.append(result)

    with ThreadPoolExecutor(max_workers=len(requests)) as executor:
        futures = [executor.submit(attack, request) for request in requests]
        for f in futures:
            f.result()

    return created, duplicates


def count_accounts(pool: ConnectionPool, column: str, value: str) -> int:
    # column is a fixed test literal
    with pool.connection() as conn, conn.cursor() as cursor:
        cursor.execute(f"SELECT COUNT(*) FROM accounts WHERE {column} = %s", (value,))
        return cursor.fetchone()[0]


class TestRaceConditionAttacks:
    """
    Adversarial tests simulating race condition attacks.

    These tests simulate an attacker rapidly submitting concurrent
    registrations to exploit potential race conditions in the system.
    """

    def test_concurrent_same_user_name_exactly_one_succeeds(
        self, pool: ConnectionPool, transaction: AccountTransaction
    ) -> None:
        """
        Attack scenario: the same user name with different emails, all at once.

        Expected defense: exactly one account is created, every other
        attempt fails with DuplicateAccount on user_name.
        """
        num_attackers = 5
        requests = [request_for("target", f"attacker{i}@example.com") for i in range(num_attackers)]

        created, duplicates = run_concurrently(transaction, requests)

        assert len(created) == 1, f"Race condition vulnerability: {len(created)} accounts created (expected 1)"
        assert len(duplicates) == num_attackers - 1
        assert all(e.field == "user_name" for e in duplicates)
        assert count_accounts(pool, "user_name", "target") == 1

    def test_concurrent_same_email_exactly_one_succeeds(
        self, pool: ConnectionPool, transaction: AccountTransaction
    ) -> None:
        """Attack scenario: the same email under different user names."""
        num_attackers = 5
        requests = [request_for(f"attacker{i}", "victim@example.com") for i in range(num_attackers)]

        created, duplicates = run_concurrently(transaction, requests)

        assert len(created) == 1
        assert all(e.field == "email" for e in duplicates)
        assert count_accounts(pool, "email", "victim@example.com") == 1

    def test_high_volume_concurrent_registration_attack(
        self, pool: ConnectionPool, transaction: AccountTransaction
    ) -> None:
        """
        Attack scenario: many concurrent attempts for the same identity.

        Expected defense: system remains consistent under high concurrency.
        """
        num_attackers = 15
        requests = [request_for("flood", "flood@example.com") for _ in range(num_attackers)]

        created, duplicates = run_concurrently(transaction, requests)

        assert len(created) == 1, f"High-volume race attack succeeded: {len(created)} accounts (expected 1)"
        assert len(duplicates) == num_attackers - 1


class TestDataIntegrityUnderConcurrency:
    """Tests verifying data integrity under concurrent operations."""

    def test_losers_leave_no_memberships(self, pool: ConnectionPool, transaction: AccountTransaction) -> None:
        """Only the winning account receives group memberships."""
        requests = [request_for("member", f"member{i}@example.com") for i in range(5)]

        created, _ = run_concurrently(transaction, requests)

        with pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute("SELECT account_id, group_id FROM account_groups")
            rows = cursor.fetchall()
        assert rows == [(created[0].account_id, 1)]

    def test_distinct_registrations_all_succeed(
        self, pool: ConnectionPool, transaction: AccountTransaction
    ) -> None:
        """Concurrency alone never rejects unrelated registrations."""
        requests = [request_for(f"user{i}", f"user{i}@example.com") for i in range(10)]

        created, duplicates = run_concurrently(transaction, requests)

        assert len(created) == 10
        assert duplicates == []
        assert len({result.account_id for result in created}) == 10
