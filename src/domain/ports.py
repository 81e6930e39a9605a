"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure. Adapters implement these protocols.
"""

from typing import Protocol

from .models import NewAccount


class UserStore(Protocol):
    """Port interface for account, group and session persistence."""

    def exists_by_username(self, user_name: str) -> bool:
        """Return True if an account already uses this user name."""
        ...

    def exists_by_email(self, email: str) -> bool:
        """Return True if an account already uses this email address."""
        ...

    def account_exists(self, account_id: int) -> bool:
        """Return True if an account with this id exists."""
        ...

    def insert_account(self, account: NewAccount) -> int:
        """
        Insert a new account atomically.

        The storage layer enforces uniqueness of user name and email; a
        constraint violation is reported the same way as a failed pre-check.

        Args:
            account: Account row with the hashed password

        Returns:
            The generated account id

        Raises:
            DuplicateAccount: If user name or email is already taken
            StorageFailure: If the insert failed for any other reason
        """
        ...

    def insert_membership(self, account_id: int, group_id: int) -> None:
        """
        Add the account to a group.

        Raises:
            StorageFailure: If the membership could not be written
        """
        ...

    def default_group_ids(self) -> frozenset[int]:
        """Return the groups every self-registered account joins."""
        ...

    def is_authenticated(self, session_id: str | None) -> bool:
        """Return True if the session belongs to a logged-in account."""
        ...


class PasswordHasher(Protocol):
    """Port interface for the one-way password hash."""

    def hash(self, password: str) -> str:
        """Return a salted slow hash of the password."""
        ...


class SessionChallenge(Protocol):
    """Port interface for per-session challenge values."""

    def current_challenge_digest(self, session_id: str | None) -> str | None:
        """Return the digest of the captcha issued to this session, if any."""
        ...

    def csrf_token(self, session_id: str | None) -> str | None:
        """Return the CSRF token issued to this session, if any."""
        ...


class ActivationSender(Protocol):
    """Port interface for activation token delivery."""

    def send_activation_token(self, email: str, user_name: str, token: str) -> None:
        """
        Deliver the activation token to the new account holder.

        Args:
            email: Recipient email address
            user_name: Account user name, for the greeting
            token: Activation token to confirm
        """
        ...
