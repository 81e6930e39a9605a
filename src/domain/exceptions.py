"""
Domain exceptions - Semantic error types for account registration.

This module defines domain-specific exceptions that communicate
business rule violations without leaking infrastructure details.

Only ValidationFailure is recoverable in the sense that it carries every
input problem found in one pass; every other error aborts the request.
"""


class RegistrationError(Exception):
    """Base class for registration domain errors."""

    pass


class ValidationFailure(RegistrationError):
    """One or more submitted fields are invalid."""

    def __init__(self, messages: list[str]) -> None:
        super().__init__("; ".join(messages))
        self.messages = list(messages)


class AccessRefused(RegistrationError):
    """The request may not register an account at all."""

    def __init__(self, message: str, redirect: str) -> None:
        super().__init__(message)
        self.redirect = redirect


class AuthorizationFailure(AccessRefused):
    """Login required, CSRF token rejected, or already logged in."""

    pass


class RegistrationDisabled(AccessRefused):
    """Public self-registration is switched off."""

    pass


class MasterAccountMissing(AccessRefused):
    """The master account has not been created yet."""

    pass


class DuplicateAccount(RegistrationError):
    """User name or email is already taken."""

    def __init__(self, field: str, value: str) -> None:
        super().__init__(f"{field} '{value}' is already in use")
        self.field = field
        self.value = value


class HashingFailure(RegistrationError):
    """The password could not be hashed."""

    pass


class StorageFailure(RegistrationError):
    """The account store rejected or failed a write."""

    pass


class PartialMembershipFailure(StorageFailure):
    """
    Account was created but its group memberships were not all assigned.

    The account is not rolled back: callers must treat it as existing.
    """

    def __init__(self, account_id: int, activation_required: bool, group_ids: frozenset[int]) -> None:
        super().__init__(f"Account {account_id} created without groups {sorted(group_ids)}")
        self.account_id = account_id
        self.activation_required = activation_required
        self.group_ids = group_ids
