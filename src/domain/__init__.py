"""
Domain layer - Pure business logic with zero framework imports.

This package contains the account registration flow: field validation,
captcha checks, the account creation transaction and the per-request
alert queue. It defines its own port interfaces for infrastructure
abstraction, ensuring true hexagonal architecture decoupling.
"""

from .alerts import AlertSink, Severity
from .captcha import CaptchaChecker, challenge_digest
from .exceptions import (
    AccessRefused,
    AuthorizationFailure,
    DuplicateAccount,
    HashingFailure,
    MasterAccountMissing,
    PartialMembershipFailure,
    RegistrationDisabled,
    RegistrationError,
    StorageFailure,
    ValidationFailure,
)
from .models import (
    Alert,
    Created,
    NewAccount,
    RegistrationOutcome,
    RegistrationPolicy,
    RegistrationRequest,
    SessionContext,
)
from .ports import ActivationSender, PasswordHasher, SessionChallenge, UserStore
from .registration import RegistrationService
from .transaction import AccountTransaction, parse_group_ids
from .validation import ValidationError, Validator

__all__ = [
    "AccessRefused",
    "AccountTransaction",
    "ActivationSender",
    "Alert",
    "AlertSink",
    "AuthorizationFailure",
    "CaptchaChecker",
    "Created",
    "DuplicateAccount",
    "HashingFailure",
    "MasterAccountMissing",
    "NewAccount",
    "PartialMembershipFailure",
    "PasswordHasher",
    "RegistrationDisabled",
    "RegistrationError",
    "RegistrationOutcome",
    "RegistrationPolicy",
    "RegistrationRequest",
    "RegistrationService",
    "SessionChallenge",
    "SessionContext",
    "Severity",
    "StorageFailure",
    "UserStore",
    "ValidationError",
    "ValidationFailure",
    "Validator",
    "challenge_digest",
    "parse_group_ids",
]
