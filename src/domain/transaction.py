"""
Account creation transaction.

Turns a collected RegistrationRequest into a persisted account plus
group memberships. Steps run in a fixed order and each one is a hard
gate:

    1. decide whether activation is required
    2. field rules and password confirmation    -> ValidationFailure
    3. user name / email uniqueness pre-check   -> DuplicateAccount
    4. password hash                            -> HashingFailure
    5. account insert                           -> DuplicateAccount | StorageFailure
       then activation token delivery (if required)
    6. group memberships                        -> PartialMembershipFailure

Nothing is written before step 5. After step 5 the account exists: a
failure in step 6 is reported as PartialMembershipFailure and the account
is NOT rolled back.

The uniqueness pre-check only produces a friendlier error. The store's
unique constraints decide concurrent races.
"""

import logging
import secrets
from dataclasses import dataclass

from email_validator import EmailNotValidError, validate_email

from . import messages
from .exceptions import (
    DuplicateAccount,
    HashingFailure,
    PartialMembershipFailure,
    StorageFailure,
    ValidationFailure,
)
from .models import Created, NewAccount, RegistrationPolicy, RegistrationRequest
from .ports import ActivationSender, PasswordHasher, UserStore

logger = logging.getLogger(__name__)

USER_NAME_LENGTH = (1, 25)
DISPLAY_NAME_LENGTH = (1, 50)
PASSWORD_LENGTH = (8, 50)
# bcrypt hashes at most 72 bytes of input
PASSWORD_MAX_BYTES = 72


def parse_group_ids(raw: str) -> frozenset[int]:
    """
    Parse a comma-separated list of group ids.

    Blank entries are ignored and duplicates collapse: "2,3,3,5" -> {2, 3, 5}.

    Raises:
        ValueError: If an entry is not an integer
    """
    return frozenset(int(part) for part in raw.split(",") if part.strip())


@dataclass
class AccountTransaction:
    """
    Creates one account as an all-or-nothing unit (up to memberships).

    Callers must only run it once input validation, captcha and CSRF
    checks have all passed.
    """

    store: UserStore
    hasher: PasswordHasher
    policy: RegistrationPolicy
    activation_sender: ActivationSender

    def execute(self, request: RegistrationRequest) -> Created:
        """
        Run every step and return the created account.

        Raises:
            ValidationFailure: Field rules or password confirmation failed
            DuplicateAccount: User name or email already taken
            HashingFailure: Password could not be hashed
            StorageFailure: Account insert failed
            PartialMembershipFailure: Account exists but groups were not assigned
        """
        require_activation = self._require_activation(request)

        self._check_fields(request)
        self._check_unique(request)
        password_hash = self._hash_password(request.password)

        activation_token = secrets.token_hex(16) if require_activation else None
        account_id = self.store.insert_account(
            NewAccount(
                user_name=request.user_name,
                display_name=request.display_name,
                email=request.email,
                title=request.title,
                password_hash=password_hash,
                active=not require_activation,
                activation_token=activation_token,
            )
        )
        logger.info("Created account %s (%s)", account_id, request.user_name)

        if activation_token is not None:
            self.activation_sender.send_activation_token(request.email, request.user_name, activation_token)

        self._assign_groups(account_id, request, require_activation)

        return Created(account_id=account_id, activation_required=require_activation)

    def _require_activation(self, request: RegistrationRequest) -> bool:
        if request.is_admin_mode and request.skip_activation:
            return False
        return self.policy.email_activation

    def _check_fields(self, request: RegistrationRequest) -> None:
        errors = []

        if not _within(request.user_name, USER_NAME_LENGTH):
            errors.append(messages.ACCOUNT_USER_CHAR_LIMIT.format(min=USER_NAME_LENGTH[0], max=USER_NAME_LENGTH[1]))
        if not (request.user_name.isascii() and request.user_name.isalnum()):
            errors.append(messages.ACCOUNT_USER_INVALID_CHARACTERS)
        if not _within(request.display_name, DISPLAY_NAME_LENGTH):
            errors.append(
                messages.ACCOUNT_DISPLAY_CHAR_LIMIT.format(min=DISPLAY_NAME_LENGTH[0], max=DISPLAY_NAME_LENGTH[1])
            )
        try:
            validate_email(request.email, check_deliverability=False)
        except EmailNotValidError:
            errors.append(messages.ACCOUNT_INVALID_EMAIL)
        if not _within(request.password, PASSWORD_LENGTH):
            errors.append(messages.ACCOUNT_PASS_CHAR_LIMIT.format(min=PASSWORD_LENGTH[0], max=PASSWORD_LENGTH[1]))
        elif len(request.password.encode("utf-8")) > PASSWORD_MAX_BYTES:
            errors.append(messages.ACCOUNT_PASS_BYTE_LIMIT.format(max=PASSWORD_MAX_BYTES))
        if request.password != request.password_confirm:
            errors.append(messages.ACCOUNT_PASS_MISMATCH)

        if errors:
            raise ValidationFailure(errors)

    def _check_unique(self, request: RegistrationRequest) -> None:
        if self.store.exists_by_username(request.user_name):
            raise DuplicateAccount("user_name", request.user_name)
        if self.store.exists_by_email(request.email):
            raise DuplicateAccount("email", request.email)

    def _hash_password(self, password: str) -> str:
        try:
            return self.hasher.hash(password)
        except Exception as e:
            raise HashingFailure("Password could not be hashed") from e

    def _assign_groups(self, account_id: int, request: RegistrationRequest, require_activation: bool) -> None:
        group_ids: frozenset[int] = frozenset()
        assigned: set[int] = set()
        try:
            if request.is_admin_mode and request.requested_group_ids:
                group_ids = request.requested_group_ids
            else:
                group_ids = self.store.default_group_ids()
            for group_id in sorted(group_ids):
                self.store.insert_membership(account_id, group_id)
                assigned.add(group_id)
        except StorageFailure as e:
            missing = frozenset(group_ids - assigned)
            logger.error("Account %s created but groups %s were not assigned: %s", account_id, sorted(missing), e)
            raise PartialMembershipFailure(account_id, require_activation, missing) from e


def _within(value: str, bounds: tuple[int, int]) -> bool:
    return bounds[0] <= len(value) <= bounds[1]
