"""
Registration domain service - request-level account creation flow.

Registration runs in one of two modes:

- Public (self-registration): the visitor must not be logged in, public
  registration must be enabled, the master account must exist, and a
  captcha must be answered.
- Admin: an authenticated user creates an account for someone else. A
  CSRF token replaces the captcha, and the admin may pick the groups and
  skip activation.

Flow
====

    gate (mode checks)          -> AuthorizationFailure / RegistrationDisabled /
                                   MasterAccountMissing, nothing else runs
    collect fields              -> Validator errors accumulate
    captcha (public mode only)  -> counted as one more error
    error_count == 0 checkpoint
    AccountTransaction          -> Created or a typed failure

Every outcome is turned into alerts plus an errors/successes count; only
unexpected exceptions leave this service.
"""

import logging
import secrets
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from . import messages
from .alerts import AlertSink, Severity
from .captcha import CaptchaChecker
from .exceptions import (
    AccessRefused,
    AuthorizationFailure,
    DuplicateAccount,
    MasterAccountMissing,
    PartialMembershipFailure,
    RegistrationDisabled,
    RegistrationError,
    ValidationFailure,
)
from .models import RegistrationOutcome, RegistrationPolicy, RegistrationRequest, SessionContext
from .ports import UserStore
from .transaction import AccountTransaction, parse_group_ids
from .validation import Validator

logger = logging.getLogger(__name__)

REGISTER_PAGE = "/register"
LOGIN_PAGE = "/login"
ACCOUNT_PAGE = "/account"
INSTALL_PAGE = "/install/register_root"


@dataclass
class RegistrationService:
    """
    Domain service for user registration.

    Orchestrates gating, field collection, captcha verification and the
    account transaction, and reports the result as alerts.
    """

    store: UserStore
    transaction: AccountTransaction
    policy: RegistrationPolicy
    captcha_checker: CaptchaChecker = field(default_factory=CaptchaChecker)

    def register(self, form: Mapping[str, Any], session: SessionContext) -> RegistrationOutcome:
        """
        Register a new account from submitted form fields.

        Args:
            form: Raw submitted fields
            session: Session values of the submitting actor

        Returns:
            RegistrationOutcome with alerts, counts and the redirect target
        """
        alerts = AlertSink()
        validator = Validator(form)
        admin = validator.optional_field("admin") == "true"

        try:
            if admin:
                self._check_admin_access(validator, session)
            else:
                self._check_public_access(session)
        except AccessRefused as exc:
            logger.warning("Registration refused: %s", exc)
            alerts.record(Severity.DANGER, str(exc))
            return self._failure(alerts, exc.redirect)

        request = self._collect(validator, admin)

        for error in validator.errors:
            alerts.record(Severity.DANGER, error.message)
        error_count = validator.error_count

        if not admin and not self.captcha_checker.verify(request.captcha_token, session.captcha_digest):
            alerts.record(Severity.DANGER, messages.CAPTCHA_FAIL)
            error_count += 1

        if error_count:
            return self._failure(alerts, REGISTER_PAGE)

        try:
            created = self.transaction.execute(request)
        except ValidationFailure as exc:
            for message in exc.messages:
                alerts.record(Severity.DANGER, message)
            return self._failure(alerts, REGISTER_PAGE)
        except DuplicateAccount as exc:
            template = messages.ACCOUNT_USERNAME_IN_USE if exc.field == "user_name" else messages.ACCOUNT_EMAIL_IN_USE
            alerts.record(Severity.DANGER, template.format(value=exc.value))
            return self._failure(alerts, REGISTER_PAGE)
        except PartialMembershipFailure as exc:
            self._record_created(alerts, exc.activation_required)
            alerts.record(Severity.DANGER, messages.ACCOUNT_GROUPS_FAILED)
            return self._failure(alerts, REGISTER_PAGE, account_id=exc.account_id)
        except RegistrationError as exc:
            logger.error("Account creation failed for %s: %s", request.user_name, exc)
            alerts.record(Severity.DANGER, messages.ACCOUNT_CREATION_FAILED)
            return self._failure(alerts, REGISTER_PAGE)

        self._record_created(alerts, created.activation_required)
        alerts.record(Severity.SUCCESS, messages.ACCOUNT_CREATION_COMPLETE.format(user_name=request.user_name))
        return RegistrationOutcome(
            errors=0,
            successes=1,
            redirect=session.referral_page,
            alerts=alerts.drain(),
            account_id=created.account_id,
        )

    def _check_admin_access(self, validator: Validator, session: SessionContext) -> None:
        if not session.is_authenticated:
            raise AuthorizationFailure(messages.LOGIN_REQUIRED, LOGIN_PAGE)

        csrf_token = validator.required_field("csrf_token").strip()
        if not csrf_token or not session.csrf_token or not secrets.compare_digest(
            csrf_token.encode(), session.csrf_token.encode()
        ):
            raise AuthorizationFailure(messages.ACCESS_DENIED, REGISTER_PAGE)

    def _check_public_access(self, session: SessionContext) -> None:
        if not self.store.account_exists(self.policy.master_account_id):
            raise MasterAccountMissing(messages.MASTER_ACCOUNT_NOT_EXISTS, INSTALL_PAGE)
        if not self.policy.can_register:
            raise RegistrationDisabled(messages.ACCOUNT_REGISTRATION_DISABLED, LOGIN_PAGE)
        if session.is_authenticated:
            raise AuthorizationFailure(messages.ALREADY_LOGGED_IN, ACCOUNT_PAGE)

    def _collect(self, validator: Validator, admin: bool) -> RegistrationRequest:
        user_name = validator.required_field("user_name").strip()
        display_name = validator.required_field("display_name").strip()
        email = validator.required_field("email").strip()
        # Admins set the title; self-registered accounts get the default one
        title = validator.required_field("title").strip() if admin else self.policy.new_user_title
        # Passwords are used verbatim
        password = validator.required_field("password")
        password_confirm = validator.required_field("passwordc")

        requested_group_ids = None
        add_groups = validator.optional_field("add_groups")
        if admin and add_groups and add_groups.strip():
            try:
                requested_group_ids = parse_group_ids(add_groups)
            except ValueError:
                validator.add_error("add_groups", messages.INVALID_GROUP_LIST.format(groups=add_groups.strip()))

        captcha = validator.optional_field("captcha")
        return RegistrationRequest(
            user_name=user_name,
            display_name=display_name,
            email=email,
            title=title,
            password=password,
            password_confirm=password_confirm,
            is_admin_mode=admin,
            requested_group_ids=requested_group_ids,
            skip_activation=admin and validator.optional_field("skip_activation") == "true",
            captcha_token=captcha.strip() if captcha else None,
            csrf_token=validator.optional_field("csrf_token") if admin else None,
        )

    @staticmethod
    def _record_created(alerts: AlertSink, activation_required: bool) -> None:
        if activation_required:
            alerts.record(Severity.SUCCESS, messages.ACCOUNT_REGISTRATION_COMPLETE_TYPE2)
        else:
            alerts.record(Severity.SUCCESS, messages.ACCOUNT_REGISTRATION_COMPLETE_TYPE1)

    @staticmethod
    def _failure(alerts: AlertSink, redirect: str, account_id: int | None = None) -> RegistrationOutcome:
        return RegistrationOutcome(errors=1, successes=0, redirect=redirect, alerts=alerts.drain(), account_id=account_id)
