"""
Domain value types for the registration flow.

Plain frozen dataclasses: created per request (or once at startup for
RegistrationPolicy) and never mutated afterwards.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class RegistrationPolicy:
    """
    Process-wide registration configuration.

    Built once from application settings and passed into the domain
    services instead of being read from ambient globals.
    """

    email_activation: bool = False
    can_register: bool = True
    new_user_title: str = "New Member"
    master_account_id: int = 1


@dataclass(frozen=True)
class SessionContext:
    """Session values the gating checks need, passed explicitly."""

    session_id: str | None = None
    is_authenticated: bool = False
    csrf_token: str | None = None
    captcha_digest: str | None = None
    referral_page: str = "/account"


@dataclass(frozen=True)
class RegistrationRequest:
    """Collected registration fields, trimmed except for the passwords."""

    user_name: str
    display_name: str
    email: str
    title: str
    password: str
    password_confirm: str
    is_admin_mode: bool = False
    requested_group_ids: frozenset[int] | None = None
    skip_activation: bool = False
    captcha_token: str | None = None
    csrf_token: str | None = None


@dataclass(frozen=True)
class NewAccount:
    """Row handed to the store for insertion. The store assigns the id."""

    user_name: str
    display_name: str
    email: str
    title: str
    password_hash: str
    active: bool
    activation_token: str | None = None


@dataclass(frozen=True)
class Created:
    """Successful account creation."""

    account_id: int
    activation_required: bool


@dataclass(frozen=True)
class Alert:
    """User-facing message with its severity."""

    severity: str
    message: str


@dataclass(frozen=True)
class RegistrationOutcome:
    """
    Result of one registration request.

    errors/successes mirror the structured payload returned to
    background callers; redirect is where a browser caller goes next.
    """

    errors: int
    successes: int
    redirect: str
    alerts: list[Alert] = field(default_factory=list)
    account_id: int | None = None
