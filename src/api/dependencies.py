"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes, and the
startup-time construction of the error pipeline.
"""

import psycopg
from fastapi import Cookie, Depends, Request
from psycopg_pool import ConnectionPool

from src.adapters.repository.postgres import PostgresUserStore
from src.adapters.security.bcrypt_hasher import BcryptPasswordHasher
from src.adapters.smtp.console import ConsoleActivationSender
from src.api.errors import (
    ErrorResponder,
    ExceptionClassifier,
    ExceptionHandler,
    RegistrationExceptionHandler,
    StorageExceptionHandler,
)
from src.config.settings import Settings, get_settings
from src.domain.exceptions import RegistrationError, StorageFailure
from src.domain.models import RegistrationPolicy, SessionContext
from src.domain.ports import SessionChallenge, UserStore
from src.domain.registration import RegistrationService
from src.domain.transaction import AccountTransaction

# Module-level singleton - ConsoleActivationSender is stateless
_activation_sender = ConsoleActivationSender()


def get_pool(request: Request) -> ConnectionPool:
    """
    Get connection pool from app state.

    The pool is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.pool


def get_store(request: Request) -> PostgresUserStore:
    """Create user store with connection pool from app state."""
    return PostgresUserStore(get_pool(request))


def get_policy(settings: Settings) -> RegistrationPolicy:
    """Freeze the registration-related settings into the domain policy."""
    return RegistrationPolicy(
        email_activation=settings.email_activation,
        can_register=settings.can_register,
        new_user_title=settings.new_user_title,
        master_account_id=settings.master_account_id,
    )


def get_activation_sender() -> ConsoleActivationSender:
    """Get console activation sender (singleton)."""
    return _activation_sender


def get_registration_service(request: Request) -> RegistrationService:
    """
    Create registration service with injected dependencies.

    Wires the store, password hasher and activation sender into the
    account transaction, and the transaction into the service.
    """
    settings = get_settings()
    store = get_store(request)
    policy = get_policy(settings)
    transaction = AccountTransaction(
        store=store,
        hasher=BcryptPasswordHasher(settings.bcrypt_cost),
        policy=policy,
        activation_sender=get_activation_sender(),
    )
    return RegistrationService(store=store, transaction=transaction, policy=policy)


def get_session_challenge(request: Request) -> SessionChallenge:
    """Session challenge values (captcha digest, CSRF token) from the database."""
    return get_store(request)


def get_session_context(
    session_id: str | None = Cookie(None),
    store: UserStore = Depends(get_store),
    challenges: SessionChallenge = Depends(get_session_challenge),
) -> SessionContext:
    """
    Load the session values the registration checks need.

    Unknown or missing sessions are anonymous: not authenticated, no CSRF
    token and no captcha challenge.
    """
    return SessionContext(
        session_id=session_id,
        is_authenticated=store.is_authenticated(session_id),
        csrf_token=challenges.csrf_token(session_id),
        captcha_digest=challenges.current_challenge_digest(session_id),
    )


def create_error_responder(settings: Settings) -> ErrorResponder:
    """
    Build the application's error responder.

    Later bindings win over earlier ones, so StorageFailure (a
    RegistrationError) is handled by the storage handler.
    """
    classifier = ExceptionClassifier(default=ExceptionHandler)
    classifier.register(RegistrationError, RegistrationExceptionHandler)
    classifier.register(StorageFailure, StorageExceptionHandler)
    classifier.register(psycopg.OperationalError, StorageExceptionHandler)
    return ErrorResponder(classifier, settings)
