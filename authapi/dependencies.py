"""
Dependency wiring for the FastAPI app.
"""

from __future__ import annotations

from authapi.authenticator import CredentialAuthenticator
from authapi.config import get_settings
from authapi.db import AccountStore, InMemoryAccountStore, SqlAccountStore
from authapi.passwords import Argon2PasswordHasher, PasswordHasher
from authapi.sessions import SessionSigner

_account_store: AccountStore | None = None
_password_hasher: PasswordHasher | None = None
_session_signer: SessionSigner | None = None
_authenticator: CredentialAuthenticator | None = None


def get_account_store() -> AccountStore:
    """
    Return a singleton account store so registrations persist across requests.
    """
    global _account_store
    if _account_store:
        return _account_store

    settings = get_settings()
    if settings.use_in_memory_backends or not settings.database_url:
        _account_store = InMemoryAccountStore()
    else:
        _account_store = SqlAccountStore(settings.database_url)
    return _account_store


def get_password_hasher() -> PasswordHasher:
    global _password_hasher
    if _password_hasher:
        return _password_hasher

    settings = get_settings()
    _password_hasher = Argon2PasswordHasher(
        time_cost=settings.argon2_time_cost,
        memory_cost=settings.argon2_memory_cost,
        parallelism=settings.argon2_parallelism,
    )
    return _password_hasher


def get_session_signer() -> SessionSigner:
    global _session_signer
    if _session_signer:
        return _session_signer

    settings = get_settings()
    _session_signer = SessionSigner(
        settings.secret_key,
        salt=settings.session_salt,
        max_age_seconds=settings.session_max_age_seconds,
    )
    return _session_signer


def get_authenticator() -> CredentialAuthenticator:
    global _authenticator
    if _authenticator:
        return _authenticator

    settings = get_settings()
    _authenticator = CredentialAuthenticator(
        get_account_store(),
        get_password_hasher(),
        timeout_seconds=settings.operation_timeout_seconds,
        uniform_login_errors=settings.uniform_login_errors,
    )
    return _authenticator
