"""
Credential validation and authentication.

Registration and login outcomes that a user can correct (too short, name
taken, unknown user, wrong password) come back as FieldErrors on a normal
AuthResult. Anything else raises.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Callable, Optional, TypeVar

from authapi.db import AccountRecord, AccountStore, PersistenceError
from authapi.passwords import PasswordHasher

logger = logging.getLogger(__name__)

T = TypeVar("T")

MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 4

USERNAME_TOO_SHORT = "Length must be greater than 2."
PASSWORD_TOO_SHORT = "Length must be greater than 3."
USERNAME_TAKEN = "Username already taken."
USERNAME_UNKNOWN = "Username doesn't exist."
PASSWORD_INCORRECT = "Incorrect password."
CREDENTIALS_INCORRECT = "Incorrect username or password."


class AuthenticatorError(Exception):
    """Base class for failures that abort an authentication operation."""


class OperationTimeoutError(AuthenticatorError):
    """A store or hasher call exceeded the configured timeout."""


@dataclass(frozen=True)
class CredentialInput:
    username: str
    password: str


@dataclass(frozen=True)
class FieldError:
    field: Optional[str] = None
    message: Optional[str] = None


@dataclass
class AuthResult:
    account: Optional[AccountRecord] = None
    errors: list[FieldError] = field(default_factory=list)
    # Set by a successful login; the caller stores it in its session mechanism.
    session_account_id: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.account is not None and not self.errors

    @classmethod
    def failure(cls, field_name: str, message: str) -> "AuthResult":
        return cls(errors=[FieldError(field=field_name, message=message)])


class CredentialAuthenticator:
    def __init__(
        self,
        store: AccountStore,
        hasher: PasswordHasher,
        *,
        timeout_seconds: Optional[float] = None,
        uniform_login_errors: bool = False,
    ):
        self.store = store
        self.hasher = hasher
        self.timeout_seconds = timeout_seconds
        self.uniform_login_errors = uniform_login_errors

    async def _call(self, fn: Callable[..., T], *args) -> T:
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(fn, *args), timeout=self.timeout_seconds
            )
        except asyncio.TimeoutError as exc:
            name = getattr(fn, "__qualname__", repr(fn))
            raise OperationTimeoutError(
                f"{name} did not finish within {self.timeout_seconds}s"
            ) from exc

    async def validate_registration(self, options: CredentialInput) -> AuthResult:
        if len(options.username) < MIN_USERNAME_LENGTH:
            return AuthResult.failure("username", USERNAME_TOO_SHORT)
        if len(options.password) < MIN_PASSWORD_LENGTH:
            return AuthResult.failure("password", PASSWORD_TOO_SHORT)

        password_hash = await self._call(self.hasher.hash, options.password)
        try:
            account = await self._call(
                self.store.create_account, options.username, password_hash
            )
        except PersistenceError as exc:
            if exc.is_duplicate:
                logger.info("Registration rejected, username taken: %s", options.username)
                return AuthResult.failure("username", USERNAME_TAKEN)
            logger.exception("Registration failed for %s", options.username)
            raise

        logger.info("Registered account %s (%s)", account.account_id, account.username)
        return AuthResult(account=account)

    async def validate_login(self, options: CredentialInput) -> AuthResult:
        account = await self._call(self.store.find_by_username, options.username)
        if account is None:
            logger.info("Login failed, unknown username: %s", options.username)
            if self.uniform_login_errors:
                return AuthResult.failure("password", CREDENTIALS_INCORRECT)
            return AuthResult.failure("username", USERNAME_UNKNOWN)

        valid = await self._call(
            self.hasher.verify, account.password_hash, options.password
        )
        if not valid:
            logger.info("Login failed, wrong password for %s", account.account_id)
            if self.uniform_login_errors:
                return AuthResult.failure("password", CREDENTIALS_INCORRECT)
            return AuthResult.failure("password", PASSWORD_INCORRECT)

        logger.info("Login succeeded for %s", account.account_id)
        return AuthResult(account=account, session_account_id=account.account_id)

    async def identify_current_user(
        self, session_account_id: Optional[str]
    ) -> Optional[AccountRecord]:
        if not session_account_id:
            return None
        account = await self._call(self.store.find_by_id, session_account_id)
        if account is None:
            # Stale cookie, e.g. signed before the store was reset.
            logger.warning("Session refers to an unknown account; treating as anonymous")
        return account
