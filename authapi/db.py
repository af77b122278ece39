"""
Account persistence for Postgres (via SQLAlchemy) and an in-memory test implementation.
"""

from __future__ import annotations

import enum
import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, Optional, Protocol

from sqlalchemy import Column, Float, String, create_engine, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

UNIQUE_VIOLATION_SQLSTATE = "23505"


class PersistenceErrorKind(enum.Enum):
    DUPLICATE_KEY = "DUPLICATE_KEY"
    OTHER = "OTHER"


class PersistenceError(Exception):
    """Raised by an AccountStore when a write or read cannot be completed."""

    def __init__(self, kind: PersistenceErrorKind, message: str = ""):
        super().__init__(message or kind.value)
        self.kind = kind

    @property
    def is_duplicate(self) -> bool:
        return self.kind is PersistenceErrorKind.DUPLICATE_KEY


@dataclass
class AccountRecord:
    account_id: str
    username: str
    password_hash: str
    created_at: float = field(default_factory=lambda: time.time())
    updated_at: float = field(default_factory=lambda: time.time())


class AccountStore(Protocol):
    """Interface for account persistence.

    Lookups return None when nothing matches. Writes raise PersistenceError.
    """

    def create_account(self, username: str, password_hash: str) -> AccountRecord:
        ...

    def find_by_username(self, username: str) -> Optional[AccountRecord]:
        ...

    def find_by_id(self, account_id: str) -> Optional[AccountRecord]:
        ...


class InMemoryAccountStore:
    """Simple in-memory account store for development and tests."""

    def __init__(self):
        self.accounts: Dict[str, AccountRecord] = {}
        self.ids_by_username: Dict[str, str] = {}
        self._lock = threading.Lock()

    def create_account(self, username: str, password_hash: str) -> AccountRecord:
        with self._lock:
            if username in self.ids_by_username:
                raise PersistenceError(
                    PersistenceErrorKind.DUPLICATE_KEY,
                    f"username {username!r} already exists",
                )
            record = AccountRecord(
                account_id=uuid.uuid4().hex,
                username=username,
                password_hash=password_hash,
            )
            self.accounts[record.account_id] = record
            self.ids_by_username[username] = record.account_id
            return record

    def find_by_username(self, username: str) -> Optional[AccountRecord]:
        account_id = self.ids_by_username.get(username)
        if account_id is None:
            return None
        return self.accounts.get(account_id)

    def find_by_id(self, account_id: str) -> Optional[AccountRecord]:
        return self.accounts.get(account_id)

    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        with self._lock:
            self.accounts.clear()
            self.ids_by_username.clear()


def _is_unique_violation(exc: IntegrityError) -> bool:
    orig = getattr(exc, "orig", None)
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if code == UNIQUE_VIOLATION_SQLSTATE:
        return True
    message = str(orig or exc).lower()
    return "unique constraint" in message or "duplicate key" in message


class SqlAccountStore:
    """
    SQLAlchemy-backed implementation. Accepts any SQLAlchemy URL (e.g., Postgres or SQLite for tests).
    """

    def __init__(self, database_url: str):
        if not database_url:
            raise ValueError("DATABASE_URL is required for SqlAccountStore")
        engine_kwargs: dict = {"future": True, "pool_pre_ping": True}
        if database_url.startswith("sqlite"):
            # Calls arrive from worker threads.
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            if ":memory:" in database_url or database_url.rstrip("/").endswith("sqlite:"):
                engine_kwargs["poolclass"] = StaticPool
        else:
            engine_kwargs["pool_recycle"] = 1800
        self.engine = create_engine(database_url, **engine_kwargs)
        self.Session = sessionmaker(
            bind=self.engine, class_=Session, expire_on_commit=False, future=True
        )
        Base.metadata.create_all(self.engine)

    def _to_account_record(self, row: "AccountRow") -> AccountRecord:
        return AccountRecord(
            account_id=row.account_id,
            username=row.username,
            password_hash=row.password_hash,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    def create_account(self, username: str, password_hash: str) -> AccountRecord:
        now = time.time()
        with self.Session() as session:
            row = AccountRow(
                account_id=uuid.uuid4().hex,
                username=username,
                password_hash=password_hash,
                created_at=now,
                updated_at=now,
            )
            session.add(row)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                if _is_unique_violation(exc):
                    raise PersistenceError(
                        PersistenceErrorKind.DUPLICATE_KEY,
                        f"username {username!r} already exists",
                    ) from exc
                raise PersistenceError(PersistenceErrorKind.OTHER, str(exc)) from exc
            except SQLAlchemyError as exc:
                session.rollback()
                raise PersistenceError(PersistenceErrorKind.OTHER, str(exc)) from exc
            session.refresh(row)
            return self._to_account_record(row)

    def find_by_username(self, username: str) -> Optional[AccountRecord]:
        with self.Session() as session:
            stmt = select(AccountRow).where(AccountRow.username == username).limit(1)
            try:
                row = session.execute(stmt).scalar_one_or_none()
            except SQLAlchemyError as exc:
                raise PersistenceError(PersistenceErrorKind.OTHER, str(exc)) from exc
            if not row:
                return None
            return self._to_account_record(row)

    def find_by_id(self, account_id: str) -> Optional[AccountRecord]:
        with self.Session() as session:
            try:
                row = session.get(AccountRow, account_id)
            except SQLAlchemyError as exc:
                raise PersistenceError(PersistenceErrorKind.OTHER, str(exc)) from exc
            if not row:
                return None
            return self._to_account_record(row)


Base = declarative_base()


class AccountRow(Base):
    __tablename__ = "accounts"

    account_id = Column(String, primary_key=True)
    username = Column(String, nullable=False, unique=True, index=True)
    password_hash = Column(String, nullable=False)
    created_at = Column(Float, nullable=False)
    updated_at = Column(Float, nullable=False)
