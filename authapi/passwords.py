"""
Password hashing capability and its argon2 implementation.
"""

from __future__ import annotations

from typing import Protocol

from argon2 import PasswordHasher as _Argon2Hasher
from argon2.exceptions import InvalidHashError, VerificationError


class PasswordHasher(Protocol):
    """Defines the hashing operations the authenticator needs."""

    def hash(self, plain: str) -> str:
        ...

    def verify(self, hash_value: str, plain: str) -> bool:
        ...


class Argon2PasswordHasher:
    """Argon2id hashes; the encoded string carries its own salt and parameters."""

    def __init__(
        self,
        *,
        time_cost: int = 3,
        memory_cost: int = 65536,
        parallelism: int = 4,
    ):
        self._ph = _Argon2Hasher(
            time_cost=time_cost,
            memory_cost=memory_cost,
            parallelism=parallelism,
        )

    def hash(self, plain: str) -> str:
        return self._ph.hash(plain)

    def verify(self, hash_value: str, plain: str) -> bool:
        if not hash_value:
            return False
        try:
            return self._ph.verify(hash_value, plain)
        except (VerificationError, InvalidHashError):
            return False
