"""
Configuration and settings for the account service.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    api_prefix: str = Field(default="/api")

    # Database (Postgres expected; SQLite works for local runs)
    database_url: Optional[str] = Field(default=None)

    # Development toggles
    use_in_memory_backends: bool = Field(default=False)

    # Signed session cookie
    # Required; SessionSigner refuses to start without it.
    secret_key: Optional[str] = Field(default=None)
    session_cookie_name: str = Field(default="qid")
    session_salt: str = Field(default="authapi.session.v1")
    session_max_age_seconds: int = Field(default=60 * 60 * 24 * 365 * 10)
    session_cookie_secure: bool = Field(default=False)
    session_cookie_samesite: Literal["lax", "strict", "none"] = Field(default="lax")

    # Argon2id cost parameters
    argon2_time_cost: int = Field(default=3, ge=1)
    argon2_memory_cost: int = Field(default=65536, ge=8)
    argon2_parallelism: int = Field(default=4, ge=1)

    # Upper bound for a single store/hasher call; None disables the timeout.
    operation_timeout_seconds: Optional[float] = Field(default=10.0, gt=0)

    # Report unknown user and wrong password with the same field error.
    uniform_login_errors: bool = Field(default=False)

    log_level: str = Field(default="INFO")
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=4000)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
