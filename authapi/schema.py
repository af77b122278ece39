"""
GraphQL schema: the `me` query and the `register` / `login` mutations.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

import strawberry
from fastapi import Depends
from strawberry.fastapi import BaseContext, GraphQLRouter
from strawberry.types import Info

from authapi.authenticator import AuthResult, CredentialAuthenticator, CredentialInput
from authapi.config import Settings, get_settings
from authapi.db import AccountRecord
from authapi.dependencies import get_authenticator, get_session_signer
from authapi.sessions import SessionSigner


class GraphQLContext(BaseContext):
    """Context passed to every GraphQL resolver."""

    def __init__(
        self,
        authenticator: CredentialAuthenticator,
        sessions: SessionSigner,
        settings: Settings,
    ) -> None:
        super().__init__()
        self.authenticator = authenticator
        self.sessions = sessions
        self.settings = settings

    def session_account_id(self) -> Optional[str]:
        token = self.request.cookies.get(self.settings.session_cookie_name)
        data = self.sessions.read(token)
        return data.account_id if data else None

    def start_session(self, account_id: str) -> None:
        self.response.set_cookie(
            key=self.settings.session_cookie_name,
            value=self.sessions.issue(account_id),
            max_age=self.settings.session_max_age_seconds,
            httponly=True,
            secure=self.settings.session_cookie_secure,
            samesite=self.settings.session_cookie_samesite,
        )

    def end_session(self) -> None:
        self.response.delete_cookie(
            key=self.settings.session_cookie_name,
            httponly=True,
            secure=self.settings.session_cookie_secure,
            samesite=self.settings.session_cookie_samesite,
        )


async def get_context(
    authenticator: CredentialAuthenticator = Depends(get_authenticator),
    sessions: SessionSigner = Depends(get_session_signer),
    settings: Settings = Depends(get_settings),
) -> GraphQLContext:
    return GraphQLContext(authenticator, sessions, settings)


def _timestamp(value: float) -> datetime:
    return datetime.fromtimestamp(value, tz=timezone.utc)


@strawberry.type
class User:
    id: strawberry.ID
    username: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_record(cls, record: AccountRecord) -> "User":
        return cls(
            id=strawberry.ID(record.account_id),
            username=record.username,
            created_at=_timestamp(record.created_at),
            updated_at=_timestamp(record.updated_at),
        )


@strawberry.type
class FieldError:
    field: Optional[str] = None
    message: Optional[str] = None


@strawberry.type
class UserResponse:
    errors: Optional[list[FieldError]] = None
    user: Optional[User] = None

    @classmethod
    def from_result(cls, result: AuthResult) -> "UserResponse":
        if result.errors:
            return cls(
                errors=[FieldError(field=e.field, message=e.message) for e in result.errors]
            )
        return cls(user=User.from_record(result.account))


@strawberry.input
class UsernamePasswordInput:
    username: str
    password: str

    def to_credentials(self) -> CredentialInput:
        return CredentialInput(username=self.username, password=self.password)


@strawberry.type
class Query:
    @strawberry.field
    async def me(self, info: Info[GraphQLContext, None]) -> Optional[User]:
        ctx = info.context
        session_account_id = ctx.session_account_id()
        account = await ctx.authenticator.identify_current_user(session_account_id)
        if account is None:
            if session_account_id:
                ctx.end_session()
            return None
        return User.from_record(account)


@strawberry.type
class Mutation:
    @strawberry.mutation
    async def register(
        self, options: UsernamePasswordInput, info: Info[GraphQLContext, None]
    ) -> UserResponse:
        result = await info.context.authenticator.validate_registration(
            options.to_credentials()
        )
        return UserResponse.from_result(result)

    @strawberry.mutation
    async def login(
        self, options: UsernamePasswordInput, info: Info[GraphQLContext, None]
    ) -> UserResponse:
        result = await info.context.authenticator.validate_login(
            options.to_credentials()
        )
        if result.session_account_id:
            info.context.start_session(result.session_account_id)
        return UserResponse.from_result(result)


schema = strawberry.Schema(query=Query, mutation=Mutation)


def create_graphql_router() -> GraphQLRouter:
    return GraphQLRouter(schema, context_getter=get_context)
