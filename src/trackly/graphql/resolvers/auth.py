"""
Signup, login and current-user resolvers
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import strawberry

from ... import repository
from ...auth import get_auth_adapter, hash_password, verify_password
from ...database.connection import get_async_session
from ...dbmodels import Users
from ...errors import InvalidCredentials, Unauthenticated
from ...logging import get_logger
from ...validation import UserFields, validate_fields
from ..access_control import get_auth_context_from_info, require_authenticated
from ..converters import convert_db_to_graphql_user
from ..types.user import AuthPayload

if TYPE_CHECKING:
    from ..mutations.root import AddUserInput
    from ..types.user import User

logger = get_logger(__name__)


async def issue_session_token(user: Users) -> str:
    """Sign a bearer token whose subject is the user's id."""
    adapter = get_auth_adapter()
    return await adapter.issue_token(user.id, claims={"email": user.email, "name": user.name})


async def resolve_current_user(info: strawberry.Info) -> User:
    auth_context = await get_auth_context_from_info(info)
    user_id = require_authenticated(auth_context)

    async with get_async_session() as session:
        user = await repository.get_user(session, user_id)
        if not user:
            logger.info("Token refers to a missing user", user_id=str(user_id))
            raise Unauthenticated()
        return convert_db_to_graphql_user(user)


async def add_user(info: strawberry.Info, input: AddUserInput) -> AuthPayload:
    """Register a new account and return a session for it."""
    fields = validate_fields(
        UserFields, name=input.name, email=input.email, password=input.password
    )
    password_hash = await hash_password(fields.password)

    async with get_async_session() as session:
        user = await repository.create_user(
            session,
            name=fields.name,
            email=fields.email,
            password_hash=password_hash,
        )
        token = await issue_session_token(user)
        logger.info("User created", user_id=str(user.id))
        return AuthPayload(token=token, user=convert_db_to_graphql_user(user))


async def login(info: strawberry.Info, email: str, password: str) -> AuthPayload:
    """
    Exchange credentials for a session token.

    An unknown email and a wrong password fail with the same error.
    """
    async with get_async_session() as session:
        user = await repository.get_user_by_email(session, email)
        password_ok = await verify_password(password, user.password if user else None)
        if user is None or not password_ok:
            logger.info("Login failed")
            raise InvalidCredentials()

        token = await issue_session_token(user)
        logger.info("User logged in", user_id=str(user.id))
        return AuthPayload(token=token, user=convert_db_to_graphql_user(user))
