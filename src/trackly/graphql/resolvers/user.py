from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

import strawberry
from sqlalchemy.ext.asyncio import AsyncSession

from ... import repository
from ...auth import hash_password, verify_password
from ...database.connection import get_async_session
from ...dbmodels import Users
from ...errors import InvalidCredentials, Unauthenticated
from ...logging import get_logger
from ...validation import UserUpdateFields, supplied, validate_fields
from ..access_control import get_auth_context_from_info, require_authenticated
from ..converters import convert_db_to_graphql_project, convert_db_to_graphql_user

if TYPE_CHECKING:
    from ..mutations.root import UpdateUserInput
    from ..types.project import Project
    from ..types.user import User

logger = get_logger(__name__)


async def get_requester(session: AsyncSession, user_id: UUID) -> Users:
    """Load the requesting user, treating a deleted account as logged out."""
    user = await repository.get_user(session, user_id)
    if not user:
        logger.info("Token refers to a missing user", user_id=str(user_id))
        raise Unauthenticated()
    return user


async def confirm_password(user: Users, password: str) -> None:
    if not await verify_password(password, user.password):
        logger.info("Password confirmation failed", user_id=str(user.id))
        raise InvalidCredentials()


async def resolve_user_projects(user: User, info: strawberry.Info) -> list[Project]:
    """
    Projects the user owns or is a client of.

    When another user is asking, only projects they share with that user are
    listed, so a comment author's other projects are not exposed.
    """
    auth_context = await get_auth_context_from_info(info)
    visible_to = auth_context.user_id if auth_context and auth_context.is_authenticated else None

    async with get_async_session() as session:
        projects = await repository.list_user_projects(session, user.id, visible_to=visible_to)
        return [convert_db_to_graphql_project(project) for project in projects]


async def update_user(info: strawberry.Info, input: UpdateUserInput) -> User:
    """Apply a partial update to the requester's own account."""
    auth_context = await get_auth_context_from_info(info)
    user_id = require_authenticated(auth_context)

    fields = validate_fields(
        UserUpdateFields,
        **{
            key: value
            for key, value in (
                ("name", input.name),
                ("email", input.email),
                ("password", input.password),
            )
            if value is not None
        },
    )
    changes = supplied(fields)
    password_hash = await hash_password(changes["password"]) if "password" in changes else None

    async with get_async_session() as session:
        user = await get_requester(session, user_id)
        await repository.update_user(
            session,
            user,
            name=changes.get("name"),
            email=changes.get("email"),
            password_hash=password_hash,
        )
        logger.info("User updated", user_id=str(user.id), fields=sorted(changes))
        return convert_db_to_graphql_user(user)


async def delete_user(info: strawberry.Info, password: str) -> User:
    """Delete the requester's account after re-confirming the password."""
    auth_context = await get_auth_context_from_info(info)
    user_id = require_authenticated(auth_context)

    async with get_async_session() as session:
        user = await get_requester(session, user_id)
        await confirm_password(user, password)

        deleted = convert_db_to_graphql_user(user)
        await repository.delete_user_cascade(session, user_id)
        logger.info("User deleted", user_id=str(user_id))
        return deleted
