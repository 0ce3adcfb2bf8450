from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

import strawberry

from ... import repository
from ...database.connection import get_async_session
from ...errors import NotFound
from ...logging import get_logger
from ...validation import CommentFields, validate_fields
from ..access_control import (
    ensure_comment_author,
    ensure_project_member,
    get_auth_context_from_info,
    require_authenticated,
)
from ..converters import (
    convert_db_to_graphql_comment,
    convert_db_to_graphql_task,
    convert_db_to_graphql_user,
)

if TYPE_CHECKING:
    from ..types.comment import Comment
    from ..types.task import Task
    from ..types.user import User

logger = get_logger(__name__)


async def resolve_comment_user(comment: Comment, info: strawberry.Info) -> User:
    async with get_async_session() as session:
        user = await repository.get_user(session, comment.user_id)
        if not user:
            raise NotFound("User not found.")
        return convert_db_to_graphql_user(user)


async def resolve_comment_task(comment: Comment, info: strawberry.Info) -> Task:
    async with get_async_session() as session:
        task = await repository.get_task(session, comment.task_id)
        if not task:
            raise NotFound("Task not found.")
        return convert_db_to_graphql_task(task)


async def add_comment(info: strawberry.Info, task_id: UUID, body: str) -> Comment:
    """Comment on a task as the requester."""
    auth_context = await get_auth_context_from_info(info)
    user_id = require_authenticated(auth_context)

    async with get_async_session() as session:
        task = await repository.get_task(session, task_id)
        if not task:
            raise NotFound("Task not found.")

        ensure_project_member(task.project, user_id)
        fields = validate_fields(CommentFields, body=body)

        comment = await repository.attach_comment_to_task(
            session, task_id=task.id, user_id=user_id, body=fields.body
        )
        logger.info("Comment added", comment_id=str(comment.id), task_id=str(task.id))
        return convert_db_to_graphql_comment(comment)


async def delete_comment(info: strawberry.Info, comment_id: UUID) -> Comment:
    """Delete a comment. Only its author may do so."""
    auth_context = await get_auth_context_from_info(info)
    user_id = require_authenticated(auth_context)

    async with get_async_session() as session:
        comment = await repository.get_comment(session, comment_id)
        if not comment:
            raise NotFound("Comment not found.")

        ensure_comment_author(comment, user_id)

        deleted = convert_db_to_graphql_comment(comment)
        await repository.delete_comment(session, comment_id)
        logger.info("Comment deleted", comment_id=str(comment_id), task_id=str(deleted.task_id))
        return deleted
