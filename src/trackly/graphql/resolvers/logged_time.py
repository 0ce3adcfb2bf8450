from __future__ import annotations

from typing import TYPE_CHECKING

import strawberry

from ... import repository
from ...database.connection import get_async_session
from ...errors import NotFound
from ...logging import get_logger
from ...validation import LoggedTimeFields, validate_fields
from ..access_control import ensure_project_owner, get_auth_context_from_info, require_authenticated
from ..converters import (
    convert_db_to_graphql_logged_time,
    convert_db_to_graphql_task,
    convert_db_to_graphql_user,
)

if TYPE_CHECKING:
    from ..mutations.root import LoggedTimeInput
    from ..types.logged_time import LoggedTime
    from ..types.task import Task
    from ..types.user import User

logger = get_logger(__name__)


async def resolve_logged_time_user(logged_time: LoggedTime, info: strawberry.Info) -> User:
    async with get_async_session() as session:
        user = await repository.get_user(session, logged_time.user_id)
        if not user:
            raise NotFound("User not found.")
        return convert_db_to_graphql_user(user)


async def resolve_logged_time_task(logged_time: LoggedTime, info: strawberry.Info) -> Task:
    async with get_async_session() as session:
        task = await repository.get_task(session, logged_time.task_id)
        if not task:
            raise NotFound("Task not found.")
        return convert_db_to_graphql_task(task)


async def add_logged_time(info: strawberry.Info, input: LoggedTimeInput) -> LoggedTime:
    """
    Log time against a task as the requester.

    ``hours`` arrives already parsed by the ``Hours`` scalar, so non-numeric
    input is stored as 0.
    """
    auth_context = await get_auth_context_from_info(info)
    user_id = require_authenticated(auth_context)

    async with get_async_session() as session:
        task = await repository.get_task(session, input.task_id)
        if not task:
            raise NotFound("Task not found.")

        ensure_project_owner(task.project, user_id)
        fields = validate_fields(
            LoggedTimeFields, description=input.description, hours=input.hours, date=input.date
        )

        logged_time = await repository.attach_logged_time_to_task(
            session,
            task_id=task.id,
            user_id=user_id,
            description=fields.description,
            hours=fields.hours,
            date=fields.date,
        )
        logger.info(
            "Time logged",
            logged_time_id=str(logged_time.id),
            task_id=str(task.id),
            hours=logged_time.hours,
        )
        return convert_db_to_graphql_logged_time(logged_time)
