from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

import strawberry

from ... import repository
from ...database.connection import get_async_session
from ...errors import NotFound
from ...logging import get_logger
from ...validation import TaskFields, TaskUpdateFields, supplied, validate_fields
from ..access_control import (
    ensure_project_member,
    ensure_project_owner,
    get_auth_context_from_info,
    is_project_owner,
    require_authenticated,
)
from ..converters import (
    convert_db_to_graphql_comment,
    convert_db_to_graphql_logged_time,
    convert_db_to_graphql_project,
    convert_db_to_graphql_task,
)
from ..types.task import TaskStatus

if TYPE_CHECKING:
    from ..mutations.root import AddTaskInput, UpdateTaskInput
    from ..types.comment import Comment
    from ..types.logged_time import LoggedTime
    from ..types.project import Project
    from ..types.task import Task

logger = get_logger(__name__)


async def resolve_task_by_id(info: strawberry.Info, id: UUID) -> Task:
    """Resolve a task; the requester must be an owner or client of its project."""
    auth_context = await get_auth_context_from_info(info)
    user_id = require_authenticated(auth_context)

    async with get_async_session() as session:
        task = await repository.get_task(session, id)
        if not task:
            logger.info("Task not found", task_id=str(id))
            raise NotFound("Task not found.")

        ensure_project_member(task.project, user_id)
        return convert_db_to_graphql_task(task)


# Field resolvers
async def resolve_task_project(task: Task, info: strawberry.Info) -> Project:
    async with get_async_session() as session:
        project = await repository.get_project(session, task.project_id)
        if not project:
            raise NotFound("Project not found.")
        return convert_db_to_graphql_project(project)


async def resolve_task_comments(task: Task, info: strawberry.Info) -> list[Comment]:
    async with get_async_session() as session:
        comments = await repository.list_task_comments(session, task.id)
        return [convert_db_to_graphql_comment(comment) for comment in comments]


async def resolve_task_time_log(task: Task, info: strawberry.Info) -> list[LoggedTime]:
    async with get_async_session() as session:
        entries = await repository.list_task_logged_times(session, task.id)
        return [convert_db_to_graphql_logged_time(entry) for entry in entries]


async def resolve_task_total_hours(task: Task, info: strawberry.Info) -> float:
    async with get_async_session() as session:
        return await repository.sum_task_hours(session, task.id)


# Mutation resolvers
async def add_task(info: strawberry.Info, input: AddTaskInput) -> Task:
    """
    Create a task in a project.

    Owners choose the status freely (default ``todo``); tasks created by a
    client always start as ``requested``.
    """
    auth_context = await get_auth_context_from_info(info)
    user_id = require_authenticated(auth_context)

    async with get_async_session() as session:
        project = await repository.get_project(session, input.project_id)
        if not project:
            raise NotFound("Project not found.")

        ensure_project_member(project, user_id)
        fields = validate_fields(TaskFields, title=input.title, description=input.description)

        if not is_project_owner(project, user_id):
            status = TaskStatus.REQUESTED
        else:
            status = input.status or TaskStatus.TODO

        task = await repository.attach_task_to_project(
            session,
            project_id=project.id,
            title=fields.title,
            description=fields.description,
            status=status.value,
        )
        logger.info(
            "Task created", task_id=str(task.id), project_id=str(project.id), status=task.status
        )
        return convert_db_to_graphql_task(task)


async def update_task(info: strawberry.Info, input: UpdateTaskInput) -> Task:
    """Apply a partial update to a task. Only project owners may edit tasks."""
    auth_context = await get_auth_context_from_info(info)
    user_id = require_authenticated(auth_context)

    async with get_async_session() as session:
        task = await repository.get_task(session, input.task_id)
        if not task:
            raise NotFound("Task not found.")

        ensure_project_owner(task.project, user_id)
        fields = validate_fields(
            TaskUpdateFields,
            **{
                key: value
                for key, value in (("title", input.title), ("description", input.description))
                if value is not None
            },
        )
        changes = supplied(fields)

        await repository.update_task(
            session,
            task,
            title=changes.get("title"),
            description=changes.get("description"),
            status=input.status.value if input.status else None,
        )
        logger.info("Task updated", task_id=str(task.id), fields=sorted(changes))
        return convert_db_to_graphql_task(task)


async def delete_task(info: strawberry.Info, task_id: UUID) -> Task:
    """Delete a task with its comments and logged time."""
    auth_context = await get_auth_context_from_info(info)
    user_id = require_authenticated(auth_context)

    async with get_async_session() as session:
        task = await repository.get_task(session, task_id)
        if not task:
            raise NotFound("Task not found.")

        ensure_project_owner(task.project, user_id)

        deleted = convert_db_to_graphql_task(task)
        await repository.delete_task_cascade(session, task_id)
        logger.info("Task deleted", task_id=str(task_id), project_id=str(deleted.project_id))
        return deleted
