from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

import strawberry

from ... import repository
from ...auth import hash_password
from ...database.connection import get_async_session
from ...errors import NotFound, ValidationFailed
from ...logging import get_logger
from ...validation import ProjectFields, UserFields, validate_fields
from ..access_control import (
    ensure_project_member,
    ensure_project_owner,
    get_auth_context_from_info,
    is_project_owner,
    require_authenticated,
)
from ..converters import (
    convert_db_to_graphql_project,
    convert_db_to_graphql_task,
    convert_db_to_graphql_user,
)
from .user import confirm_password, get_requester

if TYPE_CHECKING:
    from ..mutations.root import AddProjectInput, ClientInput
    from ..types.project import Project
    from ..types.task import Task
    from ..types.user import User

logger = get_logger(__name__)


# Query resolvers
async def resolve_my_projects(info: strawberry.Info) -> list[Project]:
    """Projects the requester owns or is a client of, oldest first."""
    auth_context = await get_auth_context_from_info(info)
    user_id = require_authenticated(auth_context)

    async with get_async_session() as session:
        projects = await repository.list_user_projects(session, user_id)
        return [convert_db_to_graphql_project(project) for project in projects]


async def resolve_project_by_id(info: strawberry.Info, id: UUID) -> Project:
    """
    Resolve a project by its ID.

    Checks authorization: the requester must be an owner or a client.
    """
    auth_context = await get_auth_context_from_info(info)
    user_id = require_authenticated(auth_context)

    async with get_async_session() as session:
        project = await repository.get_project(session, id)
        if not project:
            logger.info("Project not found", project_id=str(id))
            raise NotFound("Project not found.")

        ensure_project_member(project, user_id)
        return convert_db_to_graphql_project(project)


# Field resolvers
async def resolve_project_owners(project: Project, info: strawberry.Info) -> list[User]:
    async with get_async_session() as session:
        owners = await repository.list_project_owners(session, project.id)
        return [convert_db_to_graphql_user(user) for user in owners]


async def resolve_project_clients(project: Project, info: strawberry.Info) -> list[User]:
    async with get_async_session() as session:
        clients = await repository.list_project_clients(session, project.id)
        return [convert_db_to_graphql_user(user) for user in clients]


async def resolve_project_tasks(project: Project, info: strawberry.Info) -> list[Task]:
    async with get_async_session() as session:
        tasks = await repository.list_project_tasks(session, project.id)
        return [convert_db_to_graphql_task(task) for task in tasks]


# Mutation resolvers
async def add_project(info: strawberry.Info, input: AddProjectInput) -> Project:
    """Create a project owned by the requester."""
    auth_context = await get_auth_context_from_info(info)
    user_id = require_authenticated(auth_context)
    fields = validate_fields(ProjectFields, title=input.title)

    async with get_async_session() as session:
        requester = await get_requester(session, user_id)
        project = await repository.create_project(
            session, title=fields.title, owner_id=requester.id
        )

        logger.info("Project created", project_id=str(project.id), owner_id=str(requester.id))
        return convert_db_to_graphql_project(project)


async def update_project_title(info: strawberry.Info, project_id: UUID, title: str) -> Project:
    auth_context = await get_auth_context_from_info(info)
    user_id = require_authenticated(auth_context)

    async with get_async_session() as session:
        project = await repository.get_project(session, project_id)
        if not project:
            raise NotFound("Project not found.")

        ensure_project_member(project, user_id)
        fields = validate_fields(ProjectFields, title=title)
        await repository.update_project_title(session, project, fields.title)

        logger.info("Project title updated", project_id=str(project_id))
        return convert_db_to_graphql_project(project)


async def add_client_to_project(
    info: strawberry.Info, project_id: UUID, client_input: ClientInput
) -> Project:
    """
    Add a client to a project.

    An existing account with the given email is added as is; otherwise a new
    account with the ``client`` role is created from the input.
    """
    auth_context = await get_auth_context_from_info(info)
    user_id = require_authenticated(auth_context)

    async with get_async_session() as session:
        project = await repository.get_project(session, project_id)
        if not project:
            raise NotFound("Project not found.")

        ensure_project_owner(project, user_id)

        client = await repository.get_user_by_email(session, client_input.email)
        if client:
            if is_project_owner(project, client.id):
                raise ValidationFailed("User is already an owner of this project.")
            created = False
        else:
            fields = validate_fields(
                UserFields,
                name=client_input.name,
                email=client_input.email,
                password=client_input.password,
            )
            client = await repository.create_user(
                session,
                name=fields.name,
                email=fields.email,
                password_hash=await hash_password(fields.password),
                role="client",
            )
            created = True

        added = await repository.add_project_client(session, project.id, client.id)
        logger.info(
            "Client added to project",
            project_id=str(project.id),
            client_id=str(client.id),
            created_account=created,
            already_client=not added,
        )
        return convert_db_to_graphql_project(project)


async def delete_project(
    info: strawberry.Info, project_id: UUID, password: str | None = None
) -> Project:
    """
    Delete a project with its tasks, comments and logged time.

    When a password is supplied it must match the requester's.
    """
    auth_context = await get_auth_context_from_info(info)
    user_id = require_authenticated(auth_context)

    async with get_async_session() as session:
        project = await repository.get_project(session, project_id)
        if not project:
            raise NotFound("Project not found.")

        ensure_project_owner(project, user_id)
        if password is not None:
            await confirm_password(await get_requester(session, user_id), password)

        deleted = convert_db_to_graphql_project(project)
        await repository.delete_project_cascade(session, project_id)

        logger.info("Project deleted", project_id=str(project_id), user_id=str(user_id))
        return deleted
