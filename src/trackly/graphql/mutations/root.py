"""
Root GraphQL mutation definitions
"""

from datetime import datetime
from uuid import UUID

import strawberry

from ..scalars import Hours
from ..types.comment import Comment
from ..types.logged_time import LoggedTime
from ..types.project import Project
from ..types.task import Task, TaskStatus
from ..types.user import AuthPayload, User


# Input types for mutations
@strawberry.input
class AddUserInput:
    """Input for signing up."""

    name: str
    email: str
    password: str


@strawberry.input
class UpdateUserInput:
    """Input for updating the current user. Omitted fields are left unchanged."""

    name: str | None = None
    email: str | None = None
    password: str | None = None


@strawberry.input
class AddProjectInput:
    title: str


@strawberry.input
class ClientInput:
    """
    Input for adding a client to a project.

    ``name`` and ``password`` are only used when no account with ``email``
    exists yet.
    """

    email: str
    name: str | None = None
    password: str | None = None


@strawberry.input
class AddTaskInput:
    project_id: UUID
    title: str
    description: str | None = None
    status: TaskStatus | None = None


@strawberry.input
class UpdateTaskInput:
    task_id: UUID
    title: str | None = None
    description: str | None = None
    status: TaskStatus | None = None


@strawberry.input
class LoggedTimeInput:
    task_id: UUID
    description: str
    hours: Hours
    date: datetime | None = None


@strawberry.type
class Mutation:
    """Root GraphQL mutation type."""

    # User mutations
    @strawberry.mutation(name="addUser")
    async def add_user(self, info: strawberry.Info, input: AddUserInput) -> AuthPayload:
        """Sign up and receive a session token."""
        from ..resolvers.auth import add_user

        return await add_user(info, input)

    @strawberry.mutation(name="login")
    async def login(self, info: strawberry.Info, email: str, password: str) -> AuthPayload:
        """Exchange credentials for a session token."""
        from ..resolvers.auth import login

        return await login(info, email, password)

    @strawberry.mutation(name="updateUser")
    async def update_user(self, info: strawberry.Info, input: UpdateUserInput) -> User:
        """Update the current user."""
        from ..resolvers.user import update_user

        return await update_user(info, input)

    @strawberry.mutation(name="deleteUser")
    async def delete_user(self, info: strawberry.Info, password: str) -> User:
        """Delete the current user. Requires the password."""
        from ..resolvers.user import delete_user

        return await delete_user(info, password)

    # Project mutations
    @strawberry.mutation(name="addProject")
    async def add_project(self, info: strawberry.Info, input: AddProjectInput) -> Project:
        """Create a new project owned by the current user."""
        from ..resolvers.project import add_project

        return await add_project(info, input)

    @strawberry.mutation(name="updateProjectTitle")
    async def update_project_title(
        self, info: strawberry.Info, project_id: UUID, title: str
    ) -> Project:
        """Rename a project."""
        from ..resolvers.project import update_project_title

        return await update_project_title(info, project_id, title)

    @strawberry.mutation(name="addClientToProject")
    async def add_client_to_project(
        self, info: strawberry.Info, project_id: UUID, client_input: ClientInput
    ) -> Project:
        """Add a client to a project, creating the account if needed."""
        from ..resolvers.project import add_client_to_project

        return await add_client_to_project(info, project_id, client_input)

    @strawberry.mutation(name="deleteProject")
    async def delete_project(
        self, info: strawberry.Info, project_id: UUID, password: str | None = None
    ) -> Project:
        """Delete a project and everything in it."""
        from ..resolvers.project import delete_project

        return await delete_project(info, project_id, password)

    # Task mutations
    @strawberry.mutation(name="addTask")
    async def add_task(self, info: strawberry.Info, input: AddTaskInput) -> Task:
        """Add a task to a project."""
        from ..resolvers.task import add_task

        return await add_task(info, input)

    @strawberry.mutation(name="updateTask")
    async def update_task(self, info: strawberry.Info, input: UpdateTaskInput) -> Task:
        """Update a task."""
        from ..resolvers.task import update_task

        return await update_task(info, input)

    @strawberry.mutation(name="deleteTask")
    async def delete_task(self, info: strawberry.Info, task_id: UUID) -> Task:
        """Delete a task with its comments and logged time."""
        from ..resolvers.task import delete_task

        return await delete_task(info, task_id)

    # Comment mutations
    @strawberry.mutation(name="addComment")
    async def add_comment(self, info: strawberry.Info, task_id: UUID, body: str) -> Comment:
        """Comment on a task."""
        from ..resolvers.comment import add_comment

        return await add_comment(info, task_id, body)

    @strawberry.mutation(name="deleteComment")
    async def delete_comment(self, info: strawberry.Info, comment_id: UUID) -> Comment:
        """Delete one of your own comments."""
        from ..resolvers.comment import delete_comment

        return await delete_comment(info, comment_id)

    # Logged time mutations
    @strawberry.mutation(name="addLoggedTime")
    async def add_logged_time(self, info: strawberry.Info, input: LoggedTimeInput) -> LoggedTime:
        """Log time against a task."""
        from ..resolvers.logged_time import add_logged_time

        return await add_logged_time(info, input)
