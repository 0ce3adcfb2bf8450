"""
Task GraphQL type definitions
"""

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Annotated
from uuid import UUID

import strawberry

from ..scalars import Hours

if TYPE_CHECKING:
    from .comment import Comment
    from .logged_time import LoggedTime
    from .project import Project


@strawberry.enum
class TaskStatus(Enum):
    """Task status enumeration."""

    REQUESTED = "requested"
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    DONE = "done"


@strawberry.type
class Task:
    """Task type for GraphQL API."""

    id: UUID
    project_id: UUID
    title: str
    description: str | None
    status: TaskStatus
    created_at: datetime
    updated_at: datetime

    @strawberry.field
    async def project(
        self, info: strawberry.Info
    ) -> Annotated["Project", strawberry.lazy(".project")]:
        """Get the project this task belongs to."""
        from ..resolvers.task import resolve_task_project

        return await resolve_task_project(self, info)

    @strawberry.field
    async def comments(
        self, info: strawberry.Info
    ) -> list[Annotated["Comment", strawberry.lazy(".comment")]]:
        """Comments on this task, oldest first."""
        from ..resolvers.task import resolve_task_comments

        return await resolve_task_comments(self, info)

    @strawberry.field
    async def time_log(
        self, info: strawberry.Info
    ) -> list[Annotated["LoggedTime", strawberry.lazy(".logged_time")]]:
        """Time logged against this task, oldest first."""
        from ..resolvers.task import resolve_task_time_log

        return await resolve_task_time_log(self, info)

    @strawberry.field
    async def total_hours(self, info: strawberry.Info) -> Hours:
        """Sum of all hours logged against this task."""
        from ..resolvers.task import resolve_task_total_hours

        return await resolve_task_total_hours(self, info)
