"""
Logged time GraphQL type definitions
"""

from datetime import datetime
from typing import TYPE_CHECKING, Annotated
from uuid import UUID

import strawberry

from ..scalars import Hours

if TYPE_CHECKING:
    from .task import Task
    from .user import User


@strawberry.type
class LoggedTime:
    """Time entry type for GraphQL API."""

    id: UUID
    description: str
    hours: Hours
    date: datetime
    user_id: UUID
    task_id: UUID
    created_at: datetime

    @strawberry.field
    async def user(self, info: strawberry.Info) -> Annotated["User", strawberry.lazy(".user")]:
        """Get the user who logged this time."""
        from ..resolvers.logged_time import resolve_logged_time_user

        return await resolve_logged_time_user(self, info)

    @strawberry.field
    async def task(self, info: strawberry.Info) -> Annotated["Task", strawberry.lazy(".task")]:
        """Get the task this time was logged against."""
        from ..resolvers.logged_time import resolve_logged_time_task

        return await resolve_logged_time_task(self, info)
