"""
Comment GraphQL type definitions
"""

from datetime import datetime
from typing import TYPE_CHECKING, Annotated
from uuid import UUID

import strawberry

if TYPE_CHECKING:
    from .task import Task
    from .user import User


@strawberry.type
class Comment:
    """Comment type for GraphQL API."""

    id: UUID
    body: str
    user_id: UUID
    task_id: UUID
    created_at: datetime

    @strawberry.field
    async def user(self, info: strawberry.Info) -> Annotated["User", strawberry.lazy(".user")]:
        """Get the author of this comment."""
        from ..resolvers.comment import resolve_comment_user

        return await resolve_comment_user(self, info)

    @strawberry.field
    async def task(self, info: strawberry.Info) -> Annotated["Task", strawberry.lazy(".task")]:
        """Get the task this comment belongs to."""
        from ..resolvers.comment import resolve_comment_task

        return await resolve_comment_task(self, info)
