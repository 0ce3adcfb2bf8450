"""
Project GraphQL type definitions
"""

from datetime import datetime
from typing import TYPE_CHECKING, Annotated
from uuid import UUID

import strawberry

if TYPE_CHECKING:
    from .task import Task
    from .user import User


@strawberry.type
class Project:
    """Project type for GraphQL API."""

    id: UUID
    title: str
    created_at: datetime
    updated_at: datetime

    @strawberry.field
    async def owners(
        self, info: strawberry.Info
    ) -> list[Annotated["User", strawberry.lazy(".user")]]:
        """Users with full write authority over this project."""
        from ..resolvers.project import resolve_project_owners

        return await resolve_project_owners(self, info)

    @strawberry.field
    async def clients(
        self, info: strawberry.Info
    ) -> list[Annotated["User", strawberry.lazy(".user")]]:
        """Users with restricted access to this project."""
        from ..resolvers.project import resolve_project_clients

        return await resolve_project_clients(self, info)

    @strawberry.field
    async def tasks(
        self, info: strawberry.Info
    ) -> list[Annotated["Task", strawberry.lazy(".task")]]:
        """Tasks in this project, oldest first."""
        from ..resolvers.project import resolve_project_tasks

        return await resolve_project_tasks(self, info)
