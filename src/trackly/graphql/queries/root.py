"""
Root GraphQL query definitions
"""

from uuid import UUID

import strawberry

from ..types.project import Project
from ..types.task import Task
from ..types.user import User


@strawberry.type
class Query:
    """Root GraphQL query type."""

    @strawberry.field
    async def me(self, info: strawberry.Info) -> User:
        """Get the current authenticated user."""
        from ..resolvers.auth import resolve_current_user

        return await resolve_current_user(info)

    @strawberry.field
    async def my_projects(self, info: strawberry.Info) -> list[Project]:
        """Get projects owned by or shared with the current user."""
        from ..resolvers.project import resolve_my_projects

        return await resolve_my_projects(info)

    @strawberry.field
    async def project(self, info: strawberry.Info, id: UUID) -> Project:
        """Get a project by ID."""
        from ..resolvers.project import resolve_project_by_id

        return await resolve_project_by_id(info, id)

    @strawberry.field
    async def task(self, info: strawberry.Info, id: UUID) -> Task:
        """Get a task by ID."""
        from ..resolvers.task import resolve_task_by_id

        return await resolve_task_by_id(info, id)
