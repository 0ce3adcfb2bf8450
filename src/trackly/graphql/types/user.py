"""
User GraphQL type definitions
"""

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Annotated
from uuid import UUID

import strawberry

if TYPE_CHECKING:
    from .project import Project


@strawberry.enum
class UserRole(Enum):
    """Stored account classifier. It never grants access by itself."""

    ADMIN = "admin"
    CLIENT = "client"


@strawberry.type
class User:
    """User type for GraphQL API."""

    id: UUID
    name: str
    email: str
    role: UserRole
    created_at: datetime
    updated_at: datetime

    @strawberry.field
    async def projects(
        self, info: strawberry.Info
    ) -> list[Annotated["Project", strawberry.lazy(".project")]]:
        """Projects this user owns or is a client of, limited to ones the requester shares."""
        from ..resolvers.user import resolve_user_projects

        return await resolve_user_projects(self, info)


@strawberry.type
class AuthPayload:
    """Session token returned by signup and login."""

    token: str
    user: User
