"""
Shared access control logic for GraphQL resolvers

Access is project scoped: a user may read a project and work on its tasks when
they are one of the project's owners or clients, and only owners may manage
clients, edit or delete tasks, log time or delete the project. The stored user
``role`` never grants access on its own.
"""

from typing import TYPE_CHECKING
from uuid import UUID

import strawberry

from ..auth.context import AuthContext
from ..auth.middleware import get_auth_context_optional
from ..errors import Forbidden, Unauthenticated
from ..logging import get_logger

if TYPE_CHECKING:
    from ..dbmodels import Comments, Projects

logger = get_logger(__name__)


async def get_auth_context_from_info(info: strawberry.Info) -> AuthContext | None:
    """
    Extract auth context from GraphQL info object.

    The context getter resolves the bearer token once per request; when a
    context was built without it (e.g. direct schema execution) the request
    headers are consulted instead.
    """
    auth_context = info.context.get("auth")
    if auth_context is not None:
        return auth_context

    request = info.context.get("request")
    if not request:
        logger.error("Request not found in GraphQL context")
        return None

    return await get_auth_context_optional(request.headers.get("authorization"))


def require_authenticated(auth_context: AuthContext | None) -> UUID:
    """Return the requesting user's id, or raise Unauthenticated."""
    if not auth_context or not auth_context.is_authenticated or auth_context.user_id is None:
        raise Unauthenticated()
    return auth_context.user_id


def is_project_owner(project: "Projects", user_id: UUID | None) -> bool:
    if user_id is None:
        return False
    return any(owner.user_id == user_id for owner in project.project_owners)


def is_project_client(project: "Projects", user_id: UUID | None) -> bool:
    if user_id is None:
        return False
    return any(client.user_id == user_id for client in project.project_clients)


def is_project_member(project: "Projects", user_id: UUID | None) -> bool:
    """Owners and clients are both members of a project."""
    return is_project_owner(project, user_id) or is_project_client(project, user_id)


def ensure_project_member(project: "Projects", user_id: UUID) -> None:
    if not is_project_member(project, user_id):
        logger.info("Access denied to project", project_id=str(project.id))
        raise Forbidden()


def ensure_project_owner(project: "Projects", user_id: UUID) -> None:
    if not is_project_owner(project, user_id):
        logger.info("Owner access denied to project", project_id=str(project.id))
        raise Forbidden()


def ensure_comment_author(comment: "Comments", user_id: UUID) -> None:
    if comment.user_id != user_id:
        logger.info("Comment delete denied to non-author", comment_id=str(comment.id))
        raise Forbidden()
