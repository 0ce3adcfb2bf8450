"""Repository helpers for users, projects, tasks, comments and logged time.

Every relationship lives in exactly one place: owner and client sets are rows
in ``project_owners``/``project_clients`` and children point at their parent
through a foreign key. The ``attach_*``, ``add_project_*`` and ``delete_*``
helpers below are the only code that writes those rows, and they all work
inside the caller's session, so a resolver's writes commit or roll back
together.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import delete, func, or_, select
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from .dbmodels import (
    Comments,
    LoggedTimes,
    ProjectClients,
    ProjectOwners,
    Projects,
    Tasks,
    Users,
    utcnow,
)
from .errors import DuplicateKey
from .logging import get_logger

logger = get_logger(__name__)


async def _flush(session: AsyncSession, duplicate_message: str) -> None:
    try:
        await session.flush()
    except IntegrityError as e:
        logger.info("Integrity error during flush", error=str(e.orig))
        raise DuplicateKey(duplicate_message) from e


def member_of(user_id: UUID):
    """SQL condition: the project has ``user_id`` as an owner or a client."""
    return or_(
        Projects.id.in_(select(ProjectOwners.project_id).where(ProjectOwners.user_id == user_id)),
        Projects.id.in_(
            select(ProjectClients.project_id).where(ProjectClients.user_id == user_id)
        ),
    )


# Users
async def get_user(session: AsyncSession, user_id: UUID) -> Users | None:
    return await session.get(Users, user_id)


async def get_user_by_email(session: AsyncSession, email: str) -> Users | None:
    stmt = select(Users).where(Users.email == email.strip().lower())
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def create_user(
    session: AsyncSession,
    *,
    name: str,
    email: str,
    password_hash: str,
    role: str = "admin",
) -> Users:
    user = Users(name=name, email=email, password=password_hash, role=role)
    session.add(user)
    await _flush(session, "An account with that email already exists.")
    return user


async def update_user(
    session: AsyncSession,
    user: Users,
    *,
    name: str | None = None,
    email: str | None = None,
    password_hash: str | None = None,
) -> Users:
    if name is not None:
        user.name = name
    if email is not None:
        user.email = email
    if password_hash is not None:
        user.password = password_hash
    user.updated_at = utcnow()
    await _flush(session, "An account with that email already exists.")
    return user


async def delete_user_cascade(session: AsyncSession, user_id: UUID) -> None:
    """Delete a user with its memberships, comments and logged time.

    Projects the user owned are kept even if no owner remains.
    """
    await session.execute(delete(Comments).where(Comments.user_id == user_id))
    await session.execute(delete(LoggedTimes).where(LoggedTimes.user_id == user_id))
    await session.execute(delete(ProjectOwners).where(ProjectOwners.user_id == user_id))
    await session.execute(delete(ProjectClients).where(ProjectClients.user_id == user_id))
    await session.execute(delete(Users).where(Users.id == user_id))


# Projects
async def get_project(session: AsyncSession, project_id: UUID) -> Projects | None:
    """Load a project with its owner and client rows."""
    stmt = (
        select(Projects)
        .where(Projects.id == project_id)
        .options(
            selectinload(Projects.project_owners),
            selectinload(Projects.project_clients),
        )
        .execution_options(populate_existing=True)
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def list_user_projects(
    session: AsyncSession, user_id: UUID, *, visible_to: UUID | None = None
) -> list[Projects]:
    """Projects ``user_id`` owns or is a client of, oldest first.

    With ``visible_to``, only projects that user is also a member of are returned.
    """
    stmt = select(Projects).where(member_of(user_id))
    if visible_to is not None and visible_to != user_id:
        stmt = stmt.where(member_of(visible_to))
    stmt = stmt.order_by(Projects.created_at)

    result = await session.execute(stmt)
    return list(result.scalars().all())


async def create_project(session: AsyncSession, *, title: str, owner_id: UUID) -> Projects:
    project = Projects(title=title)
    session.add(project)
    await session.flush()
    await add_project_owner(session, project.id, owner_id)
    return project


async def _insert_membership(
    session: AsyncSession,
    model: type[ProjectOwners] | type[ProjectClients],
    project_id: UUID,
    user_id: UUID,
) -> bool:
    """Insert a membership row unless it exists. Returns True if a row was added.

    Uses ``ON CONFLICT DO NOTHING`` so concurrent adds of the same member
    resolve to a single row without an integrity error.
    """
    dialect = session.get_bind().dialect.name
    insert = postgresql_insert if dialect == "postgresql" else sqlite_insert
    stmt = (
        insert(model.__table__)
        .values(project_id=project_id, user_id=user_id, added_at=utcnow())
        .on_conflict_do_nothing(index_elements=["project_id", "user_id"])
    )
    result = await session.execute(stmt)
    return result.rowcount == 1


async def add_project_owner(session: AsyncSession, project_id: UUID, user_id: UUID) -> bool:
    """Add ``user_id`` to the project's owners. Returns False if already an owner."""
    return await _insert_membership(session, ProjectOwners, project_id, user_id)


async def add_project_client(session: AsyncSession, project_id: UUID, user_id: UUID) -> bool:
    """Add ``user_id`` to the project's clients. Returns False if already a client."""
    return await _insert_membership(session, ProjectClients, project_id, user_id)


async def update_project_title(session: AsyncSession, project: Projects, title: str) -> Projects:
    project.title = title
    project.updated_at = utcnow()
    await session.flush()
    return project


async def list_project_owners(session: AsyncSession, project_id: UUID) -> list[Users]:
    stmt = (
        select(Users)
        .join(ProjectOwners, ProjectOwners.user_id == Users.id)
        .where(ProjectOwners.project_id == project_id)
        .order_by(ProjectOwners.added_at)
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def list_project_clients(session: AsyncSession, project_id: UUID) -> list[Users]:
    stmt = (
        select(Users)
        .join(ProjectClients, ProjectClients.user_id == Users.id)
        .where(ProjectClients.project_id == project_id)
        .order_by(ProjectClients.added_at)
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def delete_project_cascade(session: AsyncSession, project_id: UUID) -> None:
    """Delete a project together with its tasks, their comments and logged time."""
    task_ids = select(Tasks.id).where(Tasks.project_id == project_id)
    await session.execute(delete(Comments).where(Comments.task_id.in_(task_ids)))
    await session.execute(delete(LoggedTimes).where(LoggedTimes.task_id.in_(task_ids)))
    await session.execute(delete(Tasks).where(Tasks.project_id == project_id))
    await session.execute(delete(ProjectOwners).where(ProjectOwners.project_id == project_id))
    await session.execute(delete(ProjectClients).where(ProjectClients.project_id == project_id))
    await session.execute(delete(Projects).where(Projects.id == project_id))


# Tasks
async def get_task(session: AsyncSession, task_id: UUID) -> Tasks | None:
    """Load a task with its project and the project's owner and client rows."""
    stmt = (
        select(Tasks)
        .where(Tasks.id == task_id)
        .options(
            selectinload(Tasks.project).selectinload(Projects.project_owners),
            selectinload(Tasks.project).selectinload(Projects.project_clients),
        )
        .execution_options(populate_existing=True)
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def attach_task_to_project(
    session: AsyncSession,
    *,
    project_id: UUID,
    title: str,
    description: str | None = None,
    status: str = "todo",
) -> Tasks:
    task = Tasks(project_id=project_id, title=title, description=description, status=status)
    session.add(task)
    await session.flush()
    return task


async def list_project_tasks(session: AsyncSession, project_id: UUID) -> list[Tasks]:
    stmt = select(Tasks).where(Tasks.project_id == project_id).order_by(Tasks.created_at)
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def update_task(
    session: AsyncSession,
    task: Tasks,
    *,
    title: str | None = None,
    description: str | None = None,
    status: str | None = None,
) -> Tasks:
    if title is not None:
        task.title = title
    if description is not None:
        task.description = description
    if status is not None:
        task.status = status
    task.updated_at = utcnow()
    await session.flush()
    return task


async def delete_task_cascade(session: AsyncSession, task_id: UUID) -> None:
    """Delete a task together with its comments and logged time."""
    await session.execute(delete(Comments).where(Comments.task_id == task_id))
    await session.execute(delete(LoggedTimes).where(LoggedTimes.task_id == task_id))
    await session.execute(delete(Tasks).where(Tasks.id == task_id))


# Comments
async def get_comment(session: AsyncSession, comment_id: UUID) -> Comments | None:
    return await session.get(Comments, comment_id)


async def attach_comment_to_task(
    session: AsyncSession, *, task_id: UUID, user_id: UUID, body: str
) -> Comments:
    comment = Comments(task_id=task_id, user_id=user_id, body=body)
    session.add(comment)
    await session.flush()
    return comment


async def list_task_comments(session: AsyncSession, task_id: UUID) -> list[Comments]:
    stmt = select(Comments).where(Comments.task_id == task_id).order_by(Comments.created_at)
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def delete_comment(session: AsyncSession, comment_id: UUID) -> None:
    await session.execute(delete(Comments).where(Comments.id == comment_id))


# Logged time
async def attach_logged_time_to_task(
    session: AsyncSession,
    *,
    task_id: UUID,
    user_id: UUID,
    description: str,
    hours: float,
    date: datetime | None = None,
) -> LoggedTimes:
    logged_time = LoggedTimes(
        task_id=task_id,
        user_id=user_id,
        description=description,
        hours=hours,
        date=date or utcnow(),
    )
    session.add(logged_time)
    await session.flush()
    return logged_time


async def list_task_logged_times(session: AsyncSession, task_id: UUID) -> list[LoggedTimes]:
    stmt = (
        select(LoggedTimes)
        .where(LoggedTimes.task_id == task_id)
        .order_by(LoggedTimes.created_at)
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def sum_task_hours(session: AsyncSession, task_id: UUID) -> float:
    stmt = select(func.coalesce(func.sum(LoggedTimes.hours), 0.0)).where(
        LoggedTimes.task_id == task_id
    )
    result = await session.execute(stmt)
    return float(result.scalar() or 0.0)
