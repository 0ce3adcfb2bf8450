"""
Conversion from database rows to GraphQL types.

Conversion only reads column attributes, never relationships, so it is safe
on rows that were just flushed inside an async session.
"""

from ..dbmodels import Comments, LoggedTimes, Projects, Tasks, Users
from .types.comment import Comment
from .types.logged_time import LoggedTime
from .types.project import Project
from .types.task import Task, TaskStatus
from .types.user import User, UserRole


def convert_db_to_graphql_user(user: Users) -> User:
    """Convert a database User model to GraphQL User type."""
    return User(
        id=user.id,
        name=user.name,
        email=user.email,
        role=UserRole(user.role),
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


def convert_db_to_graphql_project(project: Projects) -> Project:
    return Project(
        id=project.id,
        title=project.title,
        created_at=project.created_at,
        updated_at=project.updated_at,
    )


def convert_db_to_graphql_task(task: Tasks) -> Task:
    return Task(
        id=task.id,
        project_id=task.project_id,
        title=task.title,
        description=task.description,
        status=TaskStatus(task.status),
        created_at=task.created_at,
        updated_at=task.updated_at,
    )


def convert_db_to_graphql_comment(comment: Comments) -> Comment:
    return Comment(
        id=comment.id,
        body=comment.body,
        user_id=comment.user_id,
        task_id=comment.task_id,
        created_at=comment.created_at,
    )


def convert_db_to_graphql_logged_time(logged_time: LoggedTimes) -> LoggedTime:
    return LoggedTime(
        id=logged_time.id,
        description=logged_time.description,
        hours=float(logged_time.hours or 0.0),
        date=logged_time.date,
        user_id=logged_time.user_id,
        task_id=logged_time.task_id,
        created_at=logged_time.created_at,
    )
