"""
Database models for Trackly (authoritative ORM definitions).

This module defines the SQLAlchemy Base with a naming convention for stable
Alembic autogenerate diffs, and exposes `target_metadata` for Alembic.

Identifiers and timestamps are generated in Python so the same models work on
PostgreSQL and SQLite.
"""

from datetime import UTC, datetime
from uuid import UUID, uuid4

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Float,
    ForeignKeyConstraint,
    Index,
    MetaData,
    PrimaryKeyConstraint,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

# Naming convention for deterministic constraint/index names in Alembic diffs
naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


def utcnow() -> datetime:
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Base class for all database models with type checking support."""

    metadata = MetaData(naming_convention=naming_convention)


class Users(Base):
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("role IN ('admin', 'client')", name="role_check"),
        PrimaryKeyConstraint("id", name="users_pkey"),
        UniqueConstraint("email", name="users_email_key"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, default=uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    password: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default="admin")
    created_at: Mapped[datetime] = mapped_column(DateTime(True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(True), default=utcnow)

    owned_projects: Mapped[list["ProjectOwners"]] = relationship(
        "ProjectOwners", uselist=True, back_populates="user"
    )
    client_projects: Mapped[list["ProjectClients"]] = relationship(
        "ProjectClients", uselist=True, back_populates="user"
    )
    comments: Mapped[list["Comments"]] = relationship(
        "Comments", uselist=True, back_populates="user"
    )
    logged_times: Mapped[list["LoggedTimes"]] = relationship(
        "LoggedTimes", uselist=True, back_populates="user"
    )


class Projects(Base):
    __tablename__ = "projects"
    __table_args__ = (PrimaryKeyConstraint("id", name="projects_pkey"),)

    id: Mapped[UUID] = mapped_column(Uuid, default=uuid4)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(True), default=utcnow)

    project_owners: Mapped[list["ProjectOwners"]] = relationship(
        "ProjectOwners", uselist=True, back_populates="project"
    )
    project_clients: Mapped[list["ProjectClients"]] = relationship(
        "ProjectClients", uselist=True, back_populates="project"
    )
    tasks: Mapped[list["Tasks"]] = relationship(
        "Tasks", uselist=True, back_populates="project", order_by="Tasks.created_at"
    )


class ProjectOwners(Base):
    __tablename__ = "project_owners"
    __table_args__ = (
        ForeignKeyConstraint(
            ["project_id"],
            ["projects.id"],
            ondelete="CASCADE",
            name="project_owners_project_id_fkey",
        ),
        ForeignKeyConstraint(
            ["user_id"],
            ["users.id"],
            ondelete="CASCADE",
            name="project_owners_user_id_fkey",
        ),
        PrimaryKeyConstraint("project_id", "user_id", name="project_owners_pkey"),
        Index("idx_project_owners_user", "user_id"),
    )

    project_id: Mapped[UUID] = mapped_column(Uuid)
    user_id: Mapped[UUID] = mapped_column(Uuid)
    added_at: Mapped[datetime] = mapped_column(DateTime(True), default=utcnow)

    project: Mapped["Projects"] = relationship("Projects", back_populates="project_owners")
    user: Mapped["Users"] = relationship("Users", back_populates="owned_projects")


class ProjectClients(Base):
    __tablename__ = "project_clients"
    __table_args__ = (
        ForeignKeyConstraint(
            ["project_id"],
            ["projects.id"],
            ondelete="CASCADE",
            name="project_clients_project_id_fkey",
        ),
        ForeignKeyConstraint(
            ["user_id"],
            ["users.id"],
            ondelete="CASCADE",
            name="project_clients_user_id_fkey",
        ),
        PrimaryKeyConstraint("project_id", "user_id", name="project_clients_pkey"),
        Index("idx_project_clients_user", "user_id"),
    )

    project_id: Mapped[UUID] = mapped_column(Uuid)
    user_id: Mapped[UUID] = mapped_column(Uuid)
    added_at: Mapped[datetime] = mapped_column(DateTime(True), default=utcnow)

    project: Mapped["Projects"] = relationship("Projects", back_populates="project_clients")
    user: Mapped["Users"] = relationship("Users", back_populates="client_projects")


class Tasks(Base):
    __tablename__ = "tasks"
    __table_args__ = (
        CheckConstraint(
            "status IN ('requested', 'todo', 'in_progress', 'done')",
            name="status_check",
        ),
        ForeignKeyConstraint(
            ["project_id"],
            ["projects.id"],
            ondelete="CASCADE",
            name="tasks_project_id_fkey",
        ),
        PrimaryKeyConstraint("id", name="tasks_pkey"),
        Index("idx_tasks_project", "project_id"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, default=uuid4)
    project_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="todo")
    created_at: Mapped[datetime] = mapped_column(DateTime(True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(True), default=utcnow)

    project: Mapped["Projects"] = relationship("Projects", back_populates="tasks")
    comments: Mapped[list["Comments"]] = relationship(
        "Comments", uselist=True, back_populates="task", order_by="Comments.created_at"
    )
    logged_times: Mapped[list["LoggedTimes"]] = relationship(
        "LoggedTimes", uselist=True, back_populates="task", order_by="LoggedTimes.created_at"
    )


class Comments(Base):
    __tablename__ = "comments"
    __table_args__ = (
        ForeignKeyConstraint(
            ["task_id"],
            ["tasks.id"],
            ondelete="CASCADE",
            name="comments_task_id_fkey",
        ),
        ForeignKeyConstraint(
            ["user_id"],
            ["users.id"],
            ondelete="CASCADE",
            name="comments_user_id_fkey",
        ),
        PrimaryKeyConstraint("id", name="comments_pkey"),
        Index("idx_comments_task", "task_id"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, default=uuid4)
    task_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)
    user_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(True), default=utcnow)

    task: Mapped["Tasks"] = relationship("Tasks", back_populates="comments")
    user: Mapped["Users"] = relationship("Users", back_populates="comments")


class LoggedTimes(Base):
    __tablename__ = "logged_times"
    __table_args__ = (
        ForeignKeyConstraint(
            ["task_id"],
            ["tasks.id"],
            ondelete="CASCADE",
            name="logged_times_task_id_fkey",
        ),
        ForeignKeyConstraint(
            ["user_id"],
            ["users.id"],
            ondelete="CASCADE",
            name="logged_times_user_id_fkey",
        ),
        PrimaryKeyConstraint("id", name="logged_times_pkey"),
        Index("idx_logged_times_task", "task_id"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, default=uuid4)
    task_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)
    user_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    hours: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    date: Mapped[datetime] = mapped_column(DateTime(True), default=utcnow)
    created_at: Mapped[datetime] = mapped_column(DateTime(True), default=utcnow)

    task: Mapped["Tasks"] = relationship("Tasks", back_populates="logged_times")
    user: Mapped["Users"] = relationship("Users", back_populates="logged_times")


# Expose for Alembic
target_metadata = Base.metadata
