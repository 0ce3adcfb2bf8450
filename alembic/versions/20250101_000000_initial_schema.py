"""
Initial schema: users, projects, memberships, tasks, comments and logged time.

Revision ID: 20250101_000000_initial_schema
Revises:
Create Date: 2025-01-01 00:00:00
"""

import sqlalchemy as sa

from alembic import op  # type: ignore[reportMissingImports]

# revision identifiers, used by Alembic.
revision = "20250101_000000_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # users
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=20), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True)),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
        sa.CheckConstraint("role IN ('admin', 'client')", name="users_role_check"),
        sa.PrimaryKeyConstraint("id", name="users_pkey"),
        sa.UniqueConstraint("email", name="users_email_key"),
    )

    # projects
    op.create_table(
        "projects",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True)),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
        sa.PrimaryKeyConstraint("id", name="projects_pkey"),
    )

    # project_owners / project_clients
    for table, prefix in (("project_owners", "owners"), ("project_clients", "clients")):
        op.create_table(
            table,
            sa.Column("project_id", sa.Uuid(), nullable=False),
            sa.Column("user_id", sa.Uuid(), nullable=False),
            sa.Column("added_at", sa.DateTime(timezone=True)),
            sa.ForeignKeyConstraint(
                ["project_id"],
                ["projects.id"],
                ondelete="CASCADE",
                name=f"{table}_project_id_fkey",
            ),
            sa.ForeignKeyConstraint(
                ["user_id"],
                ["users.id"],
                ondelete="CASCADE",
                name=f"{table}_user_id_fkey",
            ),
            sa.PrimaryKeyConstraint("project_id", "user_id", name=f"{table}_pkey"),
        )
        op.create_index(f"idx_project_{prefix}_user", table, ["user_id"])

    # tasks
    op.create_table(
        "tasks",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("project_id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True)),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
        sa.CheckConstraint(
            "status IN ('requested', 'todo', 'in_progress', 'done')",
            name="tasks_status_check",
        ),
        sa.ForeignKeyConstraint(
            ["project_id"], ["projects.id"], ondelete="CASCADE", name="tasks_project_id_fkey"
        ),
        sa.PrimaryKeyConstraint("id", name="tasks_pkey"),
    )
    op.create_index("idx_tasks_project", "tasks", ["project_id"])

    # comments
    op.create_table(
        "comments",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("task_id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("body", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True)),
        sa.ForeignKeyConstraint(
            ["task_id"], ["tasks.id"], ondelete="CASCADE", name="comments_task_id_fkey"
        ),
        sa.ForeignKeyConstraint(
            ["user_id"], ["users.id"], ondelete="CASCADE", name="comments_user_id_fkey"
        ),
        sa.PrimaryKeyConstraint("id", name="comments_pkey"),
    )
    op.create_index("idx_comments_task", "comments", ["task_id"])

    # logged_times
    op.create_table(
        "logged_times",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("task_id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("hours", sa.Float(), nullable=False),
        sa.Column("date", sa.DateTime(timezone=True)),
        sa.Column("created_at", sa.DateTime(timezone=True)),
        sa.ForeignKeyConstraint(
            ["task_id"], ["tasks.id"], ondelete="CASCADE", name="logged_times_task_id_fkey"
        ),
        sa.ForeignKeyConstraint(
            ["user_id"], ["users.id"], ondelete="CASCADE", name="logged_times_user_id_fkey"
        ),
        sa.PrimaryKeyConstraint("id", name="logged_times_pkey"),
    )
    op.create_index("idx_logged_times_task", "logged_times", ["task_id"])


def downgrade() -> None:
    op.drop_index("idx_logged_times_task", table_name="logged_times")
    op.drop_table("logged_times")
    op.drop_index("idx_comments_task", table_name="comments")
    op.drop_table("comments")
    op.drop_index("idx_tasks_project", table_name="tasks")
    op.drop_table("tasks")
    op.drop_index("idx_project_clients_user", table_name="project_clients")
    op.drop_table("project_clients")
    op.drop_index("idx_project_owners_user", table_name="project_owners")
    op.drop_table("project_owners")
    op.drop_table("projects")
    op.drop_table("users")
