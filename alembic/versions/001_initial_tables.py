"""001_initial_tables

Revision ID: 001
Revises:
Create Date: 2026-10-19 00:00:00.000000

Creates all initial tables for TeamHub:
  - users, oauth_tokens
  - organizations, projects, people
  - task_lists, tasks, watchers
  - conversations, comments
  - pages, page_slots, notes, uploads
"""
from __future__ import annotations

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | None = None
depends_on: str | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
    ]


def _fk(table: str, column: str, referred: str, ondelete: str = "CASCADE") -> sa.ForeignKeyConstraint:
    return sa.ForeignKeyConstraint(
        [column], [f"{referred}.id"],
        name=f"fk_{table}_{column}_{referred}",
        ondelete=ondelete,
    )


def upgrade() -> None:
    # ── Enums ─────────────────────────────────────────────────────────────────
    task_status_enum = postgresql.ENUM(
        "new", "open", "hold", "resolved", "rejected",
        name="task_status_enum", create_type=False
    )
    task_status_enum.create(op.get_bind(), checkfirst=True)

    # ── users ─────────────────────────────────────────────────────────────────
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("username", sa.String(40), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("first_name", sa.String(100), nullable=True),
        sa.Column("last_name", sa.String(100), nullable=True),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("remember_token_hash", sa.String(64), nullable=True),
        sa.Column("remember_token_expires_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.UniqueConstraint("email", name="uq_users_email"),
        sa.UniqueConstraint("username", name="uq_users_username"),
    )
    op.create_index("ix_users_remember_token_hash", "users", ["remember_token_hash"])

    # ── oauth_tokens ──────────────────────────────────────────────────────────
    op.create_table(
        "oauth_tokens",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("scope", sa.String(255), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("invalidated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        _fk("oauth_tokens", "user_id", "users"),
        sa.PrimaryKeyConstraint("id", name="pk_oauth_tokens"),
    )
    op.create_index("ix_oauth_tokens_user_id", "oauth_tokens", ["user_id"])

    # ── organizations ─────────────────────────────────────────────────────────
    op.create_table(
        "organizations",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("permalink", sa.String(255), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_organizations"),
        sa.UniqueConstraint("permalink", name="uq_organizations_permalink"),
    )

    # ── projects ──────────────────────────────────────────────────────────────
    op.create_table(
        "projects",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("permalink", sa.String(255), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("organization_id", sa.Integer(), nullable=True),
        sa.Column("archived", sa.Boolean(), nullable=False, server_default="false"),
        *_timestamps(),
        _fk("projects", "user_id", "users"),
        _fk("projects", "organization_id", "organizations", ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id", name="pk_projects"),
        sa.UniqueConstraint("permalink", name="uq_projects_permalink"),
    )
    op.create_index("ix_projects_user_id", "projects", ["user_id"])
    op.create_index("ix_projects_organization_id", "projects", ["organization_id"])

    # ── people ────────────────────────────────────────────────────────────────
    op.create_table(
        "people",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("project_id", sa.Integer(), nullable=False),
        sa.Column("role", sa.Integer(), nullable=False, server_default="2"),
        *_timestamps(),
        _fk("people", "user_id", "users"),
        _fk("people", "project_id", "projects"),
        sa.PrimaryKeyConstraint("id", name="pk_people"),
        sa.UniqueConstraint("user_id", "project_id", name="uq_people_user_id_project_id"),
    )
    op.create_index("ix_people_project_id", "people", ["project_id"])

    # ── task_lists ────────────────────────────────────────────────────────────
    op.create_table(
        "task_lists",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("permalink", sa.String(255), nullable=False),
        sa.Column("project_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("archived", sa.Boolean(), nullable=False, server_default="false"),
        *_timestamps(),
        _fk("task_lists", "project_id", "projects"),
        _fk("task_lists", "user_id", "users"),
        sa.PrimaryKeyConstraint("id", name="pk_task_lists"),
        sa.UniqueConstraint("project_id", "permalink", name="uq_task_lists_project_id_permalink"),
    )
    op.create_index("ix_task_lists_project_id", "task_lists", ["project_id"])

    # ── tasks ─────────────────────────────────────────────────────────────────
    op.create_table(
        "tasks",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column(
            "status",
            task_status_enum,
            nullable=False,
            server_default="new",
        ),
        sa.Column("project_id", sa.Integer(), nullable=False),
        sa.Column("task_list_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("assigned_id", sa.Integer(), nullable=True),
        sa.Column("due_on", sa.Date(), nullable=True),
        *_timestamps(),
        _fk("tasks", "project_id", "projects"),
        _fk("tasks", "task_list_id", "task_lists"),
        _fk("tasks", "user_id", "users"),
        _fk("tasks", "assigned_id", "people", ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id", name="pk_tasks"),
    )
    op.create_index("ix_tasks_project_id", "tasks", ["project_id"])
    op.create_index("ix_tasks_task_list_id", "tasks", ["task_list_id"])
    op.create_index("ix_tasks_assigned_id", "tasks", ["assigned_id"])
    op.create_index("ix_tasks_status", "tasks", ["status"])

    # ── watchers ──────────────────────────────────────────────────────────────
    op.create_table(
        "watchers",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("watchable_type", sa.String(50), nullable=False),
        sa.Column("watchable_id", sa.Integer(), nullable=False),
        *_timestamps(),
        _fk("watchers", "user_id", "users"),
        sa.PrimaryKeyConstraint("id", name="pk_watchers"),
        sa.UniqueConstraint(
            "user_id", "watchable_type", "watchable_id",
            name="uq_watchers_user_id_watchable",
        ),
    )
    op.create_index("ix_watchers_watchable", "watchers", ["watchable_type", "watchable_id"])

    # ── conversations ─────────────────────────────────────────────────────────
    op.create_table(
        "conversations",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("simple", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("project_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        *_timestamps(),
        _fk("conversations", "project_id", "projects"),
        _fk("conversations", "user_id", "users"),
        sa.PrimaryKeyConstraint("id", name="pk_conversations"),
    )
    op.create_index("ix_conversations_project_id", "conversations", ["project_id"])

    # ── comments ──────────────────────────────────────────────────────────────
    op.create_table(
        "comments",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("body", sa.Text(), nullable=False),
        sa.Column("project_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("target_type", sa.String(50), nullable=False),
        sa.Column("target_id", sa.Integer(), nullable=False),
        *_timestamps(),
        _fk("comments", "project_id", "projects"),
        _fk("comments", "user_id", "users"),
        sa.PrimaryKeyConstraint("id", name="pk_comments"),
    )
    op.create_index("ix_comments_target", "comments", ["target_type", "target_id"])
    op.create_index("ix_comments_project_id", "comments", ["project_id"])

    # ── pages ─────────────────────────────────────────────────────────────────
    op.create_table(
        "pages",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("permalink", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("project_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        *_timestamps(),
        _fk("pages", "project_id", "projects"),
        _fk("pages", "user_id", "users"),
        sa.PrimaryKeyConstraint("id", name="pk_pages"),
        sa.UniqueConstraint("project_id", "permalink", name="uq_pages_project_id_permalink"),
    )
    op.create_index("ix_pages_project_id", "pages", ["project_id"])

    # ── page_slots ────────────────────────────────────────────────────────────
    op.create_table(
        "page_slots",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("page_id", sa.Integer(), nullable=False),
        sa.Column("rel_object_type", sa.String(50), nullable=False),
        sa.Column("rel_object_id", sa.Integer(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        _fk("page_slots", "page_id", "pages"),
        sa.PrimaryKeyConstraint("id", name="pk_page_slots"),
    )
    op.create_index("ix_page_slots_rel_object", "page_slots", ["rel_object_type", "rel_object_id"])

    # ── notes ─────────────────────────────────────────────────────────────────
    op.create_table(
        "notes",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("body", sa.Text(), nullable=True),
        sa.Column("page_id", sa.Integer(), nullable=False),
        sa.Column("project_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        *_timestamps(),
        _fk("notes", "page_id", "pages"),
        _fk("notes", "project_id", "projects"),
        _fk("notes", "user_id", "users"),
        sa.PrimaryKeyConstraint("id", name="pk_notes"),
    )
    op.create_index("ix_notes_page_id", "notes", ["page_id"])

    # ── uploads ───────────────────────────────────────────────────────────────
    op.create_table(
        "uploads",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("asset_file_name", sa.String(255), nullable=False),
        sa.Column("asset_content_type", sa.String(100), nullable=True),
        sa.Column("asset_file_size", sa.Integer(), nullable=False),
        sa.Column("description", sa.String(1000), nullable=True),
        sa.Column("page_id", sa.Integer(), nullable=True),
        sa.Column("comment_id", sa.Integer(), nullable=True),
        sa.Column("project_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        *_timestamps(),
        _fk("uploads", "page_id", "pages"),
        _fk("uploads", "comment_id", "comments"),
        _fk("uploads", "project_id", "projects"),
        _fk("uploads", "user_id", "users"),
        sa.PrimaryKeyConstraint("id", name="pk_uploads"),
    )
    op.create_index("ix_uploads_page_id", "uploads", ["page_id"])
    op.create_index("ix_uploads_comment_id", "uploads", ["comment_id"])


def downgrade() -> None:
    for table in (
        "uploads",
        "notes",
        "page_slots",
        "pages",
        "comments",
        "conversations",
        "watchers",
        "tasks",
        "task_lists",
        "people",
        "projects",
        "organizations",
        "oauth_tokens",
        "users",
    ):
        op.drop_table(table)

    op.execute("DROP TYPE IF EXISTS task_status_enum")
