"""Create users, snippets, snippet_tags and sessions tables

Revision ID: 001
Revises: None
Create Date: 2026-10-18 00:00:00.000000+00:00

What:  Initial schema: accounts, their snippets, snippet tags and the
       server-side session rows.
How:   Portable column types (sa.Uuid, TIMESTAMP WITH TIME ZONE) so the same
       revision runs on PostgreSQL and SQLite.

Rollback: downgrade() drops all four tables (destructive).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column(
            "username",
            sa.String(150),
            nullable=False,
            comment="Login name, matched exactly (case-sensitive)",
        ),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        # One account per name, even under concurrent registration
        sa.UniqueConstraint("username", name="uq_users_username"),
    )

    op.create_table(
        "snippets",
        sa.Column("id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("title", sa.String(300), nullable=False, server_default=sa.text("''")),
        sa.Column("language", sa.String(100), nullable=False, server_default=sa.text("''")),
        sa.Column("content", sa.Text(), nullable=False, server_default=sa.text("''")),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
            comment="When the snippet was created (UTC); not touched by edits",
        ),
        sa.Column("user_id", sa.Uuid(as_uuid=True), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    # Listing is always "this user's snippets, newest first"
    op.create_index(
        "idx_snippets_user_created_at",
        "snippets",
        ["user_id", "created_at"],
    )

    op.create_table(
        "snippet_tags",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("snippet_id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("tag", sa.String(100), nullable=False),
        sa.ForeignKeyConstraint(["snippet_id"], ["snippets.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_snippet_tags_tag", "snippet_tags", ["tag"])
    op.create_index("idx_snippet_tags_snippet_id", "snippet_tags", ["snippet_id"])

    op.create_table(
        "sessions",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("user_id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column("expires_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    # Startup purge deletes by expiry
    op.create_index("idx_sessions_expires_at", "sessions", ["expires_at"])


def downgrade() -> None:
    op.drop_index("idx_sessions_expires_at", table_name="sessions")
    op.drop_table("sessions")
    op.drop_index("idx_snippet_tags_snippet_id", table_name="snippet_tags")
    op.drop_index("idx_snippet_tags_tag", table_name="snippet_tags")
    op.drop_table("snippet_tags")
    op.drop_index("idx_snippets_user_created_at", table_name="snippets")
    op.drop_table("snippets")
    op.drop_table("users")
