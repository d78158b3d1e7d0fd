"""initial journal schema

Revision ID: 0a1f3c9d2b7e
Revises:
Create Date: 2026-01-05 10:12:44.318204

"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


revision = "0a1f3c9d2b7e"
down_revision = None
branch_labels = None
depends_on = None


legend_enum = sa.Enum(
    "CORE_MEMORY",
    "GOOD_DAY",
    "NEUTRAL",
    "BAD_DAY",
    "NIGHTMARE",
    name="legend",
)
review_category_enum = sa.Enum(
    "WORK",
    "PERSONAL",
    "LEARNING",
    "CUSTOM",
    name="review_category",
)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("password_hash", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=True),
        sa.Column("image", sa.String(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "user_sessions",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("refresh_token_id", sa.String(), nullable=False),
        sa.Column("user_agent", sa.String(), nullable=True),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column("revoked_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("refresh_token_id"),
    )
    op.create_index(
        "ix_user_sessions_user_id", "user_sessions", ["user_id"], unique=False
    )

    op.create_table(
        "day_entries",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("legend", legend_enum, nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "date", name="uq_day_entries_user_date"),
    )
    op.create_index(
        "ix_day_entries_user_id", "day_entries", ["user_id"], unique=False
    )
    op.create_index("ix_day_entries_date", "day_entries", ["date"], unique=False)

    op.create_table(
        "custom_categories",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(length=50), nullable=False),
        sa.Column("is_required", sa.Boolean(), nullable=False),
        sa.Column("order", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "user_id", "order", name="uq_custom_categories_user_order"
        ),
    )
    op.create_index(
        "ix_custom_categories_user_id",
        "custom_categories",
        ["user_id"],
        unique=False,
    )

    op.create_table(
        "reviews",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("day_entry_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("category", review_category_enum, nullable=False),
        sa.Column(
            "custom_category_id", postgresql.UUID(as_uuid=True), nullable=True
        ),
        sa.Column("content", sa.Text(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["day_entry_id"], ["day_entries.id"], ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(
            ["custom_category_id"], ["custom_categories.id"], ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_reviews_day_entry_id", "reviews", ["day_entry_id"], unique=False
    )
    op.create_index(
        "ix_reviews_custom_category_id",
        "reviews",
        ["custom_category_id"],
        unique=False,
    )
    op.create_index(
        "uq_reviews_entry_category",
        "reviews",
        ["day_entry_id", "category"],
        unique=True,
        postgresql_where=sa.text("custom_category_id IS NULL"),
        sqlite_where=sa.text("custom_category_id IS NULL"),
    )
    op.create_index(
        "uq_reviews_entry_custom_category",
        "reviews",
        ["day_entry_id", "custom_category_id"],
        unique=True,
        postgresql_where=sa.text("custom_category_id IS NOT NULL"),
        sqlite_where=sa.text("custom_category_id IS NOT NULL"),
    )

    op.create_table(
        "profile_settings",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("is_public", sa.Boolean(), nullable=False),
        sa.Column("show_moods", sa.Boolean(), nullable=False),
        sa.Column("show_reviews", sa.Boolean(), nullable=False),
        sa.Column("show_stats", sa.Boolean(), nullable=False),
        sa.Column("public_slug", sa.String(length=50), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("public_slug"),
    )
    op.create_index(
        "ix_profile_settings_user_id",
        "profile_settings",
        ["user_id"],
        unique=True,
    )


def downgrade() -> None:
    op.drop_index("ix_profile_settings_user_id", table_name="profile_settings")
    op.drop_table("profile_settings")

    op.drop_index("uq_reviews_entry_custom_category", table_name="reviews")
    op.drop_index("uq_reviews_entry_category", table_name="reviews")
    op.drop_index("ix_reviews_custom_category_id", table_name="reviews")
    op.drop_index("ix_reviews_day_entry_id", table_name="reviews")
    op.drop_table("reviews")

    op.drop_index(
        "ix_custom_categories_user_id", table_name="custom_categories"
    )
    op.drop_table("custom_categories")

    op.drop_index("ix_day_entries_date", table_name="day_entries")
    op.drop_index("ix_day_entries_user_id", table_name="day_entries")
    op.drop_table("day_entries")

    op.drop_index("ix_user_sessions_user_id", table_name="user_sessions")
    op.drop_table("user_sessions")

    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")

    review_category_enum.drop(op.get_bind(), checkfirst=True)
    legend_enum.drop(op.get_bind(), checkfirst=True)
