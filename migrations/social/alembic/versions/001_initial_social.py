"""Initial social schema: users, follows, blocks, activity_events, share_links.

Revision ID: 001_initial_social
Revises:
Create Date: 2026-10-19 09:00:00.000000

Changes:
  1. users            — profile mirror keyed by identity-provider subject
  2. follows / blocks — directed edges; unique per pair, no self edges
  3. activity_events  — append-only action log read by the feed
  4. share_links      — public tokens (unique), optional expiry, view counter
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID

revision: str = "001_initial_social"
down_revision: str | None = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("user_id", sa.String(100), primary_key=True, nullable=False),
        sa.Column("display_name", sa.String(150), nullable=True),
        sa.Column("avatar_url", sa.String(500), nullable=True),
        sa.Column(
            "created_at",
            TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
    )

    op.create_table(
        "follows",
        sa.Column("follow_id", UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("follower_id", sa.String(100), nullable=False),
        sa.Column("following_id", sa.String(100), nullable=False),
        sa.Column(
            "created_at",
            TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.UniqueConstraint("follower_id", "following_id", name="uq_follows_pair"),
        sa.CheckConstraint("follower_id != following_id", name="ck_follows_no_self"),
    )
    op.create_index("idx_follows_follower_id", "follows", ["follower_id", "created_at"])
    op.create_index("idx_follows_following_id", "follows", ["following_id", "created_at"])

    op.create_table(
        "blocks",
        sa.Column("block_id", UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("blocker_id", sa.String(100), nullable=False),
        sa.Column("blocked_id", sa.String(100), nullable=False),
        sa.Column(
            "created_at",
            TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.UniqueConstraint("blocker_id", "blocked_id", name="uq_blocks_pair"),
        sa.CheckConstraint("blocker_id != blocked_id", name="ck_blocks_no_self"),
    )
    op.create_index("idx_blocks_blocker_id", "blocks", ["blocker_id", "created_at"])
    op.create_index("idx_blocks_blocked_id", "blocks", ["blocked_id"])

    op.create_table(
        "activity_events",
        sa.Column("activity_id", UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("user_id", sa.String(100), nullable=False),
        # Non-native enum, stored as VARCHAR
        sa.Column("action_type", sa.String(32), nullable=False),
        sa.Column("anime_id", sa.Integer(), nullable=True),
        sa.Column("anime_title", sa.String(255), nullable=True),
        sa.Column("details", sa.String(255), nullable=True),
        sa.Column(
            "created_at",
            TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.CheckConstraint(
            "anime_id IS NULL OR anime_id > 0", name="ck_activity_events_anime_id_positive"
        ),
    )
    op.create_index(
        "idx_activity_events_user_created", "activity_events", ["user_id", "created_at"]
    )
    op.create_index("idx_activity_events_action_type", "activity_events", ["action_type"])

    op.create_table(
        "share_links",
        sa.Column("share_id", UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("user_id", sa.String(100), nullable=False),
        sa.Column("anime_id", sa.Integer(), nullable=False),
        sa.Column("share_token", sa.String(32), nullable=False),
        sa.Column(
            "created_at",
            TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column("expires_at", TIMESTAMP(timezone=True), nullable=True),
        sa.Column("views", sa.Integer(), nullable=False, server_default="0"),
        sa.UniqueConstraint("share_token", name="uq_share_links_token"),
        sa.CheckConstraint("anime_id > 0", name="ck_share_links_anime_id_positive"),
        sa.CheckConstraint("views >= 0", name="ck_share_links_views_non_negative"),
    )
    op.create_index("idx_share_links_user_created", "share_links", ["user_id", "created_at"])
    op.create_index("idx_share_links_expires_at", "share_links", ["expires_at"])


def downgrade() -> None:
    op.drop_index("idx_share_links_expires_at", table_name="share_links")
    op.drop_index("idx_share_links_user_created", table_name="share_links")
    op.drop_table("share_links")
    op.drop_index("idx_activity_events_action_type", table_name="activity_events")
    op.drop_index("idx_activity_events_user_created", table_name="activity_events")
    op.drop_table("activity_events")
    op.drop_index("idx_blocks_blocked_id", table_name="blocks")
    op.drop_index("idx_blocks_blocker_id", table_name="blocks")
    op.drop_table("blocks")
    op.drop_index("idx_follows_following_id", table_name="follows")
    op.drop_index("idx_follows_follower_id", table_name="follows")
    op.drop_table("follows")
    op.drop_table("users")
