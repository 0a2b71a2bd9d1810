"""
Social graph domain — SQLAlchemy ORM models.

Tables:
  follows  — unidirectional follow edges (follower → following)
  blocks   — block edges (blocker blocks blocked)

User ids are soft references to identity-provider subjects (no FK); a block
edge A→B implies no follow edge in either direction between A and B.
"""
from __future__ import annotations

import uuid
from datetime import datetime, timezone

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from shared.database.postgres import Base


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Follow(Base):
    __tablename__ = "follows"

    follow_id: Mapped[uuid.UUID] = mapped_column(sa.Uuid, primary_key=True, default=uuid.uuid4)
    follower_id: Mapped[str] = mapped_column(sa.String(100), nullable=False)
    following_id: Mapped[str] = mapped_column(sa.String(100), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), nullable=False, default=_now
    )

    __table_args__ = (
        sa.UniqueConstraint("follower_id", "following_id", name="uq_follows_pair"),
        sa.CheckConstraint("follower_id != following_id", name="ck_follows_no_self"),
        sa.Index("idx_follows_follower_id", "follower_id", "created_at"),
        sa.Index("idx_follows_following_id", "following_id", "created_at"),
    )


class Block(Base):
    __tablename__ = "blocks"

    block_id: Mapped[uuid.UUID] = mapped_column(sa.Uuid, primary_key=True, default=uuid.uuid4)
    blocker_id: Mapped[str] = mapped_column(sa.String(100), nullable=False)
    blocked_id: Mapped[str] = mapped_column(sa.String(100), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), nullable=False, default=_now
    )

    __table_args__ = (
        sa.UniqueConstraint("blocker_id", "blocked_id", name="uq_blocks_pair"),
        sa.CheckConstraint("blocker_id != blocked_id", name="ck_blocks_no_self"),
        sa.Index("idx_blocks_blocker_id", "blocker_id", "created_at"),
        sa.Index("idx_blocks_blocked_id", "blocked_id"),
    )
