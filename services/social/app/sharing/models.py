"""
Sharing domain — SQLAlchemy ORM models.

Tables:
  share_links — public, optionally expiring links to an anime, with a view
                counter.  Expired rows are kept until the cleanup sweep.
"""
from __future__ import annotations

import uuid
from datetime import datetime, timezone

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from shared.database.postgres import Base
from app.sharing.constants import TOKEN_LENGTH


def _now() -> datetime:
    return datetime.now(timezone.utc)


class ShareLink(Base):
    __tablename__ = "share_links"

    share_id: Mapped[uuid.UUID] = mapped_column(sa.Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[str] = mapped_column(sa.String(100), nullable=False)
    anime_id: Mapped[int] = mapped_column(sa.Integer, nullable=False)
    share_token: Mapped[str] = mapped_column(sa.String(TOKEN_LENGTH), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), nullable=False, default=_now
    )
    # NULL means the link never expires
    expires_at: Mapped[datetime | None] = mapped_column(sa.DateTime(timezone=True), nullable=True)
    views: Mapped[int] = mapped_column(
        sa.Integer, nullable=False, default=0, server_default=sa.text("0")
    )

    __table_args__ = (
        sa.UniqueConstraint("share_token", name="uq_share_links_token"),
        sa.CheckConstraint("anime_id > 0", name="ck_share_links_anime_id_positive"),
        sa.CheckConstraint("views >= 0", name="ck_share_links_views_non_negative"),
        sa.Index("idx_share_links_user_created", "user_id", "created_at"),
        sa.Index("idx_share_links_expires_at", "expires_at"),
    )
