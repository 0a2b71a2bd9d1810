"""
Activity domain — SQLAlchemy ORM models.

Tables:
  activity_events — append-only log of user actions surfaced to followers.
                    Unfollow is never recorded.
"""
from __future__ import annotations

import uuid
from datetime import datetime, timezone

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from shared.database.postgres import Base
from app.activity.constants import MAX_ANIME_TITLE_LENGTH, MAX_DETAILS_LENGTH, ActivityType


def _now() -> datetime:
    return datetime.now(timezone.utc)


class ActivityEvent(Base):
    __tablename__ = "activity_events"

    activity_id: Mapped[uuid.UUID] = mapped_column(sa.Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[str] = mapped_column(sa.String(100), nullable=False)
    action_type: Mapped[ActivityType] = mapped_column(
        sa.Enum(
            ActivityType,
            name="activitytype",
            native_enum=False,
            length=32,
            values_callable=lambda e: [x.value for x in e],
        ),
        nullable=False,
    )
    anime_id: Mapped[int | None] = mapped_column(sa.Integer, nullable=True)
    anime_title: Mapped[str | None] = mapped_column(sa.String(MAX_ANIME_TITLE_LENGTH), nullable=True)
    details: Mapped[str | None] = mapped_column(sa.String(MAX_DETAILS_LENGTH), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), nullable=False, default=_now
    )

    __table_args__ = (
        sa.CheckConstraint("anime_id IS NULL OR anime_id > 0", name="ck_activity_events_anime_id_positive"),
        sa.Index("idx_activity_events_user_created", "user_id", "created_at"),
        sa.Index("idx_activity_events_action_type", "action_type"),
    )
