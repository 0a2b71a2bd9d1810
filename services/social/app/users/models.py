"""
Users — read-only mirror of the identity provider's profiles.

The identity provider owns accounts; this table only answers "look up user by
identity" and supplies the public projection (display name, avatar) embedded
in follower lists, feeds and share links.
"""
from __future__ import annotations

from datetime import datetime, timezone

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from shared.database.postgres import Base


def _now() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    # Identity-provider subject (the same string carried in the JWT `sub` claim)
    user_id: Mapped[str] = mapped_column(sa.String(100), primary_key=True)
    display_name: Mapped[str | None] = mapped_column(sa.String(150), nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(sa.String(500), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), nullable=False, default=_now
    )
