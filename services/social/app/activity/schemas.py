"""
Activity domain — Pydantic V2 request/response schemas.
"""
from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, PositiveInt

from app.activity.constants import MAX_ANIME_TITLE_LENGTH, MAX_DETAILS_LENGTH, ActivityType
from app.users.schemas import PublicUser


class _Base(BaseModel):
    model_config = ConfigDict(extra="forbid")


# ── Requests ───────────────────────────────────────────────────────────────────

class ActivityCreateRequest(_Base):
    action_type: ActivityType
    anime_id: PositiveInt | None = None
    anime_title: str | None = Field(default=None, max_length=MAX_ANIME_TITLE_LENGTH)
    details: str | None = Field(default=None, max_length=MAX_DETAILS_LENGTH)


# ── Responses ──────────────────────────────────────────────────────────────────

class ActivityCreatedResponse(BaseModel):
    activity_id: uuid.UUID


class ActivityItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    activity_id: uuid.UUID
    user_id: str
    action_type: ActivityType
    anime_id: int | None
    anime_title: str | None
    details: str | None
    created_at: datetime
    user: PublicUser | None = None


class ActivityFeedResponse(BaseModel):
    """
    A page of activity, newest first.

    Pass ``next_cursor`` back as ``cursor`` to continue; it is the created_at of
    the last item and acts as an exclusive upper bound on the next page.
    """

    activities: list[ActivityItem]
    next_cursor: datetime | None = None
    has_more: bool
