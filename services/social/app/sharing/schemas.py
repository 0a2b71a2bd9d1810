"""
Sharing domain — Pydantic V2 request/response schemas.
"""
from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, PositiveInt

from app.sharing.constants import LinkLookupCode
from app.users.schemas import PublicUser

# Keeps now + expires_in_days inside the datetime range
MAX_EXPIRES_IN_DAYS = 1_000_000


class _Base(BaseModel):
    model_config = ConfigDict(extra="forbid")


# ── Requests ───────────────────────────────────────────────────────────────────

class ShareLinkCreateRequest(_Base):
    anime_id: PositiveInt
    expires_in_days: int | None = Field(
        default=None,
        gt=0,
        le=MAX_EXPIRES_IN_DAYS,
        description="Omit for a link that never expires.",
    )


# ── Responses ──────────────────────────────────────────────────────────────────

class ShareLinkCreatedResponse(BaseModel):
    success: bool = True
    share_id: uuid.UUID
    token: str
    url: str
    expires_at: datetime | None


class ShareLinkResponse(BaseModel):
    """A live link as seen through its public token."""

    share_id: uuid.UUID
    anime_id: int
    share_token: str
    created_at: datetime
    expires_at: datetime | None
    views: int
    creator: PublicUser | None
    expired: bool = False


class ShareLinkErrorResponse(BaseModel):
    error: str
    code: LinkLookupCode
    expired: bool | None = None
    expired_at: datetime | None = None


class OwnedShareLink(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    share_id: uuid.UUID
    anime_id: int
    share_token: str
    url: str
    created_at: datetime
    expires_at: datetime | None
    views: int
    is_expired: bool


class ShareLinkListResponse(BaseModel):
    share_links: list[OwnedShareLink]
    next_cursor: str | None = None


class CleanupResponse(BaseModel):
    deleted_count: int
