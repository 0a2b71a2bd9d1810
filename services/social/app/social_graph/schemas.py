"""
Social graph domain — Pydantic V2 request/response schemas.
"""
from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict

from app.pagination import CursorPage
from app.social_graph.constants import InteractionCode, Relationship
from app.users.schemas import PublicUser


# ── Follow ─────────────────────────────────────────────────────────────────────

class FollowResponse(BaseModel):
    success: bool = True
    follow_id: uuid.UUID


class FollowListItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID               # follow_id
    user_id: str                # the other party (follower or followed, depending on the list)
    created_at: datetime
    user: PublicUser | None     # null when the identity no longer resolves


FollowListResponse = CursorPage[FollowListItem]


class FollowStatusResponse(BaseModel):
    is_following: bool


class CountResponse(BaseModel):
    count: int


# ── Block ──────────────────────────────────────────────────────────────────────

class BlockMutationResponse(BaseModel):
    """Returned by block and unblock; carries the full block list for client cache coherency."""

    success: bool = True
    blocked_user_ids: list[str]
    message: str


class BlockedUserItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID               # block_id
    user_id: str
    created_at: datetime
    user: PublicUser | None


class BlockedUsersResponse(BaseModel):
    blocked_users: list[BlockedUserItem]
    next_cursor: str | None = None
    total_count: int


class BlockStatusResponse(BaseModel):
    is_blocked: bool
    is_blocked_by: bool
    relationship: Relationship


class CanInteractResponse(BaseModel):
    allowed: bool
    reason: str | None
    code: InteractionCode
