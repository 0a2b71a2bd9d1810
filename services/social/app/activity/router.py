"""
Activity domain — FastAPI routes.

All routes prefixed /api/v1/activity.

Routes:
  POST /                  Record an action by the caller (201)
  GET  /feed              Caller's feed: self + followed users, minus blocks
  GET  /users/{user_id}   One user's own timeline (no visibility filtering)
"""
from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.activity import controller as ctrl
from app.activity.schemas import (
    ActivityCreatedResponse,
    ActivityCreateRequest,
    ActivityFeedResponse,
)
from app.auth.dependencies import get_current_user
from app.database import get_db
from app.schemas import LimitQuery, UserIdPath
from shared.models.user import CurrentUser

router = APIRouter(prefix="/activity", tags=["activity"])


@router.post(
    "",
    response_model=ActivityCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record an activity",
    description="Called by the favorites, watch-later and comment features after a user acts.",
)
async def add_activity(
    body: ActivityCreateRequest,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> ActivityCreatedResponse:
    return await ctrl.add_activity(session, current_user.id, body)


@router.get(
    "/feed",
    response_model=ActivityFeedResponse,
    summary="My activity feed",
    description=(
        "Newest first. Pass `next_cursor` back as `cursor`; it is an exclusive "
        "upper bound on created_at (max 50 per page)."
    ),
)
async def activity_feed(
    cursor: datetime | None = Query(None, description="created_at of the last item seen"),
    limit: LimitQuery = None,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> ActivityFeedResponse:
    return await ctrl.get_feed(session, current_user.id, cursor=cursor, limit=limit)


@router.get(
    "/users/{user_id}",
    response_model=ActivityFeedResponse,
    summary="A user's activity timeline",
)
async def user_activity(
    user_id: UserIdPath,
    cursor: datetime | None = Query(None, description="created_at of the last item seen"),
    limit: LimitQuery = None,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> ActivityFeedResponse:
    return await ctrl.get_user_activity(session, user_id, cursor=cursor, limit=limit)
