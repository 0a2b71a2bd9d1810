"""
Activity domain — request orchestration.
"""
from __future__ import annotations

from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from app.activity import service as svc
from app.activity.models import ActivityEvent
from app.activity.schemas import (
    ActivityCreatedResponse,
    ActivityCreateRequest,
    ActivityFeedResponse,
    ActivityItem,
)
from app.pagination import MAX_ACTIVITY_PER_PAGE, as_utc, clamp_limit
from app.users.schemas import PublicUser


def _to_item(event: ActivityEvent, user: PublicUser | None) -> ActivityItem:
    return ActivityItem(
        activity_id=event.activity_id,
        user_id=event.user_id,
        action_type=event.action_type,
        anime_id=event.anime_id,
        anime_title=event.anime_title,
        details=event.details,
        created_at=as_utc(event.created_at),
        user=user,
    )


def _page(
    rows: list[tuple[ActivityEvent, PublicUser | None]],
    next_cursor: datetime | None,
    has_more: bool,
) -> ActivityFeedResponse:
    return ActivityFeedResponse(
        activities=[_to_item(e, u) for e, u in rows],
        next_cursor=as_utc(next_cursor) if next_cursor is not None else None,
        has_more=has_more,
    )


async def add_activity(
    session: AsyncSession, user_id: str, body: ActivityCreateRequest
) -> ActivityCreatedResponse:
    event = await svc.add_activity(
        session,
        user_id,
        body.action_type,
        anime_id=body.anime_id,
        anime_title=body.anime_title,
        details=body.details,
    )
    return ActivityCreatedResponse(activity_id=event.activity_id)


async def get_feed(
    session: AsyncSession,
    caller_id: str,
    cursor: datetime | None,
    limit: int | None,
) -> ActivityFeedResponse:
    rows, next_cursor, has_more = await svc.get_feed(
        session,
        caller_id,
        cursor=as_utc(cursor) if cursor is not None else None,
        limit=clamp_limit(limit, MAX_ACTIVITY_PER_PAGE),
    )
    return _page(rows, next_cursor, has_more)


async def get_user_activity(
    session: AsyncSession,
    user_id: str,
    cursor: datetime | None,
    limit: int | None,
) -> ActivityFeedResponse:
    rows, next_cursor, has_more = await svc.get_user_activity(
        session,
        user_id,
        cursor=as_utc(cursor) if cursor is not None else None,
        limit=clamp_limit(limit, MAX_ACTIVITY_PER_PAGE),
    )
    return _page(rows, next_cursor, has_more)
