"""
Activity domain — appending events.

Kept apart from the feed service so the social graph can record follow /
block / unblock events without importing the feed (which reads the graph).
"""
from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from app.activity.constants import ActivityType
from app.activity.models import ActivityEvent


async def record_activity(
    session: AsyncSession,
    user_id: str,
    action_type: ActivityType,
    *,
    anime_id: int | None = None,
    anime_title: str | None = None,
    details: str | None = None,
) -> ActivityEvent:
    event = ActivityEvent(
        user_id=user_id,
        action_type=action_type,
        anime_id=anime_id,
        anime_title=anime_title,
        details=details,
    )
    session.add(event)
    await session.flush()
    return event
