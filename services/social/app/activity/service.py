"""
Activity domain — feed aggregation (fan-out-on-read).

Visibility:
  visible authors = people the caller follows ∪ {caller}
                    − people the caller blocked − people who blocked the caller

Pagination:
  The cursor is the created_at of the last event on the previous page and is
  an exclusive upper bound applied to every author's page.  Each author
  contributes at most limit + 1 events, so the merged stream can tell exactly
  whether another page exists.
"""
from __future__ import annotations

import logging
from datetime import datetime

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from app.activity.constants import ActivityType
from app.activity.models import ActivityEvent
from app.activity.recorder import record_activity
from app.social_graph import service as graph_svc
from app.users import service as users_svc
from app.users.schemas import PublicUser

logger = logging.getLogger(__name__)


async def add_activity(
    session: AsyncSession,
    user_id: str,
    action_type: ActivityType,
    *,
    anime_id: int | None = None,
    anime_title: str | None = None,
    details: str | None = None,
) -> ActivityEvent:
    return await record_activity(
        session,
        user_id,
        action_type,
        anime_id=anime_id,
        anime_title=anime_title,
        details=details,
    )


async def get_visible_author_ids(session: AsyncSession, caller_id: str) -> set[str]:
    following = await graph_svc.get_following_ids(session, caller_id)
    blocked = set(await graph_svc.get_blocked_ids(session, caller_id))
    blocked_by = await graph_svc.get_blocker_ids(session, caller_id)
    return (following | {caller_id}) - blocked - blocked_by


async def _latest_per_author(
    session: AsyncSession,
    author_ids: set[str],
    *,
    before: datetime | None,
    per_author: int,
) -> list[ActivityEvent]:
    """Up to `per_author` newest events for each author, older than `before`."""
    rank = sa.func.row_number().over(
        partition_by=ActivityEvent.user_id,
        order_by=(ActivityEvent.created_at.desc(), ActivityEvent.activity_id.desc()),
    ).label("rn")
    inner = sa.select(ActivityEvent.activity_id, rank).where(
        ActivityEvent.user_id.in_(sorted(author_ids))
    )
    if before is not None:
        inner = inner.where(ActivityEvent.created_at < before)
    ranked = inner.subquery("ranked")

    result = await session.execute(
        sa.select(ActivityEvent)
        .join(ranked, ranked.c.activity_id == ActivityEvent.activity_id)
        .where(ranked.c.rn <= per_author)
    )
    return list(result.scalars().all())


def _newest_first(events: list[ActivityEvent]) -> list[ActivityEvent]:
    return sorted(events, key=lambda e: (e.created_at, e.activity_id), reverse=True)


async def get_feed(
    session: AsyncSession,
    caller_id: str,
    *,
    cursor: datetime | None,
    limit: int,
) -> tuple[list[tuple[ActivityEvent, PublicUser | None]], datetime | None, bool]:
    """
    Return (rows, next_cursor, has_more) for the caller's feed, newest first.

    Each row is (event, author profile or None).
    """
    visible = await get_visible_author_ids(session, caller_id)
    events = await _latest_per_author(session, visible, before=cursor, per_author=limit + 1)

    # The graph can change between the id-set reads and the event query
    merged = _newest_first([e for e in events if e.user_id in visible])
    has_more = len(merged) > limit
    page = merged[:limit]

    users = await users_svc.get_public_users(session, [e.user_id for e in page])
    next_cursor = page[-1].created_at if has_more and page else None
    logger.debug(
        "Feed for %s: %d author(s), %d candidate event(s), %d returned",
        caller_id, len(visible), len(merged), len(page),
    )
    return [(e, users.get(e.user_id)) for e in page], next_cursor, has_more


async def get_user_activity(
    session: AsyncSession,
    user_id: str,
    *,
    cursor: datetime | None,
    limit: int,
) -> tuple[list[tuple[ActivityEvent, PublicUser | None]], datetime | None, bool]:
    """A single author's timeline. Callers check can_interact beforehand."""
    stmt = sa.select(ActivityEvent).where(ActivityEvent.user_id == user_id)
    if cursor is not None:
        stmt = stmt.where(ActivityEvent.created_at < cursor)
    stmt = stmt.order_by(ActivityEvent.created_at.desc(), ActivityEvent.activity_id.desc())
    result = await session.execute(stmt.limit(limit + 1))
    events = list(result.scalars().all())

    has_more = len(events) > limit
    page = events[:limit]
    users = await users_svc.get_public_users(session, [user_id] if page else [])
    next_cursor = page[-1].created_at if has_more and page else None
    return [(e, users.get(e.user_id)) for e in page], next_cursor, has_more
