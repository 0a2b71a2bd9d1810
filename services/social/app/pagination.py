"""Shared pagination utilities for list and feed endpoints.

Two cursor flavours:
  - Row cursor: opaque base64 of the last row's (created_at, id), used by the
    follow / block / share-link listings that walk rows in insertion order.
  - Time cursor: the created_at of the last activity in a feed page, used as
    an upper-exclusive bound on the next call.
"""

import base64
from datetime import datetime, timezone
from typing import Generic, TypeVar
from uuid import UUID

import sqlalchemy as sa
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute

from app.exceptions import InvalidCursor

T = TypeVar("T")

MAX_FOLLOWS_PER_PAGE = 50
MAX_BLOCKS_PER_PAGE = 100
MAX_ACTIVITY_PER_PAGE = 50
MAX_SHARE_LINKS_PER_PAGE = 50


class CursorPage(BaseModel, Generic[T]):
    """Cursor-based paginated response.

    `next_cursor` is an opaque string encoding the last item's (created_at, id).
    Pass it as the `cursor` query parameter to fetch the next page.
    """

    items: list[T]
    next_cursor: str | None = Field(
        default=None,
        description="Opaque cursor for the next page. Null when no more pages.",
    )
    has_more: bool = Field(description="True when additional pages exist.")


def clamp_limit(limit: int | None, maximum: int) -> int:
    """Apply the per-call maximum; a missing or non-positive limit means 'maximum'."""
    if limit is None or limit <= 0:
        return maximum
    return min(limit, maximum)


def as_utc(dt: datetime) -> datetime:
    """Normalise to UTC; naive datetimes (as returned by SQLite) are taken as UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def encode_cursor(dt: datetime, uid: UUID) -> str:
    """Encode a (created_at, id) pair into a URL-safe base64 cursor string."""
    raw = f"{as_utc(dt).isoformat()}|{uid}"
    return base64.urlsafe_b64encode(raw.encode()).decode()


def decode_cursor(cursor: str) -> tuple[datetime, UUID]:
    """Decode a cursor string back to (created_at, id).

    Raises InvalidCursor (422) on malformed input.
    """
    try:
        raw = base64.urlsafe_b64decode(cursor.encode()).decode()
        dt_str, uid_str = raw.split("|", 1)
        return as_utc(datetime.fromisoformat(dt_str)), UUID(uid_str)
    except (ValueError, UnicodeDecodeError) as exc:
        raise InvalidCursor() from exc


async def keyset_page(
    session: AsyncSession,
    stmt: sa.Select,
    *,
    created_col: InstrumentedAttribute,
    id_col: InstrumentedAttribute,
    cursor: str | None,
    limit: int,
) -> tuple[list, str | None]:
    """Walk `stmt` in insertion order, (created_at, id) ascending.

    Fetches limit + 1 rows so the cursor is only emitted when another page
    really exists.  Returns (rows, next_cursor).
    """
    if cursor is not None:
        cursor_at, cursor_id = decode_cursor(cursor)
        stmt = stmt.where(
            sa.or_(
                created_col > cursor_at,
                sa.and_(created_col == cursor_at, id_col > cursor_id),
            )
        )
    stmt = stmt.order_by(created_col.asc(), id_col.asc()).limit(limit + 1)
    rows = list((await session.execute(stmt)).scalars().all())

    has_more = len(rows) > limit
    rows = rows[:limit]
    if not has_more or not rows:
        return rows, None
    last = rows[-1]
    return rows, encode_cursor(
        getattr(last, created_col.key), getattr(last, id_col.key)
    )
