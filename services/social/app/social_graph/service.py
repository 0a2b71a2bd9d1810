"""
Social graph domain — pure business logic (zero FastAPI imports).

State rules:
  follow:   cannot follow self, target must exist, cannot follow twice,
            cannot follow someone who blocked you (or whom you blocked)
  unfollow: edge must exist; never recorded in the activity log
  block:    cannot block self, target must exist; removes follow edges in
            both directions inside the same transaction
  unblock:  edge must exist; never restores the follow edges a block removed
"""
from __future__ import annotations

import logging

import sqlalchemy as sa
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.activity.constants import ActivityType
from app.activity.recorder import record_activity
from app.exceptions import (
    AlreadyBlocked,
    AlreadyFollowing,
    BlockedByUser,
    BlockNotFound,
    CannotBlockSelf,
    CannotFollowSelf,
    CannotUnblockSelf,
    NotFollowing,
    TargetBlocked,
    UserNotFound,
)
from app.pagination import keyset_page
from app.social_graph.constants import InteractionCode, Relationship
from app.social_graph.models import Block, Follow
from app.users import service as users_svc
from app.users.models import User
from app.users.schemas import PublicUser

logger = logging.getLogger(__name__)


# ── Internal helpers ───────────────────────────────────────────────────────────

async def _follow_exists(session: AsyncSession, follower_id: str, following_id: str) -> bool:
    result = await session.execute(
        sa.select(sa.exists().where(
            Follow.follower_id == follower_id,
            Follow.following_id == following_id,
        ))
    )
    return result.scalar_one()


async def _block_exists(session: AsyncSession, blocker_id: str, blocked_id: str) -> bool:
    result = await session.execute(
        sa.select(sa.exists().where(
            Block.blocker_id == blocker_id,
            Block.blocked_id == blocked_id,
        ))
    )
    return result.scalar_one()


async def _require_user(session: AsyncSession, user_id: str) -> User:
    user = await users_svc.get_user(session, user_id)
    if user is None:
        raise UserNotFound()
    return user


# ── Follow ─────────────────────────────────────────────────────────────────────

async def follow(session: AsyncSession, follower_id: str, following_id: str) -> Follow:
    if follower_id == following_id:
        raise CannotFollowSelf()
    await _require_user(session, following_id)
    if await _follow_exists(session, follower_id, following_id):
        raise AlreadyFollowing()
    if await _block_exists(session, blocker_id=following_id, blocked_id=follower_id):
        raise BlockedByUser()
    if await _block_exists(session, blocker_id=follower_id, blocked_id=following_id):
        raise TargetBlocked()

    edge = Follow(follower_id=follower_id, following_id=following_id)
    session.add(edge)
    try:
        await session.flush()
    except IntegrityError:
        # A concurrent request inserted the same pair between the check and the insert
        await session.rollback()
        raise AlreadyFollowing() from None

    await record_activity(session, follower_id, ActivityType.FOLLOW, details=following_id)
    return edge


async def unfollow(session: AsyncSession, follower_id: str, following_id: str) -> None:
    if not await _follow_exists(session, follower_id, following_id):
        raise NotFollowing()
    await session.execute(
        sa.delete(Follow).where(
            Follow.follower_id == follower_id,
            Follow.following_id == following_id,
        )
    )


async def is_following(session: AsyncSession, follower_id: str, following_id: str) -> bool:
    return await _follow_exists(session, follower_id, following_id)


async def count_followers(session: AsyncSession, user_id: str) -> int:
    result = await session.execute(
        sa.select(sa.func.count()).select_from(Follow).where(Follow.following_id == user_id)
    )
    return result.scalar_one()


async def count_following(session: AsyncSession, user_id: str) -> int:
    result = await session.execute(
        sa.select(sa.func.count()).select_from(Follow).where(Follow.follower_id == user_id)
    )
    return result.scalar_one()


# ── Following / Followers lists ────────────────────────────────────────────────

async def get_followers(
    session: AsyncSession,
    user_id: str,
    *,
    cursor: str | None,
    limit: int,
) -> tuple[list[tuple[Follow, PublicUser | None]], str | None]:
    """
    Return (rows, next_cursor) where each row is (Follow, follower profile or None).
    """
    edges, next_cursor = await keyset_page(
        session,
        sa.select(Follow).where(Follow.following_id == user_id),
        created_col=Follow.created_at,
        id_col=Follow.follow_id,
        cursor=cursor,
        limit=limit,
    )
    users = await users_svc.get_public_users(session, [f.follower_id for f in edges])
    return [(f, users.get(f.follower_id)) for f in edges], next_cursor


async def get_following(
    session: AsyncSession,
    user_id: str,
    *,
    cursor: str | None,
    limit: int,
) -> tuple[list[tuple[Follow, PublicUser | None]], str | None]:
    """
    Return (rows, next_cursor) where each row is (Follow, followed profile or None).
    """
    edges, next_cursor = await keyset_page(
        session,
        sa.select(Follow).where(Follow.follower_id == user_id),
        created_col=Follow.created_at,
        id_col=Follow.follow_id,
        cursor=cursor,
        limit=limit,
    )
    users = await users_svc.get_public_users(session, [f.following_id for f in edges])
    return [(f, users.get(f.following_id)) for f in edges], next_cursor


# ── Id sets (feed visibility) ─────────────────────────────────────────────────

async def get_following_ids(session: AsyncSession, user_id: str) -> set[str]:
    result = await session.execute(
        sa.select(Follow.following_id).where(Follow.follower_id == user_id)
    )
    return set(result.scalars().all())


async def get_blocked_ids(session: AsyncSession, user_id: str) -> list[str]:
    """Everyone user_id has blocked, oldest block first."""
    result = await session.execute(
        sa.select(Block.blocked_id)
        .where(Block.blocker_id == user_id)
        .order_by(Block.created_at.asc(), Block.block_id.asc())
    )
    return list(result.scalars().all())


async def get_blocker_ids(session: AsyncSession, user_id: str) -> set[str]:
    """Everyone who has blocked user_id."""
    result = await session.execute(
        sa.select(Block.blocker_id).where(Block.blocked_id == user_id)
    )
    return set(result.scalars().all())


# ── Block ──────────────────────────────────────────────────────────────────────

async def block(
    session: AsyncSession,
    blocker_id: str,
    blocked_id: str,
) -> tuple[User, list[str]]:
    """Block a user and sever follows both ways. Returns (target, blocker's block-id list)."""
    if blocker_id == blocked_id:
        raise CannotBlockSelf()
    target = await _require_user(session, blocked_id)
    if await _block_exists(session, blocker_id, blocked_id):
        raise AlreadyBlocked()

    session.add(Block(blocker_id=blocker_id, blocked_id=blocked_id))
    try:
        await session.flush()
    except IntegrityError:
        await session.rollback()
        raise AlreadyBlocked() from None

    # Remove follow edges in both directions
    removed = await session.execute(
        sa.delete(Follow).where(
            sa.or_(
                sa.and_(Follow.follower_id == blocker_id, Follow.following_id == blocked_id),
                sa.and_(Follow.follower_id == blocked_id, Follow.following_id == blocker_id),
            )
        )
    )
    if removed.rowcount:
        logger.info(
            "Block %s -> %s removed %d follow edge(s)", blocker_id, blocked_id, removed.rowcount
        )

    await record_activity(session, blocker_id, ActivityType.BLOCK, details=blocked_id)
    return target, await get_blocked_ids(session, blocker_id)


async def unblock(
    session: AsyncSession,
    blocker_id: str,
    blocked_id: str,
) -> tuple[User | None, list[str]]:
    """Remove a block. Follow edges severed by the block stay removed."""
    if blocker_id == blocked_id:
        raise CannotUnblockSelf()
    if not await _block_exists(session, blocker_id, blocked_id):
        raise BlockNotFound()

    target = await users_svc.get_user(session, blocked_id)
    await session.execute(
        sa.delete(Block).where(
            Block.blocker_id == blocker_id,
            Block.blocked_id == blocked_id,
        )
    )
    await record_activity(session, blocker_id, ActivityType.UNBLOCK, details=blocked_id)
    return target, await get_blocked_ids(session, blocker_id)


async def get_blocked(
    session: AsyncSession,
    user_id: str,
    *,
    cursor: str | None,
    limit: int,
) -> tuple[list[tuple[Block, PublicUser | None]], str | None, int]:
    """Return (rows, next_cursor, total) for user_id's block list."""
    total_r = await session.execute(
        sa.select(sa.func.count()).select_from(Block).where(Block.blocker_id == user_id)
    )
    total = total_r.scalar_one()

    edges, next_cursor = await keyset_page(
        session,
        sa.select(Block).where(Block.blocker_id == user_id),
        created_col=Block.created_at,
        id_col=Block.block_id,
        cursor=cursor,
        limit=limit,
    )
    users = await users_svc.get_public_users(session, [b.blocked_id for b in edges])
    return [(b, users.get(b.blocked_id)) for b in edges], next_cursor, total


# ── Block visibility checks ────────────────────────────────────────────────────

async def get_relationship(
    session: AsyncSession,
    requester_id: str,
    target_id: str,
) -> tuple[bool, bool, Relationship]:
    """Return (is_blocked, is_blocked_by, relationship) from the requester's side."""
    if requester_id == target_id:
        return False, False, Relationship.NONE
    blocked = await _block_exists(session, blocker_id=requester_id, blocked_id=target_id)
    blocked_by = await _block_exists(session, blocker_id=target_id, blocked_id=requester_id)
    if blocked:
        relationship = Relationship.BLOCKED
    elif blocked_by:
        relationship = Relationship.BLOCKED_BY
    else:
        relationship = Relationship.NONE
    return blocked, blocked_by, relationship


async def can_interact(
    session: AsyncSession,
    requester_id: str,
    target_id: str,
) -> tuple[bool, str | None, InteractionCode]:
    """Return (allowed, reason, code). Being blocked by the target wins over having blocked them."""
    if await _block_exists(session, blocker_id=target_id, blocked_id=requester_id):
        return False, "You are blocked by this user", InteractionCode.BLOCKED_BY_USER
    if await _block_exists(session, blocker_id=requester_id, blocked_id=target_id):
        return False, "You have blocked this user", InteractionCode.USER_BLOCKED
    return True, None, InteractionCode.ALLOWED
