"""
Social graph domain — request orchestration.
"""
from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from app.pagination import MAX_BLOCKS_PER_PAGE, MAX_FOLLOWS_PER_PAGE, clamp_limit
from app.social_graph import service as svc
from app.social_graph.schemas import (
    BlockedUserItem,
    BlockedUsersResponse,
    BlockMutationResponse,
    BlockStatusResponse,
    CanInteractResponse,
    CountResponse,
    FollowListItem,
    FollowListResponse,
    FollowResponse,
    FollowStatusResponse,
)
from app.schemas import SuccessResponse


async def follow_user(session: AsyncSession, follower_id: str, following_id: str) -> FollowResponse:
    edge = await svc.follow(session, follower_id, following_id)
    return FollowResponse(follow_id=edge.follow_id)


async def unfollow_user(session: AsyncSession, follower_id: str, following_id: str) -> SuccessResponse:
    await svc.unfollow(session, follower_id, following_id)
    return SuccessResponse()


async def follow_status(session: AsyncSession, follower_id: str, following_id: str) -> FollowStatusResponse:
    return FollowStatusResponse(is_following=await svc.is_following(session, follower_id, following_id))


async def follower_count(session: AsyncSession, user_id: str) -> CountResponse:
    return CountResponse(count=await svc.count_followers(session, user_id))


async def following_count(session: AsyncSession, user_id: str) -> CountResponse:
    return CountResponse(count=await svc.count_following(session, user_id))


async def list_followers(
    session: AsyncSession,
    user_id: str,
    cursor: str | None,
    limit: int | None,
) -> FollowListResponse:
    rows, next_cursor = await svc.get_followers(
        session, user_id, cursor=cursor, limit=clamp_limit(limit, MAX_FOLLOWS_PER_PAGE)
    )
    items = [
        FollowListItem(id=f.follow_id, user_id=f.follower_id, created_at=f.created_at, user=u)
        for f, u in rows
    ]
    return FollowListResponse(items=items, next_cursor=next_cursor, has_more=next_cursor is not None)


async def list_following(
    session: AsyncSession,
    user_id: str,
    cursor: str | None,
    limit: int | None,
) -> FollowListResponse:
    rows, next_cursor = await svc.get_following(
        session, user_id, cursor=cursor, limit=clamp_limit(limit, MAX_FOLLOWS_PER_PAGE)
    )
    items = [
        FollowListItem(id=f.follow_id, user_id=f.following_id, created_at=f.created_at, user=u)
        for f, u in rows
    ]
    return FollowListResponse(items=items, next_cursor=next_cursor, has_more=next_cursor is not None)


async def block_user(session: AsyncSession, blocker_id: str, blocked_id: str) -> BlockMutationResponse:
    target, blocked_ids = await svc.block(session, blocker_id, blocked_id)
    return BlockMutationResponse(
        blocked_user_ids=blocked_ids,
        message=f"Successfully blocked {target.display_name or blocked_id}",
    )


async def unblock_user(session: AsyncSession, blocker_id: str, blocked_id: str) -> BlockMutationResponse:
    target, blocked_ids = await svc.unblock(session, blocker_id, blocked_id)
    name = target.display_name if target is not None and target.display_name else blocked_id
    return BlockMutationResponse(blocked_user_ids=blocked_ids, message=f"Successfully unblocked {name}")


async def list_blocked(
    session: AsyncSession,
    user_id: str,
    cursor: str | None,
    limit: int | None,
) -> BlockedUsersResponse:
    rows, next_cursor, total = await svc.get_blocked(
        session, user_id, cursor=cursor, limit=clamp_limit(limit, MAX_BLOCKS_PER_PAGE)
    )
    items = [
        BlockedUserItem(id=b.block_id, user_id=b.blocked_id, created_at=b.created_at, user=u)
        for b, u in rows
    ]
    return BlockedUsersResponse(blocked_users=items, next_cursor=next_cursor, total_count=total)


async def block_status(session: AsyncSession, requester_id: str, target_id: str) -> BlockStatusResponse:
    blocked, blocked_by, relationship = await svc.get_relationship(session, requester_id, target_id)
    return BlockStatusResponse(is_blocked=blocked, is_blocked_by=blocked_by, relationship=relationship)


async def can_interact(session: AsyncSession, requester_id: str, target_id: str) -> CanInteractResponse:
    allowed, reason, code = await svc.can_interact(session, requester_id, target_id)
    return CanInteractResponse(allowed=allowed, reason=reason, code=code)
