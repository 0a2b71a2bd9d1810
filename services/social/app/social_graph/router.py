"""
Social graph domain — user-facing routes.

All routes prefixed /api/v1/users.

Routes:
  GET    /me/blocked                My block list (cursor-paginated, with total)
  POST   /{user_id}/follow          Follow a user  (50/hour rate limit)
  DELETE /{user_id}/follow          Unfollow
  GET    /{user_id}/follow-status   Do I follow this user?
  GET    /{user_id}/followers       Who follows this user (cursor-paginated)
  GET    /{user_id}/following       Who this user follows (cursor-paginated)
  GET    /{user_id}/followers/count
  GET    /{user_id}/following/count
  POST   /{user_id}/block           Block (removes follow edges both ways)
  DELETE /{user_id}/block           Unblock (does not restore follows)
  GET    /{user_id}/block-status    Block relationship in both directions
  GET    /{user_id}/can-interact    Whether I may interact with this user

Note: /me/... routes must be registered before /{user_id}/... routes so
Starlette's literal-path matching takes precedence.
"""
from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_current_user
from app.database import get_db
from app.rate_limit import limiter
from app.schemas import LimitQuery, SuccessResponse, UserIdPath
from app.social_graph import controller as ctrl
from app.social_graph.schemas import (
    BlockedUsersResponse,
    BlockMutationResponse,
    BlockStatusResponse,
    CanInteractResponse,
    CountResponse,
    FollowListResponse,
    FollowResponse,
    FollowStatusResponse,
)
from shared.models.user import CurrentUser

router = APIRouter(prefix="/users", tags=["social-graph"])


# ── My lists (must be registered before /{user_id}/... to avoid mis-routing) ──

@router.get(
    "/me/blocked",
    response_model=BlockedUsersResponse,
    summary="List users I have blocked",
)
async def my_blocked(
    cursor: str | None = Query(None, description="Opaque cursor from the previous page"),
    limit: LimitQuery = None,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> BlockedUsersResponse:
    return await ctrl.list_blocked(session, current_user.id, cursor=cursor, limit=limit)


# ── Follow ─────────────────────────────────────────────────────────────────────

@router.post(
    "/{user_id}/follow",
    response_model=FollowResponse,
    status_code=status.HTTP_200_OK,
    summary="Follow a user",
    description="Rate-limited to 50 follow actions per hour.",
)
@limiter.limit("50/hour")
async def follow_user(
    request: Request,
    user_id: UserIdPath,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> FollowResponse:
    return await ctrl.follow_user(session, current_user.id, user_id)


@router.delete(
    "/{user_id}/follow",
    response_model=SuccessResponse,
    summary="Unfollow a user",
)
async def unfollow_user(
    user_id: UserIdPath,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> SuccessResponse:
    return await ctrl.unfollow_user(session, current_user.id, user_id)


@router.get(
    "/{user_id}/follow-status",
    response_model=FollowStatusResponse,
    summary="Check whether I follow a user",
)
async def follow_status(
    user_id: UserIdPath,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> FollowStatusResponse:
    return await ctrl.follow_status(session, current_user.id, user_id)


@router.get(
    "/{user_id}/followers/count",
    response_model=CountResponse,
    summary="Count a user's followers",
)
async def follower_count(
    user_id: UserIdPath,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> CountResponse:
    return await ctrl.follower_count(session, user_id)


@router.get(
    "/{user_id}/following/count",
    response_model=CountResponse,
    summary="Count the users a user follows",
)
async def following_count(
    user_id: UserIdPath,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> CountResponse:
    return await ctrl.following_count(session, user_id)


@router.get(
    "/{user_id}/followers",
    response_model=FollowListResponse,
    summary="List a user's followers",
    description="Insertion order. Pass `next_cursor` back as `cursor` for the next page (max 50).",
)
async def user_followers(
    user_id: UserIdPath,
    cursor: str | None = Query(None, description="Opaque cursor from the previous page"),
    limit: LimitQuery = None,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> FollowListResponse:
    return await ctrl.list_followers(session, user_id, cursor=cursor, limit=limit)


@router.get(
    "/{user_id}/following",
    response_model=FollowListResponse,
    summary="List the users a user follows",
    description="Insertion order. Pass `next_cursor` back as `cursor` for the next page (max 50).",
)
async def user_following(
    user_id: UserIdPath,
    cursor: str | None = Query(None, description="Opaque cursor from the previous page"),
    limit: LimitQuery = None,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> FollowListResponse:
    return await ctrl.list_following(session, user_id, cursor=cursor, limit=limit)


# ── Block ──────────────────────────────────────────────────────────────────────

@router.post(
    "/{user_id}/block",
    response_model=BlockMutationResponse,
    status_code=status.HTTP_200_OK,
    summary="Block a user",
    description="Automatically removes follow edges in both directions.",
)
async def block_user(
    user_id: UserIdPath,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> BlockMutationResponse:
    return await ctrl.block_user(session, current_user.id, user_id)


@router.delete(
    "/{user_id}/block",
    response_model=BlockMutationResponse,
    summary="Unblock a user",
    description="Follow edges removed by the block are not restored.",
)
async def unblock_user(
    user_id: UserIdPath,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> BlockMutationResponse:
    return await ctrl.unblock_user(session, current_user.id, user_id)


@router.get(
    "/{user_id}/block-status",
    response_model=BlockStatusResponse,
    summary="Block relationship with a user",
)
async def block_status(
    user_id: UserIdPath,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> BlockStatusResponse:
    return await ctrl.block_status(session, current_user.id, user_id)


@router.get(
    "/{user_id}/can-interact",
    response_model=CanInteractResponse,
    summary="Check whether I may interact with a user",
)
async def can_interact(
    user_id: UserIdPath,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> CanInteractResponse:
    return await ctrl.can_interact(session, current_user.id, user_id)
