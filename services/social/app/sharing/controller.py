"""
Sharing domain — request orchestration.
"""
from __future__ import annotations

import uuid
from datetime import datetime

from fastapi import status
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings
from app.pagination import MAX_SHARE_LINKS_PER_PAGE, as_utc, clamp_limit
from app.schemas import SuccessResponse
from app.sharing import service as svc
from app.sharing.constants import LinkLookupCode
from app.sharing.models import ShareLink
from app.sharing.schemas import (
    CleanupResponse,
    OwnedShareLink,
    ShareLinkCreatedResponse,
    ShareLinkCreateRequest,
    ShareLinkErrorResponse,
    ShareLinkListResponse,
    ShareLinkResponse,
)
from app.users import service as users_svc

_LOOKUP_ERRORS: dict[LinkLookupCode, tuple[int, str]] = {
    LinkLookupCode.INVALID_TOKEN: (status.HTTP_422_UNPROCESSABLE_ENTITY, "Invalid token"),
    LinkLookupCode.NOT_FOUND: (status.HTTP_404_NOT_FOUND, "Link not found"),
    LinkLookupCode.EXPIRED: (status.HTTP_410_GONE, "Link expired"),
}


def _share_url(settings: Settings, token: str) -> str:
    return f"{settings.share_base_url.rstrip('/')}/{token}"


def _maybe_utc(value: datetime | None) -> datetime | None:
    return as_utc(value) if value is not None else None


async def create_share_link(
    session: AsyncSession,
    user_id: str,
    body: ShareLinkCreateRequest,
    settings: Settings,
) -> ShareLinkCreatedResponse:
    link = await svc.create_share_link(
        session, user_id, body.anime_id, expires_in_days=body.expires_in_days
    )
    return ShareLinkCreatedResponse(
        share_id=link.share_id,
        token=link.share_token,
        url=_share_url(settings, link.share_token),
        expires_at=_maybe_utc(link.expires_at),
    )


async def get_share_link(
    session: AsyncSession, token: str
) -> tuple[int, ShareLinkResponse | ShareLinkErrorResponse]:
    """Return (status_code, body); lookup failures are reported, not raised."""
    link, code = await svc.get_share_link(session, token)
    if code is not None:
        status_code, message = _LOOKUP_ERRORS[code]
        if code is LinkLookupCode.EXPIRED:
            return status_code, ShareLinkErrorResponse(
                error=message, code=code, expired=True, expired_at=_maybe_utc(link.expires_at)
            )
        return status_code, ShareLinkErrorResponse(error=message, code=code)

    creator = await users_svc.get_public_users(session, [link.user_id])
    return status.HTTP_200_OK, ShareLinkResponse(
        share_id=link.share_id,
        anime_id=link.anime_id,
        share_token=link.share_token,
        created_at=as_utc(link.created_at),
        expires_at=_maybe_utc(link.expires_at),
        views=link.views,
        creator=creator[link.user_id],
    )


async def increment_share_view(session: AsyncSession, share_id: uuid.UUID) -> SuccessResponse:
    await svc.increment_share_view(session, share_id)
    return SuccessResponse()


def _to_owned(link: ShareLink, expired: bool, settings: Settings) -> OwnedShareLink:
    return OwnedShareLink(
        share_id=link.share_id,
        anime_id=link.anime_id,
        share_token=link.share_token,
        url=_share_url(settings, link.share_token),
        created_at=as_utc(link.created_at),
        expires_at=_maybe_utc(link.expires_at),
        views=link.views,
        is_expired=expired,
    )


async def list_my_share_links(
    session: AsyncSession,
    user_id: str,
    cursor: str | None,
    limit: int | None,
    settings: Settings,
) -> ShareLinkListResponse:
    rows, next_cursor = await svc.get_user_share_links(
        session, user_id, cursor=cursor, limit=clamp_limit(limit, MAX_SHARE_LINKS_PER_PAGE)
    )
    return ShareLinkListResponse(
        share_links=[_to_owned(link, expired, settings) for link, expired in rows],
        next_cursor=next_cursor,
    )


async def delete_share_link(
    session: AsyncSession, share_id: uuid.UUID, user_id: str
) -> SuccessResponse:
    await svc.delete_share_link(session, share_id, user_id)
    return SuccessResponse()


async def cleanup_expired_links(session: AsyncSession) -> CleanupResponse:
    return CleanupResponse(deleted_count=await svc.cleanup_expired_links(session))
