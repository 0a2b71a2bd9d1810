"""
Sharing domain — user-facing and public routes.

All routes prefixed /api/v1/share-links.

Routes:
  POST   /                    Create a share link for an anime  (30/hour rate limit)
  GET    /me                  My share links (cursor-paginated, with is_expired)
  GET    /{token}             PUBLIC — resolve a token  (60/minute per IP)
  POST   /{share_id}/views    Count one view
  DELETE /{share_id}          Delete my link (expired links included)

Note: /me must be registered before /{token} so Starlette's literal-path
matching takes precedence.
"""
import uuid

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_current_user
from app.config import Settings
from app.database import get_db
from app.dependencies import get_settings
from app.rate_limit import limiter
from app.schemas import LimitQuery, SuccessResponse
from app.sharing import controller as ctrl
from app.sharing.schemas import (
    ShareLinkCreatedResponse,
    ShareLinkCreateRequest,
    ShareLinkErrorResponse,
    ShareLinkListResponse,
    ShareLinkResponse,
)
from shared.models.user import CurrentUser

router = APIRouter(prefix="/share-links", tags=["share-links"])


@router.post(
    "",
    response_model=ShareLinkCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a share link",
    description="Omit `expires_in_days` for a link that never expires. Rate-limited to 30 per hour.",
)
@limiter.limit("30/hour")
async def create_share_link(
    request: Request,
    body: ShareLinkCreateRequest,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> ShareLinkCreatedResponse:
    return await ctrl.create_share_link(session, current_user.id, body, settings)


@router.get(
    "/me",
    response_model=ShareLinkListResponse,
    summary="List my share links",
)
async def my_share_links(
    cursor: str | None = Query(None, description="Opaque cursor from the previous page"),
    limit: LimitQuery = None,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> ShareLinkListResponse:
    return await ctrl.list_my_share_links(
        session, current_user.id, cursor=cursor, limit=limit, settings=settings
    )


@router.get(
    "/{token}",
    response_model=ShareLinkResponse,
    summary="Resolve a public share link",
    description=(
        "No authentication. Failures return `{error, code}` where code is "
        "INVALID_TOKEN (422), NOT_FOUND (404) or EXPIRED (410, with `expired_at`)."
    ),
    responses={
        422: {"model": ShareLinkErrorResponse},
        404: {"model": ShareLinkErrorResponse},
        410: {"model": ShareLinkErrorResponse},
    },
)
@limiter.limit("60/minute")
async def resolve_share_link(
    request: Request,
    token: str,
    session: AsyncSession = Depends(get_db),
) -> JSONResponse:
    status_code, body = await ctrl.get_share_link(session, token)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", exclude_none=isinstance(body, ShareLinkErrorResponse)),
    )


@router.post(
    "/{share_id}/views",
    response_model=SuccessResponse,
    summary="Count a view of a share link",
)
async def increment_share_view(
    share_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> SuccessResponse:
    return await ctrl.increment_share_view(session, share_id)


@router.delete(
    "/{share_id}",
    response_model=SuccessResponse,
    summary="Delete one of my share links",
)
async def delete_share_link(
    share_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> SuccessResponse:
    return await ctrl.delete_share_link(session, share_id, current_user.id)
