"""
Sharing domain — admin-facing routes.

Routes:
  POST /api/v1/admin/share-links/cleanup   Delete every expired share link

Requires: ADMIN, SUPER_ADMIN or SERVICE role (the scheduled sweep runs as SERVICE).
"""
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import require_admin
from app.database import get_db
from app.sharing import controller as ctrl
from app.sharing.schemas import CleanupResponse
from shared.models.user import CurrentUser

router = APIRouter(prefix="/admin/share-links", tags=["admin-share-links"])


@router.post(
    "/cleanup",
    response_model=CleanupResponse,
    summary="[Admin] Remove expired share links",
    description="Idempotent; re-running after a partial sweep only removes what is left.",
)
async def cleanup_expired_links(
    admin: CurrentUser = Depends(require_admin),
    session: AsyncSession = Depends(get_db),
) -> CleanupResponse:
    return await ctrl.cleanup_expired_links(session)
