"""
Sharing domain — share link issuance, lookup and maintenance.

Tokens are 32 characters drawn with `secrets` from [A-Za-z0-9] (~190 bits).
A draw that collides with an existing token is replaced by a fresh draw, up
to MAX_TOKEN_ATTEMPTS; the unique constraint on share_token covers the race
between the existence check and the insert.

Expired links stay readable as EXPIRED (and deletable by their owner) until
cleanup_expired_links removes them.
"""
from __future__ import annotations

import logging
import secrets
import uuid
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

import sqlalchemy as sa
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import NotLinkOwner, ShareLinkNotFound, TokenGenerationFailed
from app.pagination import as_utc, keyset_page
from app.sharing.constants import (
    MAX_TOKEN_ATTEMPTS,
    TOKEN_ALPHABET,
    TOKEN_LENGTH,
    LinkLookupCode,
)
from app.sharing.models import ShareLink

logger = logging.getLogger(__name__)


# ── Tokens ─────────────────────────────────────────────────────────────────────

def generate_share_token() -> str:
    return "".join(secrets.choice(TOKEN_ALPHABET) for _ in range(TOKEN_LENGTH))


def is_well_formed_token(token: str) -> bool:
    return len(token) == TOKEN_LENGTH and all(c in TOKEN_ALPHABET for c in token)


async def _token_exists(session: AsyncSession, token: str) -> bool:
    result = await session.execute(
        sa.select(sa.exists().where(ShareLink.share_token == token))
    )
    return result.scalar_one()


def is_expired(link: ShareLink, now: datetime | None = None) -> bool:
    if link.expires_at is None:
        return False
    return as_utc(link.expires_at) < (now or datetime.now(timezone.utc))


# ── Create ─────────────────────────────────────────────────────────────────────

async def create_share_link(
    session: AsyncSession,
    user_id: str,
    anime_id: int,
    expires_in_days: int | None = None,
    *,
    token_factory: Callable[[], str] = generate_share_token,
) -> ShareLink:
    token: str | None = None
    for attempt in range(1, MAX_TOKEN_ATTEMPTS + 1):
        candidate = token_factory()
        if not await _token_exists(session, candidate):
            token = candidate
            break
        logger.warning("Share token collision (attempt %d/%d)", attempt, MAX_TOKEN_ATTEMPTS)
    if token is None:
        logger.error("Share token generation exhausted after %d attempts", MAX_TOKEN_ATTEMPTS)
        raise TokenGenerationFailed()

    now = datetime.now(timezone.utc)
    link = ShareLink(
        user_id=user_id,
        anime_id=anime_id,
        share_token=token,
        created_at=now,
        expires_at=now + timedelta(days=expires_in_days) if expires_in_days is not None else None,
        views=0,
    )
    session.add(link)
    try:
        await session.flush()
    except IntegrityError:
        # A concurrent insert claimed the same token after our existence check
        await session.rollback()
        logger.error("Share token claimed concurrently; giving up")
        raise TokenGenerationFailed() from None
    return link


# ── Public lookup ──────────────────────────────────────────────────────────────

async def get_share_link(
    session: AsyncSession, token: str
) -> tuple[ShareLink | None, LinkLookupCode | None]:
    """
    Resolve a public token.

    Returns (link, None) for a live link; otherwise a lookup code.  EXPIRED
    still carries the link so the caller can report when it expired.
    """
    if not is_well_formed_token(token):
        return None, LinkLookupCode.INVALID_TOKEN
    result = await session.execute(sa.select(ShareLink).where(ShareLink.share_token == token))
    link = result.scalar_one_or_none()
    if link is None:
        return None, LinkLookupCode.NOT_FOUND
    if is_expired(link):
        return link, LinkLookupCode.EXPIRED
    return link, None


# ── Owner operations ───────────────────────────────────────────────────────────

async def increment_share_view(session: AsyncSession, share_id: uuid.UUID) -> None:
    # Single UPDATE so concurrent increments never lose a view
    result = await session.execute(
        sa.update(ShareLink)
        .where(ShareLink.share_id == share_id)
        .values(views=ShareLink.views + 1)
    )
    if result.rowcount == 0:
        raise ShareLinkNotFound()


async def get_user_share_links(
    session: AsyncSession,
    user_id: str,
    *,
    cursor: str | None,
    limit: int,
) -> tuple[list[tuple[ShareLink, bool]], str | None]:
    """Return ([(link, is_expired)], next_cursor), oldest link first."""
    links, next_cursor = await keyset_page(
        session,
        sa.select(ShareLink).where(ShareLink.user_id == user_id),
        created_col=ShareLink.created_at,
        id_col=ShareLink.share_id,
        cursor=cursor,
        limit=limit,
    )
    now = datetime.now(timezone.utc)
    return [(link, is_expired(link, now)) for link in links], next_cursor


async def delete_share_link(session: AsyncSession, share_id: uuid.UUID, user_id: str) -> None:
    """Owners may delete their links at any time, expired or not."""
    link = await session.get(ShareLink, share_id)
    if link is None:
        raise ShareLinkNotFound()
    if link.user_id != user_id:
        raise NotLinkOwner()
    await session.delete(link)
    await session.flush()


# ── Maintenance ────────────────────────────────────────────────────────────────

async def cleanup_expired_links(session: AsyncSession) -> int:
    """Delete every link past its expiry. Safe to re-run; returns the number removed."""
    result = await session.execute(
        sa.delete(ShareLink)
        .where(ShareLink.expires_at < datetime.now(timezone.utc))
        .execution_options(synchronize_session="fetch")
    )
    deleted = result.rowcount or 0
    logger.info("Expired share link sweep removed %d link(s)", deleted)
    return deleted
