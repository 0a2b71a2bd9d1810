"""
Users — identity lookups used by every other domain.
"""
from __future__ import annotations

from collections.abc import Iterable

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from app.users.models import User
from app.users.schemas import PublicUser


async def get_user(session: AsyncSession, user_id: str) -> User | None:
    result = await session.execute(sa.select(User).where(User.user_id == user_id))
    return result.scalar_one_or_none()


async def get_public_users(
    session: AsyncSession, user_ids: Iterable[str]
) -> dict[str, PublicUser | None]:
    """Batch-resolve identities (deduplicated) in one round trip.

    Identities with no profile map to None instead of failing the caller's page.
    """
    wanted = list(dict.fromkeys(user_ids))
    if not wanted:
        return {}
    result = await session.execute(sa.select(User).where(User.user_id.in_(wanted)))
    found = {u.user_id: to_public_user(u) for u in result.scalars().all()}
    return {uid: found.get(uid) for uid in wanted}


def to_public_user(user: User) -> PublicUser:
    return PublicUser(id=user.user_id, display_name=user.display_name, avatar_url=user.avatar_url)
