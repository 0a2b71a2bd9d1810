import asyncio
from contextlib import asynccontextmanager

import pytest
import sqlalchemy as sa

from app.exceptions import AlreadyFollowing
from app.sharing import service as sharing_svc
from app.sharing.models import ShareLink
from app.social_graph import service as graph_svc
from app.social_graph.models import Follow
from shared.database.postgres import get_session

ALICE = "user-alice-0001"
BOB = "user-bob-00002"

# Same commit-or-rollback unit of work a request gets from get_db
unit_of_work = asynccontextmanager(get_session)


@pytest.mark.asyncio
async def test_concurrent_view_increments_are_all_counted(db_session, make_user, session_factory) -> None:
    await make_user(ALICE)
    link = await sharing_svc.create_share_link(db_session, ALICE, 42)
    await db_session.commit()

    async def _view() -> None:
        async with unit_of_work(session_factory) as session:
            await sharing_svc.increment_share_view(session, link.share_id)

    await asyncio.gather(*(_view() for _ in range(20)))

    async with session_factory() as session:
        views = (await session.execute(
            sa.select(ShareLink.views).where(ShareLink.share_id == link.share_id)
        )).scalar_one()
    assert views == 20


@pytest.mark.asyncio
async def test_concurrent_link_creation_never_shares_a_token(db_session, make_user, session_factory) -> None:
    await make_user(ALICE)
    await make_user(BOB)
    await db_session.commit()

    async def _create(owner: str, anime_id: int) -> str:
        async with unit_of_work(session_factory) as session:
            link = await sharing_svc.create_share_link(session, owner, anime_id, expires_in_days=7)
            return link.share_token

    tokens = await asyncio.gather(*(
        _create(ALICE if n % 2 else BOB, n + 1) for n in range(10)
    ))

    assert len(set(tokens)) == 10
    async with session_factory() as session:
        stored = (await session.execute(sa.select(ShareLink.share_token))).scalars().all()
    assert sorted(stored) == sorted(tokens)


@pytest.mark.asyncio
async def test_concurrent_follows_leave_one_edge(db_session, make_user, session_factory) -> None:
    await make_user(ALICE)
    await make_user(BOB)
    await db_session.commit()

    async def _follow() -> None:
        async with unit_of_work(session_factory) as session:
            await graph_svc.follow(session, ALICE, BOB)

    results = await asyncio.gather(_follow(), _follow(), return_exceptions=True)

    assert sum(r is None for r in results) == 1
    assert sum(isinstance(r, AlreadyFollowing) for r in results) == 1
    async with session_factory() as session:
        edges = (await session.execute(
            sa.select(sa.func.count()).select_from(Follow).where(
                Follow.follower_id == ALICE,
                Follow.following_id == BOB,
            )
        )).scalar_one()
    assert edges == 1
