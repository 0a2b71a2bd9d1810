import pytest
import sqlalchemy as sa

from app.activity.constants import ActivityType
from app.activity.models import ActivityEvent
from app.exceptions import (
    AlreadyFollowing,
    BlockedByUser,
    CannotFollowSelf,
    InvalidCursor,
    NotFollowing,
    TargetBlocked,
    UserNotFound,
)
from app.social_graph import service as svc

ALICE = "user-alice-0001"
BOB = "user-bob-00002"


@pytest.mark.asyncio
async def test_follow_creates_edge_and_activity(db_session, make_user) -> None:
    await make_user(ALICE, "Alice")
    await make_user(BOB, "Bob")

    edge = await svc.follow(db_session, ALICE, BOB)

    assert edge.follower_id == ALICE
    assert edge.following_id == BOB
    assert await svc.is_following(db_session, ALICE, BOB)
    assert not await svc.is_following(db_session, BOB, ALICE)

    events = (await db_session.execute(
        sa.select(ActivityEvent).where(ActivityEvent.user_id == ALICE)
    )).scalars().all()
    assert [(e.action_type, e.details) for e in events] == [(ActivityType.FOLLOW, BOB)]


@pytest.mark.asyncio
async def test_follow_self_raises(db_session, make_user) -> None:
    await make_user(ALICE)
    with pytest.raises(CannotFollowSelf):
        await svc.follow(db_session, ALICE, ALICE)


@pytest.mark.asyncio
async def test_follow_unknown_user_raises(db_session, make_user) -> None:
    await make_user(ALICE)
    with pytest.raises(UserNotFound):
        await svc.follow(db_session, ALICE, "user-missing-0001")


@pytest.mark.asyncio
async def test_follow_twice_raises(db_session, make_user) -> None:
    await make_user(ALICE)
    await make_user(BOB)
    await svc.follow(db_session, ALICE, BOB)
    with pytest.raises(AlreadyFollowing):
        await svc.follow(db_session, ALICE, BOB)
    assert await svc.count_following(db_session, ALICE) == 1


@pytest.mark.asyncio
async def test_follow_refused_in_either_direction_of_a_block(db_session, make_user) -> None:
    await make_user(ALICE)
    await make_user(BOB)
    await svc.block(db_session, BOB, ALICE)

    with pytest.raises(BlockedByUser):
        await svc.follow(db_session, ALICE, BOB)
    with pytest.raises(TargetBlocked):
        await svc.follow(db_session, BOB, ALICE)


@pytest.mark.asyncio
async def test_unfollow(db_session, make_user) -> None:
    await make_user(ALICE)
    await make_user(BOB)
    await svc.follow(db_session, ALICE, BOB)

    await svc.unfollow(db_session, ALICE, BOB)

    assert not await svc.is_following(db_session, ALICE, BOB)
    with pytest.raises(NotFollowing):
        await svc.unfollow(db_session, ALICE, BOB)
    # Unfollow is never recorded
    actions = (await db_session.execute(
        sa.select(ActivityEvent.action_type).where(ActivityEvent.user_id == ALICE)
    )).scalars().all()
    assert actions == [ActivityType.FOLLOW]


@pytest.mark.asyncio
async def test_counts(db_session, make_user) -> None:
    await make_user(ALICE)
    for i in range(3):
        follower = f"user-follower-{i:04d}"
        await make_user(follower)
        await svc.follow(db_session, follower, ALICE)

    assert await svc.count_followers(db_session, ALICE) == 3
    assert await svc.count_following(db_session, ALICE) == 0
    assert await svc.count_following(db_session, "user-follower-0000") == 1


@pytest.mark.asyncio
async def test_followers_paginate_in_insertion_order(db_session, make_user) -> None:
    await make_user(ALICE)
    followers = [f"user-follower-{i:04d}" for i in range(5)]
    for follower in followers:
        await make_user(follower, follower.upper())
        await svc.follow(db_session, follower, ALICE)

    pages: list[list[str]] = []
    cursors: list[str | None] = []
    cursor = None
    while True:
        rows, cursor = await svc.get_followers(db_session, ALICE, cursor=cursor, limit=2)
        pages.append([f.follower_id for f, _ in rows])
        cursors.append(cursor)
        if cursor is None:
            break

    assert [len(p) for p in pages] == [2, 2, 1]
    assert [uid for page in pages for uid in page] == followers
    assert cursors[0] is not None and cursors[1] is not None and cursors[2] is None


@pytest.mark.asyncio
async def test_follow_list_tolerates_missing_profiles(db_session, make_user) -> None:
    await make_user(ALICE)
    await make_user(BOB, "Bob")
    await svc.follow(db_session, ALICE, BOB)
    await svc.follow(db_session, BOB, ALICE)
    # Profile removed from the mirror after the edge was created
    await db_session.execute(sa.text("DELETE FROM users WHERE user_id = :id"), {"id": BOB})

    rows, next_cursor = await svc.get_followers(db_session, ALICE, cursor=None, limit=10)

    assert next_cursor is None
    assert [(f.follower_id, u) for f, u in rows] == [(BOB, None)]


@pytest.mark.asyncio
async def test_following_list_enriches_profiles(db_session, make_user) -> None:
    await make_user(ALICE)
    await make_user(BOB, "Bob")
    await svc.follow(db_session, ALICE, BOB)

    rows, _ = await svc.get_following(db_session, ALICE, cursor=None, limit=10)

    assert len(rows) == 1
    edge, user = rows[0]
    assert edge.following_id == BOB
    assert user is not None and user.display_name == "Bob"


@pytest.mark.asyncio
async def test_malformed_cursor_raises(db_session, make_user) -> None:
    await make_user(ALICE)
    with pytest.raises(InvalidCursor):
        await svc.get_followers(db_session, ALICE, cursor="not-a-cursor", limit=2)
