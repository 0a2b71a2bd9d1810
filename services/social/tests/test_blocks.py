import pytest
import sqlalchemy as sa

from app.activity.constants import ActivityType
from app.activity.models import ActivityEvent
from app.exceptions import AlreadyBlocked, BlockNotFound, CannotBlockSelf, CannotUnblockSelf, UserNotFound
from app.social_graph import service as svc
from app.social_graph.constants import InteractionCode, Relationship

U1 = "user-one-00001"
U2 = "user-two-00002"
U3 = "user-three-003"


@pytest.mark.asyncio
async def test_block_removes_follows_both_ways(db_session, make_user) -> None:
    await make_user(U1)
    await make_user(U2, "Two")
    await svc.follow(db_session, U1, U2)
    await svc.follow(db_session, U2, U1)

    target, blocked_ids = await svc.block(db_session, U1, U2)

    assert target.user_id == U2
    assert blocked_ids == [U2]
    assert not await svc.is_following(db_session, U1, U2)
    assert not await svc.is_following(db_session, U2, U1)


@pytest.mark.asyncio
async def test_block_then_can_interact_scenario(db_session, make_user) -> None:
    await make_user(U1)
    await make_user(U2)
    await svc.follow(db_session, U1, U2)
    await svc.follow(db_session, U2, U1)

    await svc.block(db_session, U1, U2)

    assert await svc.count_following(db_session, U1) == 0
    assert await svc.count_following(db_session, U2) == 0
    allowed, reason, code = await svc.can_interact(db_session, U2, U1)
    assert allowed is False
    assert reason is not None
    assert code is InteractionCode.BLOCKED_BY_USER
    allowed, _, code = await svc.can_interact(db_session, U1, U2)
    assert allowed is False
    assert code is InteractionCode.USER_BLOCKED


@pytest.mark.asyncio
async def test_blocked_by_takes_precedence_in_mutual_block(db_session, make_user) -> None:
    await make_user(U1)
    await make_user(U2)
    await svc.block(db_session, U1, U2)
    await svc.block(db_session, U2, U1)

    _, _, code = await svc.can_interact(db_session, U1, U2)
    assert code is InteractionCode.BLOCKED_BY_USER


@pytest.mark.asyncio
async def test_can_interact_without_blocks(db_session, make_user) -> None:
    await make_user(U1)
    await make_user(U2)
    assert await svc.can_interact(db_session, U1, U2) == (True, None, InteractionCode.ALLOWED)


@pytest.mark.asyncio
async def test_block_validation(db_session, make_user) -> None:
    await make_user(U1)
    await make_user(U2)
    with pytest.raises(CannotBlockSelf):
        await svc.block(db_session, U1, U1)
    with pytest.raises(UserNotFound):
        await svc.block(db_session, U1, "user-missing-0001")
    await svc.block(db_session, U1, U2)
    with pytest.raises(AlreadyBlocked):
        await svc.block(db_session, U1, U2)


@pytest.mark.asyncio
async def test_unblock_does_not_restore_follows(db_session, make_user) -> None:
    await make_user(U1)
    await make_user(U2)
    await make_user(U3)
    await svc.follow(db_session, U1, U2)
    await svc.block(db_session, U1, U2)
    await svc.block(db_session, U1, U3)

    target, blocked_ids = await svc.unblock(db_session, U1, U2)

    assert target is not None and target.user_id == U2
    assert blocked_ids == [U3]
    assert not await svc.is_following(db_session, U1, U2)
    assert await svc.get_relationship(db_session, U1, U2) == (False, False, Relationship.NONE)

    actions = (await db_session.execute(
        sa.select(ActivityEvent.action_type)
        .where(ActivityEvent.user_id == U1)
        .order_by(ActivityEvent.created_at)
    )).scalars().all()
    assert actions == [
        ActivityType.FOLLOW,
        ActivityType.BLOCK,
        ActivityType.BLOCK,
        ActivityType.UNBLOCK,
    ]


@pytest.mark.asyncio
async def test_unblock_validation(db_session, make_user) -> None:
    await make_user(U1)
    await make_user(U2)
    with pytest.raises(CannotUnblockSelf):
        await svc.unblock(db_session, U1, U1)
    with pytest.raises(BlockNotFound):
        await svc.unblock(db_session, U1, U2)


@pytest.mark.asyncio
async def test_relationship_from_both_sides(db_session, make_user) -> None:
    await make_user(U1)
    await make_user(U2)
    await svc.block(db_session, U1, U2)

    assert await svc.get_relationship(db_session, U1, U2) == (True, False, Relationship.BLOCKED)
    assert await svc.get_relationship(db_session, U2, U1) == (False, True, Relationship.BLOCKED_BY)
    assert await svc.get_relationship(db_session, U1, U1) == (False, False, Relationship.NONE)


@pytest.mark.asyncio
async def test_blocked_list_paginates_with_total(db_session, make_user) -> None:
    await make_user(U1)
    targets = [f"user-target-{i:04d}" for i in range(3)]
    for target in targets:
        await make_user(target)
        await svc.block(db_session, U1, target)

    rows, cursor, total = await svc.get_blocked(db_session, U1, cursor=None, limit=2)
    assert total == 3
    assert [b.blocked_id for b, _ in rows] == targets[:2]
    assert cursor is not None

    rows, cursor, total = await svc.get_blocked(db_session, U1, cursor=cursor, limit=2)
    assert total == 3
    assert [b.blocked_id for b, _ in rows] == targets[2:]
    assert cursor is None
