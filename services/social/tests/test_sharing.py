import uuid
from datetime import datetime, timedelta, timezone

import pytest
import sqlalchemy as sa

from app.exceptions import NotLinkOwner, ShareLinkNotFound, TokenGenerationFailed
from app.pagination import as_utc
from app.sharing import service as svc
from app.sharing.constants import MAX_TOKEN_ATTEMPTS, TOKEN_ALPHABET, TOKEN_LENGTH, LinkLookupCode
from app.sharing.models import ShareLink

OWNER = "user-owner-0001"
OTHER = "user-other-0002"


def test_generated_tokens_are_fixed_length_alphanumeric() -> None:
    tokens = {svc.generate_share_token() for _ in range(50)}
    assert len(tokens) == 50
    for token in tokens:
        assert len(token) == TOKEN_LENGTH
        assert set(token) <= set(TOKEN_ALPHABET)
        assert svc.is_well_formed_token(token)


@pytest.mark.parametrize("token", ["", "short", "a" * 31, "a" * 33, "a" * 31 + "!", "a" * 31 + "-"])
def test_malformed_tokens(token: str) -> None:
    assert not svc.is_well_formed_token(token)


@pytest.mark.asyncio
async def test_create_then_get_with_expiry(db_session, make_user) -> None:
    await make_user(OWNER, "Owner")
    before = datetime.now(timezone.utc)

    link = await svc.create_share_link(db_session, OWNER, 42, expires_in_days=7)

    assert link.views == 0
    assert link.anime_id == 42
    expected = before + timedelta(days=7)
    assert abs(as_utc(link.expires_at) - expected) < timedelta(seconds=5)

    found, code = await svc.get_share_link(db_session, link.share_token)
    assert code is None
    assert found is not None and found.share_id == link.share_id
    assert not svc.is_expired(found)


@pytest.mark.asyncio
async def test_link_without_expiry_never_expires(db_session, make_user) -> None:
    await make_user(OWNER)
    link = await svc.create_share_link(db_session, OWNER, 7)
    assert link.expires_at is None
    assert not svc.is_expired(link, datetime(2100, 1, 1, tzinfo=timezone.utc))


@pytest.mark.asyncio
async def test_lookup_codes(db_session, make_user) -> None:
    await make_user(OWNER)
    link = await svc.create_share_link(db_session, OWNER, 42, expires_in_days=1)

    assert await svc.get_share_link(db_session, "bad") == (None, LinkLookupCode.INVALID_TOKEN)
    assert await svc.get_share_link(db_session, "A" * TOKEN_LENGTH) == (
        None,
        LinkLookupCode.NOT_FOUND,
    )

    link.expires_at = datetime.now(timezone.utc) - timedelta(minutes=1)
    await db_session.flush()
    found, code = await svc.get_share_link(db_session, link.share_token)
    assert code is LinkLookupCode.EXPIRED
    # The row is kept for audit until the sweep runs
    assert found is not None and found.share_id == link.share_id


@pytest.mark.asyncio
async def test_collision_draws_a_fresh_token(db_session, make_user) -> None:
    await make_user(OWNER)
    taken = "T" * TOKEN_LENGTH
    await svc.create_share_link(db_session, OWNER, 1, token_factory=lambda: taken)
    draws = iter([taken, taken, "F" * TOKEN_LENGTH])

    link = await svc.create_share_link(db_session, OWNER, 2, token_factory=lambda: next(draws))

    assert link.share_token == "F" * TOKEN_LENGTH


@pytest.mark.asyncio
async def test_collision_exhaustion_raises(db_session, make_user) -> None:
    await make_user(OWNER)
    taken = "T" * TOKEN_LENGTH
    await svc.create_share_link(db_session, OWNER, 1, token_factory=lambda: taken)
    calls = []

    def _always_taken() -> str:
        calls.append(1)
        return taken

    with pytest.raises(TokenGenerationFailed):
        await svc.create_share_link(db_session, OWNER, 2, token_factory=_always_taken)
    assert len(calls) == MAX_TOKEN_ATTEMPTS


@pytest.mark.asyncio
async def test_increment_views(db_session, make_user) -> None:
    await make_user(OWNER)
    link = await svc.create_share_link(db_session, OWNER, 42)

    for _ in range(5):
        await svc.increment_share_view(db_session, link.share_id)

    views = (await db_session.execute(
        sa.select(ShareLink.views).where(ShareLink.share_id == link.share_id)
    )).scalar_one()
    assert views == 5


@pytest.mark.asyncio
async def test_increment_unknown_link_raises(db_session) -> None:
    with pytest.raises(ShareLinkNotFound):
        await svc.increment_share_view(db_session, uuid.uuid4())


@pytest.mark.asyncio
async def test_delete_requires_owner(db_session, make_user) -> None:
    await make_user(OWNER)
    await make_user(OTHER)
    link = await svc.create_share_link(db_session, OWNER, 42)

    with pytest.raises(NotLinkOwner):
        await svc.delete_share_link(db_session, link.share_id, OTHER)

    await svc.delete_share_link(db_session, link.share_id, OWNER)
    with pytest.raises(ShareLinkNotFound):
        await svc.delete_share_link(db_session, link.share_id, OWNER)


@pytest.mark.asyncio
async def test_user_share_links_flag_expired(db_session, make_user) -> None:
    await make_user(OWNER)
    live = await svc.create_share_link(db_session, OWNER, 1, expires_in_days=3)
    stale = await svc.create_share_link(db_session, OWNER, 2, expires_in_days=3)
    stale.expires_at = datetime.now(timezone.utc) - timedelta(days=1)
    await db_session.flush()

    rows, next_cursor = await svc.get_user_share_links(db_session, OWNER, cursor=None, limit=10)

    assert next_cursor is None
    assert [(link.share_id, expired) for link, expired in rows] == [
        (live.share_id, False),
        (stale.share_id, True),
    ]


@pytest.mark.asyncio
async def test_cleanup_removes_only_expired_links(db_session, make_user) -> None:
    await make_user(OWNER)
    await svc.create_share_link(db_session, OWNER, 1)
    await svc.create_share_link(db_session, OWNER, 2, expires_in_days=30)
    for anime_id in (3, 4):
        link = await svc.create_share_link(db_session, OWNER, anime_id, expires_in_days=1)
        link.expires_at = datetime.now(timezone.utc) - timedelta(hours=1)
    await db_session.flush()

    assert await svc.cleanup_expired_links(db_session) == 2
    assert await svc.cleanup_expired_links(db_session) == 0

    remaining = (await db_session.execute(
        sa.select(ShareLink.anime_id).order_by(ShareLink.anime_id)
    )).scalars().all()
    assert remaining == [1, 2]
