import os

# Before the app (and its limiter) is imported
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

import time
from collections.abc import AsyncGenerator, Awaitable, Callable
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from jose import jwt
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from app.database import get_db
from app.main import app
from app.users.models import User
from shared.auth.config import AuthSettings
from shared.database.postgres import Base, get_session


@pytest_asyncio.fixture
async def engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine, None]:
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'social.db'}", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def make_user(db_session: AsyncSession) -> Callable[..., Awaitable[User]]:
    async def _make(user_id: str, display_name: str | None = None) -> User:
        user = User(user_id=user_id, display_name=display_name, avatar_url=None)
        db_session.add(user)
        await db_session.flush()
        return user

    return _make


def make_token(user_id: str, roles: tuple[str, ...] = ("user",)) -> str:
    settings = AuthSettings()
    now = int(time.time())
    payload = {
        "sub": user_id,
        "roles": list(roles),
        "iss": settings.issuer,
        "aud": settings.audience,
        "iat": now,
        "exp": now + 3600,
    }
    return jwt.encode(payload, settings.secret, algorithm=settings.algorithm)


def auth_headers(user_id: str, roles: tuple[str, ...] = ("user",)) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(user_id, roles)}"}


@pytest_asyncio.fixture
async def async_client(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient, None]:
    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async for session in get_session(session_factory):
            yield session

    app.dependency_overrides[get_db] = _override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def auth() -> Callable[..., dict[str, str]]:
    """Bearer headers for a user id (and optional roles)."""
    return auth_headers
