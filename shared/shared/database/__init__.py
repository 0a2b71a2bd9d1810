from shared.database.postgres import (
    AsyncSessionFactory,
    Base,
    get_async_session_factory,
    get_session,
)

__all__ = [
    "AsyncSessionFactory",
    "Base",
    "get_async_session_factory",
    "get_session",
]
