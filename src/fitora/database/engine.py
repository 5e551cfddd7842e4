"""Database engine and async session factory for the user directory."""

from collections.abc import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from fitora.config import settings
from fitora.models.user import Base


def make_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)


engine = create_async_engine(settings.database_url, echo=settings.debug)

async_session_factory = make_session_factory(engine)


async def init_db(target: AsyncEngine | None = None) -> None:
    """Create the users table if it doesn't exist yet."""
    async with (target or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one session per request, committed on success.

    The factory comes from ``app.state`` so tests can point the app at a
    throwaway database.
    """
    factory = getattr(request.app.state, "session_factory", async_session_factory)
    async with factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
