"""Tests for the UserRepository."""

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from fitora.database.repository import UserRepository
from fitora.models.user import Base, User

@pytest_asyncio.fixture
async def db_session():
    """Create tables in a fresh in-memory DB and yield a session."""
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    factory = async_sessionmaker(engine, expire_on_commit=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with factory() as session:
        user = User(email="test@example.com", display_name="Test User")
        user.set_password("initial-pass")
        inactive = User(email="gone@example.com", display_name="Gone", is_active=False)
        session.add_all([user, inactive])
        await session.commit()
        yield session

    # Tear down
    await engine.dispose()


# ── Tests ────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_find_by_email_match(db_session: AsyncSession):
    repo = UserRepository(db_session)
    user = await repo.find_by_email("test@example.com")
    assert user is not None
    assert user.display_name == "Test User"


@pytest.mark.asyncio
async def test_find_by_email_ignores_case(db_session: AsyncSession):
    repo = UserRepository(db_session)
    user = await repo.find_by_email("  TEST@Example.com ")
    assert user is not None


@pytest.mark.asyncio
async def test_find_by_email_skips_inactive(db_session: AsyncSession):
    repo = UserRepository(db_session)
    assert await repo.find_by_email("gone@example.com") is None
    assert await repo.email_exists("gone@example.com") is False


@pytest.mark.asyncio
async def test_create_normalizes_email(db_session: AsyncSession):
    repo = UserRepository(db_session)
    user = await repo.create("New.User@Example.com", "hunter22", display_name="New")
    await db_session.commit()

    assert user.email == "new.user@example.com"
    assert await repo.email_exists("new.user@example.com")
    assert user.check_password("hunter22")


@pytest.mark.asyncio
async def test_set_password_replaces_credential(db_session: AsyncSession):
    repo = UserRepository(db_session)
    user = await repo.find_by_email("test@example.com")

    await repo.set_password(user, "brand-new-pass")

    assert user.check_password("brand-new-pass")
    assert not user.check_password("initial-pass")


def test_check_password_without_hash_is_false():
    assert User(email="x@example.com").check_password("anything") is False
