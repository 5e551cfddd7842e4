"""Seed script — populates the user directory with sample accounts."""

import asyncio

from fitora.database.engine import async_session_factory, init_db
from fitora.database.repository import UserRepository

SAMPLE_USERS = [
    ("alice@example.com", "Alice Johnson", "wonderland1"),
    ("bob@example.com", "Bob Smith", "builder42"),
    ("carol@example.com", "Carol Davis", "carols-secret"),
]


async def seed() -> None:
    """Insert sample users, skipping emails that already exist."""
    await init_db()
    created = 0
    async with async_session_factory() as session:
        repo = UserRepository(session)
        for email, name, password in SAMPLE_USERS:
            if await repo.email_exists(email):
                continue
            await repo.create(email, password, display_name=name)
            created += 1
        await session.commit()
    print(f"✅ Seeded {created} users into the database.")


if __name__ == "__main__":
    asyncio.run(seed())
