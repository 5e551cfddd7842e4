"""User repository — the identity directory consulted after OTP checks."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fitora.models.user import User
from fitora.otp.store import normalize_identity


class UserRepository:
    """Encapsulates all database queries related to users."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_by_email(self, email: str) -> User | None:
        """Look up an active user by email, ignoring case and whitespace."""
        stmt = select(User).where(
            User.email == normalize_identity(email), User.is_active.is_(True)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def email_exists(self, email: str) -> bool:
        return await self.find_by_email(email) is not None

    async def create(self, email: str, password: str, display_name: str = "") -> User:
        user = User(email=normalize_identity(email), display_name=display_name)
        user.set_password(password)
        self._session.add(user)
        await self._session.flush()
        return user

    async def set_password(self, user: User, new_password: str) -> None:
        """Replace the user's credential with a hash of *new_password*."""
        user.set_password(new_password)
        await self._session.flush()
