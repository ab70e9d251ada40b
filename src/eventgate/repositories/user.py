"""Repository for User entity."""

from sqlmodel import select

from src.eventgate.models import User
from src.eventgate.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    model = User

    async def get_by_email(self, email: str) -> User | None:
        """Get user by (lower-cased) email address."""
        result = await self.session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()
