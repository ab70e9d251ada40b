from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.eventgate.core.exceptions import UserNotFound
from src.eventgate.core.logging import get_logger
from src.eventgate.models import User
from src.eventgate.models.base import utc_now
from src.eventgate.repositories import UserRepository
from src.eventgate.schemas.user import UserUpdate

logger = get_logger(__name__)


class UserService:
    """Principal profile management."""

    def __init__(self, user_repo: UserRepository, session: AsyncSession):
        self.user_repo = user_repo
        self.session = session

    async def update_profile(self, user: User, data: UserUpdate) -> User:
        """Update display metadata with the provided fields."""
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(user, field, value)

        user.updated_at = utc_now()
        await self.session.commit()
        await self.session.refresh(user)
        return user

    async def deactivate_user(self, user_id: UUID) -> User:
        """Soft-deactivate a principal; existing tokens stop working."""
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise UserNotFound()
        user.is_active = False
        user.updated_at = utc_now()
        await self.session.commit()
        await self.session.refresh(user)
        logger.info("user_deactivated", user_id=str(user_id))
        return user
