"""Test helper functions for common data creation patterns."""

from sqlalchemy.ext.asyncio import AsyncSession

from src.eventgate.core.security import create_access_token
from src.eventgate.models import Event, Registration, RegistrationStatus, User
from tests.factories import RegistrationFactory, UserFactory


def auth_headers(user: User) -> dict[str, str]:
    """Bearer header for ``user``."""
    return {"Authorization": f"Bearer {create_access_token(user.id, user.role)}"}


async def create_pending_registration(session: AsyncSession, event: Event) -> Registration:
    registration = RegistrationFactory.build(
        event_id=event.id, status=RegistrationStatus.PENDING.value
    )
    session.add(registration)
    await session.commit()
    return registration


async def create_user(session: AsyncSession, **kwargs) -> User:
    user = UserFactory.build(**kwargs)
    session.add(user)
    await session.commit()
    return user
