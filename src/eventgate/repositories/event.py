"""Repository for Event entity."""

from uuid import UUID

from sqlmodel import select

from src.eventgate.models import Event
from src.eventgate.repositories.base import BaseRepository


class EventRepository(BaseRepository[Event]):
    model = Event

    async def get_for_tenant(self, tenant_id: UUID, event_id: UUID) -> Event | None:
        """Get an event only if it belongs to the tenant."""
        result = await self.session.execute(
            select(Event).where(Event.id == event_id, Event.tenant_id == tenant_id)
        )
        return result.scalar_one_or_none()

    async def get_active_for_tenant(self, tenant_id: UUID, event_id: UUID) -> Event | None:
        result = await self.session.execute(
            select(Event).where(
                Event.id == event_id,
                Event.tenant_id == tenant_id,
                Event.is_active == True,  # noqa: E712
            )
        )
        return result.scalar_one_or_none()

    async def tenant_has_events(self, tenant_id: UUID) -> bool:
        result = await self.session.execute(
            select(Event.id).where(Event.tenant_id == tenant_id).limit(1)
        )
        return result.first() is not None

    async def list_for_tenant(self, tenant_id: UUID, active_only: bool = True) -> list[Event]:
        """Events of a tenant, soonest first; undated events sort last."""
        query = select(Event).where(Event.tenant_id == tenant_id)
        if active_only:
            query = query.where(Event.is_active == True)  # noqa: E712
        result = await self.session.execute(
            query.order_by(
                Event.starts_at.asc().nulls_last(),  # type: ignore[union-attr]
                Event.created_at,
            )
        )
        return list(result.scalars().all())
