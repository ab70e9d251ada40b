"""Event management for tenant admins, plus the public read."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.eventgate.core.exceptions import EventNotFound, InvalidEventWindow
from src.eventgate.core.logging import get_logger
from src.eventgate.models import Event, Tenant
from src.eventgate.models.base import utc_now
from src.eventgate.repositories import EventRepository
from src.eventgate.schemas.event import EventCreate, EventUpdate

logger = get_logger(__name__)


class EventService:
    def __init__(self, event_repo: EventRepository, session: AsyncSession):
        self.event_repo = event_repo
        self.session = session

    async def create_event(self, tenant: Tenant, data: EventCreate) -> Event:
        event = Event(
            tenant_id=tenant.id,
            name=data.name,
            location_name=data.location_name,
            description=data.description,
            visibility=data.visibility.value,
            starts_at=data.starts_at,
            ends_at=data.ends_at,
        )
        self.event_repo.add(event)
        await self.session.commit()
        await self.session.refresh(event)
        logger.info("event_created", event_id=str(event.id), tenant_id=str(tenant.id))
        return event

    async def list_events(self, tenant: Tenant, include_inactive: bool = False) -> list[Event]:
        return await self.event_repo.list_for_tenant(tenant.id, active_only=not include_inactive)

    async def get_event(self, tenant: Tenant, event_id: UUID) -> Event:
        """Any event of the tenant, active or not."""
        event = await self.event_repo.get_for_tenant(tenant.id, event_id)
        if event is None:
            raise EventNotFound()
        return event

    async def get_public_event(self, tenant: Tenant, event_id: UUID) -> Event:
        event = await self.event_repo.get_active_for_tenant(tenant.id, event_id)
        if event is None:
            raise EventNotFound()
        return event

    async def update_event(self, tenant: Tenant, event_id: UUID, data: EventUpdate) -> Event:
        event = await self.get_event(tenant, event_id)
        update_data = data.model_dump(exclude_unset=True)

        starts_at = update_data.get("starts_at", event.starts_at)
        ends_at = update_data.get("ends_at", event.ends_at)
        if starts_at and ends_at and ends_at < starts_at:
            raise InvalidEventWindow()

        for field, value in update_data.items():
            if field == "visibility" and value is not None:
                value = value.value
            setattr(event, field, value)

        event.updated_at = utc_now()
        await self.session.commit()
        await self.session.refresh(event)
        logger.info("event_updated", event_id=str(event.id), fields=sorted(update_data))
        return event

    async def deactivate_event(self, tenant: Tenant, event_id: UUID) -> Event:
        """Soft delete; registrations stay intact."""
        event = await self.get_event(tenant, event_id)
        event.is_active = False
        event.updated_at = utc_now()
        await self.session.commit()
        await self.session.refresh(event)
        logger.info("event_deactivated", event_id=str(event.id))
        return event
