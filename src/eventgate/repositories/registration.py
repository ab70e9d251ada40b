"""Repository for Registration entity.

Every lifecycle mutation is a single conditional UPDATE. The affected row
count tells the caller whether it won; nothing here reads then writes.
"""

from datetime import datetime
from typing import Any, cast
from uuid import UUID

from sqlalchemy import CursorResult, or_, update
from sqlmodel import select

from src.eventgate.models import Event, Registration, RegistrationStatus, Tenant
from src.eventgate.repositories.base import BaseRepository


class RegistrationRepository(BaseRepository[Registration]):
    model = Registration

    async def get_for_event(self, event_id: UUID, registration_id: UUID) -> Registration | None:
        result = await self.session.execute(
            select(Registration)
            .where(Registration.id == registration_id, Registration.event_id == event_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_by_event_and_email(self, event_id: UUID, email: str) -> Registration | None:
        result = await self.session.execute(
            select(Registration).where(
                Registration.event_id == event_id,
                Registration.email == email,
            )
        )
        return result.scalar_one_or_none()

    async def get_by_event_and_credential(
        self, event_id: UUID, credential: str
    ) -> Registration | None:
        result = await self.session.execute(
            select(Registration)
            .where(Registration.event_id == event_id, Registration.credential == credential)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def list_for_event(
        self, event_id: UUID, status: RegistrationStatus | None = None
    ) -> list[Registration]:
        """List registrations of an event, oldest first."""
        query = select(Registration).where(Registration.event_id == event_id)
        if status is not None:
            query = query.where(Registration.status == status.value)
        result = await self.session.execute(query.order_by(Registration.created_at))
        return list(result.scalars().all())

    async def list_for_principal(
        self, user_id: UUID, email: str, status: RegistrationStatus | None = None
    ) -> list[tuple[Registration, Event, Tenant]]:
        """Registrations linked to a principal or made with its email, newest first."""
        query = (
            select(Registration, Event, Tenant)
            .join(Event, Event.id == Registration.event_id)  # type: ignore[arg-type]
            .join(Tenant, Tenant.id == Event.tenant_id)  # type: ignore[arg-type]
            .where(or_(Registration.user_id == user_id, Registration.email == email))
        )
        if status is not None:
            query = query.where(Registration.status == status.value)
        result = await self.session.execute(
            query.order_by(Registration.created_at.desc())  # type: ignore[attr-defined]
        )
        return [(registration, event, tenant) for registration, event, tenant in result.all()]

    async def _conditional_update(self, *conditions: Any, **values: Any) -> bool:
        result = await self.session.execute(
            update(Registration)
            .where(*conditions)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return (cast(CursorResult[Any], result).rowcount or 0) == 1

    async def mark_approved(self, registration_id: UUID, now: datetime) -> bool:
        """pending -> approved. True if this call made the transition."""
        return await self._conditional_update(
            Registration.id == registration_id,
            Registration.status == RegistrationStatus.PENDING.value,
            status=RegistrationStatus.APPROVED.value,
            updated_at=now,
        )

    async def mark_rejected(self, registration_id: UUID, now: datetime) -> bool:
        """pending -> rejected. True if this call made the transition."""
        return await self._conditional_update(
            Registration.id == registration_id,
            Registration.status == RegistrationStatus.PENDING.value,
            status=RegistrationStatus.REJECTED.value,
            updated_at=now,
        )

    async def attach_credential(
        self, registration_id: UUID, credential: str, now: datetime
    ) -> bool:
        """Fill an empty credential slot of an approved registration."""
        return await self._conditional_update(
            Registration.id == registration_id,
            Registration.status == RegistrationStatus.APPROVED.value,
            Registration.credential.is_(None),  # type: ignore[union-attr]
            credential=credential,
            credential_issued_at=now,
            updated_at=now,
        )

    async def consume(self, event_id: UUID, credential: str, now: datetime) -> bool:
        """Consume a credential exactly once. False means another scan won or it never matched."""
        return await self._conditional_update(
            Registration.event_id == event_id,
            Registration.credential == credential,
            Registration.status == RegistrationStatus.APPROVED.value,
            Registration.consumed == False,  # noqa: E712
            consumed=True,
            consumed_at=now,
            updated_at=now,
        )
