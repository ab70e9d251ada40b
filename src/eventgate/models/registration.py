"""Registration model - one registrant's request to attend one event."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from src.eventgate.models.base import utc_now
from src.eventgate.models.enums import RegistrationStatus


class Registration(SQLModel, table=True):
    """Registration lifecycle row.

    ``consumed`` only ever becomes true while ``status`` is approved, and the
    credential slot is filled at most once.
    """

    __tablename__ = "registrations"
    __table_args__ = (
        UniqueConstraint("event_id", "email", name="uq_registrations_event_email"),
        {"schema": "public"},
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    event_id: UUID = Field(foreign_key="public.events.id", index=True, ondelete="CASCADE")
    user_id: UUID | None = Field(
        default=None, foreign_key="public.users.id", index=True, ondelete="SET NULL"
    )
    name: str = Field(max_length=255)
    email: str = Field(max_length=255, index=True)
    phone: str | None = Field(default=None, max_length=50)
    status: str = Field(default=RegistrationStatus.PENDING.value, max_length=20)
    credential: str | None = Field(default=None, max_length=128, unique=True)
    credential_issued_at: datetime | None = Field(default=None)
    consumed: bool = Field(default=False)
    consumed_at: datetime | None = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def status_enum(self) -> RegistrationStatus:
        return RegistrationStatus(self.status)

    @property
    def is_approved(self) -> bool:
        return self.status == RegistrationStatus.APPROVED.value
