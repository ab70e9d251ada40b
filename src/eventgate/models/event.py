"""Event model - owned by exactly one tenant."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from src.eventgate.core.security.crypto import generate_opaque_token
from src.eventgate.models.base import utc_now
from src.eventgate.models.enums import EventVisibility


def _share_token() -> str:
    return generate_opaque_token(16)


class Event(SQLModel, table=True):
    __tablename__ = "events"
    __table_args__ = {"schema": "public"}

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    tenant_id: UUID = Field(foreign_key="public.tenants.id", index=True, ondelete="CASCADE")
    name: str = Field(max_length=255)
    location_name: str = Field(max_length=255)
    description: str | None = Field(default=None)
    visibility: str = Field(default=EventVisibility.PRIVATE.value, max_length=20)
    starts_at: datetime | None = Field(default=None)
    ends_at: datetime | None = Field(default=None)
    share_token: str = Field(default_factory=_share_token, max_length=64, unique=True)
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def auto_approves(self) -> bool:
        return self.visibility == EventVisibility.OPEN.value
