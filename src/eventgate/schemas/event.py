from datetime import datetime
from typing import Self
from uuid import UUID

from pydantic import BaseModel, Field, field_validator, model_validator

from src.eventgate.models import EventVisibility


class _EventWindow(BaseModel):
    starts_at: datetime | None = None
    ends_at: datetime | None = None

    @model_validator(mode="after")
    def check_window(self) -> Self:
        if self.starts_at and self.ends_at and self.ends_at < self.starts_at:
            raise ValueError("ends_at must not precede starts_at")
        return self


class EventCreate(_EventWindow):
    name: str = Field(min_length=1, max_length=255)
    location_name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    visibility: EventVisibility = EventVisibility.PRIVATE


class EventUpdate(_EventWindow):
    name: str | None = Field(None, min_length=1, max_length=255)
    location_name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    visibility: EventVisibility | None = None
    is_active: bool | None = None

    @field_validator("name", "location_name", "visibility", "is_active")
    @classmethod
    def reject_null(cls, v: object) -> object:
        # Omit a field to keep it; these columns have no empty value
        if v is None:
            raise ValueError("may be omitted but not null")
        return v


class EventRead(BaseModel):
    id: UUID
    tenant_id: UUID
    name: str
    location_name: str
    description: str | None = None
    visibility: str
    starts_at: datetime | None = None
    ends_at: datetime | None = None
    share_token: str
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class EventPublic(BaseModel):
    id: UUID
    name: str
    location_name: str
    description: str | None = None
    visibility: str
    starts_at: datetime | None = None
    ends_at: datetime | None = None

    model_config = {"from_attributes": True}
