from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from src.eventgate.schemas.event import EventPublic
from src.eventgate.schemas.tenant import TenantPublic


class RegistrationCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    phone: str | None = Field(None, max_length=50)


class RegistrationRead(BaseModel):
    id: UUID
    event_id: UUID
    user_id: UUID | None = None
    name: str
    email: str
    phone: str | None = None
    status: str
    credential: str | None = None
    credential_issued_at: datetime | None = None
    consumed: bool
    consumed_at: datetime | None = None
    created_at: datetime

    model_config = {"from_attributes": True}


class RegistrationResponse(BaseModel):
    message: str
    registration: RegistrationRead


class ApprovalResponse(BaseModel):
    message: str
    registration: RegistrationRead
    credential_issued: bool
    warning: str | None = None


class ScanRequest(BaseModel):
    credential: str = Field(min_length=1, max_length=128)


class ScannedRegistrant(BaseModel):
    id: UUID
    name: str
    email: str


class EventLabel(BaseModel):
    id: UUID
    name: str
    location_name: str


class ScanResponse(BaseModel):
    message: str = "QR code scanned successfully"
    registrant: ScannedRegistrant
    event: EventLabel
    consumed_at: datetime


class MapAccessResponse(BaseModel):
    map_url: str
    event: EventLabel
    registrant: ScannedRegistrant


class MessageResponse(BaseModel):
    message: str


class PrincipalRegistrationRead(BaseModel):
    """One of the caller's own registrations, with where and when it is."""

    registration: RegistrationRead
    event: EventPublic
    tenant: TenantPublic
