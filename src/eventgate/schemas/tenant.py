from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from src.eventgate.core.security.validators import (
    MAX_SUBDOMAIN_LENGTH,
    MIN_SUBDOMAIN_LENGTH,
    validate_subdomain_format,
)
from src.eventgate.schemas.user import UserRead


class TenantCreate(BaseModel):
    subdomain: str = Field(
        min_length=MIN_SUBDOMAIN_LENGTH,
        max_length=MAX_SUBDOMAIN_LENGTH,
        json_schema_extra={
            "examples": ["grand-hall", "expo2025"],
            "description": "Lowercase letters, numbers and hyphens.",
        },
    )
    display_name: str = Field(min_length=1, max_length=255)
    map_url: str | None = Field(None, max_length=2048)

    @field_validator("subdomain")
    @classmethod
    def validate_subdomain(cls, v: str) -> str:
        return validate_subdomain_format(v)


class TenantUpdate(BaseModel):
    subdomain: str | None = Field(
        None, min_length=MIN_SUBDOMAIN_LENGTH, max_length=MAX_SUBDOMAIN_LENGTH
    )
    display_name: str | None = Field(None, min_length=1, max_length=255)
    map_url: str | None = Field(None, max_length=2048)
    is_active: bool | None = None

    @field_validator("subdomain")
    @classmethod
    def validate_subdomain(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return validate_subdomain_format(v)

    @field_validator("display_name", "is_active")
    @classmethod
    def reject_null(cls, v: object) -> object:
        if v is None:
            raise ValueError("may be omitted but not null")
        return v


class TenantRead(BaseModel):
    id: UUID
    subdomain: str
    display_name: str
    map_url: str | None = None
    is_active: bool
    created_by_user_id: UUID | None = None
    created_at: datetime

    model_config = {"from_attributes": True}


class TenantPublic(BaseModel):
    """What anyone may learn about a tenant."""

    id: UUID
    subdomain: str
    display_name: str

    model_config = {"from_attributes": True}


class TenantAdminAssign(BaseModel):
    email: EmailStr
    tenant_id: UUID


class TenantAdminGrant(BaseModel):
    tenant_id: UUID
    user: UserRead
