"""Tenant model - one branded venue per subdomain."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from src.eventgate.core.security.validators import MAX_SUBDOMAIN_LENGTH
from src.eventgate.models.base import utc_now


class Tenant(SQLModel, table=True):
    """Tenant registry in public schema."""

    __tablename__ = "tenants"
    __table_args__ = {"schema": "public"}

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    subdomain: str = Field(max_length=MAX_SUBDOMAIN_LENGTH, unique=True, index=True)
    display_name: str = Field(max_length=255)
    map_url: str | None = Field(default=None, max_length=2048)
    is_active: bool = Field(default=True)
    created_by_user_id: UUID | None = Field(
        default=None, foreign_key="public.users.id", ondelete="SET NULL"
    )
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
