"""Principal and tenant-admin membership models."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from src.eventgate.models.base import utc_now
from src.eventgate.models.enums import GlobalRole


class User(SQLModel, table=True):
    """Authenticated principal, independent of any tenant.

    Created on first SSO sign-in or when a platform admin grants tenant-admin
    rights to an unknown email. Never hard-deleted.
    """

    __tablename__ = "users"
    __table_args__ = {"schema": "public"}

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(max_length=255, unique=True, index=True)
    display_name: str = Field(max_length=255)
    avatar_url: str | None = Field(default=None, max_length=2048)
    role: str = Field(default=GlobalRole.GUEST.value, max_length=50)
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def role_enum(self) -> GlobalRole:
        return GlobalRole(self.role)

    @property
    def is_platform_admin(self) -> bool:
        return self.role == GlobalRole.PLATFORM_ADMIN.value


class TenantAdmin(SQLModel, table=True):
    """Grants a principal admin rights on one tenant."""

    __tablename__ = "tenant_admins"
    __table_args__ = {"schema": "public"}

    user_id: UUID = Field(foreign_key="public.users.id", primary_key=True, ondelete="CASCADE")
    tenant_id: UUID = Field(
        foreign_key="public.tenants.id", primary_key=True, index=True, ondelete="CASCADE"
    )
    created_at: datetime = Field(default_factory=utc_now)
