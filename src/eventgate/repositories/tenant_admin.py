"""Repository for TenantAdmin memberships."""

from typing import Any, cast
from uuid import UUID

from sqlalchemy import CursorResult, delete
from sqlmodel import select

from src.eventgate.models import TenantAdmin, User
from src.eventgate.repositories.base import BaseRepository


class TenantAdminRepository(BaseRepository[TenantAdmin]):
    """Explicit principal-to-tenant admin grants."""

    model = TenantAdmin

    async def get_membership(self, user_id: UUID, tenant_id: UUID) -> TenantAdmin | None:
        result = await self.session.execute(
            select(TenantAdmin).where(
                TenantAdmin.user_id == user_id,
                TenantAdmin.tenant_id == tenant_id,
            )
        )
        return result.scalar_one_or_none()

    async def is_tenant_admin(self, user_id: UUID, tenant_id: UUID) -> bool:
        """Check if the principal holds admin rights on the tenant."""
        membership = await self.get_membership(user_id, tenant_id)
        return membership is not None

    def create_membership(self, user_id: UUID, tenant_id: UUID) -> TenantAdmin:
        """Create a new membership (add to session, no commit)."""
        membership = TenantAdmin(user_id=user_id, tenant_id=tenant_id)
        self.session.add(membership)
        return membership

    async def remove_membership(self, user_id: UUID, tenant_id: UUID) -> int:
        """Delete a membership. Returns the number of rows removed."""
        result = await self.session.execute(
            delete(TenantAdmin).where(
                TenantAdmin.user_id == user_id,  # type: ignore[arg-type]
                TenantAdmin.tenant_id == tenant_id,  # type: ignore[arg-type]
            )
        )
        return cast(CursorResult[Any], result).rowcount or 0

    async def list_admins(self, tenant_id: UUID) -> list[User]:
        """List principals administering the tenant."""
        result = await self.session.execute(
            select(User)
            .join(TenantAdmin, User.id == TenantAdmin.user_id)  # type: ignore[arg-type]
            .where(TenantAdmin.tenant_id == tenant_id)
            .order_by(User.email)
        )
        return list(result.scalars().all())
