"""Repository for Tenant entity."""

from sqlmodel import select

from src.eventgate.models import Tenant
from src.eventgate.repositories.base import BaseRepository


class TenantRepository(BaseRepository[Tenant]):
    model = Tenant

    async def get_by_subdomain(self, subdomain: str) -> Tenant | None:
        """Get tenant by subdomain, active or not."""
        result = await self.session.execute(select(Tenant).where(Tenant.subdomain == subdomain))
        return result.scalar_one_or_none()

    async def get_active_by_subdomain(self, subdomain: str) -> Tenant | None:
        """Get tenant by subdomain only if it is active."""
        result = await self.session.execute(
            select(Tenant).where(
                Tenant.subdomain == subdomain,
                Tenant.is_active == True,  # noqa: E712
            )
        )
        return result.scalar_one_or_none()

    async def exists_by_subdomain(self, subdomain: str) -> bool:
        tenant = await self.get_by_subdomain(subdomain)
        return tenant is not None

    async def list_all(self) -> list[Tenant]:
        result = await self.session.execute(select(Tenant).order_by(Tenant.subdomain))
        return list(result.scalars().all())
