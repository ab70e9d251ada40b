"""Tenant administration - platform-admin operations."""

from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.eventgate.core.exceptions import (
    SubdomainLocked,
    SubdomainTaken,
    TenantAdminAlreadyAssigned,
    TenantAdminNotFound,
    TenantNotFound,
)
from src.eventgate.core.logging import get_logger
from src.eventgate.core.security import normalize_email
from src.eventgate.models import GlobalRole, Tenant, User
from src.eventgate.models.base import utc_now
from src.eventgate.repositories import (
    EventRepository,
    TenantAdminRepository,
    TenantRepository,
    UserRepository,
)
from src.eventgate.schemas.tenant import TenantCreate, TenantUpdate

logger = get_logger(__name__)


class TenantService:
    """Tenant CRUD and tenant-admin grants."""

    def __init__(
        self,
        tenant_repo: TenantRepository,
        tenant_admin_repo: TenantAdminRepository,
        user_repo: UserRepository,
        event_repo: EventRepository,
        session: AsyncSession,
    ):
        self.tenant_repo = tenant_repo
        self.tenant_admin_repo = tenant_admin_repo
        self.user_repo = user_repo
        self.event_repo = event_repo
        self.session = session

    async def _get_tenant(self, tenant_id: UUID) -> Tenant:
        tenant = await self.tenant_repo.get_by_id(tenant_id)
        if tenant is None:
            raise TenantNotFound()
        return tenant

    async def list_tenants(self) -> list[Tenant]:
        return await self.tenant_repo.list_all()

    async def create_tenant(self, data: TenantCreate, creator: User) -> Tenant:
        """Create a tenant.

        Raises:
            SubdomainTaken: Another tenant owns the subdomain. The unique
                constraint covers concurrent creators.
        """
        if await self.tenant_repo.exists_by_subdomain(data.subdomain):
            raise SubdomainTaken(data.subdomain)

        tenant = Tenant(
            subdomain=data.subdomain,
            display_name=data.display_name,
            map_url=data.map_url,
            created_by_user_id=creator.id,
        )
        try:
            self.tenant_repo.add(tenant)
            await self.session.commit()
            await self.session.refresh(tenant)
        except IntegrityError as e:
            await self.session.rollback()
            raise SubdomainTaken(data.subdomain) from e

        logger.info("tenant_created", tenant_id=str(tenant.id), subdomain=tenant.subdomain)
        return tenant

    async def update_tenant(self, tenant_id: UUID, data: TenantUpdate) -> Tenant:
        """Update a tenant. The subdomain is frozen once the tenant owns events."""
        tenant = await self._get_tenant(tenant_id)
        update_data = data.model_dump(exclude_unset=True)

        new_subdomain = update_data.get("subdomain")
        if new_subdomain is not None and new_subdomain != tenant.subdomain:
            if await self.event_repo.tenant_has_events(tenant.id):
                raise SubdomainLocked(tenant.subdomain)
            if await self.tenant_repo.exists_by_subdomain(new_subdomain):
                raise SubdomainTaken(new_subdomain)
        elif "subdomain" in update_data:
            update_data.pop("subdomain")

        for field, value in update_data.items():
            setattr(tenant, field, value)
        tenant.updated_at = utc_now()

        try:
            await self.session.commit()
            await self.session.refresh(tenant)
        except IntegrityError as e:
            await self.session.rollback()
            raise SubdomainTaken(str(new_subdomain)) from e

        logger.info("tenant_updated", tenant_id=str(tenant.id), fields=sorted(update_data))
        return tenant

    async def delete_tenant(self, tenant_id: UUID) -> None:
        """Hard delete; memberships, events and registrations cascade."""
        tenant = await self._get_tenant(tenant_id)
        await self.tenant_repo.delete(tenant)
        await self.session.commit()
        logger.info("tenant_deleted", tenant_id=str(tenant_id), subdomain=tenant.subdomain)

    async def assign_tenant_admin(self, email: str, tenant_id: UUID) -> User:
        """Grant tenant-admin rights, creating the principal if it is unknown.

        GUEST principals are promoted to TENANT_ADMIN; platform admins keep
        their role.
        """
        tenant = await self._get_tenant(tenant_id)
        email = normalize_email(email)

        user = await self.user_repo.get_by_email(email)
        if user is None:
            user = User(
                email=email,
                display_name=email.split("@")[0],
                role=GlobalRole.TENANT_ADMIN.value,
            )
            self.user_repo.add(user)
            await self.session.flush()
        else:
            if await self.tenant_admin_repo.is_tenant_admin(user.id, tenant.id):
                raise TenantAdminAlreadyAssigned()
            if user.role == GlobalRole.GUEST.value:
                user.role = GlobalRole.TENANT_ADMIN.value
                user.updated_at = utc_now()

        self.tenant_admin_repo.create_membership(user.id, tenant.id)
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise TenantAdminAlreadyAssigned() from e
        await self.session.refresh(user)

        logger.info(
            "tenant_admin_assigned",
            user_id=str(user.id),
            tenant_id=str(tenant.id),
        )
        return user

    async def revoke_tenant_admin(self, tenant_id: UUID, user_id: UUID) -> None:
        removed = await self.tenant_admin_repo.remove_membership(user_id, tenant_id)
        if removed == 0:
            await self.session.rollback()
            raise TenantAdminNotFound()
        await self.session.commit()
        logger.info("tenant_admin_revoked", user_id=str(user_id), tenant_id=str(tenant_id))

    async def list_tenant_admins(self, tenant: Tenant) -> list[User]:
        return await self.tenant_admin_repo.list_admins(tenant.id)
