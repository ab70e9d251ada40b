"""Decides whether a principal may act on a resolved tenant."""

from src.eventgate.core.exceptions import (
    InsufficientRole,
    TenantAccessDenied,
    TenantContextRequired,
)
from src.eventgate.core.logging import get_logger
from src.eventgate.models import Capability, GlobalRole, Tenant, User
from src.eventgate.repositories import TenantAdminRepository

logger = get_logger(__name__)


class AuthorizationGate:
    """Evaluates a capability in a fixed order.

    1. Tenant-scoped capability without a tenant -> TenantContextRequired.
    2. Platform admins pass, before any membership lookup.
    3. Tenant-scoped capability needs a TenantAdmin row for the tenant.
    4. Global capabilities need the matching global role.
    """

    def __init__(self, tenant_admin_repo: TenantAdminRepository):
        self.tenant_admin_repo = tenant_admin_repo

    async def authorize(
        self, principal: User, tenant: Tenant | None, capability: Capability
    ) -> None:
        if capability == Capability.TENANT_ADMIN and tenant is None:
            raise TenantContextRequired()

        if principal.role == GlobalRole.PLATFORM_ADMIN.value:
            return

        if capability == Capability.TENANT_ADMIN and tenant is not None:
            if not await self.tenant_admin_repo.is_tenant_admin(principal.id, tenant.id):
                logger.info(
                    "Tenant access denied",
                    user_id=str(principal.id),
                    tenant=tenant.subdomain,
                )
                raise TenantAccessDenied(tenant=tenant.subdomain)
            return

        raise InsufficientRole(required=capability.value, current=principal.role)

    async def can_administer(self, principal: User, tenant: Tenant) -> bool:
        """Non-raising variant of the tenant-admin check."""
        if principal.role == GlobalRole.PLATFORM_ADMIN.value:
            return True
        return await self.tenant_admin_repo.is_tenant_admin(principal.id, tenant.id)
