"""Authentication and authorization dependencies.

Authentication always resolves before tenant context, so an anonymous caller
learns nothing about which tenants exist.
"""

from typing import Annotated

from fastapi import Depends, Header

from src.eventgate.api.dependencies.services import AuthorizationGateDep, AuthServiceDep
from src.eventgate.api.dependencies.tenant import ResolvedTenant
from src.eventgate.core.exceptions import TenantContextRequired
from src.eventgate.core.logging import bind_user_context
from src.eventgate.models import Capability, Tenant, User


def bearer_token(authorization: str | None) -> str | None:
    """Extract the token of an ``Authorization: Bearer <token>`` header."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def get_current_user(
    auth_service: AuthServiceDep,
    authorization: Annotated[str | None, Header()] = None,
) -> User:
    """Verify the bearer credential and load the principal from storage."""
    user = await auth_service.verify_credential(bearer_token(authorization))
    bind_user_context(user.id, user.role, user.email)
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]


async def require_platform_admin(user: CurrentUser, gate: AuthorizationGateDep) -> User:
    await gate.authorize(user, None, Capability.PLATFORM_ADMIN)
    return user


PlatformAdmin = Annotated[User, Depends(require_platform_admin)]


async def require_tenant_admin(
    user: CurrentUser,
    tenant: ResolvedTenant,
    gate: AuthorizationGateDep,
) -> Tenant:
    """Resolved tenant the current principal administers."""
    await gate.authorize(user, tenant, Capability.TENANT_ADMIN)
    if tenant is None:
        raise TenantContextRequired()
    return tenant


AdminTenant = Annotated[Tenant, Depends(require_tenant_admin)]
