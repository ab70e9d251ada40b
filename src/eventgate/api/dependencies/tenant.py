"""Tenant resolution dependencies."""

from typing import Annotated

from fastapi import Depends, Request

from src.eventgate.api.dependencies.services import TenantResolverDep
from src.eventgate.core.config import get_settings
from src.eventgate.core.exceptions import TenantContextRequired
from src.eventgate.core.logging import bind_tenant_context
from src.eventgate.models import Tenant


def request_host(request: Request, trust_forwarded: bool = False) -> str | None:
    """Host the client addressed; X-Forwarded-Host wins only behind a trusted proxy."""
    if trust_forwarded:
        forwarded = request.headers.get("x-forwarded-host")
        if forwarded:
            return forwarded
    return request.headers.get("host")


async def get_resolved_tenant(request: Request, resolver: TenantResolverDep) -> Tenant | None:
    """Tenant addressed by the host or the ``{slug}`` path segment, if any."""
    host = request_host(request, get_settings().trust_forwarded_host)
    tenant = await resolver.resolve(host, request.path_params.get("slug"))
    if tenant is not None:
        bind_tenant_context(tenant.id, tenant.subdomain)
    return tenant


ResolvedTenant = Annotated[Tenant | None, Depends(get_resolved_tenant)]


async def get_required_tenant(tenant: ResolvedTenant) -> Tenant:
    if tenant is None:
        raise TenantContextRequired()
    return tenant


RequiredTenant = Annotated[Tenant, Depends(get_required_tenant)]
