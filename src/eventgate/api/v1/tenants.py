"""Tenant-scoped endpoints that do not address a single event."""

from fastapi import APIRouter

from src.eventgate.api.dependencies import (
    AdminTenant,
    EventServiceDep,
    RequiredTenant,
    TenantServiceDep,
)
from src.eventgate.schemas.event import EventPublic, EventRead
from src.eventgate.schemas.tenant import TenantPublic
from src.eventgate.schemas.user import UserRead

router = APIRouter(prefix="/tenant", tags=["tenants"])


@router.get(
    "/{slug}",
    response_model=TenantPublic,
    responses={400: {"description": "Unknown or inactive tenant"}},
)
async def get_tenant(slug: str, tenant: RequiredTenant) -> TenantPublic:
    """Public tenant information."""
    return TenantPublic.model_validate(tenant)


@router.get("/{slug}/admins", response_model=list[UserRead])
async def list_tenant_admins(
    slug: str, tenant: AdminTenant, service: TenantServiceDep
) -> list[UserRead]:
    admins = await service.list_tenant_admins(tenant)
    return [UserRead.model_validate(u) for u in admins]


@router.get("/{slug}/events", response_model=list[EventPublic])
async def list_events(
    slug: str, tenant: RequiredTenant, service: EventServiceDep
) -> list[EventPublic]:
    """Active events of the tenant, soonest first."""
    events = await service.list_events(tenant)
    return [EventPublic.model_validate(e) for e in events]


@router.get("/{slug}/events/all", response_model=list[EventRead])
async def list_all_events(
    slug: str, tenant: AdminTenant, service: EventServiceDep
) -> list[EventRead]:
    """Every event of the tenant, deactivated ones included."""
    events = await service.list_events(tenant, include_inactive=True)
    return [EventRead.model_validate(e) for e in events]
