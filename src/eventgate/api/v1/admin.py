"""Platform administration endpoints. Every route requires a platform admin."""

from uuid import UUID

from fastapi import APIRouter, status

from src.eventgate.api.dependencies import PlatformAdmin, TenantServiceDep, UserServiceDep
from src.eventgate.schemas.registration import MessageResponse
from src.eventgate.schemas.tenant import (
    TenantAdminAssign,
    TenantAdminGrant,
    TenantCreate,
    TenantRead,
    TenantUpdate,
)
from src.eventgate.schemas.user import UserRead

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/tenants", response_model=list[TenantRead])
async def list_tenants(admin: PlatformAdmin, service: TenantServiceDep) -> list[TenantRead]:
    tenants = await service.list_tenants()
    return [TenantRead.model_validate(t) for t in tenants]


@router.post(
    "/tenants",
    response_model=TenantRead,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"description": "Subdomain already exists"}},
)
async def create_tenant(
    data: TenantCreate, admin: PlatformAdmin, service: TenantServiceDep
) -> TenantRead:
    tenant = await service.create_tenant(data, creator=admin)
    return TenantRead.model_validate(tenant)


@router.patch(
    "/tenants/{tenant_id}",
    response_model=TenantRead,
    responses={
        404: {"description": "Tenant not found"},
        409: {"description": "Subdomain taken, or locked because the tenant has events"},
    },
)
async def update_tenant(
    tenant_id: UUID, data: TenantUpdate, admin: PlatformAdmin, service: TenantServiceDep
) -> TenantRead:
    tenant = await service.update_tenant(tenant_id, data)
    return TenantRead.model_validate(tenant)


@router.delete("/tenants/{tenant_id}", response_model=MessageResponse)
async def delete_tenant(
    tenant_id: UUID, admin: PlatformAdmin, service: TenantServiceDep
) -> MessageResponse:
    """Delete a tenant with its memberships, events and registrations."""
    await service.delete_tenant(tenant_id)
    return MessageResponse(message="Tenant deleted successfully")


@router.post(
    "/tenant-admins",
    response_model=TenantAdminGrant,
    status_code=status.HTTP_201_CREATED,
    responses={
        404: {"description": "Tenant not found"},
        409: {"description": "User is already a tenant admin for this tenant"},
    },
)
async def assign_tenant_admin(
    data: TenantAdminAssign, admin: PlatformAdmin, service: TenantServiceDep
) -> TenantAdminGrant:
    """Grant tenant-admin rights by email, creating the principal if needed."""
    user = await service.assign_tenant_admin(str(data.email), data.tenant_id)
    return TenantAdminGrant(tenant_id=data.tenant_id, user=UserRead.model_validate(user))


@router.delete("/tenants/{tenant_id}/admins/{user_id}", response_model=MessageResponse)
async def revoke_tenant_admin(
    tenant_id: UUID, user_id: UUID, admin: PlatformAdmin, service: TenantServiceDep
) -> MessageResponse:
    await service.revoke_tenant_admin(tenant_id, user_id)
    return MessageResponse(message="Tenant admin access revoked")


@router.post("/users/{user_id}/deactivate", response_model=UserRead)
async def deactivate_user(
    user_id: UUID, admin: PlatformAdmin, service: UserServiceDep
) -> UserRead:
    user = await service.deactivate_user(user_id)
    return UserRead.model_validate(user)
