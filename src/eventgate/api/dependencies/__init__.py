"""FastAPI dependency injection definitions.

Re-exports all dependencies for convenience.
"""

# Auth
from src.eventgate.api.dependencies.auth import (
    AdminTenant,
    CurrentUser,
    PlatformAdmin,
    bearer_token,
    get_current_user,
    require_platform_admin,
    require_tenant_admin,
)

# Database
from src.eventgate.api.dependencies.db import DBSession, get_db_session

# Repositories
from src.eventgate.api.dependencies.repositories import (
    EventRepo,
    RegistrationRepo,
    TenantAdminRepo,
    TenantRepo,
    UserRepo,
    get_event_repository,
    get_registration_repository,
    get_tenant_admin_repository,
    get_tenant_repository,
    get_user_repository,
)

# Services
from src.eventgate.api.dependencies.services import (
    AuthorizationGateDep,
    AuthServiceDep,
    CredentialIssuerDep,
    EventServiceDep,
    RegistrationServiceDep,
    SsoClientDep,
    TenantResolverDep,
    TenantServiceDep,
    UserServiceDep,
    get_auth_service,
    get_authorization_gate,
    get_credential_issuer,
    get_event_service,
    get_registration_service,
    get_sso_client,
    get_tenant_resolver,
    get_tenant_service,
    get_user_service,
)

# Tenant
from src.eventgate.api.dependencies.tenant import (
    RequiredTenant,
    ResolvedTenant,
    get_required_tenant,
    get_resolved_tenant,
)

__all__ = [
    # Database
    "DBSession",
    "get_db_session",
    # Tenant
    "RequiredTenant",
    "ResolvedTenant",
    "get_required_tenant",
    "get_resolved_tenant",
    # Auth
    "AdminTenant",
    "CurrentUser",
    "PlatformAdmin",
    "bearer_token",
    "get_current_user",
    "require_platform_admin",
    "require_tenant_admin",
    # Repositories
    "EventRepo",
    "RegistrationRepo",
    "TenantAdminRepo",
    "TenantRepo",
    "UserRepo",
    "get_event_repository",
    "get_registration_repository",
    "get_tenant_admin_repository",
    "get_tenant_repository",
    "get_user_repository",
    # Services
    "AuthServiceDep",
    "AuthorizationGateDep",
    "CredentialIssuerDep",
    "EventServiceDep",
    "RegistrationServiceDep",
    "SsoClientDep",
    "TenantResolverDep",
    "TenantServiceDep",
    "UserServiceDep",
    "get_auth_service",
    "get_authorization_gate",
    "get_credential_issuer",
    "get_event_service",
    "get_registration_service",
    "get_sso_client",
    "get_tenant_resolver",
    "get_tenant_service",
    "get_user_service",
]
