"""Service factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.eventgate.api.dependencies.db import DBSession
from src.eventgate.api.dependencies.repositories import (
    EventRepo,
    RegistrationRepo,
    TenantAdminRepo,
    TenantRepo,
    UserRepo,
)
from src.eventgate.core.config import get_settings
from src.eventgate.services import (
    AuthorizationGate,
    AuthService,
    CredentialIssuer,
    EventService,
    RegistrationService,
    SsoClient,
    TenantResolver,
    TenantService,
    UserService,
)


def get_sso_client() -> SsoClient:
    settings = get_settings()
    return SsoClient(settings.sso_service_url, settings.sso_timeout_seconds)


def get_credential_issuer() -> CredentialIssuer:
    settings = get_settings()
    return CredentialIssuer(box_size=settings.qr_box_size, border=settings.qr_border)


SsoClientDep = Annotated[SsoClient, Depends(get_sso_client)]
CredentialIssuerDep = Annotated[CredentialIssuer, Depends(get_credential_issuer)]


def get_tenant_resolver(tenant_repo: TenantRepo) -> TenantResolver:
    return TenantResolver(tenant_repo, get_settings().base_domain)


def get_auth_service(
    user_repo: UserRepo, session: DBSession, sso_client: SsoClientDep
) -> AuthService:
    return AuthService(user_repo, session, sso_client, get_settings().platform_admin_emails)


def get_authorization_gate(tenant_admin_repo: TenantAdminRepo) -> AuthorizationGate:
    return AuthorizationGate(tenant_admin_repo)


def get_registration_service(
    event_repo: EventRepo,
    registration_repo: RegistrationRepo,
    user_repo: UserRepo,
    session: DBSession,
    issuer: CredentialIssuerDep,
) -> RegistrationService:
    return RegistrationService(event_repo, registration_repo, user_repo, session, issuer)


def get_event_service(event_repo: EventRepo, session: DBSession) -> EventService:
    return EventService(event_repo, session)


def get_tenant_service(
    tenant_repo: TenantRepo,
    tenant_admin_repo: TenantAdminRepo,
    user_repo: UserRepo,
    event_repo: EventRepo,
    session: DBSession,
) -> TenantService:
    return TenantService(tenant_repo, tenant_admin_repo, user_repo, event_repo, session)


def get_user_service(user_repo: UserRepo, session: DBSession) -> UserService:
    return UserService(user_repo, session)


TenantResolverDep = Annotated[TenantResolver, Depends(get_tenant_resolver)]
AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
AuthorizationGateDep = Annotated[AuthorizationGate, Depends(get_authorization_gate)]
RegistrationServiceDep = Annotated[RegistrationService, Depends(get_registration_service)]
EventServiceDep = Annotated[EventService, Depends(get_event_service)]
TenantServiceDep = Annotated[TenantService, Depends(get_tenant_service)]
UserServiceDep = Annotated[UserService, Depends(get_user_service)]
