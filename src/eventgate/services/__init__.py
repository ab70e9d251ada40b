from src.eventgate.services.auth_service import AuthService, ExchangeResult
from src.eventgate.services.authorization import AuthorizationGate
from src.eventgate.services.credential_issuer import CredentialIssuer
from src.eventgate.services.event_service import EventService
from src.eventgate.services.registration_service import (
    ApprovalOutcome,
    PrincipalRegistration,
    RegistrationService,
    ScanOutcome,
    VenueAccess,
    grant_venue_access,
)
from src.eventgate.services.sso_client import SsoClient
from src.eventgate.services.tenant_resolver import TenantResolver, parse_host_subdomain
from src.eventgate.services.tenant_service import TenantService
from src.eventgate.services.user_service import UserService

__all__ = [
    "ApprovalOutcome",
    "AuthService",
    "AuthorizationGate",
    "CredentialIssuer",
    "EventService",
    "ExchangeResult",
    "PrincipalRegistration",
    "RegistrationService",
    "ScanOutcome",
    "SsoClient",
    "TenantResolver",
    "TenantService",
    "UserService",
    "VenueAccess",
    "grant_venue_access",
    "parse_host_subdomain",
]
