from src.eventgate.schemas.auth import (
    SsoCallbackRequest,
    SsoLoginResponse,
    SsoProfile,
    TokenResponse,
    VerifyResponse,
)
from src.eventgate.schemas.event import EventCreate, EventPublic, EventRead, EventUpdate
from src.eventgate.schemas.registration import (
    ApprovalResponse,
    EventLabel,
    MapAccessResponse,
    MessageResponse,
    PrincipalRegistrationRead,
    RegistrationCreate,
    RegistrationRead,
    RegistrationResponse,
    ScannedRegistrant,
    ScanRequest,
    ScanResponse,
)
from src.eventgate.schemas.tenant import (
    TenantAdminAssign,
    TenantAdminGrant,
    TenantCreate,
    TenantPublic,
    TenantRead,
    TenantUpdate,
)
from src.eventgate.schemas.user import UserRead, UserUpdate

__all__ = [
    # Auth
    "SsoCallbackRequest",
    "SsoLoginResponse",
    "SsoProfile",
    "TokenResponse",
    "VerifyResponse",
    # Event
    "EventCreate",
    "EventPublic",
    "EventRead",
    "EventUpdate",
    # Registration
    "ApprovalResponse",
    "EventLabel",
    "MapAccessResponse",
    "MessageResponse",
    "PrincipalRegistrationRead",
    "RegistrationCreate",
    "RegistrationRead",
    "RegistrationResponse",
    "ScannedRegistrant",
    "ScanRequest",
    "ScanResponse",
    # Tenant
    "TenantAdminAssign",
    "TenantAdminGrant",
    "TenantCreate",
    "TenantPublic",
    "TenantRead",
    "TenantUpdate",
    # User
    "UserRead",
    "UserUpdate",
]
