"""Typed error taxonomy and the exception handlers that render it.

Every rejected operation raises a subclass of ``AppError``. The handler turns
it into ``{"detail", "error", "request_id", **context}`` so callers can tell
conflicts apart and explain them to a human.
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from asgi_correlation_id import correlation_id
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.eventgate.core.logging import get_logger

logger = get_logger(__name__)


class AppError(Exception):
    """Base class for errors that are safe to show to the caller."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    code: str = "app_error"
    message: str = "Request could not be completed"

    def __init__(self, message: str | None = None, **context: Any):
        self.message = message or self.message
        self.context = context
        super().__init__(self.message)

    def to_payload(self) -> dict[str, Any]:
        return {"detail": self.message, "error": self.code, **jsonable_encoder(self.context)}


# --- Input errors -----------------------------------------------------------


class InputError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(InputError):
    status_code = status.HTTP_404_NOT_FOUND


class TenantContextRequired(InputError):
    code = "tenant_context_required"
    message = "This endpoint requires a valid tenant subdomain"


class InvalidEventWindow(InputError):
    code = "invalid_event_window"
    message = "ends_at must not precede starts_at"


class RedirectNotAllowed(InputError):
    code = "redirect_not_allowed"
    message = "Redirect target must be an https URL on the platform domain"


class TenantNotFound(NotFoundError):
    code = "tenant_not_found"
    message = "Tenant not found"


class EventNotFound(NotFoundError):
    code = "event_not_found"
    message = "Event not found"


class RegistrationNotFound(NotFoundError):
    code = "registration_not_found"
    message = "Registration not found"


class UserNotFound(NotFoundError):
    code = "user_not_found"
    message = "User not found"


class TenantAdminNotFound(NotFoundError):
    code = "tenant_admin_not_found"
    message = "User is not a tenant admin for this tenant"


class MapNotAvailable(NotFoundError):
    code = "map_not_available"
    message = "Map not available for this event"


# --- State conflicts --------------------------------------------------------


class StateConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT


class DuplicateRegistration(StateConflictError):
    # Registrants see this as a plain validation failure
    status_code = status.HTTP_400_BAD_REQUEST
    code = "duplicate_registration"
    message = "Already registered for this event"

    def __init__(self, registration: Any):
        self.registration = registration
        super().__init__(registration=_registration_snapshot(registration))


class AlreadyApproved(StateConflictError):
    code = "already_approved"
    message = "Registration is already approved"

    def __init__(self, registration_id: UUID):
        super().__init__(registration_id=registration_id, current_status="approved")


class AlreadyFinalized(StateConflictError):
    code = "already_finalized"
    message = "Registration has already been finalized"

    def __init__(self, registration_id: UUID, current_status: str):
        super().__init__(registration_id=registration_id, current_status=current_status)


class RegistrationNotApproved(StateConflictError):
    code = "registration_not_approved"
    message = "Registration is not approved"

    def __init__(self, registration_id: UUID, current_status: str):
        super().__init__(registration_id=registration_id, current_status=current_status)


class CredentialAlreadyIssued(StateConflictError):
    code = "credential_already_issued"
    message = "Registration already holds a credential"

    def __init__(self, registration_id: UUID, issued_at: datetime | None):
        super().__init__(registration_id=registration_id, issued_at=issued_at)


class CredentialNotFound(StateConflictError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "credential_not_found"
    message = "Invalid QR code or registration not approved"


class CredentialAlreadyConsumed(StateConflictError):
    code = "credential_already_consumed"
    message = "QR code already scanned"

    def __init__(self, registration_id: UUID, consumed_at: datetime | None):
        self.consumed_at = consumed_at
        super().__init__(registration_id=registration_id, consumed_at=consumed_at)


class SubdomainTaken(StateConflictError):
    code = "subdomain_taken"
    message = "Subdomain already exists"

    def __init__(self, subdomain: str):
        super().__init__(subdomain=subdomain)


class SubdomainLocked(StateConflictError):
    code = "subdomain_locked"
    message = "Subdomain cannot change once the tenant has events"

    def __init__(self, subdomain: str):
        super().__init__(subdomain=subdomain)


class TenantAdminAlreadyAssigned(StateConflictError):
    code = "tenant_admin_already_assigned"
    message = "User is already a tenant admin for this tenant"


# --- Authentication ---------------------------------------------------------


class AuthenticationError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED


class CredentialMissing(AuthenticationError):
    code = "credential_missing"
    message = "Access token required"


class CredentialInvalid(AuthenticationError):
    code = "credential_invalid"
    message = "Invalid token"


class CredentialExpired(AuthenticationError):
    code = "credential_expired"
    message = "Token expired"


class PrincipalInactive(AuthenticationError):
    code = "principal_inactive"
    message = "Invalid or inactive user"


class ExternalAssertionInvalid(AuthenticationError):
    code = "external_assertion_invalid"
    message = "Invalid SSO token"


# --- Authorization ----------------------------------------------------------


class AuthorizationError(AppError):
    status_code = status.HTTP_403_FORBIDDEN


class TenantAccessDenied(AuthorizationError):
    code = "tenant_access_denied"
    message = "Tenant admin access required"

    def __init__(self, tenant: str):
        super().__init__(tenant=tenant)


class InsufficientRole(AuthorizationError):
    code = "insufficient_role"
    message = "Insufficient permissions"

    def __init__(self, required: str, current: str):
        super().__init__(required=required, current=current)


class VenueAccessDenied(AuthorizationError):
    code = "venue_access_denied"
    message = "Access denied. QR code must be scanned and registration must be approved."


# --- Dependency failures ----------------------------------------------------


class DependencyError(AppError):
    status_code = status.HTTP_502_BAD_GATEWAY


class ExternalAuthorityUnavailable(DependencyError):
    code = "external_authority_unavailable"
    message = "Identity provider is unavailable"


class CredentialIssuanceFailed(DependencyError):
    code = "credential_issuance_failed"
    message = "Credential could not be issued"


def _registration_snapshot(registration: Any) -> dict[str, Any]:
    return {
        "id": registration.id,
        "event_id": registration.event_id,
        "name": registration.name,
        "email": registration.email,
        "status": registration.status,
        "created_at": registration.created_at,
    }


def setup_exception_handlers(app: FastAPI) -> None:
    """Configure exception handlers that include request_id in responses."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        request_id = correlation_id.get()
        logger.info(
            "Request rejected",
            error=exc.code,
            status_code=exc.status_code,
            path=request.url.path,
        )
        headers = None
        if isinstance(exc, AuthenticationError):
            headers = {"WWW-Authenticate": "Bearer"}
        return JSONResponse(
            status_code=exc.status_code,
            content={**exc.to_payload(), "request_id": request_id},
            headers=headers,
        )

    @app.exception_handler(StarletteHTTPException)
    async def starlette_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.detail,
                "request_id": correlation_id.get(),
            },
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.detail,
                "request_id": correlation_id.get(),
            },
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        request_id = correlation_id.get()
        logger.exception(
            "Unhandled exception",
            exc_info=exc,
            request_id=request_id,
            path=request.url.path,
        )
        return JSONResponse(
            status_code=500,
            content={
                "detail": "Internal server error",
                "request_id": request_id,
            },
        )
