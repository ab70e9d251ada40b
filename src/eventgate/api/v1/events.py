"""Event and registration lifecycle endpoints under ``/tenant/{slug}/event``."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, Request, Response, status

from src.eventgate.api.dependencies import (
    AdminTenant,
    AuthorizationGateDep,
    CredentialIssuerDep,
    CurrentUser,
    EventServiceDep,
    RegistrationServiceDep,
    RequiredTenant,
)
from src.eventgate.core.exceptions import (
    CredentialNotFound,
    RegistrationNotApproved,
    TenantAccessDenied,
)
from src.eventgate.core.rate_limit import limiter, register_rate_limit
from src.eventgate.models import RegistrationStatus
from src.eventgate.schemas.event import EventCreate, EventPublic, EventRead, EventUpdate
from src.eventgate.schemas.registration import (
    ApprovalResponse,
    EventLabel,
    MapAccessResponse,
    MessageResponse,
    RegistrationCreate,
    RegistrationRead,
    RegistrationResponse,
    ScannedRegistrant,
    ScanRequest,
    ScanResponse,
)
from src.eventgate.services.registration_service import ApprovalOutcome

router = APIRouter(prefix="/tenant/{slug}/event", tags=["events"])


def _approval_response(outcome: ApprovalOutcome, message: str) -> ApprovalResponse:
    if outcome.warning:
        message = f"{message} (QR code generation failed)"
    return ApprovalResponse(
        message=message,
        registration=RegistrationRead.model_validate(outcome.registration),
        credential_issued=outcome.credential_issued,
        warning=outcome.warning,
    )


# --- Events -----------------------------------------------------------------


@router.post("", response_model=EventRead, status_code=status.HTTP_201_CREATED)
async def create_event(
    slug: str, data: EventCreate, tenant: AdminTenant, service: EventServiceDep
) -> EventRead:
    event = await service.create_event(tenant, data)
    return EventRead.model_validate(event)


@router.get("/{event_id}", response_model=EventPublic)
async def get_event(
    slug: str, event_id: UUID, tenant: RequiredTenant, service: EventServiceDep
) -> EventPublic:
    """Public view of an active event."""
    event = await service.get_public_event(tenant, event_id)
    return EventPublic.model_validate(event)


@router.patch("/{event_id}", response_model=EventRead)
async def update_event(
    slug: str,
    event_id: UUID,
    data: EventUpdate,
    tenant: AdminTenant,
    service: EventServiceDep,
) -> EventRead:
    event = await service.update_event(tenant, event_id, data)
    return EventRead.model_validate(event)


@router.delete("/{event_id}", response_model=MessageResponse)
async def deactivate_event(
    slug: str, event_id: UUID, tenant: AdminTenant, service: EventServiceDep
) -> MessageResponse:
    await service.deactivate_event(tenant, event_id)
    return MessageResponse(message="Event deactivated successfully")


# --- Registration lifecycle -------------------------------------------------


@router.post(
    "/{event_id}/register",
    response_model=RegistrationResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Already registered for this event"},
        404: {"description": "Event not found"},
        429: {"description": "Too many requests"},
    },
)
@limiter.limit(register_rate_limit)
async def register(
    request: Request,
    slug: str,
    event_id: UUID,
    data: RegistrationCreate,
    tenant: RequiredTenant,
    service: RegistrationServiceDep,
) -> RegistrationResponse:
    """Register for an event. OPEN events answer with an approved registration."""
    outcome = await service.register(tenant, event_id, data)
    return RegistrationResponse(
        message="Registration submitted successfully",
        registration=RegistrationRead.model_validate(outcome.registration),
    )


@router.get("/{event_id}/registrations", response_model=list[RegistrationRead])
async def list_registrations(
    slug: str,
    event_id: UUID,
    tenant: AdminTenant,
    service: RegistrationServiceDep,
    status_filter: Annotated[RegistrationStatus | None, Query(alias="status")] = None,
) -> list[RegistrationRead]:
    """Approval queue, optionally filtered by status."""
    registrations = await service.list_registrations(tenant, event_id, status_filter)
    return [RegistrationRead.model_validate(r) for r in registrations]


@router.post(
    "/{event_id}/approve-user/{registration_id}",
    response_model=ApprovalResponse,
    responses={
        404: {"description": "Registration not found"},
        409: {"description": "Registration already approved or rejected"},
    },
)
async def approve_registration(
    slug: str,
    event_id: UUID,
    registration_id: UUID,
    tenant: AdminTenant,
    service: RegistrationServiceDep,
) -> ApprovalResponse:
    outcome = await service.approve(tenant, event_id, registration_id)
    return _approval_response(outcome, "User approved successfully")


@router.post("/{event_id}/reject-user/{registration_id}", response_model=RegistrationResponse)
async def reject_registration(
    slug: str,
    event_id: UUID,
    registration_id: UUID,
    tenant: AdminTenant,
    service: RegistrationServiceDep,
) -> RegistrationResponse:
    registration = await service.reject(tenant, event_id, registration_id)
    return RegistrationResponse(
        message="User registration rejected",
        registration=RegistrationRead.model_validate(registration),
    )


@router.post(
    "/{event_id}/reissue-credential/{registration_id}",
    response_model=RegistrationResponse,
    responses={
        409: {"description": "Not approved, or a credential already exists"},
        502: {"description": "Credential could not be issued"},
    },
)
async def reissue_credential(
    slug: str,
    event_id: UUID,
    registration_id: UUID,
    tenant: AdminTenant,
    service: RegistrationServiceDep,
) -> RegistrationResponse:
    """Retry credential issuance for an approved registration that has none."""
    registration = await service.reissue_credential(tenant, event_id, registration_id)
    return RegistrationResponse(
        message="Credential issued successfully",
        registration=RegistrationRead.model_validate(registration),
    )


@router.post(
    "/{event_id}/scan",
    response_model=ScanResponse,
    responses={
        404: {"description": "Invalid QR code or registration not approved"},
        409: {"description": "QR code already scanned"},
    },
)
async def scan_credential(
    slug: str,
    event_id: UUID,
    data: ScanRequest,
    tenant: AdminTenant,
    service: RegistrationServiceDep,
) -> ScanResponse:
    """Redeem a credential at the gate. Succeeds once per credential."""
    outcome = await service.scan_and_consume(tenant, event_id, data.credential)
    registration, event = outcome.registration, outcome.event
    return ScanResponse(
        registrant=ScannedRegistrant(
            id=registration.id, name=registration.name, email=registration.email
        ),
        event=EventLabel(id=event.id, name=event.name, location_name=event.location_name),
        consumed_at=outcome.consumed_at,
    )


@router.get(
    "/{event_id}/registrations/{registration_id}/qr",
    response_class=Response,
    responses={200: {"content": {"image/png": {}}, "description": "QR code image"}},
)
async def registration_qr(
    slug: str,
    event_id: UUID,
    registration_id: UUID,
    current_user: CurrentUser,
    tenant: RequiredTenant,
    gate: AuthorizationGateDep,
    service: RegistrationServiceDep,
    issuer: CredentialIssuerDep,
) -> Response:
    """QR image of the credential, for tenant admins or the linked principal."""
    registration = await service.get_registration(tenant, event_id, registration_id)
    if registration.user_id != current_user.id and not await gate.can_administer(
        current_user, tenant
    ):
        raise TenantAccessDenied(tenant=tenant.subdomain)
    if registration.status != RegistrationStatus.APPROVED.value:
        raise RegistrationNotApproved(registration.id, registration.status)
    if registration.credential is None:
        raise CredentialNotFound()

    png = issuer.render_png(registration.credential)
    return Response(
        content=png,
        media_type="image/png",
        headers={"Cache-Control": "no-store"},
    )


@router.get(
    "/{event_id}/map-access/{registration_id}",
    response_model=MapAccessResponse,
    responses={403: {"description": "Credential not yet scanned or not approved"}},
)
async def map_access(
    slug: str,
    event_id: UUID,
    registration_id: UUID,
    tenant: RequiredTenant,
    service: RegistrationServiceDep,
) -> MapAccessResponse:
    """Venue map for registrants who passed the gate."""
    access = await service.venue_access(tenant, event_id, registration_id)
    registration, event = access.registration, access.event
    return MapAccessResponse(
        map_url=access.map_url,
        event=EventLabel(id=event.id, name=event.name, location_name=event.location_name),
        registrant=ScannedRegistrant(
            id=registration.id, name=registration.name, email=registration.email
        ),
    )
