"""Registration lifecycle engine.

PENDING moves to APPROVED or REJECTED exactly once, and an APPROVED
registration is consumed exactly once at the gate. Each transition is a
single conditional UPDATE in RegistrationRepository; whoever changes the row
wins, everybody else gets the typed terminal error.
"""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.eventgate.core.exceptions import (
    AlreadyApproved,
    AlreadyFinalized,
    CredentialAlreadyConsumed,
    CredentialAlreadyIssued,
    CredentialIssuanceFailed,
    CredentialNotFound,
    DuplicateRegistration,
    EventNotFound,
    MapNotAvailable,
    RegistrationNotApproved,
    RegistrationNotFound,
    VenueAccessDenied,
)
from src.eventgate.core.logging import get_logger
from src.eventgate.core.security import normalize_email
from src.eventgate.models import Event, Registration, RegistrationStatus, Tenant, User
from src.eventgate.models.base import utc_now
from src.eventgate.repositories import EventRepository, RegistrationRepository, UserRepository
from src.eventgate.schemas.registration import RegistrationCreate
from src.eventgate.services.credential_issuer import CredentialIssuer

logger = get_logger(__name__)

CREDENTIAL_ISSUANCE_FAILED_WARNING = "credential_issuance_failed"


@dataclass
class ApprovalOutcome:
    registration: Registration
    credential_issued: bool
    warning: str | None = None


@dataclass
class ScanOutcome:
    registration: Registration
    event: Event
    consumed_at: datetime


@dataclass
class VenueAccess:
    map_url: str
    registration: Registration
    event: Event


@dataclass
class PrincipalRegistration:
    registration: Registration
    event: Event
    tenant: Tenant


def grant_venue_access(registration: Registration) -> bool:
    """True iff the registration is approved and its credential was scanned."""
    return registration.status == RegistrationStatus.APPROVED.value and registration.consumed


class RegistrationService:
    def __init__(
        self,
        event_repo: EventRepository,
        registration_repo: RegistrationRepository,
        user_repo: UserRepository,
        session: AsyncSession,
        issuer: CredentialIssuer,
    ):
        self.event_repo = event_repo
        self.registration_repo = registration_repo
        self.user_repo = user_repo
        self.session = session
        self.issuer = issuer

    async def _get_event(self, tenant: Tenant, event_id: UUID) -> Event:
        event = await self.event_repo.get_for_tenant(tenant.id, event_id)
        if event is None:
            raise EventNotFound()
        return event

    async def _get_registration(self, event: Event, registration_id: UUID) -> Registration:
        registration = await self.registration_repo.get_for_event(event.id, registration_id)
        if registration is None:
            raise RegistrationNotFound()
        return registration

    async def get_registration(
        self, tenant: Tenant, event_id: UUID, registration_id: UUID
    ) -> Registration:
        event = await self._get_event(tenant, event_id)
        return await self._get_registration(event, registration_id)

    async def register(
        self, tenant: Tenant, event_id: UUID, data: RegistrationCreate
    ) -> ApprovalOutcome:
        """Create a registration; OPEN events approve it before returning.

        Raises:
            EventNotFound: Missing, inactive, or owned by another tenant.
            DuplicateRegistration: The email is already registered, including
                a concurrent registration that won the unique constraint.
        """
        event = await self.event_repo.get_active_for_tenant(tenant.id, event_id)
        if event is None:
            raise EventNotFound()

        email = normalize_email(str(data.email))
        existing = await self.registration_repo.get_by_event_and_email(event.id, email)
        if existing is not None:
            raise DuplicateRegistration(existing)

        principal = await self.user_repo.get_by_email(email)
        registration = Registration(
            event_id=event.id,
            user_id=principal.id if principal else None,
            name=data.name,
            email=email,
            phone=data.phone,
        )
        self.registration_repo.add(registration)
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            existing = await self.registration_repo.get_by_event_and_email(event.id, email)
            if existing is None:
                raise
            raise DuplicateRegistration(existing) from None

        logger.info(
            "registration_created",
            registration_id=str(registration.id),
            event_id=str(event.id),
            visibility=event.visibility,
        )

        if event.auto_approves:
            return await self._approve(registration.id)
        return ApprovalOutcome(registration=registration, credential_issued=False)

    async def approve(
        self, tenant: Tenant, event_id: UUID, registration_id: UUID
    ) -> ApprovalOutcome:
        """PENDING -> APPROVED, then issue a credential.

        A failed issuance leaves the approval committed and is reported as a
        warning; ``reissue_credential`` is the retry path.
        """
        event = await self._get_event(tenant, event_id)
        registration = await self._get_registration(event, registration_id)
        return await self._approve(registration.id)

    async def _approve(self, registration_id: UUID) -> ApprovalOutcome:
        won = await self.registration_repo.mark_approved(registration_id, utc_now())
        if not won:
            await self.session.rollback()
            current = await self.registration_repo.reload(registration_id)
            if current is None:
                raise RegistrationNotFound()
            if current.status == RegistrationStatus.APPROVED.value:
                raise AlreadyApproved(registration_id)
            raise AlreadyFinalized(registration_id, current.status)
        await self.session.commit()
        logger.info("registration_approved", registration_id=str(registration_id))

        warning = None
        try:
            credential_issued = await self._attach_new_credential(registration_id)
        except CredentialIssuanceFailed:
            credential_issued = False
            warning = CREDENTIAL_ISSUANCE_FAILED_WARNING
            logger.warning(
                CREDENTIAL_ISSUANCE_FAILED_WARNING,
                registration_id=str(registration_id),
            )

        registration = await self.registration_repo.reload(registration_id)
        if registration is None:
            raise RegistrationNotFound()
        return ApprovalOutcome(
            registration=registration,
            credential_issued=credential_issued,
            warning=warning,
        )

    async def _attach_new_credential(self, registration_id: UUID) -> bool:
        """Mint a credential and store it only if the slot is still empty."""
        credential = self.issuer.issue(registration_id)
        try:
            attached = await self.registration_repo.attach_credential(
                registration_id, credential, utc_now()
            )
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise CredentialIssuanceFailed() from e
        if attached:
            logger.info("credential_issued", registration_id=str(registration_id))
        return attached

    async def reissue_credential(
        self, tenant: Tenant, event_id: UUID, registration_id: UUID
    ) -> Registration:
        """Issue the credential an approval failed to attach."""
        event = await self._get_event(tenant, event_id)
        registration = await self._get_registration(event, registration_id)
        if registration.status != RegistrationStatus.APPROVED.value:
            raise RegistrationNotApproved(registration.id, registration.status)
        if registration.credential is not None:
            raise CredentialAlreadyIssued(registration.id, registration.credential_issued_at)

        attached = await self._attach_new_credential(registration.id)
        current = await self.registration_repo.reload(registration.id)
        if current is None:
            raise RegistrationNotFound()
        if not attached:
            # Another request filled the slot first
            raise CredentialAlreadyIssued(current.id, current.credential_issued_at)
        return current

    async def reject(
        self, tenant: Tenant, event_id: UUID, registration_id: UUID
    ) -> Registration:
        event = await self._get_event(tenant, event_id)
        registration = await self._get_registration(event, registration_id)

        won = await self.registration_repo.mark_rejected(registration.id, utc_now())
        if not won:
            await self.session.rollback()
            current = await self.registration_repo.reload(registration.id)
            raise AlreadyFinalized(
                registration.id, current.status if current else registration.status
            )
        await self.session.commit()
        logger.info("registration_rejected", registration_id=str(registration.id))

        current = await self.registration_repo.reload(registration.id)
        if current is None:
            raise RegistrationNotFound()
        return current

    async def scan_and_consume(
        self, tenant: Tenant, event_id: UUID, credential: str
    ) -> ScanOutcome:
        """Redeem a credential at the gate, at most once.

        Raises:
            EventNotFound: The event is not this tenant's.
            CredentialNotFound: No approved registration of the event holds it.
            CredentialAlreadyConsumed: It was redeemed before; carries the
                original ``consumed_at``.
        """
        event = await self._get_event(tenant, event_id)
        now = utc_now()

        won = await self.registration_repo.consume(event.id, credential, now)
        if won:
            await self.session.commit()
            registration = await self.registration_repo.get_by_event_and_credential(
                event.id, credential
            )
            if registration is None:
                raise CredentialNotFound()
            logger.info(
                "credential_consumed",
                registration_id=str(registration.id),
                event_id=str(event.id),
            )
            return ScanOutcome(registration=registration, event=event, consumed_at=now)

        await self.session.rollback()
        registration = await self.registration_repo.get_by_event_and_credential(
            event.id, credential
        )
        if (
            registration is None
            or registration.status != RegistrationStatus.APPROVED.value
            or not registration.consumed
        ):
            logger.info("credential_not_found", event_id=str(event.id))
            raise CredentialNotFound()
        logger.info(
            "credential_already_consumed",
            registration_id=str(registration.id),
            event_id=str(event.id),
        )
        raise CredentialAlreadyConsumed(registration.id, registration.consumed_at)

    async def venue_access(
        self, tenant: Tenant, event_id: UUID, registration_id: UUID
    ) -> VenueAccess:
        """Venue map for a registrant who has passed the gate."""
        event = await self._get_event(tenant, event_id)
        registration = await self.registration_repo.get_for_event(event.id, registration_id)
        if registration is None or not grant_venue_access(registration):
            raise VenueAccessDenied()
        if not tenant.map_url:
            raise MapNotAvailable()
        return VenueAccess(map_url=tenant.map_url, registration=registration, event=event)

    async def list_registrations(
        self,
        tenant: Tenant,
        event_id: UUID,
        status: RegistrationStatus | None = None,
    ) -> list[Registration]:
        event = await self._get_event(tenant, event_id)
        return await self.registration_repo.list_for_event(event.id, status)

    async def list_for_principal(
        self, user: User, status: RegistrationStatus | None = None
    ) -> list[PrincipalRegistration]:
        """Registrations across all tenants made by ``user``, by link or by email."""
        rows = await self.registration_repo.list_for_principal(user.id, user.email, status)
        return [
            PrincipalRegistration(registration=registration, event=event, tenant=tenant)
            for registration, event, tenant in rows
        ]
