"""Registration lifecycle against the in-memory repositories.

Covers registration, approval with credential issuance, rejection, gate
scanning and venue access, including the races between concurrent callers.
"""

import asyncio
from unittest.mock import patch

import pytest

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
from src.eventgate.models import RegistrationStatus
from src.eventgate.schemas.registration import RegistrationCreate
from src.eventgate.services import CredentialIssuer, RegistrationService
from src.eventgate.services.registration_service import (
    CREDENTIAL_ISSUANCE_FAILED_WARNING,
    grant_venue_access,
)
from tests.factories import EventFactory, RegistrationFactory, TenantFactory, UserFactory
from tests.fakes import FakeRepositories, FakeSession

pytestmark = [pytest.mark.unit, pytest.mark.asyncio]


def _signup(email: str = "alice@example.com", name: str = "Alice") -> RegistrationCreate:
    return RegistrationCreate(name=name, email=email, phone="+1 555 0100")


def _service_for(store, issuer: CredentialIssuer | None = None) -> RegistrationService:
    """A service with its own session, like a second concurrent request."""
    repos = FakeRepositories(FakeSession(store))
    return RegistrationService(
        repos.events,
        repos.registrations,
        repos.users,
        repos.session,
        issuer or CredentialIssuer(),
    )


class _FailingIssuer(CredentialIssuer):
    def issue(self, registration_id):
        raise CredentialIssuanceFailed()


# --- register ---


async def test_private_event_registration_stays_pending(registration_service, tenant, private_event):
    outcome = await registration_service.register(tenant, private_event.id, _signup())

    registration = outcome.registration
    assert registration.status == RegistrationStatus.PENDING.value
    assert registration.credential is None
    assert registration.consumed is False
    assert outcome.credential_issued is False


async def test_open_event_registration_is_approved_with_credential(
    registration_service, tenant, open_event
):
    outcome = await registration_service.register(tenant, open_event.id, _signup())

    registration = outcome.registration
    assert registration.status == RegistrationStatus.APPROVED.value
    assert registration.credential is not None
    assert registration.credential_issued_at is not None
    assert outcome.credential_issued is True
    assert outcome.warning is None


async def test_register_normalizes_email(registration_service, tenant, private_event):
    outcome = await registration_service.register(
        tenant, private_event.id, _signup(email="Alice@Example.COM")
    )

    assert outcome.registration.email == "alice@example.com"


async def test_register_links_known_principal_by_email(
    registration_service, store, tenant, private_event
):
    user = store.put(UserFactory.build(email="alice@example.com"))

    outcome = await registration_service.register(tenant, private_event.id, _signup())

    assert outcome.registration.user_id == user.id


async def test_duplicate_email_is_rejected_with_existing_registration(
    registration_service, store, tenant, private_event
):
    first = await registration_service.register(tenant, private_event.id, _signup())

    with pytest.raises(DuplicateRegistration) as exc_info:
        await registration_service.register(
            tenant, private_event.id, _signup(email="ALICE@example.com", name="Other")
        )

    assert exc_info.value.registration.id == first.registration.id
    assert exc_info.value.context["registration"]["status"] == "pending"
    assert len(store.registrations) == 1


async def test_concurrent_duplicate_registration_loses_on_unique_constraint(
    store, tenant, private_event
):
    first, second = _service_for(store), _service_for(store)

    results = await asyncio.gather(
        first.register(tenant, private_event.id, _signup()),
        second.register(tenant, private_event.id, _signup()),
        return_exceptions=True,
    )

    duplicates = [r for r in results if isinstance(r, DuplicateRegistration)]
    created = [r for r in results if not isinstance(r, Exception)]
    assert len(created) == 1
    assert len(duplicates) == 1
    assert duplicates[0].registration.id == created[0].registration.id
    assert len(store.registrations) == 1


async def test_same_email_may_register_for_different_events(
    registration_service, store, tenant, private_event
):
    second_event = store.put(EventFactory.build(tenant_id=tenant.id))

    await registration_service.register(tenant, private_event.id, _signup())
    await registration_service.register(tenant, second_event.id, _signup())

    assert len(store.registrations) == 2


async def test_register_for_inactive_event_fails(registration_service, store, tenant):
    event = store.put(EventFactory.build(tenant_id=tenant.id, is_active=False))

    with pytest.raises(EventNotFound):
        await registration_service.register(tenant, event.id, _signup())


async def test_register_for_other_tenants_event_fails(
    registration_service, other_tenant, private_event
):
    with pytest.raises(EventNotFound):
        await registration_service.register(other_tenant, private_event.id, _signup())


# --- approve / reject ---


async def test_approve_pending_issues_credential(registration_service, store, tenant, private_event):
    registration = store.put(RegistrationFactory.build(event_id=private_event.id))

    outcome = await registration_service.approve(tenant, private_event.id, registration.id)

    assert outcome.registration.status == RegistrationStatus.APPROVED.value
    assert outcome.credential_issued is True
    assert outcome.registration.credential is not None


async def test_approve_twice_raises_already_approved(
    registration_service, store, tenant, private_event
):
    registration = store.put(RegistrationFactory.build(event_id=private_event.id))
    first = await registration_service.approve(tenant, private_event.id, registration.id)
    credential = first.registration.credential

    with pytest.raises(AlreadyApproved) as exc_info:
        await registration_service.approve(tenant, private_event.id, registration.id)

    assert exc_info.value.context["current_status"] == "approved"
    assert store.registrations[registration.id].credential == credential


async def test_concurrent_approvals_issue_exactly_one_credential(store, tenant, private_event):
    registration = store.put(RegistrationFactory.build(event_id=private_event.id))
    services = [_service_for(store) for _ in range(5)]

    results = await asyncio.gather(
        *(s.approve(tenant, private_event.id, registration.id) for s in services),
        return_exceptions=True,
    )

    winners = [r for r in results if not isinstance(r, Exception)]
    losers = [r for r in results if isinstance(r, Exception)]
    assert len(winners) == 1
    assert all(isinstance(e, AlreadyApproved) for e in losers)
    assert store.registrations[registration.id].credential == winners[0].registration.credential


async def test_reject_pending(registration_service, store, tenant, private_event):
    registration = store.put(RegistrationFactory.build(event_id=private_event.id))

    rejected = await registration_service.reject(tenant, private_event.id, registration.id)

    assert rejected.status == RegistrationStatus.REJECTED.value
    assert rejected.credential is None


async def test_approve_after_reject_is_already_finalized(
    registration_service, store, tenant, private_event
):
    registration = store.put(RegistrationFactory.build(event_id=private_event.id))
    await registration_service.reject(tenant, private_event.id, registration.id)

    with pytest.raises(AlreadyFinalized) as exc_info:
        await registration_service.approve(tenant, private_event.id, registration.id)

    assert exc_info.value.context["current_status"] == "rejected"
    assert store.registrations[registration.id].credential is None


async def test_reject_after_approve_is_already_finalized(
    registration_service, store, tenant, private_event
):
    registration = store.put(RegistrationFactory.build(event_id=private_event.id))
    await registration_service.approve(tenant, private_event.id, registration.id)

    with pytest.raises(AlreadyFinalized) as exc_info:
        await registration_service.reject(tenant, private_event.id, registration.id)

    assert exc_info.value.context["current_status"] == "approved"


async def test_approve_unknown_registration(registration_service, tenant, private_event):
    with pytest.raises(RegistrationNotFound):
        await registration_service.approve(tenant, private_event.id, RegistrationFactory.build().id)


async def test_approve_registration_of_another_event(
    registration_service, store, tenant, private_event
):
    other_event = store.put(EventFactory.build(tenant_id=tenant.id))
    registration = store.put(RegistrationFactory.build(event_id=other_event.id))

    with pytest.raises(RegistrationNotFound):
        await registration_service.approve(tenant, private_event.id, registration.id)


async def test_approve_for_other_tenant_fails(
    registration_service, store, other_tenant, private_event
):
    registration = store.put(RegistrationFactory.build(event_id=private_event.id))

    with pytest.raises(EventNotFound):
        await registration_service.approve(other_tenant, private_event.id, registration.id)

    assert store.registrations[registration.id].status == RegistrationStatus.PENDING.value


# --- credential issuance failure and reissue ---


async def test_issuance_failure_keeps_approval_and_warns(store, tenant, private_event):
    service = _service_for(store, issuer=_FailingIssuer())
    registration = store.put(RegistrationFactory.build(event_id=private_event.id))

    outcome = await service.approve(tenant, private_event.id, registration.id)

    assert outcome.registration.status == RegistrationStatus.APPROVED.value
    assert outcome.registration.credential is None
    assert outcome.credential_issued is False
    assert outcome.warning == CREDENTIAL_ISSUANCE_FAILED_WARNING


async def test_reissue_fills_missing_credential(store, tenant, private_event):
    registration = store.put(RegistrationFactory.build(event_id=private_event.id))
    await _service_for(store, issuer=_FailingIssuer()).approve(
        tenant, private_event.id, registration.id
    )

    reissued = await _service_for(store).reissue_credential(
        tenant, private_event.id, registration.id
    )

    assert reissued.credential is not None
    assert reissued.credential_issued_at is not None


async def test_reissue_refuses_existing_credential(
    registration_service, store, tenant, private_event
):
    registration = store.put(RegistrationFactory.approved(event_id=private_event.id))
    credential = registration.credential

    with pytest.raises(CredentialAlreadyIssued):
        await registration_service.reissue_credential(tenant, private_event.id, registration.id)

    assert store.registrations[registration.id].credential == credential


async def test_reissue_requires_approval(registration_service, store, tenant, private_event):
    registration = store.put(RegistrationFactory.build(event_id=private_event.id))

    with pytest.raises(RegistrationNotApproved):
        await registration_service.reissue_credential(tenant, private_event.id, registration.id)


async def test_credential_collision_is_reported_as_issuance_failure(
    registration_service, store, tenant, private_event
):
    taken = store.put(RegistrationFactory.approved(event_id=private_event.id))
    registration = store.put(RegistrationFactory.build(event_id=private_event.id))

    with patch.object(CredentialIssuer, "issue", return_value=taken.credential):
        outcome = await registration_service.approve(tenant, private_event.id, registration.id)

    assert outcome.registration.status == RegistrationStatus.APPROVED.value
    assert outcome.registration.credential is None
    assert outcome.warning == CREDENTIAL_ISSUANCE_FAILED_WARNING


async def test_approve_does_not_claim_credential_filled_by_another_request(
    registration_service, repos, store, tenant, private_event
):
    registration = store.put(RegistrationFactory.build(event_id=private_event.id))
    attach = repos.registrations.attach_credential

    async def reissue_wins_first(registration_id, credential, now):
        await attach(registration_id, "filled-by-reissue", now)
        return await attach(registration_id, credential, now)

    with patch.object(repos.registrations, "attach_credential", reissue_wins_first):
        outcome = await registration_service.approve(tenant, private_event.id, registration.id)

    assert outcome.credential_issued is False
    assert outcome.warning is None
    assert outcome.registration.credential == "filled-by-reissue"


# --- scan_and_consume ---


async def test_scan_consumes_credential_once(registration_service, store, tenant, private_event):
    registration = store.put(RegistrationFactory.approved(event_id=private_event.id))

    outcome = await registration_service.scan_and_consume(
        tenant, private_event.id, registration.credential
    )

    assert outcome.registration.id == registration.id
    assert outcome.event.id == private_event.id
    assert store.registrations[registration.id].consumed is True
    assert store.registrations[registration.id].consumed_at == outcome.consumed_at


async def test_second_scan_reports_original_consumed_at(
    registration_service, store, tenant, private_event
):
    registration = store.put(RegistrationFactory.approved(event_id=private_event.id))
    first = await registration_service.scan_and_consume(
        tenant, private_event.id, registration.credential
    )

    with pytest.raises(CredentialAlreadyConsumed) as exc_info:
        await registration_service.scan_and_consume(
            tenant, private_event.id, registration.credential
        )

    assert exc_info.value.consumed_at == first.consumed_at


async def test_concurrent_scans_admit_exactly_one(store, tenant, private_event):
    registration = store.put(RegistrationFactory.approved(event_id=private_event.id))
    services = [_service_for(store) for _ in range(10)]

    results = await asyncio.gather(
        *(s.scan_and_consume(tenant, private_event.id, registration.credential) for s in services),
        return_exceptions=True,
    )

    winners = [r for r in results if not isinstance(r, Exception)]
    losers = [r for r in results if isinstance(r, Exception)]
    assert len(winners) == 1
    assert len(losers) == 9
    assert all(isinstance(e, CredentialAlreadyConsumed) for e in losers)
    assert {e.consumed_at for e in losers} == {winners[0].consumed_at}


async def test_scan_unknown_credential(registration_service, tenant, private_event):
    with pytest.raises(CredentialNotFound):
        await registration_service.scan_and_consume(tenant, private_event.id, "no-such-credential")


async def test_scan_credential_of_another_event(registration_service, store, tenant, private_event):
    other_event = store.put(EventFactory.build(tenant_id=tenant.id))
    registration = store.put(RegistrationFactory.approved(event_id=other_event.id))

    with pytest.raises(CredentialNotFound):
        await registration_service.scan_and_consume(
            tenant, private_event.id, registration.credential
        )

    assert store.registrations[registration.id].consumed is False


async def test_scan_at_another_tenant_fails(registration_service, store, other_tenant, private_event):
    registration = store.put(RegistrationFactory.approved(event_id=private_event.id))

    with pytest.raises(EventNotFound):
        await registration_service.scan_and_consume(
            other_tenant, private_event.id, registration.credential
        )

    assert store.registrations[registration.id].consumed is False


async def test_scan_still_works_after_event_deactivation(
    registration_service, store, tenant, private_event
):
    registration = store.put(RegistrationFactory.approved(event_id=private_event.id))
    private_event.is_active = False

    outcome = await registration_service.scan_and_consume(
        tenant, private_event.id, registration.credential
    )

    assert outcome.registration.consumed is True


# --- venue access ---


async def test_venue_access_requires_scan(registration_service, store, tenant, private_event):
    registration = store.put(RegistrationFactory.approved(event_id=private_event.id))

    with pytest.raises(VenueAccessDenied):
        await registration_service.venue_access(tenant, private_event.id, registration.id)

    await registration_service.scan_and_consume(tenant, private_event.id, registration.credential)
    access = await registration_service.venue_access(tenant, private_event.id, registration.id)

    assert access.map_url == tenant.map_url
    assert access.registration.id == registration.id


async def test_venue_access_denied_for_pending(registration_service, store, tenant, private_event):
    registration = store.put(RegistrationFactory.build(event_id=private_event.id))

    with pytest.raises(VenueAccessDenied):
        await registration_service.venue_access(tenant, private_event.id, registration.id)


async def test_venue_access_without_map(registration_service, store):
    tenant = store.put(TenantFactory.without_map())
    event = store.put(EventFactory.build(tenant_id=tenant.id))
    registration = store.put(RegistrationFactory.approved(event_id=event.id, consumed=True))

    with pytest.raises(MapNotAvailable):
        await registration_service.venue_access(tenant, event.id, registration.id)


async def test_grant_venue_access_needs_approved_and_consumed():
    assert grant_venue_access(RegistrationFactory.approved(consumed=True)) is True
    assert grant_venue_access(RegistrationFactory.approved()) is False
    assert grant_venue_access(RegistrationFactory.build()) is False


# --- listing ---


async def test_list_registrations_filters_by_status(
    registration_service, store, tenant, private_event
):
    pending = store.put(RegistrationFactory.build(event_id=private_event.id))
    store.put(RegistrationFactory.approved(event_id=private_event.id))

    everything = await registration_service.list_registrations(tenant, private_event.id)
    queue = await registration_service.list_registrations(
        tenant, private_event.id, RegistrationStatus.PENDING
    )

    assert len(everything) == 2
    assert [r.id for r in queue] == [pending.id]


async def test_list_for_principal_by_link_and_email(
    registration_service, store, tenant, other_tenant, private_event, guest
):
    elsewhere = store.put(EventFactory.build(tenant_id=other_tenant.id))
    linked = store.put(RegistrationFactory.build(event_id=private_event.id, user_id=guest.id))
    by_email = store.put(RegistrationFactory.approved(event_id=elsewhere.id, email=guest.email))
    store.put(RegistrationFactory.build(event_id=private_event.id))

    entries = await registration_service.list_for_principal(guest)
    approved = await registration_service.list_for_principal(guest, RegistrationStatus.APPROVED)

    assert {e.registration.id for e in entries} == {linked.id, by_email.id}
    assert [(e.event.id, e.tenant.id) for e in approved] == [(elsewhere.id, other_tenant.id)]


# --- end to end ---


async def test_private_event_walkthrough(registration_service, tenant, private_event):
    registered = await registration_service.register(tenant, private_event.id, _signup())
    registration_id = registered.registration.id

    approved = await registration_service.approve(tenant, private_event.id, registration_id)
    credential = approved.registration.credential
    assert credential is not None

    scanned = await registration_service.scan_and_consume(tenant, private_event.id, credential)
    access = await registration_service.venue_access(tenant, private_event.id, registration_id)

    assert access.map_url == tenant.map_url
    with pytest.raises(CredentialAlreadyConsumed) as exc_info:
        await registration_service.scan_and_consume(tenant, private_event.id, credential)
    assert exc_info.value.consumed_at == scanned.consumed_at
