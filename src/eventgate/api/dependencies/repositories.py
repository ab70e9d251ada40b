"""Repository factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.eventgate.api.dependencies.db import DBSession
from src.eventgate.repositories import (
    EventRepository,
    RegistrationRepository,
    TenantAdminRepository,
    TenantRepository,
    UserRepository,
)


def get_user_repository(session: DBSession) -> UserRepository:
    return UserRepository(session)


def get_tenant_repository(session: DBSession) -> TenantRepository:
    return TenantRepository(session)


def get_tenant_admin_repository(session: DBSession) -> TenantAdminRepository:
    return TenantAdminRepository(session)


def get_event_repository(session: DBSession) -> EventRepository:
    return EventRepository(session)


def get_registration_repository(session: DBSession) -> RegistrationRepository:
    return RegistrationRepository(session)


UserRepo = Annotated[UserRepository, Depends(get_user_repository)]
TenantRepo = Annotated[TenantRepository, Depends(get_tenant_repository)]
TenantAdminRepo = Annotated[TenantAdminRepository, Depends(get_tenant_admin_repository)]
EventRepo = Annotated[EventRepository, Depends(get_event_repository)]
RegistrationRepo = Annotated[RegistrationRepository, Depends(get_registration_repository)]
