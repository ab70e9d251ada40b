"""Principal profile endpoints."""

from typing import Annotated

from fastapi import APIRouter, Query

from src.eventgate.api.dependencies import CurrentUser, RegistrationServiceDep, UserServiceDep
from src.eventgate.models import RegistrationStatus
from src.eventgate.schemas.event import EventPublic
from src.eventgate.schemas.registration import PrincipalRegistrationRead, RegistrationRead
from src.eventgate.schemas.tenant import TenantPublic
from src.eventgate.schemas.user import UserRead, UserUpdate

router = APIRouter(prefix="/users", tags=["users"])


@router.get(
    "/me",
    response_model=UserRead,
    responses={
        200: {
            "description": "Current principal",
            "content": {
                "application/json": {
                    "example": {
                        "id": "550e8400-e29b-41d4-a716-446655440000",
                        "email": "guest@example.com",
                        "display_name": "guest",
                        "avatar_url": None,
                        "role": "guest",
                        "is_active": True,
                        "created_at": "2025-01-15T10:30:00",
                    }
                }
            },
        },
        401: {"description": "Not authenticated"},
    },
)
async def get_me(current_user: CurrentUser) -> UserRead:
    return UserRead.model_validate(current_user)


@router.patch("/me", response_model=UserRead)
async def update_me(
    data: UserUpdate, current_user: CurrentUser, service: UserServiceDep
) -> UserRead:
    """Update display name or avatar."""
    user = await service.update_profile(current_user, data)
    return UserRead.model_validate(user)


@router.get("/me/registrations", response_model=list[PrincipalRegistrationRead])
async def list_my_registrations(
    current_user: CurrentUser,
    service: RegistrationServiceDep,
    status_filter: Annotated[RegistrationStatus | None, Query(alias="status")] = None,
) -> list[PrincipalRegistrationRead]:
    """The caller's registrations across every tenant, newest first."""
    entries = await service.list_for_principal(current_user, status_filter)
    return [
        PrincipalRegistrationRead(
            registration=RegistrationRead.model_validate(entry.registration),
            event=EventPublic.model_validate(entry.event),
            tenant=TenantPublic.model_validate(entry.tenant),
        )
        for entry in entries
    ]
