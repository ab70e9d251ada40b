"""Repository layer - data access abstraction."""

from src.eventgate.repositories.base import BaseRepository
from src.eventgate.repositories.event import EventRepository
from src.eventgate.repositories.registration import RegistrationRepository
from src.eventgate.repositories.tenant import TenantRepository
from src.eventgate.repositories.tenant_admin import TenantAdminRepository
from src.eventgate.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "EventRepository",
    "RegistrationRepository",
    "TenantAdminRepository",
    "TenantRepository",
    "UserRepository",
]
