"""Model exports.

Import from here: `from src.eventgate.models import User, Tenant`
"""

from src.eventgate.models.enums import (
    Capability,
    EventVisibility,
    GlobalRole,
    RegistrationStatus,
)
from src.eventgate.models.event import Event
from src.eventgate.models.registration import Registration
from src.eventgate.models.tenant import Tenant
from src.eventgate.models.user import TenantAdmin, User

__all__ = [
    # Enums
    "Capability",
    "EventVisibility",
    "GlobalRole",
    "RegistrationStatus",
    # Models
    "Event",
    "Registration",
    "Tenant",
    "TenantAdmin",
    "User",
]
