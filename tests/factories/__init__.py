"""Test factories for generating test data.

Re-exports all factories for convenient imports:
    from tests.factories import UserFactory, TenantFactory, ...
"""

from tests.factories.base import BaseFactory, generate_uuid, utc_now
from tests.factories.event import EventFactory, RegistrationFactory
from tests.factories.tenant import TenantFactory
from tests.factories.user import TenantAdminFactory, UserFactory

__all__ = [
    # Base
    "BaseFactory",
    "generate_uuid",
    "utc_now",
    # Tenant
    "TenantFactory",
    # User
    "TenantAdminFactory",
    "UserFactory",
    # Event
    "EventFactory",
    "RegistrationFactory",
]
