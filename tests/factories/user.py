"""User and tenant-admin factories for test data generation."""

from polyfactory import Use

from src.eventgate.models import GlobalRole, TenantAdmin, User
from tests.factories.base import BaseFactory, generate_uuid, short_suffix, utc_now


class UserFactory(BaseFactory):
    """Factory for generating User test data."""

    __model__ = User

    id = Use(generate_uuid)
    email = Use(lambda: f"user_{short_suffix()}@example.com")
    display_name = "Test User"
    avatar_url = None
    role = GlobalRole.GUEST.value
    is_active = True
    created_at = Use(utc_now)
    updated_at = Use(utc_now)

    @classmethod
    def platform_admin(cls, **kwargs):
        return cls.build(
            role=GlobalRole.PLATFORM_ADMIN.value,
            display_name=kwargs.pop("display_name", "Platform Admin"),
            **kwargs,
        )

    @classmethod
    def tenant_admin(cls, **kwargs):
        return cls.build(role=GlobalRole.TENANT_ADMIN.value, **kwargs)

    @classmethod
    def inactive(cls, **kwargs):
        """Create an inactive user."""
        return cls.build(is_active=False, **kwargs)


class TenantAdminFactory(BaseFactory):
    """Factory for generating TenantAdmin grants."""

    __model__ = TenantAdmin

    # FK fields - must be set explicitly
    user_id = None
    tenant_id = None
    created_at = Use(utc_now)
