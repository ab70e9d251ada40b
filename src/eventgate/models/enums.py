"""Shared enums for models."""

from enum import Enum


class GlobalRole(str, Enum):
    """Platform-wide role of a principal."""

    PLATFORM_ADMIN = "platform_admin"
    TENANT_ADMIN = "tenant_admin"
    GUEST = "guest"


class Capability(str, Enum):
    """What an operation demands of its caller."""

    TENANT_ADMIN = "tenant_admin"
    PLATFORM_ADMIN = "platform_admin"


class EventVisibility(str, Enum):
    """OPEN events auto-approve registrations, PRIVATE ones wait for an admin."""

    OPEN = "open"
    PRIVATE = "private"


class RegistrationStatus(str, Enum):
    """Registration lifecycle status."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
