"""Test utilities."""

from tests.utils.cleanup import cleanup_tenant_cascade, cleanup_users

__all__ = ["cleanup_tenant_cascade", "cleanup_users"]
