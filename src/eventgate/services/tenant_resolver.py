"""Maps an incoming request to the tenant it addresses."""

from src.eventgate.core.logging import get_logger
from src.eventgate.models import Tenant
from src.eventgate.repositories import TenantRepository

logger = get_logger(__name__)


def parse_host_subdomain(host: str | None, base_domain: str) -> str | None:
    """Return the tenant label of ``<label>.<base_domain>``, or None.

    The port is stripped and comparison is case-insensitive. The bare base
    domain, foreign hosts and nested labels yield None.
    """
    if not host:
        return None
    # X-Forwarded-Host may carry a proxy chain; the first entry is the client's
    hostname = host.split(",")[0].strip().lower()
    if hostname.startswith("["):
        return None
    hostname = hostname.split(":", 1)[0].rstrip(".")
    base = base_domain.lower()
    suffix = f".{base}"
    if hostname == base or not hostname.endswith(suffix):
        return None
    label = hostname[: -len(suffix)]
    if not label or "." in label:
        return None
    return label


class TenantResolver:
    """Resolves an active tenant from the host or an explicit slug.

    Resolution never raises for an unknown or inactive tenant; callers that
    need one reject ``None`` themselves.
    """

    def __init__(self, tenant_repo: TenantRepository, base_domain: str):
        self.tenant_repo = tenant_repo
        self.base_domain = base_domain

    async def resolve(self, host: str | None, slug: str | None = None) -> Tenant | None:
        subdomain = parse_host_subdomain(host, self.base_domain)
        if subdomain:
            tenant = await self.tenant_repo.get_active_by_subdomain(subdomain)
            if tenant is not None:
                return tenant

        if slug:
            tenant = await self.tenant_repo.get_active_by_subdomain(slug.lower())
            if tenant is not None:
                return tenant

        logger.debug("No tenant resolved", host=host, slug=slug)
        return None
