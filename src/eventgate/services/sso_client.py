"""Client for the external SSO authority."""

from typing import Any

import httpx
from pydantic import ValidationError

from src.eventgate.core.exceptions import (
    ExternalAssertionInvalid,
    ExternalAuthorityUnavailable,
)
from src.eventgate.core.logging import get_logger
from src.eventgate.schemas.auth import SsoProfile

logger = get_logger(__name__)

PROFILE_PATH = "/api/auth/me"


class SsoClient:
    """Validates SSO assertions by asking the authority who they belong to.

    One bounded request per call and no retries. ``transport`` lets tests
    plug in an ``httpx.MockTransport``.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def fetch_profile(self, assertion: str) -> SsoProfile:
        """Return the profile behind ``assertion``.

        Raises:
            ExternalAssertionInvalid: The authority rejected the assertion or
                returned a profile without a usable email.
            ExternalAuthorityUnavailable: Network failure, timeout, 5xx or an
                unreadable body.
        """
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self.transport
            ) as client:
                response = await client.get(
                    f"{self.base_url}{PROFILE_PATH}",
                    headers={"Authorization": f"Bearer {assertion}"},
                )
        except httpx.HTTPError as e:
            logger.warning("SSO authority unreachable", error=str(e))
            raise ExternalAuthorityUnavailable() from e

        if response.status_code in (401, 403):
            raise ExternalAssertionInvalid()
        if response.status_code >= 500:
            logger.warning("SSO authority error", status_code=response.status_code)
            raise ExternalAuthorityUnavailable()
        if response.status_code != 200:
            raise ExternalAssertionInvalid()

        try:
            body: Any = response.json()
        except ValueError as e:
            raise ExternalAuthorityUnavailable() from e

        user_data = body.get("user") if isinstance(body, dict) else None
        if not isinstance(user_data, dict) or not user_data.get("email"):
            raise ExternalAssertionInvalid("Invalid user data from SSO")

        try:
            return SsoProfile(
                email=user_data["email"],
                name=user_data.get("name") or None,
                avatar_url=user_data.get("picture") or user_data.get("avatar") or None,
            )
        except ValidationError as e:
            raise ExternalAssertionInvalid("Invalid user data from SSO") from e

    def login_url(self, redirect: str) -> str:
        """SSO login page that sends the browser back to ``redirect``."""
        return str(httpx.URL(self.base_url, params={"redirect": redirect}))
