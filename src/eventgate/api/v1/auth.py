"""SSO exchange and bearer verification endpoints."""

import re
from typing import Annotated

import httpx
from fastapi import APIRouter, Query, Request

from src.eventgate.api.dependencies import AuthServiceDep, CurrentUser, SsoClientDep
from src.eventgate.core.config import Settings, get_settings
from src.eventgate.core.exceptions import RedirectNotAllowed
from src.eventgate.core.rate_limit import limiter, sso_rate_limit
from src.eventgate.schemas.auth import (
    SsoCallbackRequest,
    SsoLoginResponse,
    TokenResponse,
    VerifyResponse,
)
from src.eventgate.schemas.user import UserRead

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/sso/callback",
    response_model=TokenResponse,
    responses={
        401: {"description": "SSO authority rejected the token"},
        429: {"description": "Too many requests"},
        502: {"description": "SSO authority unavailable"},
    },
)
@limiter.limit(sso_rate_limit)
async def sso_callback(
    request: Request, body: SsoCallbackRequest, service: AuthServiceDep
) -> TokenResponse:
    """Exchange an SSO token for a local bearer token."""
    result = await service.exchange_external_assertion(body.token)
    return TokenResponse(
        access_token=result.access_token,
        user=UserRead.model_validate(result.user),
    )


@router.get("/verify", response_model=VerifyResponse)
async def verify(current_user: CurrentUser) -> VerifyResponse:
    """Echo the principal behind a valid bearer token."""
    return VerifyResponse(user=UserRead.model_validate(current_user))


def _allowed_redirect(redirect: str, settings: Settings) -> bool:
    """True for https URLs on the base domain or one of its tenant subdomains."""
    try:
        url = httpx.URL(redirect)
    except httpx.InvalidURL:
        return False
    if url.userinfo or url.port is not None:
        return False
    origin = f"{url.scheme}://{url.host}"
    return re.fullmatch(settings.cors_origin_regex, origin) is not None


@router.get(
    "/sso/login",
    response_model=SsoLoginResponse,
    responses={400: {"description": "Redirect target outside the platform domain"}},
)
async def sso_login(
    sso_client: SsoClientDep,
    redirect: Annotated[str | None, Query(max_length=2048)] = None,
) -> SsoLoginResponse:
    """SSO login URL that sends the browser back to ``redirect``."""
    settings = get_settings()
    if redirect is None:
        redirect = f"https://{settings.base_domain}"
    elif not _allowed_redirect(redirect, settings):
        raise RedirectNotAllowed(redirect=redirect)
    return SsoLoginResponse(login_url=sso_client.login_url(redirect))
