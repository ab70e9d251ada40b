"""Cryptographic utilities - local bearer tokens and opaque random values."""

import secrets
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID

from jose import ExpiredSignatureError, JWTError, jwt

from src.eventgate.core.config import get_settings
from src.eventgate.core.exceptions import CredentialExpired, CredentialInvalid

ACCESS_TOKEN_TYPE = "access"


def generate_opaque_token(nbytes: int = 32) -> str:
    """Return a URL-safe random value carrying ``nbytes`` of entropy."""
    return secrets.token_urlsafe(nbytes)


def create_access_token(
    subject: str | UUID,
    role: str,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a JWT bound to a principal id.

    The role claim is a snapshot for clients only; the server always re-reads
    the role from storage.
    """
    settings = get_settings()

    if expires_delta:
        expire = datetime.now(UTC) + expires_delta
    else:
        expire = datetime.now(UTC) + timedelta(days=settings.access_token_expire_days)

    to_encode = {
        "sub": str(subject),
        "role": role,
        "exp": expire,
        "type": ACCESS_TOKEN_TYPE,
    }
    return jwt.encode(  # type: ignore[no-any-return]
        to_encode,
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )


def decode_token(token: str) -> dict[str, Any]:
    """Decode and validate a JWT.

    Raises:
        CredentialExpired: The token is past its expiry.
        CredentialInvalid: Bad signature, malformed token or wrong algorithm.
    """
    settings = get_settings()
    try:
        return jwt.decode(  # type: ignore[no-any-return]
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except ExpiredSignatureError as e:
        raise CredentialExpired() from e
    except JWTError as e:
        raise CredentialInvalid() from e


def subject_from_payload(payload: dict[str, Any]) -> UUID:
    """Extract the principal id from an access token payload."""
    if payload.get("type") != ACCESS_TOKEN_TYPE:
        raise CredentialInvalid()
    subject = payload.get("sub")
    if not subject:
        raise CredentialInvalid()
    try:
        return UUID(str(subject))
    except ValueError as e:
        raise CredentialInvalid() from e
