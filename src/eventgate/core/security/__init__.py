"""Security utilities - crypto and validators.

Re-exports all security-related functions for convenience.
"""

from src.eventgate.core.security.crypto import (
    create_access_token,
    decode_token,
    generate_opaque_token,
    subject_from_payload,
)
from src.eventgate.core.security.validators import (
    normalize_email,
    validate_subdomain_format,
)

__all__ = [
    # Crypto
    "create_access_token",
    "decode_token",
    "generate_opaque_token",
    "subject_from_payload",
    # Validators
    "normalize_email",
    "validate_subdomain_format",
]
