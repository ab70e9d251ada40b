"""Security validators."""

import re
from typing import Final

MIN_SUBDOMAIN_LENGTH: Final[int] = 2
MAX_SUBDOMAIN_LENGTH: Final[int] = 50
SUBDOMAIN_REGEX: Final[str] = r"^[a-z0-9-]+$"

_SUBDOMAIN_PATTERN: Final[re.Pattern[str]] = re.compile(SUBDOMAIN_REGEX)


def validate_subdomain_format(subdomain: str) -> str:
    """Validate a tenant subdomain label.

    This validates **format only**. Length is enforced by Field(min_length, max_length).
    """
    if not _SUBDOMAIN_PATTERN.match(subdomain):
        raise ValueError("Subdomain can only contain lowercase letters, numbers, and hyphens")
    return subdomain


def normalize_email(email: str) -> str:
    """Emails are compared and stored lower-cased."""
    return email.strip().lower()
