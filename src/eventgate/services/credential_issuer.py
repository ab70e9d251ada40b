"""Mints opaque single-use credentials and renders them as QR images."""

from io import BytesIO
from uuid import UUID

import qrcode

from src.eventgate.core.exceptions import CredentialIssuanceFailed
from src.eventgate.core.logging import get_logger
from src.eventgate.core.security import generate_opaque_token

logger = get_logger(__name__)

CREDENTIAL_BYTES = 32


class CredentialIssuer:
    """Pure generation; persisting the value is the caller's job."""

    def __init__(self, box_size: int = 10, border: int = 2):
        self.box_size = box_size
        self.border = border

    def issue(self, registration_id: UUID) -> str:
        """Return a fresh 256-bit URL-safe credential."""
        try:
            return generate_opaque_token(CREDENTIAL_BYTES)
        except Exception as e:
            logger.error(
                "Credential generation failed",
                registration_id=str(registration_id),
                error=str(e),
            )
            raise CredentialIssuanceFailed() from e

    def render_png(self, value: str) -> bytes:
        """Render ``value`` as a PNG QR code."""
        try:
            qr = qrcode.QRCode(
                version=None,
                error_correction=qrcode.constants.ERROR_CORRECT_M,
                box_size=self.box_size,
                border=self.border,
            )
            qr.add_data(value)
            qr.make(fit=True)
            img = qr.make_image(fill_color="black", back_color="white")
            buffer = BytesIO()
            img.save(buffer, format="PNG")
        except Exception as e:
            raise CredentialIssuanceFailed("QR code could not be rendered") from e
        return buffer.getvalue()
