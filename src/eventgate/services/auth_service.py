"""Identity verification - local bearer tokens and SSO exchange."""

from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.eventgate.core.exceptions import CredentialInvalid, CredentialMissing, PrincipalInactive
from src.eventgate.core.logging import get_logger
from src.eventgate.core.security import (
    create_access_token,
    decode_token,
    normalize_email,
    subject_from_payload,
)
from src.eventgate.models import GlobalRole, User
from src.eventgate.models.base import utc_now
from src.eventgate.repositories import UserRepository
from src.eventgate.services.sso_client import SsoClient

logger = get_logger(__name__)


@dataclass
class ExchangeResult:
    user: User
    access_token: str
    created: bool


class AuthService:
    """Turns bearer tokens and SSO assertions into stored principals."""

    def __init__(
        self,
        user_repo: UserRepository,
        session: AsyncSession,
        sso_client: SsoClient,
        platform_admin_emails: list[str],
    ):
        self.user_repo = user_repo
        self.session = session
        self.sso_client = sso_client
        self.platform_admin_emails = {normalize_email(e) for e in platform_admin_emails}

    async def verify_credential(self, token: str | None) -> User:
        """Validate a local bearer token and load its principal.

        The role comes from storage; the token's role claim is ignored.
        """
        if not token:
            raise CredentialMissing()

        payload = decode_token(token)
        user_id = subject_from_payload(payload)

        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise CredentialInvalid()
        if not user.is_active:
            raise PrincipalInactive()
        return user

    async def exchange_external_assertion(self, assertion: str) -> ExchangeResult:
        """Exchange an SSO assertion for a local bearer token.

        First sight creates the principal, later sights refresh display
        metadata and may promote (never demote) to platform admin.
        """
        profile = await self.sso_client.fetch_profile(assertion)
        email = normalize_email(str(profile.email))
        is_allow_listed = email in self.platform_admin_emails

        user = await self.user_repo.get_by_email(email)
        created = user is None
        if user is None:
            user = User(
                email=email,
                display_name=profile.name or email.split("@")[0],
                avatar_url=profile.avatar_url,
                role=(GlobalRole.PLATFORM_ADMIN if is_allow_listed else GlobalRole.GUEST).value,
            )
            self.user_repo.add(user)
            try:
                await self.session.commit()
            except IntegrityError:
                # Concurrent first sign-in for the same email
                await self.session.rollback()
                user = await self.user_repo.get_by_email(email)
                if user is None:
                    raise
                created = False

        if not created:
            if not user.is_active:
                raise PrincipalInactive()
            if profile.name:
                user.display_name = profile.name
            if profile.avatar_url:
                user.avatar_url = profile.avatar_url
            if is_allow_listed and user.role != GlobalRole.PLATFORM_ADMIN.value:
                logger.info("Principal promoted to platform admin", user_id=str(user.id))
                user.role = GlobalRole.PLATFORM_ADMIN.value
            user.updated_at = utc_now()
            await self.session.commit()

        await self.session.refresh(user)
        token = create_access_token(user.id, user.role)
        logger.info(
            "SSO exchange succeeded",
            user_id=str(user.id),
            role=user.role,
            created=created,
        )
        return ExchangeResult(user=user, access_token=token, created=created)
