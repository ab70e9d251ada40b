from pydantic import BaseModel, EmailStr, Field

from src.eventgate.schemas.user import UserRead


class SsoCallbackRequest(BaseModel):
    token: str = Field(min_length=1)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserRead


class VerifyResponse(BaseModel):
    valid: bool = True
    user: UserRead


class SsoLoginResponse(BaseModel):
    login_url: str


class SsoProfile(BaseModel):
    """Profile returned by the external SSO authority."""

    email: EmailStr
    name: str | None = None
    avatar_url: str | None = None
