import re
from functools import lru_cache
from typing import Annotated, Any

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

PLACEHOLDER_JWT_SECRET = "change-this-to-a-secure-random-string"
MIN_JWT_SECRET_LENGTH = 32


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    app_name: str = "EventGate API"
    app_env: str = "development"  # development, testing, production
    debug: bool = False
    enable_openapi: bool = True

    # Security
    log_user_emails: bool = False  # Keep False in production (GDPR)

    # Database
    database_url: str
    database_pool_size: int = 5
    database_max_overflow: int = 10
    database_ssl_mode: str = "prefer"  # disable, prefer, require, verify-ca, verify-full

    # Local bearer credentials
    jwt_secret_key: str
    jwt_algorithm: str = "HS256"
    access_token_expire_days: int = 7

    # Tenancy
    base_domain: str = "mapease.com"
    # Only enable behind a proxy that overwrites X-Forwarded-Host
    trust_forwarded_host: bool = False
    # Comma-separated; first SSO sign-in with one of these emails becomes PLATFORM_ADMIN
    platform_admin_emails: Annotated[list[str], NoDecode] = []

    # External SSO authority
    sso_service_url: str = "http://localhost:4000"
    sso_timeout_seconds: float = 5.0

    # QR credential rendering
    qr_box_size: int = 10
    qr_border: int = 2

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Metrics
    metrics_api_key: str | None = None  # If set, /metrics requires this key

    # Rate limiting (slowapi); Redis storage is optional
    redis_url: str | None = None
    register_rate_limit: str = "20/minute"
    sso_rate_limit: str = "30/minute"

    @field_validator("jwt_secret_key")
    @classmethod
    def check_jwt_secret(cls, v: str) -> str:
        if v == PLACEHOLDER_JWT_SECRET:
            raise ValueError("JWT_SECRET_KEY must be changed from the example value")
        if len(v) < MIN_JWT_SECRET_LENGTH:
            raise ValueError(
                f"JWT_SECRET_KEY must be at least {MIN_JWT_SECRET_LENGTH} characters"
            )
        return v

    @field_validator("cors_origins")
    @classmethod
    def reject_wildcard_origin(cls, v: list[str]) -> list[str]:
        # Credentialed CORS cannot use "*"; tenant subdomains go through the origin regex
        if "*" in v:
            raise ValueError(
                "CORS_ORIGINS must list explicit origins, wildcard '*' is not allowed"
            )
        return v

    @field_validator("base_domain")
    @classmethod
    def normalize_base_domain(cls, v: str) -> str:
        return v.strip().lower().rstrip(".")

    @field_validator("platform_admin_emails", mode="before")
    @classmethod
    def normalize_admin_emails(cls, v: Any) -> list[str]:
        if isinstance(v, str):
            v = v.split(",")
        return [email.strip().lower() for email in v if email.strip()]

    @property
    def cors_origin_regex(self) -> str:
        """Every https subdomain of the base domain is an allowed origin."""
        return rf"^https://([a-z0-9-]+\.)?{re.escape(self.base_domain)}$"


@lru_cache
def get_settings() -> Settings:
    return Settings()
