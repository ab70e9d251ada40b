"""Process-wide async engine over asyncpg."""

import ssl
from typing import Any

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from src.eventgate.core.config import get_settings

_engine: AsyncEngine | None = None

# sslmode -> (check_hostname, verify_mode); "disable" sends no SSL context
_SSL_MODES: dict[str, tuple[bool, ssl.VerifyMode]] = {
    "prefer": (False, ssl.CERT_NONE),
    "require": (False, ssl.CERT_NONE),
    "verify-ca": (False, ssl.CERT_REQUIRED),
    "verify-full": (True, ssl.CERT_REQUIRED),
}


def _ssl_context(mode: str) -> ssl.SSLContext | None:
    if mode not in _SSL_MODES:
        return None
    check_hostname, verify_mode = _SSL_MODES[mode]
    context = ssl.create_default_context()
    context.check_hostname = check_hostname
    context.verify_mode = verify_mode
    return context


def get_engine() -> AsyncEngine:
    """Create the engine on first use, sized from settings."""
    global _engine
    if _engine is None:
        settings = get_settings()
        connect_args: dict[str, Any] = {}
        context = _ssl_context(settings.database_ssl_mode)
        if context is not None:
            connect_args["ssl"] = context
        _engine = create_async_engine(
            settings.database_url,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
            pool_pre_ping=True,
            connect_args=connect_args,
        )
    return _engine


async def dispose_engine() -> None:
    global _engine
    if _engine is not None:
        await _engine.dispose()
        _engine = None
